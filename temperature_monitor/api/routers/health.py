"""
健康检查
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
@router.get("/health", response_class=PlainTextResponse)
async def health_check():
    return "OK"
