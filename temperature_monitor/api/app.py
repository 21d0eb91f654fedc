"""
FastAPI 应用配置

配置 CORS、共享 HTTP 客户端、路由注册。
"""

import logging
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import AppConfig, get_config
from .routers import health, temperatures

logger = logging.getLogger(__name__)


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """
    创建 FastAPI 应用实例

    配置：
    - CORS 中间件（不限制来源）
    - API 路由
    - 启动时创建 HTTP 客户端，关闭时释放
    """
    if config is None:
        config = get_config()

    app = FastAPI(
        title="Temperature Monitor API",
        description="节点硬件温度查询服务",
        version=__version__,
    )
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(temperatures.router)

    @app.on_event("startup")
    async def startup_event():
        app.state.http_client = httpx.AsyncClient(timeout=config.backend.timeout)
        logger.info("Temperature Monitor API starting up...")
        logger.info(f"Backend: {config.backend.url} (dev: {config.backend.dev_url})")

    @app.on_event("shutdown")
    async def shutdown_event():
        await app.state.http_client.aclose()
        logger.info("Temperature Monitor API shutting down...")

    return app
