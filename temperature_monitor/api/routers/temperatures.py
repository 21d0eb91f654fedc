"""
温度 API

返回每个节点最近 1 分钟 / 1 小时 / 1 天的最高温度。
"""

import logging

import httpx
from fastapi import APIRouter, Depends, Query, Response, status

from ...collector import collect_temperatures
from ...config import AppConfig
from ...models import TemperatureResponse
from ...prometheus import PrometheusQueryError
from ..dependencies import get_app_config, get_http_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["temperatures"])


@router.get("/temperatures", response_model=TemperatureResponse)
async def get_temperatures(
    dev: bool = Query(False, description="使用开发环境后端（localhost:8429）"),
    config: AppConfig = Depends(get_app_config),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """
    获取节点温度

    任一时间窗口查询失败时返回空响应体的 500。
    """
    try:
        measurements = await collect_temperatures(client, config, dev=dev)
    except PrometheusQueryError as e:
        logger.warning(f"Failed to fetch temperature data: {e}")
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return TemperatureResponse(measurements=measurements)
