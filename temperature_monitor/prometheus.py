"""
指标后端查询

对 Prometheus 兼容的 /api/v1/query 发起即时查询，并把各种失败统一为 PrometheusQueryError。
"""

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from .models import MetricSample, PrometheusResponse

logger = logging.getLogger(__name__)


class PrometheusQueryError(Exception):
    """查询失败（网络错误、非成功状态、响应格式错误）"""

    def __init__(self, query: str, message: str, status_code: Optional[int] = None):
        self.query = query
        self.status_code = status_code
        super().__init__(f"Prometheus query '{query}' failed: {message}")


def build_window_query(metric: str, window: str) -> str:
    """构造时间窗口最大值查询，如 max_over_time(node_hwmon_temp_celsius[1h])"""
    return f"max_over_time({metric}[{window}])"


async def fetch_prometheus_data(
    client: httpx.AsyncClient,
    base_url: str,
    query: str,
) -> List[MetricSample]:
    """
    执行一次即时查询

    Args:
        client: 共享的 HTTP 客户端（连接池）
        base_url: 后端地址，如 http://localhost:8429
        query: 查询表达式

    Returns:
        结果集（标签集 + 数值）

    Raises:
        PrometheusQueryError: 任何失败都会抛出
    """
    url = f"{base_url}/api/v1/query"

    try:
        response = await client.get(url, params={"query": query})
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise PrometheusQueryError(
            query, f"HTTP {e.response.status_code}", status_code=e.response.status_code
        ) from e
    except httpx.HTTPError as e:
        raise PrometheusQueryError(query, f"{type(e).__name__}: {e}") from e

    try:
        payload = PrometheusResponse.model_validate(response.json())
    except (ValueError, ValidationError) as e:
        raise PrometheusQueryError(query, "malformed response body", status_code=response.status_code) from e

    if payload.status != "success" or payload.data is None:
        detail = payload.error or f"status={payload.status}"
        raise PrometheusQueryError(query, detail, status_code=response.status_code)

    logger.debug(f"Query '{query}' returned {len(payload.data.result)} series")
    return payload.data.result
