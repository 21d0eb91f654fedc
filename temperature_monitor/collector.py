"""
温度采集流程

先解析实例映射，再并发拉取三个时间窗口的数据，最后交给聚合。
"""

import asyncio
import logging
from typing import List

import httpx

from .aggregator import process_temperature_data
from .config import AppConfig
from .models import TemperatureMeasurement
from .prometheus import PrometheusQueryError, build_window_query, fetch_prometheus_data
from .resolver import get_instance_node_mapping

logger = logging.getLogger(__name__)


async def collect_temperatures(
    client: httpx.AsyncClient,
    config: AppConfig,
    dev: bool = False,
) -> List[TemperatureMeasurement]:
    """
    采集所有节点的温度

    映射查询失败只降级为空映射；任一窗口查询失败则整体失败。

    Raises:
        PrometheusQueryError: 任一时间窗口查询失败
    """
    base_url = config.backend_url(dev)
    query_config = config.query

    try:
        instance_node_map = await get_instance_node_mapping(client, base_url, query_config)
    except PrometheusQueryError as e:
        logger.warning(f"Failed to get pod to node mapping: {e}, using unknown node name")
        instance_node_map = {}

    metric = query_config.temperature_metric
    windows = query_config.windows

    # 并发拉取三个窗口，第一个错误直接向上抛出，其余未完成的查询取消
    tasks = [
        asyncio.ensure_future(
            fetch_prometheus_data(client, base_url, build_window_query(metric, window))
        )
        for window in (windows.minutely, windows.hourly, windows.daily)
    ]
    try:
        minutely, hourly, daily = await asyncio.gather(*tasks)
    except Exception:
        for task in tasks:
            task.cancel()
        raise

    measurements = process_temperature_data(
        minutely, hourly, daily, instance_node_map, unknown_node=query_config.unknown_node
    )
    logger.debug(f"Collected temperatures for {len(measurements)} nodes from {base_url}")
    return measurements
