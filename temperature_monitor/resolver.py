"""
实例到节点名的映射

通过 kube_pod_info 找到 node-exporter Pod 的 IP 与所在节点，
生成 "<pod_ip>:<port>" -> 节点名 的映射。
"""

import logging
from typing import Dict, Iterable

import httpx

from .config import QueryConfig
from .models import MetricSample
from .prometheus import fetch_prometheus_data

logger = logging.getLogger(__name__)


def build_instance_node_map(
    samples: Iterable[MetricSample],
    exporter_pod_match: str = "node-exporter",
    exporter_port: int = 9100,
) -> Dict[str, str]:
    """
    从 kube_pod_info 结果构建映射

    只处理名称包含 exporter_pod_match 的 Pod，缺少 pod_ip 或 node 标签的跳过。
    """
    instance_node_map: Dict[str, str] = {}

    for sample in samples:
        pod_name = sample.metric.get("pod")
        if not pod_name or exporter_pod_match not in pod_name:
            continue

        pod_ip = sample.metric.get("pod_ip")
        node = sample.metric.get("node")
        if not pod_ip or not node:
            continue

        instance = f"{pod_ip}:{exporter_port}"
        logger.info(f"Mapping pod IP {pod_ip} (instance: {instance}) to node: {node}")
        instance_node_map[instance] = node

    return instance_node_map


async def get_instance_node_mapping(
    client: httpx.AsyncClient,
    base_url: str,
    query_config: QueryConfig,
) -> Dict[str, str]:
    """
    查询并构建实例映射

    Raises:
        PrometheusQueryError: 查询失败时抛出，由调用方决定是否降级
    """
    samples = await fetch_prometheus_data(client, base_url, query_config.pod_info_metric)
    logger.info(f"Found {len(samples)} {query_config.pod_info_metric} entries")

    instance_node_map = build_instance_node_map(
        samples,
        exporter_pod_match=query_config.exporter_pod_match,
        exporter_port=query_config.exporter_port,
    )
    logger.info(f"Instance to node map has {len(instance_node_map)} entries: {instance_node_map}")
    return instance_node_map
