"""
温度聚合

把三个时间窗口的结果按实例关联，解析为节点名后按节点取最大值。
"""

import logging
import math
from typing import Dict, Iterable, List, Tuple

from .models import MetricSample, TemperatureMeasurement

logger = logging.getLogger(__name__)

UNKNOWN_NODE = "unknown_blade"


def round_half_away(value: float, digits: int = 0) -> float:
    """四舍五入（.5 远离零），round() 的银行家舍入不适用"""
    factor = 10 ** digits
    scaled = abs(value) * factor
    rounded = math.floor(scaled)
    # 不做 scaled + 0.5，避免 0.49999999999999994 这类值被进位
    if scaled - rounded >= 0.5:
        rounded += 1
    return math.copysign(rounded, value) / factor


def build_value_lookup(samples: Iterable[MetricSample]) -> Dict[str, float]:
    """
    构建 实例 -> 温度 查找表

    缺少 instance 标签或数值无法解析的行直接丢弃；
    同一实例的多个传感器取最大值。
    """
    lookup: Dict[str, float] = {}
    for sample in samples:
        instance = sample.metric.get("instance")
        value = sample.sample_value
        if not instance or value is None:
            continue
        current = lookup.get(instance)
        lookup[instance] = value if current is None else max(current, value)
    return lookup


def resolve_node_name(
    instance: str,
    instance_node_map: Dict[str, str],
    unknown_node: str = UNKNOWN_NODE,
) -> str:
    """实例地址 -> 节点名，找不到时返回 unknown_node"""
    node = instance_node_map.get(instance)
    if node is None:
        logger.warning(
            f"No mapping found for instance: {instance}, "
            f"available keys: {sorted(instance_node_map)}"
        )
        return unknown_node
    return node


def process_temperature_data(
    minutely: Iterable[MetricSample],
    hourly: Iterable[MetricSample],
    daily: Iterable[MetricSample],
    instance_node_map: Dict[str, str],
    unknown_node: str = UNKNOWN_NODE,
) -> List[TemperatureMeasurement]:
    """
    聚合三个窗口的温度数据

    Args:
        minutely: 1 分钟窗口结果
        hourly: 1 小时窗口结果
        daily: 1 天窗口结果
        instance_node_map: 实例 -> 节点名
        unknown_node: 未映射实例使用的节点名

    Returns:
        每个节点一条测量，按节点名排序
    """
    minutely_map = build_value_lookup(minutely)
    hourly_map = build_value_lookup(hourly)
    daily_map = build_value_lookup(daily)

    # 以分钟窗口的实例为准，缺失的小时/天数据记为 0.0
    node_groups: Dict[str, List[Tuple[float, float, float]]] = {}
    for instance, minutely_temp in minutely_map.items():
        hourly_temp = hourly_map.get(instance, 0.0)
        daily_temp = daily_map.get(instance, 0.0)

        node = resolve_node_name(instance, instance_node_map, unknown_node)
        node_groups.setdefault(node, []).append((minutely_temp, hourly_temp, daily_temp))

    measurements = []
    for node, temps in node_groups.items():
        max_minutely = max(t[0] for t in temps)
        max_hourly = max(t[1] for t in temps)
        max_daily = max(t[2] for t in temps)

        measurements.append(TemperatureMeasurement(
            node=node,
            minutely_temperature=round_half_away(max_minutely, 1),
            hourly_temperature=round_half_away(max_hourly),
            daily_temperature=round_half_away(max_daily, 1),
        ))

    measurements.sort(key=lambda m: m.node)
    return measurements
