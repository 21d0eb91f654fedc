"""
Temperature Monitor - 节点硬件温度 API

负责：
- 从 kube_pod_info 解析 node-exporter 实例到节点名的映射
- 并发查询最近 1 分钟 / 1 小时 / 1 天的温度最大值
- 按节点聚合传感器读数并提供 REST API
"""

__version__ = "1.0.0"
