"""
数据模型定义

包括：
- 指标后端响应模型（Prometheus 兼容 /api/v1/query）
- API 响应模型
"""

import math
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

# 十进制数值字符串，不接受下划线和首尾空白
_NUMBER_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


# =============================================================================
# 指标后端响应模型
# =============================================================================

class MetricSample(BaseModel):
    """单条时间序列结果：标签集 + [时间戳, "数值字符串"]"""
    metric: Dict[str, str] = Field(default_factory=dict)
    value: List[Any] = Field(default_factory=list)

    @property
    def timestamp(self) -> Optional[float]:
        """采样时间戳（秒）"""
        if not self.value:
            return None
        try:
            return float(self.value[0])
        except (TypeError, ValueError):
            return None

    @property
    def sample_value(self) -> Optional[float]:
        """
        解析数值

        缺失、非数字、NaN/Inf 均返回 None。
        """
        if len(self.value) < 2:
            return None
        raw = self.value[1]
        if not isinstance(raw, str) or not _NUMBER_RE.fullmatch(raw):
            return None
        parsed = float(raw)
        if not math.isfinite(parsed):
            return None
        return parsed


class PrometheusData(BaseModel):
    """查询结果数据"""
    resultType: str = ""
    result: List[MetricSample] = Field(default_factory=list)


class PrometheusResponse(BaseModel):
    """查询响应信封"""
    status: str
    data: Optional[PrometheusData] = None
    errorType: Optional[str] = None
    error: Optional[str] = None


# =============================================================================
# API 响应模型
# =============================================================================

class TemperatureMeasurement(BaseModel):
    """单个节点的温度测量（摄氏度）"""
    node: str
    minutely_temperature: float
    hourly_temperature: float
    daily_temperature: float


class TemperatureResponse(BaseModel):
    """GET /api/temperatures 响应"""
    measurements: List[TemperatureMeasurement] = Field(default_factory=list)
