"""
配置加载模块

从 config.yaml 加载配置，支持 Pydantic 验证和环境变量覆盖。
"""

import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BackendConfig(BaseModel):
    """指标后端（Prometheus 兼容 API）配置"""
    url: str = "http://vmsingle-vm-victoria-metrics-k8s-stack.victoria-metrics.svc:8429"
    dev_url: str = "http://localhost:8429"
    # None 表示不限时
    timeout: Optional[float] = 30.0


class WindowsConfig(BaseModel):
    """三个时间窗口的范围选择器"""
    minutely: str = "1m"
    hourly: str = "1h"
    daily: str = "1d"


class QueryConfig(BaseModel):
    """查询配置"""
    temperature_metric: str = "node_hwmon_temp_celsius"
    windows: WindowsConfig = Field(default_factory=WindowsConfig)
    pod_info_metric: str = "kube_pod_info"
    exporter_pod_match: str = "node-exporter"
    exporter_port: int = 9100
    unknown_node: str = "unknown_blade"


class APIConfig(BaseModel):
    """API 服务配置"""
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: List[str] = ["*"]


class LoggingConfig(BaseModel):
    """日志配置"""
    level: str = "INFO"
    file: Optional[str] = None


class AppConfig(BaseSettings):
    """应用配置（完整配置）"""
    model_config = SettingsConfigDict(
        env_prefix="TEMPERATURE_MONITOR_",
        env_nested_delimiter="__",
    )

    backend: BackendConfig = Field(default_factory=BackendConfig)
    query: QueryConfig = Field(default_factory=QueryConfig)
    api: APIConfig = Field(default_factory=APIConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # 环境变量优先于配置文件
        return env_settings, init_settings, file_secret_settings

    def backend_url(self, dev: bool = False) -> str:
        """根据 dev 标志选择后端地址"""
        url = self.backend.dev_url if dev else self.backend.url
        return url.rstrip("/")


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """
    加载配置文件

    优先级：
    1. 参数指定的路径
    2. 环境变量 TEMPERATURE_MONITOR_CONFIG_PATH
    3. 默认路径 config.yaml
    """
    if config_path is None:
        config_path = os.environ.get(
            "TEMPERATURE_MONITOR_CONFIG_PATH",
            "config.yaml"
        )

    config_file = Path(config_path)

    if config_file.exists():
        with open(config_file, "r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
            if raw_config:
                logging_section = raw_config.get("logging") or {}
                log_file = logging_section.get("file")
                if log_file and not Path(log_file).is_absolute():
                    # 相对路径以配置文件所在目录为基准
                    logging_section["file"] = str((config_file.resolve().parent / log_file).resolve())
                    raw_config["logging"] = logging_section

                return AppConfig(**raw_config)

    # 配置文件不存在时使用默认配置
    return AppConfig()


# 全局配置实例（延迟加载）
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """获取全局配置实例（单例模式）"""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config():
    """重置配置（主要用于测试）"""
    global _config
    _config = None
