"""
依赖注入模块

提供 FastAPI 依赖项：进程级配置与共享 HTTP 客户端，均在启动时挂到 app.state。
"""

import httpx
from fastapi import Request

from ..config import AppConfig


async def get_app_config(request: Request) -> AppConfig:
    """获取应用配置"""
    return request.app.state.config


async def get_http_client(request: Request) -> httpx.AsyncClient:
    """获取共享的 HTTP 客户端（连接池）"""
    return request.app.state.http_client
