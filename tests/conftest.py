"""Pytest configuration and shared fixtures"""

import sys
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

sys.path.insert(0, str(Path(__file__).parent.parent))

from temperature_monitor.config import reset_config


class FakePrometheus:
    """按查询表达式返回预设结果的假后端（httpx.MockTransport）"""

    def __init__(self):
        self.responses = {}
        self.unreachable = set()
        self.requests = []

    def set_result(self, query, result):
        self.responses[query] = (200, {
            "status": "success",
            "data": {"resultType": "vector", "result": result},
        })

    def set_response(self, query, status_code, payload):
        self.responses[query] = (status_code, payload)

    def set_unreachable(self, query):
        self.unreachable.add(query)

    @property
    def queries(self):
        return [request.url.params.get("query") for request in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        query = request.url.params.get("query")

        if query in self.unreachable:
            raise httpx.ConnectError("Connection refused", request=request)

        status_code, payload = self.responses.get(query, (200, {
            "status": "success",
            "data": {"resultType": "vector", "result": []},
        }))
        if isinstance(payload, str):
            return httpx.Response(status_code, text=payload)
        return httpx.Response(status_code, json=payload)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_prometheus():
    return FakePrometheus()


@pytest_asyncio.fixture
async def prometheus_client(fake_prometheus):
    """连接假后端的 HTTP 客户端"""
    async with fake_prometheus.client() as client:
        yield client


@pytest.fixture(autouse=True)
def _reset_global_config(monkeypatch):
    """隔离全局配置与环境变量"""
    monkeypatch.delenv("TEMPERATURE_MONITOR_CONFIG_PATH", raising=False)
    reset_config()
    yield
    reset_config()
