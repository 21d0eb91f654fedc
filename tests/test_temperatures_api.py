"""
测试温度 API

覆盖：
- GET / 与 /health 健康检查
- GET /api/temperatures 端到端流程
- 映射查询失败降级为 unknown_blade
- 任一窗口查询失败返回 500
- dev 参数切换后端
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from temperature_monitor.api.app import create_app
from temperature_monitor.api.dependencies import get_http_client
from temperature_monitor.config import AppConfig, BackendConfig

MINUTELY = "max_over_time(node_hwmon_temp_celsius[1m])"
HOURLY = "max_over_time(node_hwmon_temp_celsius[1h])"
DAILY = "max_over_time(node_hwmon_temp_celsius[1d])"


def series(instance, value):
    return {"metric": {"__name__": "node_hwmon_temp_celsius", "instance": instance}, "value": [1737100000, value]}


@pytest.fixture
def config():
    return AppConfig()


@pytest.fixture
def app(config, fake_prometheus):
    app = create_app(config)

    async def _override_client():
        async with fake_prometheus.client() as client:
            yield client

    app.dependency_overrides[get_http_client] = _override_client
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def cluster(fake_prometheus):
    """两台节点，blade-1 上报两个实例"""
    fake_prometheus.set_result("kube_pod_info", [
        {"metric": {"pod": "node-exporter-a", "pod_ip": "10.0.0.1", "node": "blade-1"}, "value": [1737100000, "1"]},
        {"metric": {"pod": "node-exporter-b", "pod_ip": "10.0.0.2", "node": "blade-1"}, "value": [1737100000, "1"]},
        {"metric": {"pod": "node-exporter-c", "pod_ip": "10.0.0.3", "node": "blade-0"}, "value": [1737100000, "1"]},
    ])
    fake_prometheus.set_result(MINUTELY, [
        series("10.0.0.1:9100", "40.1"),
        series("10.0.0.2:9100", "55.9"),
        series("10.0.0.3:9100", "45.37"),
    ])
    fake_prometheus.set_result(HOURLY, [
        series("10.0.0.1:9100", "50.2"),
        series("10.0.0.2:9100", "56.4"),
        series("10.0.0.3:9100", "45.6"),
    ])
    fake_prometheus.set_result(DAILY, [
        series("10.0.0.1:9100", "61.0"),
        series("10.0.0.2:9100", "58.0"),
        series("10.0.0.3:9100", "45.34"),
    ])
    return fake_prometheus


@pytest.mark.parametrize("path", ["/", "/health"])
def test_health_check(client: TestClient, path):
    """测试：健康检查返回 OK"""
    resp = client.get(path)
    assert resp.status_code == 200
    assert resp.text == "OK"


def test_get_temperatures(client: TestClient, cluster):
    """测试：端到端获取温度"""
    resp = client.get("/api/temperatures")
    assert resp.status_code == 200

    assert resp.json() == {
        "measurements": [
            {"node": "blade-0", "minutely_temperature": 45.4, "hourly_temperature": 46.0, "daily_temperature": 45.3},
            {"node": "blade-1", "minutely_temperature": 55.9, "hourly_temperature": 56.0, "daily_temperature": 61.0},
        ]
    }

    # 先查映射，再查三个窗口
    assert cluster.queries[0] == "kube_pod_info"
    assert sorted(cluster.queries[1:]) == sorted([MINUTELY, HOURLY, DAILY])
    assert all(r.url.host == "vmsingle-vm-victoria-metrics-k8s-stack.victoria-metrics.svc" for r in cluster.requests)


def test_dev_flag_uses_local_backend(client: TestClient, cluster):
    """测试：dev=true 使用本地后端"""
    resp = client.get("/api/temperatures", params={"dev": "true"})
    assert resp.status_code == 200
    assert all(r.url.host == "localhost" and r.url.port == 8429 for r in cluster.requests)


def test_mapping_failure_falls_back_to_unknown(client: TestClient, cluster):
    """测试：映射查询失败仍返回 200"""
    cluster.set_unreachable("kube_pod_info")

    resp = client.get("/api/temperatures")
    assert resp.status_code == 200

    measurements = resp.json()["measurements"]
    assert [m["node"] for m in measurements] == ["unknown_blade"]
    assert measurements[0]["minutely_temperature"] == 55.9


@pytest.mark.parametrize("failing_query", [MINUTELY, HOURLY, DAILY])
def test_window_failure_returns_500(client: TestClient, cluster, failing_query):
    """测试：窗口查询返回错误状态时返回 500"""
    cluster.set_response(failing_query, 422, {"status": "error", "errorType": "bad_data", "error": "boom"})

    resp = client.get("/api/temperatures")
    assert resp.status_code == 500
    assert resp.content == b""


def test_window_unreachable_returns_500(client: TestClient, cluster):
    """测试：窗口查询网络错误时返回 500"""
    cluster.set_unreachable(DAILY)

    resp = client.get("/api/temperatures")
    assert resp.status_code == 500


def test_empty_backend(client: TestClient, fake_prometheus):
    """测试：后端无数据"""
    resp = client.get("/api/temperatures")
    assert resp.status_code == 200
    assert resp.json() == {"measurements": []}


def test_cors_allows_any_origin(client: TestClient):
    """测试：允许任意来源跨域"""
    resp = client.get("/health", headers={"Origin": "http://dashboard.example.com"})
    assert resp.headers["access-control-allow-origin"] == "*"


def test_startup_creates_and_shutdown_closes_http_client():
    """测试：启动时按 backend.timeout 创建共享客户端，关闭时释放"""
    config = AppConfig(backend=BackendConfig(timeout=1.5))
    app = create_app(config)

    with TestClient(app) as client:
        http_client = app.state.http_client
        assert isinstance(http_client, httpx.AsyncClient)
        assert http_client.timeout == httpx.Timeout(1.5)
        assert not http_client.is_closed

        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.text == "OK"

    assert http_client.is_closed
