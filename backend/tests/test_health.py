from redis.exceptions import ConnectionError as RedisConnectionError

from inventory_api.api.routers import health


class PingingRedis:
    def ping(self):
        return True


class DownRedis:
    def ping(self):
        raise RedisConnectionError("connection refused")


def test_liveness(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["status"] == "healthy"
    assert body["data"]["version"] == "1.0.0"
    assert body["data"]["uptime"] >= 0
    assert response.headers["X-API-Version"] == "1.0.0"


def test_readiness_ok(client, monkeypatch):
    monkeypatch.setattr(health, "get_redis_client", lambda: PingingRedis())
    response = client.get("/health/ready")
    assert response.status_code == 200
    body = response.json()
    assert body["data"]["status"] == "ok"
    assert body["data"]["checks"]["database"]["status"] == "healthy"


def test_readiness_degraded_without_redis(client, monkeypatch):
    monkeypatch.setattr(health, "get_redis_client", lambda: DownRedis())
    response = client.get("/health/ready")
    assert response.status_code == 200
    body = response.json()
    assert body["data"]["status"] == "degraded"
    assert body["data"]["checks"]["redis"]["status"] == "unhealthy"


def test_root_lists_endpoints(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["data"]["endpoints"]["products"] == "/api/products"


def test_unknown_route_uses_envelope(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "message": "Route /api/nothing-here not found",
    }
