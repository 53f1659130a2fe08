from unittest.mock import patch

from redis.exceptions import ConnectionError as RedisConnectionError


def test_healthz(client):
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_health_without_redis(client):
    response = client.get("/api/v1/health")

    body = response.get_json()
    assert response.status_code == 200
    assert body["status"] == "ok"
    assert body["checks"]["database"]["status"] == "ok"
    assert body["checks"]["redis"]["status"] == "skipped"


def test_health_with_redis(client, fake_redis):
    body = client.get("/api/v1/health").get_json()

    assert body["checks"]["redis"]["status"] == "ok"


def test_health_degraded_when_redis_down(client, fake_redis):
    with patch.object(fake_redis, "ping", side_effect=RedisConnectionError("down")):
        response = client.get("/api/v1/health")

    assert response.status_code == 503
    assert response.get_json()["status"] == "degraded"
