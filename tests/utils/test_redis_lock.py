import threading
from unittest.mock import MagicMock

import fakeredis
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from itts_community.errors import ServiceUnavailable
from itts_community.utils.redis_lock import LockBusyError, redis_lock, with_lock

pytestmark = pytest.mark.lock


@pytest.fixture()
def redis_client():
    return fakeredis.FakeRedis()


def test_with_lock_returns_fn_result(redis_client):
    assert with_lock("lock:test", 5, lambda: "done", client=redis_client) == "done"
    assert redis_client.get("lock:test") is None


def test_second_acquirer_fails_fast(redis_client):
    calls = []

    def inner():
        calls.append("inner")

    def outer():
        calls.append("outer")
        with pytest.raises(LockBusyError) as exc_info:
            with_lock("lock:test", 5, inner, client=redis_client)
        assert exc_info.value.details == {"lock": "lock:test"}

    with_lock("lock:test", 5, outer, client=redis_client)

    assert calls == ["outer"]


def test_lock_is_reacquirable_after_release(redis_client):
    with redis_lock("lock:test", 5, client=redis_client):
        pass

    with redis_lock("lock:test", 5, client=redis_client):
        assert redis_client.get("lock:test") is not None


def test_lock_released_when_fn_raises(redis_client):
    with pytest.raises(ValueError):
        with redis_lock("lock:test", 5, client=redis_client):
            raise ValueError("boom")

    assert redis_client.get("lock:test") is None


def test_expired_lock_is_not_released_by_previous_owner(redis_client):
    with redis_lock("lock:test", 5, client=redis_client):
        # Simulate TTL expiry followed by another owner taking the key
        redis_client.delete("lock:test")
        other = redis_client.lock("lock:test", timeout=5)
        assert other.acquire(blocking=False)

    assert redis_client.get("lock:test") == other.local.token
    other.release()


def test_concurrent_callers_never_overlap(redis_client):
    entered = threading.Event()
    release = threading.Event()
    results = []

    def hold():
        entered.set()
        release.wait(timeout=5)
        return "first"

    def first():
        results.append(with_lock("lock:test", 5, hold, client=redis_client))

    worker = threading.Thread(target=first)
    worker.start()
    assert entered.wait(timeout=5)

    with pytest.raises(LockBusyError):
        with_lock("lock:test", 5, lambda: results.append("second"), client=redis_client)

    release.set()
    worker.join(timeout=5)
    assert results == ["first"]


def test_redis_failure_maps_to_service_unavailable():
    client = MagicMock()
    client.lock.return_value.acquire.side_effect = RedisConnectionError("down")

    with pytest.raises(ServiceUnavailable):
        with_lock("lock:test", 5, lambda: None, client=client)


def test_noop_without_redis(app):
    assert with_lock("lock:test", 5, lambda: 42) == 42


def test_lock_busy_maps_to_409(client, fake_redis, admin_headers):
    fake_redis.set("lock:mentors:create", "someone-else")

    response = client.post("/api/v1/admin/mentors", json={"full_name": "Grace Hopper"}, headers=admin_headers)

    assert response.status_code == 409
    assert response.get_json()["error"]["code"] == "RESOURCE_BUSY"
