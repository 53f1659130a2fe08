"""
Advisory distributed lock on Redis.

Acquisition is ``SET key <token> NX PX ttl`` and release is a Lua
compare-and-delete on the token (both provided by redis-py's ``Lock``), so a
holder whose TTL lapsed can never delete a lock that another owner has since
acquired. Acquisition never blocks: a held lock fails the caller immediately.

When no Redis client is configured the lock degrades to a no-op so local
development works without Redis.
"""

import logging
from contextlib import contextmanager

from redis.exceptions import LockNotOwnedError, RedisError

from itts_community.errors import Conflict, ServiceUnavailable
from itts_community.extensions import get_redis_client

logger = logging.getLogger(__name__)

DEFAULT_TTL = 10


class LockBusyError(Conflict):
    code = "RESOURCE_BUSY"
    default_message = "Resource busy, please retry"

    def __init__(self, key):
        self.key = key
        super().__init__(details={"lock": key})


@contextmanager
def redis_lock(key: str, ttl: float = DEFAULT_TTL, client=None):
    if client is None:
        client = get_redis_client()

    if client is None:
        logger.debug("No Redis configured, running without lock", extra={"lock_key": key})
        yield
        return

    lock = client.lock(key, timeout=ttl)
    try:
        acquired = lock.acquire(blocking=False)
    except RedisError as e:
        logger.error(f"Lock acquisition failed: {e}", extra={"lock_key": key})
        raise ServiceUnavailable("Lock service unavailable") from e

    if not acquired:
        logger.info("Lock busy", extra={"lock_key": key})
        raise LockBusyError(key)

    try:
        yield
    finally:
        try:
            lock.release()
        except LockNotOwnedError:
            # TTL lapsed and someone else may hold the key now; leave it alone
            logger.warning("Lock expired before release", extra={"lock_key": key, "ttl": ttl})
        except RedisError as e:
            logger.error(f"Lock release failed: {e}", extra={"lock_key": key})


def with_lock(key: str, ttl: float, fn, client=None):
    """Run ``fn()`` while holding ``key``; returns whatever ``fn`` returns."""
    with redis_lock(key, ttl, client=client):
        return fn()
