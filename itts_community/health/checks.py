import time

from flask import current_app
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from itts_community.extensions import db, get_redis_client


def _elapsed_ms(start):
    return round((time.time() - start) * 1000, 2)


def _check_database():
    start = time.time()
    try:
        db.session.execute(text("SELECT 1"))
        return {"status": "ok", "latency_ms": _elapsed_ms(start)}
    except SQLAlchemyError as e:
        db.session.rollback()
        return {"status": "error", "error": str(e.__class__.__name__)}


def _check_redis():
    client = get_redis_client()
    if client is None:
        return {"status": "skipped", "reason": "REDIS_URL not set"}

    start = time.time()
    try:
        client.ping()
        return {"status": "ok", "latency_ms": _elapsed_ms(start)}
    except RedisError as e:
        return {"status": "error", "error": str(e.__class__.__name__)}


def run_health_checks():
    """
    Run every dependency check. Overall status is ``degraded`` as soon as
    one check reports an error; skipped checks don't count.
    """
    started = time.time()

    checks = {
        "database": _check_database(),
        "redis": _check_redis(),
    }

    overall = "ok"
    for c in checks.values():
        if c["status"] == "error":
            overall = "degraded"

    return {
        "status": overall,
        "timestamp": int(time.time()),
        "checks": checks,
        "duration_ms": _elapsed_ms(started),
        "environment": current_app.config.get("ENVIRONMENT", "unknown"),
    }
