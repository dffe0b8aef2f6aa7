import time
from typing import Any, Callable, Dict

import structlog
from django.core.cache import cache
from django.db import DatabaseError, connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

logger = structlog.get_logger(__name__)


def _check_database() -> None:
    conn = connections["default"]
    conn.ensure_connection()
    with conn.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _check_cache() -> None:
    cache.set("_health_check", "ok", 10)
    if cache.get("_health_check") != "ok":
        raise ConnectionError("Cache read failed")


def _probe(name: str, check: Callable[[], None]) -> Dict[str, Any]:
    start = time.monotonic()
    try:
        check()
    except (DatabaseError, ConnectionError, OSError) as exc:
        logger.error("health_check_failure", service=name, error=str(exc))
        return {"status": "down"}
    return {
        "status": "up",
        "response_time_ms": round((time.monotonic() - start) * 1000, 2),
    }


def health_check(request: HttpRequest) -> JsonResponse:
    """GET /health - liveness of the database and the cache."""
    services = {
        "database": _probe("database", _check_database),
        "cache": _probe("cache", _check_cache),
    }
    healthy = all(s["status"] == "up" for s in services.values())

    logger.info("health_check_completed", status="healthy" if healthy else "unhealthy")

    return JsonResponse(
        {
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if healthy else 503,
    )
