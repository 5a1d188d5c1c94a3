"""
Core views providing infrastructure endpoints.

Only the health check lives here; business endpoints belong to domain apps.
"""

import logging

from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def _database_connected() -> bool:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except DatabaseError:
        logger.error("Health check: database unreachable", exc_info=True)
        return False
    return True


def _cache_connected() -> bool:
    # django-redis is configured with IGNORE_EXCEPTIONS, so a dead Redis
    # shows up as a cache miss rather than an exception.
    cache.set("health_check", "ok", timeout=1)
    return cache.get("health_check") == "ok"


def health_check(request):
    """
    Health check endpoint for load balancers and container probes.

    The database is required; the cache is reported but does not fail
    the check.

    HTTP Status Codes:
        200: Database reachable
        503: Database unreachable

    Example Response:
        {"status": "healthy", "database": "connected", "cache": "connected"}
    """
    database_ok = _database_connected()
    health_status = {
        "status": "healthy" if database_ok else "unhealthy",
        "database": "connected" if database_ok else "disconnected",
        "cache": "connected" if _cache_connected() else "disconnected",
    }
    return JsonResponse(health_status, status=200 if database_ok else 503)
