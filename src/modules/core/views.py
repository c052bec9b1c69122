import time
from typing import Any, Callable, Dict

import structlog
from django.core.cache import cache
from django.db import DatabaseError, connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

logger = structlog.get_logger(__name__)


def _probe_database() -> None:
    conn = connections["default"]
    conn.ensure_connection()
    with conn.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _probe_cache() -> None:
    cache.set("_ricemart_health", "ok", 10)
    if cache.get("_ricemart_health") != "ok":
        raise ConnectionError("cache round-trip failed")


_PROBES: Dict[str, Callable[[], None]] = {
    "database": _probe_database,
    "cache": _probe_cache,
}


def _timed(probe: Callable[[], None]) -> Dict[str, Any]:
    start = time.monotonic()
    probe()
    return {
        "status": "up",
        "response_time_ms": round((time.monotonic() - start) * 1000, 2),
    }


def health_check(request: HttpRequest) -> JsonResponse:
    """Liveness/readiness probe for the database and the cache."""
    services: Dict[str, Dict[str, Any]] = {}
    healthy = True

    for name, probe in _PROBES.items():
        try:
            services[name] = _timed(probe)
        except (DatabaseError, ConnectionError, OSError) as exc:
            services[name] = {"status": "down"}
            healthy = False
            logger.error("health.probe_failed", service=name, error=str(exc))

    overall = "healthy" if healthy else "unhealthy"
    logger.info("health.checked", status=overall)

    return JsonResponse(
        {
            "status": overall,
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if healthy else 503,
    )


class MeView(APIView):
    """Echoes the verified identity of the caller."""

    permission_classes = [IsAuthenticated]

    def get(self, request: HttpRequest) -> Response:
        user = request.user
        return Response(
            {
                "email": user.email,
                "uid": user.uid,
                "is_admin": user.is_admin,
            }
        )
