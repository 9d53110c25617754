"""Health check endpoints."""

import logging
from collections.abc import Awaitable, Callable

import falcon.asgi

logger = logging.getLogger(__name__)

ReadinessCheck = Callable[[], Awaitable[None]]


class HealthResource:
    """Liveness plus readiness over named dependency checks.

    A check passes when it returns without raising.
    """

    def __init__(self, checks: dict[str, ReadinessCheck] | None = None) -> None:
        self._checks = checks or {}

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health - liveness."""
        resp.media = {"status": "ok"}
        resp.status = falcon.HTTP_200

    async def on_get_ready(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health/ready - database and artifact storage."""
        results: dict[str, str] = {}
        for name, check in self._checks.items():
            try:
                await check()
            except Exception as e:
                logger.warning("Readiness check %s failed: %s", name, e)
                results[name] = "unavailable"
            else:
                results[name] = "ok"
        ready = all(v == "ok" for v in results.values())
        resp.media = {"status": "ready" if ready else "not_ready", "checks": results}
        resp.status = falcon.HTTP_200 if ready else falcon.HTTP_503
