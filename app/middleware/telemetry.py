"""Telemetry middleware for request instrumentation."""

from __future__ import annotations

import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.telemetry import observe_request

PROCESS_TIME_HEADER = "X-Process-Time"


class TelemetryMiddleware(BaseHTTPMiddleware):
    """Collect Prometheus request metrics and expose the handling time."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:  # pragma: no cover - re-raised
            observe_request(
                request.method,
                self._route_label(request),
                500,
                time.perf_counter() - start_time,
            )
            raise

        elapsed = time.perf_counter() - start_time
        observe_request(
            request.method,
            self._route_label(request),
            response.status_code,
            elapsed,
        )
        response.headers[PROCESS_TIME_HEADER] = f"{elapsed:.4f}"
        return response

    @staticmethod
    def _route_label(request: Request) -> str:
        """Prefer the matched route template so labels stay low-cardinality."""

        route = request.scope.get("route")
        return getattr(route, "path", None) or request.url.path
