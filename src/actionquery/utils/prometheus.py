"""Prometheus metrics of the service."""

import re
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from prometheus_client import Counter, Gauge

__all__ = ["FAILED_FETCHES", "REQUESTS_IN_PROGRESS", "add_prometheus_metrics"]


_NUMERIC_SEGMENT = re.compile(r"/\d+(?=/|$)")


REQUESTS_IN_PROGRESS = Gauge(
    "http_requests_in_progress_total",
    "Active HTTP requests",
    ["method", "path"],
)

FAILED_FETCHES = Counter(
    "action_failed_fetches_total",
    "Stored actions dropped because they failed validation",
    ["cause"],
)


def add_prometheus_metrics(app: FastAPI) -> None:
    """Track in-flight requests per method and path.

    Action IDs in paths are collapsed so canceling many actions does not
    create one series per ID.

    Args:
        app: The FastAPI application instance where the middleware will be added.
    """

    @app.middleware("http")
    async def track_in_flight(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        gauge = REQUESTS_IN_PROGRESS.labels(request.method, _path_label(request))
        gauge.inc()
        try:
            return await call_next(request)
        finally:
            gauge.dec()


def _path_label(request: Request) -> str:
    return _NUMERIC_SEGMENT.sub("/{id}", request.url.path)
