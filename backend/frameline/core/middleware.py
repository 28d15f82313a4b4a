import logging
import time
from typing import Callable

from frameline.core.metrics import MetricsCollector

logger = logging.getLogger(__name__)


class ConnectionMetricsMiddleware:
    """
    Counts open HTTP connections until the response body is finished,
    so long-lived SSE streams stay counted while they are open.
    """

    def __init__(self, app, metrics_provider: Callable[[], MetricsCollector]):
        self.app = app
        self.metrics_provider = metrics_provider

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        metrics = self.metrics_provider()
        metrics.connection_opened()
        started = time.perf_counter()
        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            metrics.connection_closed()
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.debug(f"[HTTP] {scope.get('method')} {scope.get('path')} -> {status_code} ({elapsed_ms:.1f}ms)")
