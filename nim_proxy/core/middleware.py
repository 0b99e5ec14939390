"""Middleware for metrics collection"""
import time
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match

from nim_proxy.core.metrics import REQUEST_COUNT, REQUEST_DURATION, ACTIVE_REQUESTS
from nim_proxy.core.logging import get_logger

logger = get_logger()

UNMATCHED_ENDPOINT = 'unmatched'


def endpoint_label(request: Request) -> str:
    """Route template for metric labels

    Every unknown path answers 404, so raw paths would make the label set
    unbounded. Paths that match no route share one label.
    """
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match != Match.NONE:
            return getattr(route, 'path', UNMATCHED_ENDPOINT)
    return UNMATCHED_ENDPOINT


class MetricsMiddleware(BaseHTTPMiddleware):
    """Count requests per route, model and status"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path == '/metrics':
            return await call_next(request)

        endpoint = endpoint_label(request)
        method = request.method
        ACTIVE_REQUESTS.labels(endpoint=endpoint).inc()
        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"{method} {request.url.path} failed: {type(e).__name__}: {e} "
                f"duration={time.time() - start_time:.3f}s"
            )
            raise
        finally:
            ACTIVE_REQUESTS.labels(endpoint=endpoint).dec()

        duration = time.time() - start_time
        # Set by the completions handler once the body parsed
        model = getattr(request.state, 'model', None) or 'unknown'

        REQUEST_COUNT.labels(
            method=method, endpoint=endpoint, model=model, status_code=response.status_code
        ).inc()
        REQUEST_DURATION.labels(method=method, endpoint=endpoint, model=model).observe(duration)

        # For streams this is time to headers, not to the last event
        logger.info(
            f"{method} {request.url.path} model={model} "
            f"status={response.status_code} duration={duration:.3f}s"
        )
        return response
