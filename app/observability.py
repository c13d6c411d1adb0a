import logging
import uuid
from time import perf_counter

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from app.metrics import observe_request

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _route_path(request: Request) -> str:
    # Use the route template so metrics are not labelled per template id.
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Attach a request id and record request metrics."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        started = perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            duration = perf_counter() - started
            observe_request(request.method, _route_path(request), status_code, duration)
            logger.debug(
                "%s %s -> %s in %.4fs",
                request.method,
                request.url.path,
                status_code,
                duration,
                extra={"request_id": request_id},
            )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
