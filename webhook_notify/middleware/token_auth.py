"""Query-string token check for the notification route."""

import hmac

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from webhook_notify.schemas.responses import StatusResponse

# Methods that bypass token validation (the health check)
_EXEMPT_METHODS = ("GET", "HEAD")


class TokenAuthMiddleware(BaseHTTPMiddleware):
    """Require ``?token=<value>`` matching the configured token.

    Behaviour:
    - When *token* is empty the middleware is a no-op.
    - ``GET`` requests are always exempt.
    - Every other request must carry a matching ``token`` query parameter.
    """

    def __init__(self, app: ASGIApp, token: str) -> None:
        super().__init__(app)
        self._token = token

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not self._token or request.method in _EXEMPT_METHODS:
            return await call_next(request)

        provided = request.query_params.get("token", "")
        if not hmac.compare_digest(provided.encode(), self._token.encode()):
            return JSONResponse(
                status_code=403,
                content=StatusResponse(status=403, reason="token mismatch").model_dump(),
            )

        return await call_next(request)
