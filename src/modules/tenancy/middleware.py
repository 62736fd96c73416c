"""FastAPI middleware for extracting the active-company selection."""

import logging

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from src.config import settings
from src.exceptions import ValidationException
from src.modules.tenancy.constants import EXCLUDED_ROUTES

logger = logging.getLogger(__name__)


class TenantContextMiddleware(BaseHTTPMiddleware):
    """Parses the active-company header and stores it in request state.

    For excluded routes (health, docs, etc.), passes through untouched.
    The parsed id is only a claim: it becomes a tenant once
    ``TenancyResolver.get_active_company`` confirms membership, which happens
    in the request's dependencies where the DB session is available.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path

        if any(path.startswith(route) for route in EXCLUDED_ROUTES):
            return await call_next(request)

        raw = request.headers.get(settings.active_company_header)
        if raw:
            try:
                request.state.active_company_id = int(raw)
            except ValueError:
                logger.warning("Malformed %s header: %r", settings.active_company_header, raw)
                exc = ValidationException(
                    f"{settings.active_company_header} must be an integer company id",
                    details=[{"field": settings.active_company_header, "message": "not an integer"}],
                )
                return JSONResponse(
                    status_code=exc.status_code,
                    content=exc.envelope(getattr(request.state, "request_id", "unknown")),
                )

        return await call_next(request)
