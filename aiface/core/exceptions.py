"""
Domain errors raised by the quota and analysis services.

Routes translate these into HTTP responses through the handlers
registered in aiface.main.
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse


class QuotaExceeded(Exception):
    """Daily analysis limit reached for a user."""

    def __init__(self, count: int, limit: int):
        self.count = count
        self.limit = limit
        super().__init__(f"Daily analysis limit reached ({limit} analyses per day)")


class ProviderFailure(Exception):
    """The external vision model call errored or timed out."""


async def quota_exceeded_handler(request: Request, exc: QuotaExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "message": str(exc),
            "limit": exc.limit,
            "count": exc.count,
        },
    )


async def provider_failure_handler(request: Request, exc: ProviderFailure) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "message": "Error analyzing face",
            "error": str(exc),
        },
    )
