"""
Error taxonomy shared by services and routes.

Each error carries the HTTP status it maps to; `install_error_handlers`
renders them as JSON with the request id attached.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from aggie_nexus.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class NexusError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "internal_error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail


class ValidationError(NexusError):
    """Bad input shape or a rejected program claim."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "validation_error"

    def __init__(
        self,
        detail: str | None = None,
        errors: list[str] | None = None,
        warnings: list[str] | None = None,
    ) -> None:
        super().__init__(detail)
        self.errors = errors or []
        self.warnings = warnings or []


class AuthenticationError(NexusError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "authentication_required"


class AuthorizationError(NexusError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "forbidden"


class NotFoundError(NexusError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "not_found"


class DependencyError(NexusError):
    """The database or the auth provider failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "dependency_error"


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(NexusError)
    async def nexus_error_handler(request: Request, exc: NexusError):
        payload = {"detail": exc.detail, "request_id": _request_id(request)}

        if isinstance(exc, ValidationError):
            payload["errors"] = exc.errors
            if exc.warnings:
                payload["warnings"] = exc.warnings

        if exc.status_code >= 500:
            logger.error(
                "Request failed on dependency",
                path=request.url.path,
                error_type=type(exc).__name__,
                error=str(exc),
            )

        return JSONResponse(status_code=exc.status_code, content=payload)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # Malformed bodies are client errors like any other ValidationError
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": "validation_error",
                "errors": [_describe(err) for err in exc.errors()],
                "request_id": _request_id(request),
            },
        )


def _describe(err: dict) -> str:
    location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
    return f"{location}: {err.get('msg')}" if location else str(err.get("msg"))
