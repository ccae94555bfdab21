"""Error handling middleware and exception handlers."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from budget_installments.domain.exceptions import (
    ConflictException,
    DomainException,
    MissingTenantException,
    NotFoundException,
    PersistenceException,
    ValidationException,
)
from .request_context import get_request_id

logger = structlog.get_logger(__name__)


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": code,
            "message": message,
            "request_id": get_request_id(),
        },
    )


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Maps the domain exception taxonomy to HTTP responses; the most
    specific registered class wins.
    """

    @app.exception_handler(MissingTenantException)
    async def missing_tenant_handler(
        request: Request,
        exc: MissingTenantException,
    ) -> JSONResponse:
        """Handle requests without caller identity."""
        return _error_response(401, exc.code, exc.message)

    @app.exception_handler(ValidationException)
    async def validation_handler(
        request: Request,
        exc: ValidationException,
    ) -> JSONResponse:
        """Handle business validation errors."""
        return _error_response(400, exc.code, exc.message)

    @app.exception_handler(NotFoundException)
    async def not_found_handler(
        request: Request,
        exc: NotFoundException,
    ) -> JSONResponse:
        """Handle missing or foreign entities."""
        return _error_response(404, exc.code, exc.message)

    @app.exception_handler(ConflictException)
    async def conflict_handler(
        request: Request,
        exc: ConflictException,
    ) -> JSONResponse:
        """Handle state-machine violations."""
        logger.info(
            "state_conflict",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
        )
        return _error_response(409, exc.code, exc.message)

    @app.exception_handler(PersistenceException)
    async def persistence_handler(
        request: Request,
        exc: PersistenceException,
    ) -> JSONResponse:
        """Handle storage failures."""
        logger.error(
            "persistence_error",
            request_id=get_request_id(),
            cause=str(exc.__cause__) if exc.__cause__ else None,
        )
        return _error_response(
            500,
            exc.code,
            "Unable to complete the operation. No changes were saved.",
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle generic domain exceptions."""
        logger.warning(
            "domain_exception",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
        )
        return _error_response(400, exc.code, exc.message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unhandled_exception",
            request_id=get_request_id(),
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return _error_response(500, "INTERNAL_ERROR", "An unexpected error occurred.")
