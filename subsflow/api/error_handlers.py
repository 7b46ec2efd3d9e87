"""Error Handlers — map SubsFlow failures and bad requests to the JSON error envelope.

Invariants:
    - Every error body has the SubsFlowError.to_response() shape:
      {"error": {code, message, category, severity, timestamp, ...}}
    - Request validation failures become FieldValidationError (400, VALIDATION_ERROR)
      naming the first offending field, with every pydantic error under "details"
    - Unhandled exceptions become INTERNAL_ERROR (500) and never leak internals
    - Log records carry the signed-in account id when there is one

Design Decisions:
    - Three-layer handler: domain (SubsFlowError), validation (Pydantic), catch-all (Exception)
    - Recoverable domain errors log at WARNING, storage failures at ERROR
    - Pydantic's "Value error, " prefix is dropped so schema validators read
      like the domain's own messages ("Full name is required")
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from subsflow.core.errors import (
    ErrorCategory, ErrorSeverity, FieldValidationError, SubsFlowError,
)

logger = logging.getLogger(__name__)

_REQUEST_PARTS = {"body", "query", "path", "header", "cookie"}
_VALUE_ERROR_PREFIX = "Value error, "


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:

    @app.exception_handler(SubsFlowError)
    async def subsflow_error_handler(request: Request, exc: SubsFlowError):
        """Handle all SubsFlow domain/infrastructure errors."""
        return _respond(request, exc)


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors as FieldValidationError."""
        errors = exc.errors()
        error = _field_error(errors)
        body = error.to_response()
        body["error"]["details"] = [
            {
                "field": _field_name(e["loc"]),
                "message": _clean_message(e["msg"]),
                "type": e["type"],
            }
            for e in errors
        ]
        return _respond(request, error, body)


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path, "account_id": _current_account_id(request)},
        )
        error = SubsFlowError(
            "An unexpected error occurred", "INTERNAL_ERROR",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL, http_status=500,
        )
        return JSONResponse(status_code=error.http_status, content=error.to_response())


def _respond(
    request: Request, exc: SubsFlowError, body: dict | None = None,
) -> JSONResponse:
    if exc.context.account_id is None:
        exc.context.account_id = _current_account_id(request)
    level = (
        logging.ERROR if exc.severity == ErrorSeverity.CRITICAL
        else logging.WARNING
    )
    logger.log(
        level,
        f"{type(exc).__name__}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "account_id": exc.context.account_id,
        },
    )
    return JSONResponse(
        status_code=exc.http_status, content=body or exc.to_response(),
    )


def _current_account_id(request: Request) -> str | None:
    platform = getattr(request.app.state, "platform", None)
    if platform is None:
        return None
    session = platform.sessions.identity.session
    return session.account_id if session else None


def _field_error(errors: list[dict]) -> FieldValidationError:
    if not errors:
        return FieldValidationError("Invalid request data", "body")
    first = errors[0]
    return FieldValidationError(
        _clean_message(first["msg"]), _field_name(first["loc"]),
    )


def _field_name(loc: tuple) -> str:
    parts = [str(p) for p in loc]
    if len(parts) > 1 and parts[0] in _REQUEST_PARTS:
        parts = parts[1:]
    return ".".join(parts)


def _clean_message(msg: str) -> str:
    return msg.removeprefix(_VALUE_ERROR_PREFIX)
