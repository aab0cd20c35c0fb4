from collections.abc import Mapping, Sequence
from typing import Any
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_503_SERVICE_UNAVAILABLE,
)
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

from bookclub.core.logging import get_logger


# ---- Domain failures ----

class LibraryError(Exception):
    """Base class for failures raised by the catalog core."""

    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR
    error_type: str = "library_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message: str = message


class ValidationError(LibraryError):
    """One or more payload fields violate their constraints."""

    status_code = HTTP_400_BAD_REQUEST
    error_type = "validation_error"

    def __init__(self, errors: Mapping[str, str], message: str = "Validation failed"):
        super().__init__(message)
        self.errors: dict[str, str] = dict(errors)


class NotFoundError(LibraryError):
    status_code = HTTP_404_NOT_FOUND
    error_type = "not_found"

    def __init__(self, resource: str, resource_id: int):
        super().__init__(f"{resource} with ID {resource_id} not found")
        self.resource: str = resource
        self.resource_id: int = resource_id


class ReferentialIntegrityError(LibraryError):
    """A book refers to an author that does not exist."""

    status_code = HTTP_409_CONFLICT
    error_type = "reference_not_found"

    def __init__(self, author_id: int | None):
        super().__init__(f"Author with ID {author_id} does not exist")
        self.author_id: int | None = author_id


class StoreUnavailableError(LibraryError):
    status_code = HTTP_503_SERVICE_UNAVAILABLE
    error_type = "store_unavailable"


# ---- HTTP rendering ----

class ErrorBody(BaseModel):
    """Uniform error body."""
    type: str
    message: str
    errors: dict[str, str] | None = None
    meta: dict[str, object]


def _build_meta(request: Request) -> dict[str, object]:
    """Collect metadata for error responses."""
    return {
        "request_id": getattr(request.state, "correlation_id", "-"),
        "path": request.url.path,
        "method": request.method,
    }


def _field_name(loc: Sequence[Any]) -> str:
    # ("body", "title") -> "title"; ("path", "author_id") -> "author_id"
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or "body"


def _strip_prefix(msg: str) -> str:
    return msg.removeprefix("Value error, ")


def field_errors(
    errors: Sequence[Mapping[str, Any]],
    aliases: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Flatten pydantic error dicts into {field: message}, first message wins."""
    result: dict[str, str] = {}
    for error in errors:
        name = _field_name(error.get("loc", ()))
        if aliases:
            name = aliases.get(name, name)
        result.setdefault(name, _strip_prefix(str(error.get("msg", "Invalid value"))))
    return result


def _render(
    request: Request,
    status_code: int,
    error_type: str,
    message: str,
    errors: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorBody(
        type=error_type, message=message, errors=errors, meta=_build_meta(request)
    )
    return JSONResponse(
        status_code=status_code, content=body.model_dump(exclude_none=True)
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers."""

    @app.exception_handler(LibraryError)
    async def library_error_handler(request: Request, exc: LibraryError) -> JSONResponse:
        logger = get_logger(__name__, request)
        if isinstance(exc, StoreUnavailableError):
            logger.error("Store unavailable: %s", exc.message, exc_info=exc.__cause__)
        else:
            logger.info("%s: %s", exc.error_type, exc.message)
        errors = exc.errors if isinstance(exc, ValidationError) else None
        return _render(request, exc.status_code, exc.error_type, exc.message, errors)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.warning("HTTP error", extra={"status_code": exc.status_code})
        message = exc.detail if isinstance(exc.detail, str) else "HTTP error"
        response = _render(request, exc.status_code, "http_error", message)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.info("Validation error")
        return _render(
            request,
            HTTP_400_BAD_REQUEST,
            "validation_error",
            "Invalid request payload",
            field_errors(exc.errors()),
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.warning("Database integrity error", extra={"error": str(exc.orig)})

        error_message = str(exc.orig) if exc.orig else str(exc)
        if "foreign key" in error_message.lower():
            return _render(
                request, HTTP_409_CONFLICT, "reference_not_found",
                "Referenced resource not found",
            )
        return _render(
            request, HTTP_400_BAD_REQUEST, "integrity_error", "Data integrity violation"
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.exception("Unhandled server error", exc_info=exc)
        return _render(
            request, HTTP_500_INTERNAL_SERVER_ERROR, "server_error", "Internal Server Error"
        )
