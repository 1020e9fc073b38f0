"""HTTP plumbing shared by every router.

Responses use a single JSON envelope::

    {"success": true, "data": ..., ...}
    {"success": false, "message": "..."}

Domain exceptions propagate untouched out of aggregates and handlers and are
translated to status codes here, once, at the boundary.
"""

import uuid
from typing import Any, NamedTuple

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.shared.errors import StorefrontError
from storefront.utils.logging import add_context, clear_context

logger = structlog.get_logger(__name__)

_MISSING = object()


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------
def ok(data: Any = _MISSING, status_code: int = 200, **extra: Any) -> JSONResponse:
    content = {"success": True, **extra}
    if data is not _MISSING:
        content["data"] = data
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def fail(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


class Page(NamedTuple):
    items: list
    total: int
    pagination: dict


def paginate(items: list, page: int, limit: int) -> Page:
    """Slice ``items`` for a 1-based ``page`` and describe its neighbours."""
    total = len(items)
    start = (page - 1) * limit
    end = page * limit

    pagination = {}
    if end < total:
        pagination["next"] = {"page": page + 1, "limit": limit}
    if start > 0:
        pagination["prev"] = {"page": page - 1, "limit": limit}

    return Page(items=items[start:end], total=total, pagination=pagination)


def paged(page: Page, **extra: Any) -> JSONResponse:
    return ok(
        data=page.items,
        count=len(page.items),
        total=page.total,
        pagination=page.pagination,
        **extra,
    )


# ---------------------------------------------------------------------------
# Error translation
# ---------------------------------------------------------------------------
def first_message(messages: Any, default: str = "Validation failed") -> str:
    """Pull the first human readable message out of a Protean error payload."""
    if isinstance(messages, dict):
        for value in messages.values():
            return first_message(value, default)
        return default
    if isinstance(messages, list | tuple):
        return first_message(messages[0], default) if messages else default
    if messages is None or messages == "":
        return default
    return str(messages)


def _request_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Validation failed"
    error = errors[0]
    location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    message = error.get("msg", "Invalid value")
    return f"{location[-1]}: {message}" if location else message


def register_exception_handlers(app: FastAPI) -> None:
    """Map the storefront error taxonomy onto HTTP status codes."""

    @app.exception_handler(StorefrontError)
    async def storefront_error(request: Request, exc: StorefrontError):
        return fail(exc.message, exc.status_code)

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        return fail(first_message(getattr(exc, "messages", None)), 400)

    @app.exception_handler(ObjectNotFoundError)
    async def not_found(request: Request, exc: ObjectNotFoundError):
        return fail(first_message(getattr(exc, "messages", None), default="Resource not found"), 404)

    @app.exception_handler(ExpectedVersionError)
    async def version_conflict(request: Request, exc: ExpectedVersionError):
        logger.warning("Concurrent modification detected", path=request.url.path)
        return fail("The resource was modified concurrently, please retry", 409)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        return fail(_request_validation_message(exc), 400)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return fail(str(exc.detail), exc.status_code)

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error", path=request.url.path, method=request.method)
        return fail("Server error", 500)


# ---------------------------------------------------------------------------
# Request scope
# ---------------------------------------------------------------------------
def bind_domain_context(app: FastAPI, domain) -> None:
    """Push ``domain``'s context around every request and tag its log lines."""

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        clear_context()
        add_context(
            request_id=request.headers.get("x-request-id") or uuid.uuid4().hex,
            method=request.method,
            path=request.url.path,
        )
        with domain.domain_context():
            response = await call_next(request)
        return response
