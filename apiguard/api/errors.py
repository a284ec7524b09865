"""
apiguard/api/errors.py

Global error responder.

ErrorResponder is registered as the exception handler for every error
type the framework can surface, so it produces the final response for any
request that fails:

    1. wrap the error in an ErrorEnvelope (pluggable wrapper)
    2. pick the status code: HTTP-aware errors keep their own status and
       headers, everything else becomes a bare 500
    3. log one line:
           "<ErrorKind>" with message "<message>" on line <n> in <file>.
    4. return the envelope as an application/hal+json response

If building the response fails the responder falls back to a minimal 500
body; a failing logger never replaces the built response.  It never raises.

ErrorCatchingMiddleware catches unclassified errors inside the app so
Starlette's ServerErrorMiddleware never re-raises them after responding.
"""
from __future__ import annotations

import contextlib
import traceback
from collections.abc import Callable
from typing import Any

import structlog
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from apiguard.errors import ApiGuardError
from apiguard.models.schemas.error import ErrorEnvelope

ExceptionWrapper = Callable[..., ErrorEnvelope]

_GENERIC_MESSAGE = "An unexpected error occurred."


class HalJsonResponse(JSONResponse):
    media_type = "application/hal+json"


# ---------------------------------------------------------------------------
# Error classification
# ---------------------------------------------------------------------------

def error_kind(exc: BaseException) -> str:
    """Tag used in the envelope's ``kind`` field."""
    if isinstance(exc, ApiGuardError):
        return exc.kind
    if isinstance(exc, RequestValidationError):
        return "validation_error"
    if isinstance(exc, StarletteHTTPException):
        return "http_error"
    return "internal_error"


def error_message(exc: BaseException) -> str:
    if isinstance(exc, ApiGuardError):
        return exc.message
    if isinstance(exc, StarletteHTTPException):
        return str(exc.detail)
    if isinstance(exc, RequestValidationError):
        return "Request validation failed."
    return str(exc)


def status_and_headers(exc: BaseException) -> tuple[int, dict[str, str]]:
    """Return the HTTP status and extra headers for *exc*.

    Any error declaring an integer ``status_code`` is HTTP-aware and keeps
    its status and ``headers``.  Validation errors map to 422.  Everything
    else is a 500 with no headers.
    """
    if isinstance(exc, RequestValidationError):
        return 422, {}
    status_code = getattr(exc, "status_code", None)
    if isinstance(status_code, int) and not isinstance(status_code, bool):
        return status_code, dict(getattr(exc, "headers", None) or {})
    return 500, {}


def error_origin(exc: BaseException) -> tuple[str, int]:
    """File and line of the innermost frame *exc* was raised from ("", 0 if unknown)."""
    if exc.__traceback__ is None:
        return "", 0
    frames = traceback.extract_tb(exc.__traceback__)
    if not frames:
        return "", 0
    frame = frames[-1]
    return frame.filename, frame.lineno or 0


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------

def wrap_exception(exc: BaseException, *, status_code: int, debug: bool = False) -> ErrorEnvelope:
    """Default wrapper: turn *exc* into a serialisable envelope.

    Outside debug mode, unclassified errors get a generic message and no
    source location or traceback is included.
    """
    message = error_message(exc)
    if status_code >= 500 and not debug and not isinstance(exc, ApiGuardError):
        message = _GENERIC_MESSAGE

    envelope = ErrorEnvelope(message=message, code=status_code, kind=error_kind(exc))

    if isinstance(exc, RequestValidationError):
        envelope.errors = jsonable_encoder(exc.errors())

    if debug:
        file, line = error_origin(exc)
        envelope.exception = type(exc).__name__
        envelope.file = file
        envelope.line = line
        envelope.trace = traceback.format_exception(type(exc), exc, exc.__traceback__)

    return envelope


# ---------------------------------------------------------------------------
# Responder
# ---------------------------------------------------------------------------

class ErrorResponder:
    """Convert any error into the request's final HAL+JSON response.

    Args:
        logger:  structlog-compatible logger; receives one ``error`` call per
                 handled exception.
        wrapper: Callable building the ErrorEnvelope; called as
                 ``wrapper(exc, status_code=..., debug=...)``.
        debug:   Include source location and traceback in envelopes.
    """

    def __init__(
        self,
        logger: Any = None,
        wrapper: ExceptionWrapper = wrap_exception,
        debug: bool = False,
    ) -> None:
        self.logger = logger if logger is not None else structlog.get_logger(__name__)
        self.wrapper = wrapper
        self.debug = debug

    def build_response(self, exc: BaseException, *, path: str | None = None) -> JSONResponse:
        """Return the response for *exc*.  Never raises."""
        try:
            status_code, headers = status_and_headers(exc)
            envelope = self.wrapper(exc, status_code=status_code, debug=self.debug)
            response = HalJsonResponse(
                content=envelope.model_dump(exclude_none=True),
                status_code=status_code,
                headers=headers,
            )
        except Exception as build_error:  # noqa: BLE001
            with contextlib.suppress(Exception):
                self.logger.critical(
                    "error_response_failed",
                    original_error=type(exc).__name__,
                    error=repr(build_error),
                )
            return HalJsonResponse(
                content={"message": "Internal Server Error", "code": 500},
                status_code=500,
            )

        # A broken log sink must not replace the response already built.
        with contextlib.suppress(Exception):
            file, line = error_origin(exc)
            self.logger.error(
                f'"{type(exc).__name__}" with message "{error_message(exc)}" '
                f"on line {line} in {file}.",
                error_kind=error_kind(exc),
                status_code=status_code,
                path=path,
            )
        return response

    async def __call__(self, request: Request, exc: Exception) -> JSONResponse:
        return self.build_response(exc, path=request.url.path)

    def install(self, app: FastAPI) -> None:
        """Register this responder as the handler for every error type.

        Unclassified errors are caught by ErrorCatchingMiddleware inside the
        app so they never reach Starlette's ServerErrorMiddleware, which would
        re-raise them after responding.  The ``Exception`` handler stays as a
        backstop for errors raised outside that middleware.
        """
        for exc_class in (Exception, StarletteHTTPException, RequestValidationError, ApiGuardError):
            app.add_exception_handler(exc_class, self)
        app.add_middleware(ErrorCatchingMiddleware, responder=self)


class ErrorCatchingMiddleware(BaseHTTPMiddleware):
    """Turn errors escaping the routing layer into the responder's response."""

    def __init__(self, app: ASGIApp, responder: ErrorResponder) -> None:
        super().__init__(app)
        self.responder = responder

    async def dispatch(self, request: Request, call_next: object) -> Response:
        try:
            return await call_next(request)  # type: ignore[operator]
        except Exception as exc:  # noqa: BLE001
            return self.responder.build_response(exc, path=request.url.path)
