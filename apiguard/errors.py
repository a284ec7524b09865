"""
apiguard/errors.py

Error taxonomy shared by the authenticator and the error responder.

Every error raised by this package is an ApiGuardError tagged with a
``kind`` string.  An error is HTTP-aware when it declares a
``status_code``; the responder renders such errors with that status and
the ``headers`` they carry.  Errors without a status code are rendered
as 500.

    ApiGuardError
    ├── HttpError                  caller-chosen status + headers
    ├── AuthenticationError        401, WWW-Authenticate: ApiKey
    │   ├── MissingCredentialsError
    │   └── UnknownApiKeyError
    ├── AccessDeniedError          403
    └── UserNotFoundError          internal, no status
"""
from __future__ import annotations

from collections.abc import Mapping


class ApiGuardError(Exception):
    """Base class for every error raised by apiguard."""

    kind: str = "error"
    default_status_code: int | None = None
    default_headers: Mapping[str, str] = {}

    def __init__(
        self,
        message: str = "",
        *,
        status_code: int | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code if status_code is not None else self.default_status_code
        self.headers: dict[str, str] = dict(
            headers if headers is not None else self.default_headers
        )

    @property
    def is_http_aware(self) -> bool:
        return self.status_code is not None


class HttpError(ApiGuardError):
    """An error that knows which HTTP response it should become.

    Example:
        raise HttpError("Listing not found.", status_code=404)
    """

    kind = "http_error"

    def __init__(
        self,
        message: str = "",
        *,
        status_code: int,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code, headers=headers)


class AuthenticationError(ApiGuardError):
    """The request could not be authenticated."""

    kind = "authentication_error"
    default_status_code = 401
    default_headers = {"WWW-Authenticate": "ApiKey"}


class MissingCredentialsError(AuthenticationError):
    """A required credential header was absent or empty."""

    kind = "missing_credentials"

    def __init__(self, message: str, *, header: str) -> None:
        super().__init__(message)
        self.header = header


class UnknownApiKeyError(AuthenticationError):
    """No user matches the supplied (app secret, API key) pair.

    The raw key is kept on ``api_key`` for internal use; the message only
    carries a masked form of it.
    """

    kind = "unknown_api_key"

    def __init__(self, api_key: str) -> None:
        super().__init__(f'API Key "{mask_api_key(api_key)}" does not exist.')
        self.api_key = api_key


class AccessDeniedError(ApiGuardError):
    """The authenticated principal lacks a required role."""

    kind = "access_denied"
    default_status_code = 403


class UserNotFoundError(ApiGuardError):
    """Raised by user providers when a username does not resolve to a user."""

    kind = "user_not_found"

    def __init__(self, username: str) -> None:
        super().__init__(f'Username "{username}" does not exist.')
        self.username = username


def mask_api_key(api_key: str, visible: int = 4) -> str:
    """Return *api_key* with everything after the first *visible* characters hidden."""
    if len(api_key) <= visible:
        return "…"
    return f"{api_key[:visible]}…"
