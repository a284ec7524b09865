"""
apiguard/api/routes/__init__.py

Shared FastAPI dependencies used across all route modules.

require_principal runs the API-key authenticator for the current request
and stores the authenticated token on ``request.state.token``; any failure
propagates to the ErrorResponder as an AuthenticationError.
"""
from collections.abc import Awaitable, Callable

import structlog
from fastapi import Depends, Request, Security
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession

from apiguard.config import settings
from apiguard.database.postgres import get_db
from apiguard.errors import AccessDeniedError, AuthenticationError
from apiguard.security import ApiKeyAuthenticator, PreAuthenticatedToken, UserProvider
from apiguard.storage.user_store import SqlUserProvider

logger = structlog.get_logger(__name__)

# Declared so the OpenAPI schema advertises both headers; the values are
# read by ApiKeyAuthenticator.create_token().
_app_secret_scheme = APIKeyHeader(name=settings.app_secret_header, auto_error=False)
_api_key_scheme = APIKeyHeader(name=settings.api_key_header, auto_error=False)


async def get_user_provider(pg_session: AsyncSession = Depends(get_db)) -> UserProvider:
    """FastAPI dependency returning the database-backed user provider."""
    return SqlUserProvider(pg_session)


async def require_principal(
    request: Request,
    user_provider: UserProvider = Depends(get_user_provider),
    _app_secret: str | None = Security(_app_secret_scheme),
    _api_key: str | None = Security(_api_key_scheme),
) -> PreAuthenticatedToken:
    """FastAPI dependency that enforces X-API-App-Secret / X-API-Key authentication.

    Returns the authenticated token.
    """
    provider_key = settings.provider_key
    authenticator = ApiKeyAuthenticator(
        user_provider,
        app_secret_header=settings.app_secret_header,
        api_key_header=settings.api_key_header,
    )

    token = authenticator.create_token(request, provider_key)
    if not authenticator.supports_token(token, provider_key):
        raise AuthenticationError("Unsupported authentication token.")

    principal = await authenticator.authenticate_token(token, provider_key)
    request.state.token = principal
    return principal


def require_role(role: str) -> Callable[..., Awaitable[PreAuthenticatedToken]]:
    """Build a dependency that additionally requires *role* on the principal.

    Example:
        @router.get("/admin/ping")
        async def ping(principal = Depends(require_role("ROLE_ADMIN"))): ...
    """

    async def _require_role(
        principal: PreAuthenticatedToken = Depends(require_principal),
    ) -> PreAuthenticatedToken:
        if role not in principal.roles:
            logger.info("access_denied", username=principal.username, role=role)
            raise AccessDeniedError(f'Role "{role}" is required.')
        return principal

    return _require_role
