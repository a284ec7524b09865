"""
apiguard/security/authenticator.py

API-key pre-authenticator.

Two custom headers identify the caller:

    X-API-App-Secret   secret of the client application
    X-API-Key          key issued to a user of that application

Flow
----
1. create_token()        headers → unauthenticated PreAuthenticatedToken
2. supports_token()      is the token ours (same provider key)?
3. authenticate_token()  (secret, key) → username → User → authenticated token

Every failure is raised as an AuthenticationError subclass; nothing is
retried, a failed lookup is a definitive rejection.
"""
from __future__ import annotations

import structlog
from starlette.requests import Request

from apiguard.errors import MissingCredentialsError, UnknownApiKeyError, UserNotFoundError
from apiguard.security.provider import UserProvider
from apiguard.security.tokens import ApiKeyCredentials, PreAuthenticatedToken

logger = structlog.get_logger(__name__)

APP_SECRET_HEADER = "X-API-App-Secret"
API_KEY_HEADER = "X-API-Key"


class ApiKeyAuthenticator:
    """Resolve API-key headers to an authenticated token.

    Args:
        user_provider:     Lookup collaborator for (secret, key) → user.
        app_secret_header: Name of the header carrying the application secret.
        api_key_header:    Name of the header carrying the API key.
    """

    def __init__(
        self,
        user_provider: UserProvider,
        *,
        app_secret_header: str = APP_SECRET_HEADER,
        api_key_header: str = API_KEY_HEADER,
    ) -> None:
        self.user_provider = user_provider
        self.app_secret_header = app_secret_header
        self.api_key_header = api_key_header

    def create_token(self, request: Request, provider_key: str) -> PreAuthenticatedToken:
        """Package the credential headers into an unauthenticated token.

        Header names are matched case-insensitively.  Values are kept
        verbatim.

        Raises:
            MissingCredentialsError: if either header is missing or empty.
        """
        app_secret = request.headers.get(self.app_secret_header)
        if not app_secret:
            raise MissingCredentialsError(
                "No API app secret found.", header=self.app_secret_header
            )

        api_key = request.headers.get(self.api_key_header)
        if not api_key:
            raise MissingCredentialsError("No API key found.", header=self.api_key_header)

        return PreAuthenticatedToken.unauthenticated(
            ApiKeyCredentials(app_secret=app_secret, api_key=api_key),
            provider_key,
        )

    async def authenticate_token(
        self, token: PreAuthenticatedToken, provider_key: str
    ) -> PreAuthenticatedToken:
        """Resolve *token*'s credentials to a user and return the authenticated token.

        Raises:
            UnknownApiKeyError: if no user owns the (secret, key) pair, or the
                username found no longer loads.
        """
        credentials = token.credentials
        if not isinstance(credentials, ApiKeyCredentials):
            raise TypeError("authenticate_token() expects an unauthenticated API-key token")

        username = await self.user_provider.get_username_for_api_key(
            credentials.app_secret, credentials.api_key
        )
        if not username:
            logger.info("api_key_unknown", provider_key=provider_key)
            raise UnknownApiKeyError(credentials.api_key)

        try:
            user = await self.user_provider.load_user_by_username(username)
        except UserNotFoundError as exc:
            logger.warning("api_key_user_vanished", username=username)
            raise UnknownApiKeyError(credentials.api_key) from exc

        logger.debug("api_key_authenticated", username=user.username, provider_key=provider_key)
        return PreAuthenticatedToken.for_user(user, credentials.api_key, provider_key)

    def supports_token(self, token: object, provider_key: str) -> bool:
        """Return True iff *token* is a pre-authenticated token issued for *provider_key*."""
        return isinstance(token, PreAuthenticatedToken) and token.provider_key == provider_key
