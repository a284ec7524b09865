"""
apiguard/security/tokens.py

Tokens passed between the API-key authenticator and the host framework.

ApiKeyCredentials
    The raw, untrusted header values for one request.

PreAuthenticatedToken
    Either the unauthenticated wrapper around ApiKeyCredentials built by
    ApiKeyAuthenticator.create_token(), or the authenticated principal
    returned by ApiKeyAuthenticator.authenticate_token().  Both carry the
    provider key of the authenticator that produced them.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from apiguard.security.provider import User

# Subject placeholder for tokens that have not been resolved to a user yet.
ANONYMOUS = "anon."


@dataclass(frozen=True)
class ApiKeyCredentials:
    """Header values exactly as they arrived on the request."""

    app_secret: str
    api_key: str


@dataclass(frozen=True)
class PreAuthenticatedToken:
    subject: User | str
    credentials: ApiKeyCredentials | str
    provider_key: str
    roles: frozenset[str] = field(default_factory=frozenset)
    authenticated: bool = False

    @classmethod
    def unauthenticated(
        cls, credentials: ApiKeyCredentials, provider_key: str
    ) -> PreAuthenticatedToken:
        return cls(subject=ANONYMOUS, credentials=credentials, provider_key=provider_key)

    @classmethod
    def for_user(cls, user: User, api_key: str, provider_key: str) -> PreAuthenticatedToken:
        return cls(
            subject=user,
            credentials=api_key,
            provider_key=provider_key,
            roles=frozenset(user.roles),
            authenticated=True,
        )

    @property
    def user(self) -> User | None:
        return self.subject if isinstance(self.subject, User) else None

    @property
    def username(self) -> str:
        user = self.user
        return user.username if user is not None else ANONYMOUS
