from apiguard.security.authenticator import ApiKeyAuthenticator
from apiguard.security.provider import User, UserProvider
from apiguard.security.tokens import ANONYMOUS, ApiKeyCredentials, PreAuthenticatedToken

__all__ = [
    "ANONYMOUS",
    "ApiKeyAuthenticator",
    "ApiKeyCredentials",
    "PreAuthenticatedToken",
    "User",
    "UserProvider",
]
