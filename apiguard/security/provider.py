"""
apiguard/security/provider.py

User lookup collaborator used by the API-key authenticator.

The authenticator never talks to storage directly; it asks a UserProvider
to (1) map an (app secret, API key) pair to a username and (2) load the
user record for that username.  apiguard.storage.user_store ships the
database-backed implementation.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class User:
    """Read-only snapshot of an application user."""

    id: int
    username: str
    roles: frozenset[str] = field(default_factory=frozenset)
    is_active: bool = True


class UserProvider(ABC):
    """Abstract base class for user lookups keyed by API credentials."""

    @abstractmethod
    async def get_username_for_api_key(self, app_secret: str, api_key: str) -> str | None:
        """Return the username owning *api_key* for the application identified by *app_secret*.

        Returns:
            The username, or None when no active key matches the pair.
        """
        ...

    @abstractmethod
    async def load_user_by_username(self, username: str) -> User:
        """Load the full user record.

        Raises:
            UserNotFoundError: if *username* does not resolve to a user.
        """
        ...
