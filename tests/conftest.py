"""
tests/conftest.py

Fixtures shared by unit and API tests.

InMemoryUserProvider stands in for the database-backed SqlUserProvider:
it maps (app secret, API key) pairs to usernames and usernames to users,
and records every lookup so tests can assert on call order.
"""
from __future__ import annotations

import pytest

from apiguard.errors import UserNotFoundError
from apiguard.security import User, UserProvider

ALICE = User(id=1, username="alice", roles=frozenset({"ROLE_USER"}))
ROOT = User(id=2, username="root", roles=frozenset({"ROLE_USER", "ROLE_ADMIN"}))


class InMemoryUserProvider(UserProvider):
    def __init__(
        self,
        keys: dict[tuple[str, str], str] | None = None,
        users: dict[str, User] | None = None,
    ) -> None:
        self.keys = keys or {}
        self.users = users or {}
        self.calls: list[tuple] = []

    async def get_username_for_api_key(self, app_secret: str, api_key: str) -> str | None:
        self.calls.append(("get_username_for_api_key", app_secret, api_key))
        return self.keys.get((app_secret, api_key))

    async def load_user_by_username(self, username: str) -> User:
        self.calls.append(("load_user_by_username", username))
        try:
            return self.users[username]
        except KeyError:
            raise UserNotFoundError(username) from None


@pytest.fixture()
def user_provider() -> InMemoryUserProvider:
    """Provider knowing alice (s1/k1) and root (s1/admin-key)."""
    return InMemoryUserProvider(
        keys={("s1", "k1"): "alice", ("s1", "admin-key"): "root"},
        users={"alice": ALICE, "root": ROOT},
    )
