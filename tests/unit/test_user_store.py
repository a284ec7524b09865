"""
tests/unit/test_user_store.py

Unit tests for apiguard.storage.user_store.

All tests use AsyncMock SQLAlchemy sessions so no running database is
required.

Coverage
--------
  - _parse_roles: JSON array, None/empty, malformed, non-list
  - get_username_for_api_key: found → username; not found → None
  - get_username_for_api_key: query joins applications and api_keys
  - get_user_by_username: row → frozen User snapshot; missing → None
  - SqlUserProvider: delegates lookups; load raises UserNotFoundError
"""
from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from apiguard.errors import UserNotFoundError
from apiguard.security import User
from apiguard.storage.user_store import (
    SqlUserProvider,
    _parse_roles,
    get_user_by_username,
    get_username_for_api_key,
)


# ---------------------------------------------------------------------------
# Session / result mock helpers
# ---------------------------------------------------------------------------

def _session(value: object) -> AsyncMock:
    session = AsyncMock()
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    session.execute.return_value = result
    return session


def _user_row(username: str = "alice", roles: list[str] | None = None) -> SimpleNamespace:
    return SimpleNamespace(
        id=7,
        username=username,
        roles=json.dumps(roles if roles is not None else ["ROLE_USER"]),
        is_active=True,
    )


# ---------------------------------------------------------------------------
# _parse_roles
# ---------------------------------------------------------------------------

class TestParseRoles:
    def test_json_array(self) -> None:
        assert _parse_roles('["ROLE_USER", "ROLE_ADMIN"]') == frozenset({"ROLE_USER", "ROLE_ADMIN"})

    def test_none(self) -> None:
        assert _parse_roles(None) == frozenset()

    def test_empty_string(self) -> None:
        assert _parse_roles("") == frozenset()

    def test_malformed(self) -> None:
        assert _parse_roles("ROLE_USER") == frozenset()

    def test_non_list(self) -> None:
        assert _parse_roles('{"role": "ROLE_USER"}') == frozenset()

    def test_duplicates_collapse(self) -> None:
        assert _parse_roles('["ROLE_USER", "ROLE_USER"]') == frozenset({"ROLE_USER"})


# ---------------------------------------------------------------------------
# get_username_for_api_key
# ---------------------------------------------------------------------------

class TestGetUsernameForApiKey:
    @pytest.mark.asyncio
    async def test_found(self) -> None:
        session = _session("alice")
        assert await get_username_for_api_key(session, "s1", "k1") == "alice"
        session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        assert await get_username_for_api_key(_session(None), "s1", "nope") is None

    @pytest.mark.asyncio
    async def test_query_filters_on_secret_and_key(self) -> None:
        session = _session(None)
        await get_username_for_api_key(session, "s1", "k1")
        sql = str(session.execute.call_args.args[0])
        assert "applications" in sql
        assert "secret" in sql
        assert "revoked" in sql
        assert "is_active" in sql


# ---------------------------------------------------------------------------
# get_user_by_username
# ---------------------------------------------------------------------------

class TestGetUserByUsername:
    @pytest.mark.asyncio
    async def test_found_returns_snapshot(self) -> None:
        user = await get_user_by_username(_session(_user_row(roles=["ROLE_USER"])), "alice")
        assert user == User(id=7, username="alice", roles=frozenset({"ROLE_USER"}), is_active=True)

    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        assert await get_user_by_username(_session(None), "ghost") is None


# ---------------------------------------------------------------------------
# SqlUserProvider
# ---------------------------------------------------------------------------

class TestSqlUserProvider:
    @pytest.mark.asyncio
    async def test_get_username(self) -> None:
        provider = SqlUserProvider(_session("alice"))
        assert await provider.get_username_for_api_key("s1", "k1") == "alice"

    @pytest.mark.asyncio
    async def test_load_user(self) -> None:
        provider = SqlUserProvider(_session(_user_row(roles=["ROLE_ADMIN"])))
        user = await provider.load_user_by_username("alice")
        assert user.roles == frozenset({"ROLE_ADMIN"})

    @pytest.mark.asyncio
    async def test_load_missing_user_raises(self) -> None:
        provider = SqlUserProvider(_session(None))
        with pytest.raises(UserNotFoundError) as exc_info:
            await provider.load_user_by_username("ghost")
        assert exc_info.value.username == "ghost"
