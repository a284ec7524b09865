"""
apiguard/storage/user_store.py

PostgreSQL-backed user lookups for API-key authentication.

An API key is only valid in the context of the application that issued
it: the pair (applications.secret, api_keys.key) identifies exactly one
key row, which belongs to exactly one user.  Revoked keys and inactive
users never resolve.

Roles are stored on users.roles as a JSON array and surfaced as a
frozenset on the apiguard.security.provider.User snapshot.

Transaction ownership
    All functions here are read-only; the caller owns the session.
"""
from __future__ import annotations

import json

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from apiguard.errors import UserNotFoundError
from apiguard.models.sql import ApiKey, Application
from apiguard.models.sql import User as UserRow
from apiguard.security.provider import User, UserProvider

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _parse_roles(roles_json: str | None) -> frozenset[str]:
    """Decode the users.roles JSON array.

    Malformed or non-list values decode to an empty role set.
    """
    if not roles_json:
        return frozenset()
    try:
        roles = json.loads(roles_json)
    except ValueError:
        logger.warning("user_roles_malformed", roles=roles_json)
        return frozenset()
    if not isinstance(roles, list):
        return frozenset()
    return frozenset(str(role) for role in roles)


def _to_user(row: UserRow) -> User:
    return User(
        id=row.id,
        username=row.username,
        roles=_parse_roles(row.roles),
        is_active=row.is_active,
    )


# ---------------------------------------------------------------------------
# Read operations
# ---------------------------------------------------------------------------

async def get_username_for_api_key(
    pg_session: AsyncSession,
    app_secret: str,
    api_key: str,
) -> str | None:
    """Return the username owning *api_key* within the application identified by *app_secret*.

    Args:
        pg_session: SQLAlchemy async session.
        app_secret: Value of the X-API-App-Secret header.
        api_key:    Value of the X-API-Key header.

    Returns:
        The username, or None when the pair is unknown, the key is revoked
        or the user is inactive.
    """
    stmt = (
        select(UserRow.username)
        .join(ApiKey, ApiKey.user_id == UserRow.id)
        .join(Application, Application.id == ApiKey.application_id)
        .where(
            Application.secret == app_secret,
            ApiKey.key == api_key,
            ApiKey.revoked.is_(False),
            UserRow.is_active.is_(True),
        )
    )
    result = await pg_session.execute(stmt)
    return result.scalar_one_or_none()


async def get_user_by_username(pg_session: AsyncSession, username: str) -> User | None:
    """Fetch a user snapshot by username, or None if no such user exists."""
    result = await pg_session.execute(select(UserRow).where(UserRow.username == username))
    row: UserRow | None = result.scalar_one_or_none()
    return _to_user(row) if row is not None else None


class SqlUserProvider(UserProvider):
    """UserProvider bound to one request's database session."""

    def __init__(self, pg_session: AsyncSession) -> None:
        self.pg_session = pg_session

    async def get_username_for_api_key(self, app_secret: str, api_key: str) -> str | None:
        return await get_username_for_api_key(self.pg_session, app_secret, api_key)

    async def load_user_by_username(self, username: str) -> User:
        user = await get_user_by_username(self.pg_session, username)
        if user is None:
            raise UserNotFoundError(username)
        return user
