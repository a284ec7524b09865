"""
apiguard/api/routes/me.py

GET /me
    The authenticated caller: username, roles and the provider key that
    authenticated the request.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from apiguard.api.routes import require_principal
from apiguard.models.schemas.principal import PrincipalOut
from apiguard.security import PreAuthenticatedToken

router = APIRouter()


@router.get(
    "",
    response_model=PrincipalOut,
    summary="Current principal",
)
async def get_me(
    principal: PreAuthenticatedToken = Depends(require_principal),
) -> PrincipalOut:
    return PrincipalOut(
        username=principal.username,
        roles=sorted(principal.roles),
        provider_key=principal.provider_key,
    )
