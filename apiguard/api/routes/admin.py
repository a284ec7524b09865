"""
apiguard/api/routes/admin.py

GET /admin/ping
    Connectivity check restricted to ROLE_ADMIN principals.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from apiguard.api.routes import require_role
from apiguard.security import PreAuthenticatedToken

ADMIN_ROLE = "ROLE_ADMIN"

router = APIRouter()


@router.get("/ping", summary="Admin ping")
async def ping(
    principal: PreAuthenticatedToken = Depends(require_role(ADMIN_ROLE)),
) -> dict:
    return {"status": "ok", "username": principal.username}
