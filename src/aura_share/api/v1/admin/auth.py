# src/aura_share/api/v1/admin/auth.py
"""Admin login and session endpoints."""

from fastapi import APIRouter, Request

from aura_share.api.v1.dependencies import (
    AdminAuthServiceDep,
    AdminTokenDep,
    ClientIPDep,
    CurrentAdminDep,
)
from aura_share.schemas.admin import AdminLoginRequest, AdminLoginResponse, AdminResponse
from aura_share.schemas.common import SuccessResponse

router = APIRouter(prefix="/auth", tags=["admin"])


@router.post("/login", response_model=AdminLoginResponse)
async def login(
    payload: AdminLoginRequest,
    request: Request,
    auth: AdminAuthServiceDep,
    ip_address: ClientIPDep,
) -> AdminLoginResponse:
    """Exchange admin credentials for a session token."""
    admin = auth.authenticate(payload.username, payload.password, ip_address)
    session = auth.create_session(admin, ip_address, request.headers.get("user-agent"))
    return AdminLoginResponse(
        session_token=session.session_token,
        expires_at=session.expires_at,
        admin=AdminResponse.model_validate(admin),
    )


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    token: AdminTokenDep,
    _admin: CurrentAdminDep,
    auth: AdminAuthServiceDep,
    ip_address: ClientIPDep,
) -> SuccessResponse:
    auth.revoke_session(token, ip_address)
    return SuccessResponse(message="Logged out")


@router.get("/me", response_model=AdminResponse)
async def me(admin: CurrentAdminDep) -> AdminResponse:
    return AdminResponse.model_validate(admin)
