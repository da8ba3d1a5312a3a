# src/aura_share/api/v1/admin/system.py
"""System configuration, audit log and admin account endpoints."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from aura_share.api.v1.dependencies import (
    AdminAccountServiceDep,
    AuditLogServiceDep,
    SystemConfigServiceDep,
    require_permission,
)
from aura_share.models import AdminUser
from aura_share.models.admin import PERMISSION_SYSTEM_CONFIG, PERMISSION_USER_MANAGEMENT
from aura_share.schemas.admin import (
    AdminCreateRequest,
    AdminResponse,
    AdminUpdateRequest,
    AuditLogResponse,
    SystemConfigResponse,
    SystemConfigUpdate,
)
from aura_share.schemas.common import SuccessResponse

router = APIRouter(tags=["admin"])

ConfigAdminDep = Annotated[AdminUser, Depends(require_permission(PERMISSION_SYSTEM_CONFIG))]
AccountAdminDep = Annotated[AdminUser, Depends(require_permission(PERMISSION_USER_MANAGEMENT))]


@router.get("/system/config", response_model=list[SystemConfigResponse])
async def get_config(
    _admin: ConfigAdminDep,
    config: SystemConfigServiceDep,
    key: str | None = None,
) -> list[SystemConfigResponse]:
    return [SystemConfigResponse.model_validate(entry) for entry in config.get_config(key)]


@router.put("/system/config/{key}", response_model=SystemConfigResponse)
async def update_config(
    key: str,
    payload: SystemConfigUpdate,
    admin: ConfigAdminDep,
    config: SystemConfigServiceDep,
) -> SystemConfigResponse:
    entry = config.update_config(
        key,
        payload.value,
        admin,
        type_=payload.type,
        category=payload.category,
        description=payload.description,
    )
    return SystemConfigResponse.model_validate(entry)


@router.get("/audit-logs", response_model=list[AuditLogResponse])
async def audit_logs(
    _admin: ConfigAdminDep,
    audit: AuditLogServiceDep,
    admin_id: int | None = None,
    action: str | None = None,
    target: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
) -> list[AuditLogResponse]:
    entries = audit.entries(admin_id, action, target, start, end, limit)
    return [AuditLogResponse.model_validate(entry) for entry in entries]


@router.get("/admins", response_model=list[AdminResponse])
async def list_admins(
    _admin: AccountAdminDep, accounts: AdminAccountServiceDep
) -> list[AdminResponse]:
    return [AdminResponse.model_validate(admin) for admin in accounts.list_admins()]


@router.post("/admins", response_model=AdminResponse, status_code=status.HTTP_201_CREATED)
async def create_admin(
    payload: AdminCreateRequest,
    admin: AccountAdminDep,
    accounts: AdminAccountServiceDep,
) -> AdminResponse:
    created = accounts.create_admin(
        payload.username,
        payload.password,
        payload.email,
        payload.role,
        payload.permissions,
        actor=admin,
    )
    return AdminResponse.model_validate(created)


@router.patch("/admins/{admin_id}", response_model=AdminResponse)
async def update_admin(
    admin_id: int,
    payload: AdminUpdateRequest,
    admin: AccountAdminDep,
    accounts: AdminAccountServiceDep,
) -> AdminResponse:
    updated = accounts.update_admin(
        admin_id,
        actor=admin,
        role=payload.role,
        permissions=payload.permissions,
        is_active=payload.is_active,
    )
    return AdminResponse.model_validate(updated)


@router.delete("/admins/{admin_id}", response_model=SuccessResponse)
async def delete_admin(
    admin_id: int, admin: AccountAdminDep, accounts: AdminAccountServiceDep
) -> SuccessResponse:
    accounts.delete_admin(admin_id, actor=admin)
    return SuccessResponse(message="Admin deleted")
