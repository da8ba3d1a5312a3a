"""Shared API dependencies for authentication and service wiring.

Services are built per request from the request's database session and the
application's settings; nothing here is a module-level singleton.
"""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from aura_share.core.security import decode_access_token
from aura_share.core.settings import Settings
from aura_share.db.session import get_db
from aura_share.models import AdminUser, User
from aura_share.repositories import UserRepository
from aura_share.services import (
    AdminAccountService,
    AdminAuthService,
    AnalyticsService,
    AuditLogService,
    CollaborationService,
    ContentModerationService,
    ContentService,
    EngagementService,
    FlaggingService,
    ModerationActionService,
    NotificationService,
    ReviewQueueService,
    SocialGraphService,
    SystemConfigService,
    UserModerationService,
    UserService,
    VisibilityService,
)

# Missing credentials are reported as 401 by the dependencies below.
bearer_scheme = HTTPBearer(auto_error=False)
admin_bearer_scheme = HTTPBearer(auto_error=False, scheme_name="AdminBearer")

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def get_settings(request: Request) -> Settings:
    """Return the settings the application was created with."""
    return request.app.state.settings


SettingsDep = Annotated[Settings, Depends(get_settings)]


def _unauthorized(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_from_token(token: str, db: Session, settings: Settings) -> User | None:
    user_id = decode_access_token(token, settings)
    if user_id is None:
        return None
    user = db.get(User, user_id)
    if user is None or user.is_deleted:
        return None
    return user


def get_current_user(credentials: CredentialsDep, db: SessionDep, settings: SettingsDep) -> User:
    """Get the current authenticated user from the JWT bearer token.

    Raises:
        HTTPException: 401 if the token is missing or invalid, 403 if the
            account is banned.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")
    user = _user_from_token(credentials.credentials, db, settings)
    if user is None:
        raise _unauthorized()
    if UserRepository(db).is_banned(user.id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This account has been banned",
        )
    return user


def get_optional_user(
    credentials: CredentialsDep, db: SessionDep, settings: SettingsDep
) -> User | None:
    """Return the caller if a valid token was sent, otherwise ``None``."""
    if credentials is None:
        return None
    user = _user_from_token(credentials.credentials, db, settings)
    if user is None or UserRepository(db).is_banned(user.id):
        return None
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]


def get_notification_service(db: SessionDep) -> NotificationService:
    return NotificationService(db)


def get_visibility_service(db: SessionDep) -> VisibilityService:
    return VisibilityService(db)


NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]
VisibilityServiceDep = Annotated[VisibilityService, Depends(get_visibility_service)]


def get_user_service(db: SessionDep, settings: SettingsDep) -> UserService:
    return UserService(db, settings)


def get_collaboration_service(
    db: SessionDep,
    notifications: NotificationServiceDep,
    visibility: VisibilityServiceDep,
    settings: SettingsDep,
) -> CollaborationService:
    return CollaborationService(db, notifications, visibility, settings.default_list_name)


def get_social_graph_service(
    db: SessionDep, notifications: NotificationServiceDep
) -> SocialGraphService:
    return SocialGraphService(db, notifications)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
CollaborationServiceDep = Annotated[CollaborationService, Depends(get_collaboration_service)]
SocialGraphServiceDep = Annotated[SocialGraphService, Depends(get_social_graph_service)]


def get_content_service(
    db: SessionDep,
    visibility: VisibilityServiceDep,
    collaboration: CollaborationServiceDep,
    social: SocialGraphServiceDep,
    notifications: NotificationServiceDep,
) -> ContentService:
    return ContentService(db, visibility, collaboration, social, notifications)


def get_engagement_service(db: SessionDep, visibility: VisibilityServiceDep) -> EngagementService:
    return EngagementService(db, visibility)


def get_audit_log_service(db: SessionDep) -> AuditLogService:
    return AuditLogService(db)


AuditLogServiceDep = Annotated[AuditLogService, Depends(get_audit_log_service)]


def get_moderation_action_service(
    db: SessionDep, audit: AuditLogServiceDep
) -> ModerationActionService:
    return ModerationActionService(db, audit)


ModerationActionServiceDep = Annotated[
    ModerationActionService, Depends(get_moderation_action_service)
]


def get_review_queue_service(
    db: SessionDep, audit: AuditLogServiceDep, actions: ModerationActionServiceDep
) -> ReviewQueueService:
    return ReviewQueueService(db, audit, actions)


ReviewQueueServiceDep = Annotated[ReviewQueueService, Depends(get_review_queue_service)]


def get_flagging_service(
    db: SessionDep,
    notifications: NotificationServiceDep,
    visibility: VisibilityServiceDep,
    review_queue: ReviewQueueServiceDep,
    settings: SettingsDep,
) -> FlaggingService:
    return FlaggingService(
        db,
        notifications,
        visibility,
        review_queue,
        threshold=settings.flag_auto_delete_threshold,
    )


ContentServiceDep = Annotated[ContentService, Depends(get_content_service)]
EngagementServiceDep = Annotated[EngagementService, Depends(get_engagement_service)]
FlaggingServiceDep = Annotated[FlaggingService, Depends(get_flagging_service)]


def get_admin_auth_service(
    db: SessionDep, settings: SettingsDep, audit: AuditLogServiceDep
) -> AdminAuthService:
    return AdminAuthService(db, settings, audit)


def get_content_moderation_service(
    db: SessionDep, audit: AuditLogServiceDep, actions: ModerationActionServiceDep
) -> ContentModerationService:
    return ContentModerationService(db, audit, actions)


def get_user_moderation_service(
    db: SessionDep,
    audit: AuditLogServiceDep,
    actions: ModerationActionServiceDep,
    settings: SettingsDep,
) -> UserModerationService:
    return UserModerationService(db, audit, actions, settings.default_list_name)


def get_system_config_service(db: SessionDep, audit: AuditLogServiceDep) -> SystemConfigService:
    return SystemConfigService(db, audit)


def get_admin_account_service(db: SessionDep, audit: AuditLogServiceDep) -> AdminAccountService:
    return AdminAccountService(db, audit)


def get_analytics_service(db: SessionDep) -> AnalyticsService:
    return AnalyticsService(db)


AdminAuthServiceDep = Annotated[AdminAuthService, Depends(get_admin_auth_service)]
ContentModerationServiceDep = Annotated[
    ContentModerationService, Depends(get_content_moderation_service)
]
UserModerationServiceDep = Annotated[UserModerationService, Depends(get_user_moderation_service)]
SystemConfigServiceDep = Annotated[SystemConfigService, Depends(get_system_config_service)]
AdminAccountServiceDep = Annotated[AdminAccountService, Depends(get_admin_account_service)]
AnalyticsServiceDep = Annotated[AnalyticsService, Depends(get_analytics_service)]


def get_admin_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(admin_bearer_scheme)],
) -> str:
    if credentials is None:
        raise _unauthorized("Admin authentication required")
    return credentials.credentials


AdminTokenDep = Annotated[str, Depends(get_admin_token)]


def get_current_admin(token: AdminTokenDep, auth: AdminAuthServiceDep) -> AdminUser:
    """Resolve the admin behind a session token.

    Raises:
        HTTPException: 401 if the token is unknown, expired or belongs to an
            inactive admin.
    """
    admin = auth.validate_session(token)
    if admin is None:
        raise _unauthorized("Invalid or expired admin session")
    return admin


CurrentAdminDep = Annotated[AdminUser, Depends(get_current_admin)]


def require_permission(permission: str) -> Callable[[AdminUser], AdminUser]:
    """Build a dependency that admits admins holding ``permission``."""

    def _check(admin: CurrentAdminDep) -> AdminUser:
        if not admin.has_permission(permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return admin

    return _check


def client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


ClientIPDep = Annotated[str | None, Depends(client_ip)]
