# src/aura_share/services/__init__.py
"""Business logic services for the Aura Share application."""

from .admin import (
    AdminAccountService,
    AdminAuthService,
    AuditLogService,
    ContentModerationService,
    ModerationActionService,
    ReviewQueueService,
    SystemConfigService,
    UserModerationService,
)
from .analytics import AnalyticsService
from .collaboration import CollaborationService, RoleResolution
from .content import ContentService, NewPost
from .engagement import EngagementService
from .moderation import FlaggingService, FlagResult
from .notifications import NotificationService
from .social_graph import SocialGraphService
from .users import UserService
from .visibility import VisibilityService

__all__ = [
    "AdminAccountService",
    "AdminAuthService",
    "AnalyticsService",
    "AuditLogService",
    "CollaborationService",
    "ContentModerationService",
    "ContentService",
    "EngagementService",
    "FlagResult",
    "FlaggingService",
    "ModerationActionService",
    "NewPost",
    "NotificationService",
    "ReviewQueueService",
    "RoleResolution",
    "SocialGraphService",
    "SystemConfigService",
    "UserModerationService",
    "UserService",
    "VisibilityService",
]
