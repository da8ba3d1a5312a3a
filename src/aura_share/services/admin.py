"""Admin principals, audit trail, moderation actions and the review queue.

Admins authenticate separately from regular users and hold opaque session
tokens. Every state-changing admin operation writes an :class:`AuditLog`
row in the same transaction as the change it records.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from aura_share.core.errors import (
    AuthenticationFailed,
    Conflict,
    NotFound,
    PermissionDenied,
    ValidationFailed,
)
from aura_share.core.security import generate_session_token, hash_password, verify_password
from aura_share.core.settings import Settings
from aura_share.db.session import atomic
from aura_share.db.time import as_utc, utcnow
from aura_share.models import (
    AdminSession,
    AdminUser,
    AuditLog,
    Comment,
    ContentReviewItem,
    ModerationAction,
    Post,
    PostFlag,
    SystemConfig,
    User,
)
from aura_share.models.admin import (
    ACTION_STATUS_REVERSED,
    ADMIN_PERMISSIONS,
    ADMIN_ROLE_SUPER,
    ADMIN_ROLES,
    REVIEW_PRIORITIES,
    REVIEW_STATUS_ASSIGNED,
    REVIEW_STATUS_PENDING,
    REVIEW_STATUS_REVIEWED,
)
from aura_share.repositories import PostRepository, UserRepository
from aura_share.repositories.user_repo import ACTION_BAN, ACTION_UNBAN, CONTENT_TYPE_USER

__all__ = [
    "AdminAccountService",
    "AdminAuthService",
    "AuditLogService",
    "ContentModerationService",
    "ModerationActionService",
    "ReviewQueueService",
    "SystemConfigService",
    "UserModerationService",
]

logger = logging.getLogger(__name__)

CONTENT_TYPE_POST = "post"
CONTENT_TYPE_COMMENT = "comment"
CONTENT_TYPES = (CONTENT_TYPE_POST, CONTENT_TYPE_COMMENT, CONTENT_TYPE_USER)

ACTION_REMOVE = "remove"
ACTION_RESTORE = "restore"
ACTION_APPROVE = "approve"
REVIEW_ACTIONS = (ACTION_APPROVE, ACTION_REMOVE, "warn", "escalate")


class AuditLogService:
    """Append-only record of what admins did."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def log(
        self,
        admin_id: int | None,
        action: str,
        target: str,
        target_id: int | None = None,
        details: dict[str, Any] | None = None,
        ip_address: str | None = None,
    ) -> AuditLog:
        """Stage an audit entry; the caller's transaction commits it."""
        entry = AuditLog(
            admin_id=admin_id,
            action=action,
            target=target,
            target_id=target_id,
            details=details,
            ip_address=ip_address,
        )
        self.db.add(entry)
        self.db.flush()
        return entry

    def entries(
        self,
        admin_id: int | None = None,
        action: str | None = None,
        target: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 100,
    ) -> list[AuditLog]:
        stmt = select(AuditLog)
        if admin_id is not None:
            stmt = stmt.where(AuditLog.admin_id == admin_id)
        if action is not None:
            stmt = stmt.where(AuditLog.action == action)
        if target is not None:
            stmt = stmt.where(AuditLog.target == target)
        if start is not None:
            stmt = stmt.where(AuditLog.created_at >= start)
        if end is not None:
            stmt = stmt.where(AuditLog.created_at <= end)
        stmt = stmt.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(limit)
        return list(self.db.scalars(stmt))


class AdminAuthService:
    """Credential checks and session tokens for admins."""

    def __init__(self, db: Session, settings: Settings, audit: AuditLogService) -> None:
        self.db = db
        self.settings = settings
        self.audit = audit

    def _by_username(self, username: str) -> AdminUser | None:
        return self.db.scalars(select(AdminUser).where(AdminUser.username == username)).first()

    def authenticate(self, username: str, password: str, ip_address: str | None = None) -> AdminUser:
        """Return the active admin matching the credentials.

        Raises:
            AuthenticationFailed: On an unknown username, wrong password or
                inactive account. The failure is audited.
        """
        admin = self._by_username(username)
        if admin is None or not admin.is_active or not verify_password(password, admin.password_hash):
            with atomic(self.db):
                self.audit.log(
                    admin.id if admin is not None else None,
                    "login_failed",
                    "admin_auth",
                    details={"username": username},
                    ip_address=ip_address,
                )
            logger.warning("Failed admin login for %s", username)
            raise AuthenticationFailed("Invalid credentials")
        admin.last_login = utcnow()
        self.db.flush()
        return admin

    def create_session(
        self,
        admin: AdminUser,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AdminSession:
        """Issue a session token and audit the successful login."""
        with atomic(self.db):
            session = AdminSession(
                admin_id=admin.id,
                session_token=generate_session_token(),
                ip_address=ip_address,
                user_agent=user_agent,
                expires_at=utcnow() + timedelta(hours=self.settings.admin_session_hours),
            )
            self.db.add(session)
            self.audit.log(admin.id, "login_success", "admin_auth", ip_address=ip_address)
        logger.info("Admin %s signed in", admin.username)
        return session

    def validate_session(self, token: str) -> AdminUser | None:
        """Return the admin behind an unexpired token, or ``None``."""
        session = self.db.scalars(
            select(AdminSession).where(AdminSession.session_token == token)
        ).first()
        if session is None or as_utc(session.expires_at) <= utcnow():
            return None
        admin = self.db.get(AdminUser, session.admin_id)
        if admin is None or not admin.is_active:
            return None
        return admin

    def revoke_session(self, token: str, ip_address: str | None = None) -> None:
        session = self.db.scalars(
            select(AdminSession).where(AdminSession.session_token == token)
        ).first()
        if session is None:
            return
        with atomic(self.db):
            self.audit.log(session.admin_id, "logout", "admin_auth", ip_address=ip_address)
            self.db.delete(session)

    def bootstrap_super_admin(self, username: str, password: str, email: str) -> AdminUser:
        """Create the first super admin; refuses once any admin exists."""
        if self.db.scalar(select(func.count()).select_from(AdminUser)):
            raise Conflict("An admin account already exists")
        with atomic(self.db):
            admin = AdminUser(
                username=username,
                password_hash=hash_password(password),
                email=email,
                role=ADMIN_ROLE_SUPER,
                permissions=list(ADMIN_PERMISSIONS),
            )
            self.db.add(admin)
            self.db.flush()
            self.audit.log(admin.id, "admin_bootstrapped", "admin_user", admin.id)
        return admin


class ModerationActionService:
    """Create, look up and reverse moderation decisions."""

    def __init__(self, db: Session, audit: AuditLogService) -> None:
        self.db = db
        self.audit = audit

    def create(
        self,
        moderator_id: int,
        content_type: str,
        content_id: int,
        action: str,
        reason: str,
        notes: str | None = None,
        expires_at: datetime | None = None,
    ) -> ModerationAction:
        """Stage an action; the caller's transaction commits it."""
        record = ModerationAction(
            moderator_id=moderator_id,
            content_type=content_type,
            content_id=content_id,
            action=action,
            reason=reason,
            notes=notes,
            expires_at=expires_at,
        )
        self.db.add(record)
        self.db.flush()
        return record

    def history(self, content_type: str, content_id: int) -> list[ModerationAction]:
        stmt = (
            select(ModerationAction)
            .where(
                ModerationAction.content_type == content_type,
                ModerationAction.content_id == content_id,
            )
            .order_by(ModerationAction.created_at.desc(), ModerationAction.id.desc())
        )
        return list(self.db.scalars(stmt))

    def user_history(self, user_id: int) -> list[ModerationAction]:
        return self.history(CONTENT_TYPE_USER, user_id)

    def reverse(self, action_id: int, admin: AdminUser, reason: str) -> ModerationAction:
        """Mark an action reversed; the record itself is kept."""
        record = self.db.get(ModerationAction, action_id)
        if record is None:
            raise NotFound("Moderation action not found")
        if record.status == ACTION_STATUS_REVERSED:
            raise Conflict("Moderation action already reversed")
        with atomic(self.db):
            record.status = ACTION_STATUS_REVERSED
            if record.content_type == CONTENT_TYPE_POST and record.action == ACTION_REMOVE:
                post = self.db.get(Post, record.content_id)
                if post is not None:
                    post.removed = False
            self.audit.log(
                admin.id,
                "moderation_action_reversed",
                record.content_type,
                record.content_id,
                details={"action_id": record.id, "action": record.action, "reason": reason},
            )
        return record


class ContentModerationService:
    """Remove and restore posts and comments on behalf of an admin."""

    def __init__(
        self, db: Session, audit: AuditLogService, actions: ModerationActionService
    ) -> None:
        self.db = db
        self.audit = audit
        self.actions = actions

    def _set_post_removed(self, post_id: int, removed: bool) -> Post:
        post = self.db.get(Post, post_id)
        if post is None:
            raise NotFound("Post not found")
        post.removed = removed
        return post

    def remove_content(
        self,
        content_type: str,
        content_id: int,
        admin: AdminUser,
        reason: str,
        ip_address: str | None = None,
    ) -> ModerationAction:
        """Take content down. Posts are hidden and can be restored; comments are deleted."""
        with atomic(self.db):
            if content_type == CONTENT_TYPE_POST:
                self._set_post_removed(content_id, True)
            elif content_type == CONTENT_TYPE_COMMENT:
                comment = self.db.get(Comment, content_id)
                if comment is None:
                    raise NotFound("Comment not found")
                PostRepository(self.db).delete_comment_thread(comment)
            else:
                raise ValidationFailed("Unsupported content type")
            record = self.actions.create(admin.id, content_type, content_id, ACTION_REMOVE, reason)
            self.audit.log(
                admin.id,
                "content_removed",
                content_type,
                content_id,
                details={"reason": reason},
                ip_address=ip_address,
            )
        logger.info("Admin %s removed %s %s", admin.id, content_type, content_id)
        return record

    def restore_content(
        self,
        content_type: str,
        content_id: int,
        admin: AdminUser,
        reason: str,
        ip_address: str | None = None,
    ) -> ModerationAction:
        if content_type != CONTENT_TYPE_POST:
            raise ValidationFailed("Only posts can be restored")
        with atomic(self.db):
            self._set_post_removed(content_id, False)
            record = self.actions.create(admin.id, content_type, content_id, ACTION_RESTORE, reason)
            self.audit.log(
                admin.id,
                "content_restored",
                content_type,
                content_id,
                details={"reason": reason},
                ip_address=ip_address,
            )
        return record

    def flagged_content(self, limit: int = 50) -> list[tuple[Post, int]]:
        """Return flagged posts with their flag counts, most flagged first."""
        flag_count = func.count(PostFlag.user_id)
        stmt = (
            select(Post, flag_count.label("flag_count"))
            .join(PostFlag, PostFlag.post_id == Post.id)
            .group_by(Post.id)
            .order_by(flag_count.desc(), Post.id.desc())
            .limit(limit)
        )
        return [(row[0], int(row[1])) for row in self.db.execute(stmt)]


class ReviewQueueService:
    """Queue of content awaiting an admin decision: pending, assigned, reviewed."""

    def __init__(
        self,
        db: Session,
        audit: AuditLogService | None = None,
        actions: ModerationActionService | None = None,
    ) -> None:
        self.db = db
        self.audit = audit or AuditLogService(db)
        self.actions = actions or ModerationActionService(db, self.audit)

    def _open_item(self, content_type: str, content_id: int) -> ContentReviewItem | None:
        stmt = select(ContentReviewItem).where(
            ContentReviewItem.content_type == content_type,
            ContentReviewItem.content_id == content_id,
            ContentReviewItem.status != REVIEW_STATUS_REVIEWED,
        )
        return self.db.scalars(stmt).first()

    def add(
        self,
        content_type: str,
        content_id: int,
        reason: str,
        priority: str = "medium",
        flag_count: int = 1,
    ) -> ContentReviewItem:
        """Stage a queue item, or bump the open one for the same content."""
        if priority not in REVIEW_PRIORITIES:
            raise ValidationFailed("Invalid priority")
        item = self._open_item(content_type, content_id)
        if item is None:
            item = ContentReviewItem(
                content_type=content_type,
                content_id=content_id,
                reason=reason,
                priority=priority,
                flag_count=flag_count,
            )
            self.db.add(item)
        else:
            item.flag_count = max(item.flag_count + 1, flag_count)
            if REVIEW_PRIORITIES.index(priority) > REVIEW_PRIORITIES.index(item.priority):
                item.priority = priority
        self.db.flush()
        return item

    def enqueue(
        self,
        content_type: str,
        content_id: int,
        reason: str,
        priority: str,
        admin: AdminUser,
    ) -> ContentReviewItem:
        """Queue content for review by hand."""
        with atomic(self.db):
            item = self.add(content_type, content_id, reason, priority)
            self.audit.log(admin.id, "review_queued", content_type, content_id)
        return item

    def queue(
        self,
        status: str | None = None,
        assigned_to: int | None = None,
        priority: str | None = None,
    ) -> list[ContentReviewItem]:
        stmt = select(ContentReviewItem)
        if status is not None:
            stmt = stmt.where(ContentReviewItem.status == status)
        if assigned_to is not None:
            stmt = stmt.where(ContentReviewItem.assigned_to == assigned_to)
        if priority is not None:
            stmt = stmt.where(ContentReviewItem.priority == priority)
        stmt = stmt.order_by(ContentReviewItem.created_at.desc(), ContentReviewItem.id.desc())
        return list(self.db.scalars(stmt))

    def _item(self, item_id: int) -> ContentReviewItem:
        item = self.db.get(ContentReviewItem, item_id)
        if item is None:
            raise NotFound("Review item not found")
        return item

    def assign(self, item_id: int, admin: AdminUser) -> ContentReviewItem:
        item = self._item(item_id)
        if item.status != REVIEW_STATUS_PENDING:
            raise Conflict("Only pending items can be assigned")
        with atomic(self.db):
            item.status = REVIEW_STATUS_ASSIGNED
            item.assigned_to = admin.id
            self.audit.log(admin.id, "review_assigned", item.content_type, item.content_id)
        return item

    def process(
        self, item_id: int, action: str, reason: str, admin: AdminUser
    ) -> ModerationAction:
        """Close a queue item with a decision."""
        if action not in REVIEW_ACTIONS:
            raise ValidationFailed("Invalid review action")
        item = self._item(item_id)
        if item.status == REVIEW_STATUS_REVIEWED:
            raise Conflict("Review item already processed")
        with atomic(self.db):
            if item.content_type == CONTENT_TYPE_POST and action in (ACTION_REMOVE, ACTION_APPROVE):
                post = self.db.get(Post, item.content_id)
                if post is not None:
                    post.removed = action == ACTION_REMOVE
            record = self.actions.create(
                admin.id, item.content_type, item.content_id, action, reason
            )
            item.status = REVIEW_STATUS_REVIEWED
            item.reviewed_by = admin.id
            item.reviewed_at = utcnow()
            self.audit.log(
                admin.id,
                "content_reviewed",
                item.content_type,
                item.content_id,
                details={"item_id": item.id, "action": action, "reason": reason},
            )
        return record


class UserModerationService:
    """Ban, unban and purge regular user accounts."""

    def __init__(
        self,
        db: Session,
        audit: AuditLogService,
        actions: ModerationActionService,
        default_list_name: str = "General",
    ) -> None:
        self.db = db
        self.users = UserRepository(db)
        self.audit = audit
        self.actions = actions
        self.default_list_name = default_list_name

    def _user(self, user_id: int) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def is_banned(self, user_id: int) -> bool:
        return self.users.is_banned(user_id)

    def ban_user(
        self,
        user_id: int,
        admin: AdminUser,
        reason: str,
        expires_at: datetime | None = None,
        ip_address: str | None = None,
    ) -> ModerationAction:
        self._user(user_id)
        if self.users.is_banned(user_id):
            raise Conflict("User is already banned")
        with atomic(self.db):
            record = self.actions.create(
                admin.id, CONTENT_TYPE_USER, user_id, ACTION_BAN, reason, expires_at=expires_at
            )
            self.audit.log(
                admin.id,
                "user_banned",
                CONTENT_TYPE_USER,
                user_id,
                details={"reason": reason},
                ip_address=ip_address,
            )
        logger.info("Admin %s banned user %s", admin.id, user_id)
        return record

    def unban_user(
        self,
        user_id: int,
        admin: AdminUser,
        reason: str,
        ip_address: str | None = None,
    ) -> ModerationAction:
        self._user(user_id)
        if not self.users.is_banned(user_id):
            raise Conflict("User is not banned")
        with atomic(self.db):
            record = self.actions.create(admin.id, CONTENT_TYPE_USER, user_id, ACTION_UNBAN, reason)
            self.audit.log(
                admin.id,
                "user_unbanned",
                CONTENT_TYPE_USER,
                user_id,
                details={"reason": reason},
                ip_address=ip_address,
            )
        return record

    def purge_user(self, user_id: int, admin: AdminUser, ip_address: str | None = None) -> None:
        user = self._user(user_id)
        if user.is_deleted:
            raise Conflict("User already deleted")
        with atomic(self.db):
            self.users.soft_delete(user, self.default_list_name)
            self.audit.log(admin.id, "user_deleted", CONTENT_TYPE_USER, user_id, ip_address=ip_address)

    def search_users(self, query: str, limit: int = 20) -> list[User]:
        return self.users.search(query, limit)


class SystemConfigService:
    """Key/value settings editable from the dashboard."""

    def __init__(self, db: Session, audit: AuditLogService) -> None:
        self.db = db
        self.audit = audit

    def get_config(self, key: str | None = None) -> list[SystemConfig]:
        stmt = select(SystemConfig).order_by(SystemConfig.category, SystemConfig.key)
        if key is not None:
            stmt = stmt.where(SystemConfig.key == key)
        return list(self.db.scalars(stmt))

    def update_config(
        self,
        key: str,
        value: str,
        admin: AdminUser,
        type_: str = "string",
        category: str = "features",
        description: str | None = None,
    ) -> SystemConfig:
        """Insert or update the entry for ``key``."""
        entry = self.db.scalars(select(SystemConfig).where(SystemConfig.key == key)).first()
        with atomic(self.db):
            previous = None
            if entry is None:
                entry = SystemConfig(key=key, value=value, type=type_, category=category)
                self.db.add(entry)
            else:
                previous = entry.value
                entry.value = value
                entry.type = type_
                entry.category = category
            if description is not None:
                entry.description = description
            entry.updated_by = admin.id
            self.db.flush()
            self.audit.log(
                admin.id,
                "system_config_updated",
                "system_config",
                entry.id,
                details={"key": key, "old_value": previous, "new_value": value},
            )
        return entry


class AdminAccountService:
    """Manage admin accounts."""

    def __init__(self, db: Session, audit: AuditLogService) -> None:
        self.db = db
        self.audit = audit

    def list_admins(self) -> list[AdminUser]:
        return list(self.db.scalars(select(AdminUser).order_by(AdminUser.username)))

    def _admin(self, admin_id: int) -> AdminUser:
        admin = self.db.get(AdminUser, admin_id)
        if admin is None:
            raise NotFound("Admin not found")
        return admin

    @staticmethod
    def _check_role(role: str, permissions: list[str]) -> None:
        if role not in ADMIN_ROLES:
            raise ValidationFailed("Invalid admin role")
        unknown = set(permissions) - set(ADMIN_PERMISSIONS)
        if unknown:
            raise ValidationFailed(f"Unknown permissions: {', '.join(sorted(unknown))}")

    def create_admin(
        self,
        username: str,
        password: str,
        email: str,
        role: str,
        permissions: list[str],
        actor: AdminUser,
    ) -> AdminUser:
        self._check_role(role, permissions)
        existing = self.db.scalars(
            select(AdminUser).where(
                (AdminUser.username == username) | (AdminUser.email == email)
            )
        ).first()
        if existing is not None:
            raise Conflict("Username or email already in use")
        with atomic(self.db):
            admin = AdminUser(
                username=username,
                password_hash=hash_password(password),
                email=email,
                role=role,
                permissions=permissions,
            )
            self.db.add(admin)
            self.db.flush()
            self.audit.log(
                actor.id, "admin_created", "admin_user", admin.id, details={"role": role}
            )
        return admin

    def update_admin(
        self,
        admin_id: int,
        actor: AdminUser,
        role: str | None = None,
        permissions: list[str] | None = None,
        is_active: bool | None = None,
    ) -> AdminUser:
        admin = self._admin(admin_id)
        self._check_role(role or admin.role, permissions or [])
        changes: dict[str, Any] = {}
        with atomic(self.db):
            if role is not None:
                admin.role = role
                changes["role"] = role
            if permissions is not None:
                admin.permissions = permissions
                changes["permissions"] = permissions
            if is_active is not None:
                admin.is_active = is_active
                changes["is_active"] = is_active
            self.audit.log(actor.id, "admin_updated", "admin_user", admin.id, details=changes)
        return admin

    def delete_admin(self, admin_id: int, actor: AdminUser) -> None:
        if admin_id == actor.id:
            raise PermissionDenied("Admins cannot delete themselves")
        admin = self._admin(admin_id)
        with atomic(self.db):
            self.db.execute(delete(AdminSession).where(AdminSession.admin_id == admin.id))
            admin.is_active = False
            admin.username = f"deleted_admin_{admin.id}"
            admin.email = f"deleted_admin_{admin.id}@invalid"
            self.audit.log(actor.id, "admin_deleted", "admin_user", admin.id)


