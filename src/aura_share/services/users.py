"""Account sign-up, sign-in and profile management."""
from __future__ import annotations

import logging
import re

from sqlalchemy.orm import Session

from aura_share.core.errors import (
    AuthenticationFailed,
    Conflict,
    NotFound,
    PermissionDenied,
    ValidationFailed,
)
from aura_share.core.security import create_access_token, hash_password, verify_password
from aura_share.core.settings import Settings
from aura_share.db.session import atomic
from aura_share.models import User
from aura_share.models.lists import PRIVACY_CONNECTIONS, PRIVACY_PUBLIC
from aura_share.repositories import ListRepository, UserRepository

__all__ = ["UserService", "validate_signup"]

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9]{3,20}$")
PASSWORD_MIN_LENGTH = 8
NAME_MAX_LENGTH = 50
DEFAULT_PRIVACY_CHOICES = (PRIVACY_PUBLIC, PRIVACY_CONNECTIONS)


def validate_signup(username: str, password: str, name: str) -> None:
    """Raise ValidationFailed unless the sign-up fields are acceptable."""
    if not USERNAME_PATTERN.match(username or ""):
        raise ValidationFailed("Username must be 3-20 alphanumeric characters")
    if len(password or "") < PASSWORD_MIN_LENGTH:
        raise ValidationFailed(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    _validate_name(name)


def _validate_name(name: str) -> None:
    if not name or not name.strip() or len(name) > NAME_MAX_LENGTH:
        raise ValidationFailed(f"Name must be 1-{NAME_MAX_LENGTH} characters")


class UserService:
    """Regular user accounts."""

    def __init__(self, db: Session, settings: Settings) -> None:
        self.db = db
        self.settings = settings
        self.users = UserRepository(db)
        self.lists = ListRepository(db)

    def signup(self, username: str, password: str, name: str) -> tuple[User, str]:
        """Create an account with its default list and return it with a token."""
        validate_signup(username, password, name)
        if self.users.by_username(username) is not None:
            raise Conflict("Username already exists")
        with atomic(self.db):
            user = User(
                username=username,
                password_hash=hash_password(password),
                name=name.strip(),
            )
            self.db.add(user)
            self.db.flush()
            self.lists.default_for(user.id, self.settings.default_list_name)
        logger.info("Created user %s", user.id)
        return user, create_access_token(user.id, self.settings)

    def signin(self, username: str, password: str) -> tuple[User, str]:
        user = self.users.by_username(username)
        if user is None or not verify_password(password, user.password_hash):
            raise AuthenticationFailed("Invalid username or password")
        if self.users.is_banned(user.id):
            raise PermissionDenied("This account has been banned")
        return user, create_access_token(user.id, self.settings)

    def get_user(self, user_id: int) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def search_users(self, query: str, limit: int = 20) -> list[User]:
        query = query.strip()
        if not query:
            return []
        return self.users.search(query, limit)

    def is_banned(self, user_id: int) -> bool:
        return self.users.is_banned(user_id)

    def update_profile(
        self,
        user: User,
        name: str | None = None,
        profile_picture_url: str | None = None,
    ) -> User:
        if name is not None:
            _validate_name(name)
            user.name = name.strip()
        if profile_picture_url is not None:
            user.profile_picture_url = profile_picture_url or None
        self.db.commit()
        self.db.refresh(user)
        return user

    def update_default_privacy(self, user: User, privacy: str) -> User:
        """Set the privacy new posts get when the client does not choose one."""
        if privacy not in DEFAULT_PRIVACY_CHOICES:
            raise ValidationFailed("Default privacy must be public or connections")
        user.default_privacy = privacy
        self.db.commit()
        return user

    def delete_user(self, user_id: int, acting_user: User) -> None:
        """Delete the caller's own account."""
        if user_id != acting_user.id:
            raise PermissionDenied("You can only delete your own account")
        with atomic(self.db):
            self.users.soft_delete(acting_user, self.settings.default_list_name)
        logger.info("User %s deleted their account", user_id)
