# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import timedelta
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from passlib.hash import sha256_crypt
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-aura-share")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "true")

from aura_share.core.security import create_access_token, generate_session_token
from aura_share.core.settings import Settings
from aura_share.db.session import Base
from aura_share.db.session import get_db as app_get_session
from aura_share.db.time import utcnow
from aura_share.main import app as fastapi_app
from aura_share.models import AdminSession, AdminUser, Post, PostList, User
from aura_share.models.admin import ADMIN_PERMISSIONS, ADMIN_ROLE_MODERATOR, ADMIN_ROLE_SUPER
from aura_share.services import (
    AuditLogService,
    CollaborationService,
    ContentService,
    EngagementService,
    FlaggingService,
    ModerationActionService,
    NotificationService,
    ReviewQueueService,
    SocialGraphService,
    VisibilityService,
)

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "password123"

_USER_COUNTER = count(1)
_TEST_SETTINGS_INSTANCE = Settings()  # type: ignore[call-arg]
# Same scheme as production with fewer rounds; verify_password reads rounds from the hash.
_FAST_HASH = sha256_crypt.using(rounds=1000)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Services commit for real; wipe every table so each test starts clean.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Provide a Settings instance aligned with runtime configuration."""
    return _TEST_SETTINGS_INSTANCE


def make_user(db_session: Session, name: str, username: str | None = None) -> User:
    """Persist a user with the shared test password."""
    user = User(
        username=username or f"user{next(_USER_COUNTER)}",
        password_hash=_FAST_HASH.hash(TEST_PASSWORD),
        name=name,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def bearer(user: User, settings: Settings) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, settings)}"}


def make_list(db_session: Session, owner: User, privacy_level: str, name: str = "List") -> PostList:
    post_list = PostList(user_id=owner.id, name=name, privacy_level=privacy_level)
    db_session.add(post_list)
    db_session.commit()
    db_session.refresh(post_list)
    return post_list


def make_post(
    db_session: Session,
    author: User,
    post_list: PostList,
    privacy: str = "public",
    description: str = "Test post content",
) -> Post:
    post = Post(
        user_id=author.id,
        list_id=post_list.id,
        primary_link="https://example.com/item",
        primary_description=description,
        privacy=privacy,
    )
    db_session.add(post)
    db_session.commit()
    db_session.refresh(post)
    return post


@pytest.fixture()
def user_factory(db_session: Session) -> Callable[..., User]:
    """Return a callable creating extra users."""
    return lambda name="Extra User", username=None: make_user(db_session, name, username)


@pytest.fixture()
def list_factory(db_session: Session) -> Callable[..., PostList]:
    return lambda owner, privacy_level="public", name="List": make_list(
        db_session, owner, privacy_level, name
    )


@pytest.fixture()
def post_factory(db_session: Session) -> Callable[..., Post]:
    return lambda author, post_list, privacy="public", description="Test post content": make_post(
        db_session, author, post_list, privacy, description
    )


@pytest.fixture()
def headers_for(test_settings: Settings) -> Callable[[User], dict[str, str]]:
    """Return a callable building bearer headers for any user."""
    return lambda user: bearer(user, test_settings)


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """Create and return a persisted test user."""
    return make_user(db_session, "Test User", "testuser")


@pytest.fixture()
def other_user(db_session: Session) -> User:
    """Create and return a second persisted user."""
    return make_user(db_session, "Other User", "otheruser")


@pytest.fixture()
def third_user(db_session: Session) -> User:
    """Create and return a third persisted user."""
    return make_user(db_session, "Third User", "thirduser")


@pytest.fixture()
def auth_token(test_user: User, test_settings: Settings) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return bearer(test_user, test_settings)


@pytest.fixture()
def other_auth_token(other_user: User, test_settings: Settings) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return bearer(other_user, test_settings)


@pytest.fixture()
def third_auth_token(third_user: User, test_settings: Settings) -> dict[str, str]:
    """Return authorization headers for the third test user."""
    return bearer(third_user, test_settings)


@pytest.fixture()
def public_list(db_session: Session, test_user: User) -> PostList:
    """A public list owned by the primary test user."""
    return make_list(db_session, test_user, "public", "Finds")


@pytest.fixture()
def private_list(db_session: Session, test_user: User) -> PostList:
    """A private list owned by the primary test user."""
    return make_list(db_session, test_user, "private", "Secret")


@pytest.fixture()
def test_post(db_session: Session, test_user: User, public_list: PostList) -> Post:
    """Create a baseline public post for tests."""
    return make_post(db_session, test_user, public_list)


def _make_admin(db_session: Session, username: str, role: str, permissions: list[str]) -> AdminUser:
    admin = AdminUser(
        username=username,
        password_hash=_FAST_HASH.hash(TEST_PASSWORD),
        email=f"{username}@example.com",
        role=role,
        permissions=permissions,
    )
    db_session.add(admin)
    db_session.commit()
    db_session.refresh(admin)
    return admin


def _admin_headers(db_session: Session, admin: AdminUser) -> dict[str, str]:
    session = AdminSession(
        admin_id=admin.id,
        session_token=generate_session_token(),
        expires_at=utcnow() + timedelta(hours=1),
    )
    db_session.add(session)
    db_session.commit()
    return {"Authorization": f"Bearer {session.session_token}"}


@pytest.fixture()
def admin_user(db_session: Session) -> AdminUser:
    """A super admin holding every permission."""
    return _make_admin(db_session, "rootadmin", ADMIN_ROLE_SUPER, list(ADMIN_PERMISSIONS))


@pytest.fixture()
def admin_headers(db_session: Session, admin_user: AdminUser) -> dict[str, str]:
    return _admin_headers(db_session, admin_user)


@pytest.fixture()
def moderator(db_session: Session) -> AdminUser:
    """A moderator limited to content moderation."""
    return _make_admin(db_session, "moderator", ADMIN_ROLE_MODERATOR, ["content_moderation"])


@pytest.fixture()
def moderator_headers(db_session: Session, moderator: AdminUser) -> dict[str, str]:
    return _admin_headers(db_session, moderator)


# Services wired the same way the request dependencies wire them.


@pytest.fixture()
def notifications(db_session: Session) -> NotificationService:
    return NotificationService(db_session)


@pytest.fixture()
def visibility(db_session: Session) -> VisibilityService:
    return VisibilityService(db_session)


@pytest.fixture()
def collaboration(
    db_session: Session, notifications: NotificationService, visibility: VisibilityService
) -> CollaborationService:
    return CollaborationService(db_session, notifications, visibility)


@pytest.fixture()
def social(db_session: Session, notifications: NotificationService) -> SocialGraphService:
    return SocialGraphService(db_session, notifications)


@pytest.fixture()
def content(
    db_session: Session,
    visibility: VisibilityService,
    collaboration: CollaborationService,
    social: SocialGraphService,
    notifications: NotificationService,
) -> ContentService:
    return ContentService(db_session, visibility, collaboration, social, notifications)


@pytest.fixture()
def engagement(db_session: Session, visibility: VisibilityService) -> EngagementService:
    return EngagementService(db_session, visibility)


@pytest.fixture()
def audit(db_session: Session) -> AuditLogService:
    return AuditLogService(db_session)


@pytest.fixture()
def moderation_actions(db_session: Session, audit: AuditLogService) -> ModerationActionService:
    return ModerationActionService(db_session, audit)


@pytest.fixture()
def review_queue(
    db_session: Session, audit: AuditLogService, moderation_actions: ModerationActionService
) -> ReviewQueueService:
    return ReviewQueueService(db_session, audit, moderation_actions)


@pytest.fixture()
def flagging(
    db_session: Session,
    notifications: NotificationService,
    visibility: VisibilityService,
    review_queue: ReviewQueueService,
) -> FlaggingService:
    return FlaggingService(db_session, notifications, visibility, review_queue, threshold=2)
