# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count
from typing import Any

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from forum_moderation.core.roles import Actor
from forum_moderation.core.security import create_access_token
from forum_moderation.db.session import Base
from forum_moderation.db.session import get_db as app_get_session
from forum_moderation.main import app as fastapi_app
from forum_moderation.models import Category, ModerationLog, Post, User

TEST_DB_URL = "sqlite://"

_EMAIL_COUNTER = count(1)
_SLUG_COUNTER = count(1)


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

        # Ensure each test sees a clean database even if commits occurred.
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


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory persisting users with the given flags."""

    def _make_user(**flags: Any) -> User:
        n = next(_EMAIL_COUNTER)
        flags.setdefault("email", f"user{n}@example.com")
        flags.setdefault("display_name", f"User {n}")
        user = User(**flags)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def super_admin(make_user: Callable[..., User]) -> User:
    return make_user(display_name="Super Admin", is_super_admin=True)


@pytest.fixture()
def forum_admin(make_user: Callable[..., User]) -> User:
    return make_user(display_name="Forum Admin", is_forum_admin=True)


@pytest.fixture()
def moderator(make_user: Callable[..., User]) -> User:
    return make_user(display_name="Moderator", is_forum_moderator=True)


@pytest.fixture()
def regular_user(make_user: Callable[..., User]) -> User:
    return make_user(display_name="Regular")


@pytest.fixture()
def admin_actor(forum_admin: User) -> Actor:
    return Actor.from_user(forum_admin)


@pytest.fixture()
def moderator_actor(moderator: User) -> Actor:
    return Actor.from_user(moderator)


@pytest.fixture()
def regular_actor(regular_user: User) -> Actor:
    return Actor.from_user(regular_user)


@pytest.fixture()
def make_post(db_session: Session, regular_user: User) -> Callable[..., Post]:
    """Return a factory persisting posts authored by ``regular_user``."""

    def _make_post(**fields: Any) -> Post:
        fields.setdefault("title", "Ferry delayed again")
        fields.setdefault("body", "The 7:40 sailing is running late.")
        fields.setdefault("author_id", regular_user.id)
        post = Post(**fields)
        db_session.add(post)
        db_session.commit()
        db_session.refresh(post)
        return post

    return _make_post


@pytest.fixture()
def test_post(make_post: Callable[..., Post]) -> Post:
    return make_post()


@pytest.fixture()
def make_category(db_session: Session) -> Callable[..., Category]:
    """Return a factory persisting categories with explicit display orders."""

    def _make_category(**fields: Any) -> Category:
        n = next(_SLUG_COUNTER)
        fields.setdefault("slug", f"category-{n}")
        fields.setdefault("name", f"Category {n}")
        fields.setdefault("display_order", n)
        category = Category(**fields)
        db_session.add(category)
        db_session.commit()
        db_session.refresh(category)
        return category

    return _make_category


@pytest.fixture()
def log_count(db_session: Session) -> Callable[[], int]:
    """Return a callable counting moderation log entries."""

    def _count() -> int:
        return db_session.scalar(select(func.count()).select_from(ModerationLog)) or 0

    return _count


@pytest.fixture()
def auth_headers() -> Callable[[User], dict[str, str]]:
    """Return a helper building authorization headers for a user."""

    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers
