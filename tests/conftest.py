"""Shared fixtures.

Tests run against in-memory SQLite with foreign keys switched on (see
``course_platform.database``), so cascades and constraints are enforced by
the database the same way Postgres enforces them.
"""

import os
from datetime import datetime, timedelta, timezone

# keep the process engine off Postgres while testing
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import sessionmaker

from course_platform import models
from course_platform.database import Base, enforce_foreign_keys


@pytest.fixture
def engine():
    eng = enforce_foreign_keys(create_engine("sqlite://"))
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine):
    with sessionmaker(engine)() as session:
        yield session


@pytest.fixture
def count(db):
    """Row count for a model, read straight from the database."""

    def _count(model) -> int:
        return db.scalar(select(func.count()).select_from(model))

    return _count


@pytest.fixture
def make_user(db):
    def _make(email=None, display_name=None, with_profile=True):
        user = models.User(email=email)
        db.add(user)
        db.flush()
        if with_profile:
            db.add(models.Profile(user_id=user.id, display_name=display_name))
            db.flush()
        return user

    return _make


@pytest.fixture
def make_module(db):
    def _make(title="Getting started", order=1):
        module = models.Module(title=title, order=order)
        db.add(module)
        db.flush()
        return module

    return _make


@pytest.fixture
def make_segment(db, make_module):
    def _make(module=None, slug="intro", order=1, **fields):
        module = module or make_module()
        segment = models.Segment(slug=slug, title=slug.title(), order=order, module_id=module.id, **fields)
        db.add(segment)
        db.flush()
        return segment

    return _make


@pytest.fixture
def in_one_hour():
    return datetime.now(timezone.utc) + timedelta(hours=1)
