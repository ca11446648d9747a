"""
Shared fixtures: a throwaway SQLite database per test and an event payload factory
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.db import Base
import app.models  # noqa: F401  registers tables on Base.metadata

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_devevents.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# A path SQLite can never open, standing in for an unreachable store
UNREACHABLE_DATABASE_URL = "sqlite:////nonexistent-dir/unreachable/devevents.db"
unreachable_engine = create_engine(UNREACHABLE_DATABASE_URL)
UnreachableSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=unreachable_engine)


@pytest.fixture
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def broken_session():
    """Session whose every query fails to reach storage"""
    db = UnreachableSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def event_payload():
    """Build a valid event creation payload, overriding any field"""
    def make(**overrides):
        payload = {
            "title": "DevFest 2024",
            "description": "A day of talks and workshops for developers.",
            "overview": "Community conference covering web, cloud and AI.",
            "venue": "Moscone Center",
            "location": "San Francisco, CA",
            "date": "2024-11-02",
            "time": "09:00",
            "mode": "hybrid",
            "audience": "Developers",
            "organizer": "GDG San Francisco",
            "agenda": ["Keynote", "Workshops", "Networking"],
            "tags": ["react", "webdev"],
            "image": "/images/devfest.png",
        }
        payload.update(overrides)
        return payload
    return make
