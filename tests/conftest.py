"""Pytest fixtures for ShipMatch tests."""
import sys
from datetime import date, datetime
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.persistence.models import Alert, Announcement, Base, Trip, User


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_db():
    """Create a fresh in-memory database for each test."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def user_factory(test_db):
    """
    Factory fixture to create users.

    Usage:
        alice = user_factory("alice", rating=4.5, verified=True)
    """

    def _create_user(name: str = "alice", rating=None, verified: bool = False):
        user = User(
            id=f"user-{name}-{uuid4().hex[:6]}",
            name=name,
            email=f"{name}-{uuid4().hex[:6]}@example.com",
            rating=rating,
            verified=verified,
        )
        test_db.add(user)
        test_db.commit()
        return user

    return _create_user


@pytest.fixture
def trip_factory(test_db, user_factory):
    """Factory fixture to create trips (Paris -> Lyon, 5-8 June 2024 by default)."""

    def _create_trip(
        user=None,
        from_city: str = "Paris",
        to_city: str = "Lyon",
        departure_date: date = date(2024, 6, 5),
        arrival_date: date = date(2024, 6, 8),
        status: str = "active",
        created_at: datetime = datetime(2024, 5, 1, 12, 0),
        **kwargs,
    ):
        trip = Trip(
            user_id=(user or user_factory()).id,
            from_city=from_city,
            from_country=kwargs.pop("from_country", "France"),
            to_city=to_city,
            to_country=kwargs.pop("to_country", "France"),
            departure_date=departure_date,
            arrival_date=arrival_date,
            available_kg=kwargs.pop("available_kg", 10.0),
            status=status,
            created_at=created_at,
            **kwargs,
        )
        test_db.add(trip)
        test_db.commit()
        return trip

    return _create_trip


@pytest.fixture
def announcement_factory(test_db, user_factory):
    """Factory fixture to create announcements (Paris -> Lyon, 1-10 June 2024 by default)."""

    def _create_announcement(
        user=None,
        from_city: str = "Paris",
        to_city: str = "Lyon",
        date_from: date = date(2024, 6, 1),
        date_to: date = date(2024, 6, 10),
        status: str = "active",
        created_at: datetime = datetime(2024, 5, 1, 12, 0),
        **kwargs,
    ):
        announcement = Announcement(
            user_id=(user or user_factory()).id,
            type=kwargs.pop("type", "package"),
            from_city=from_city,
            from_country=kwargs.pop("from_country", "France"),
            to_city=to_city,
            to_country=kwargs.pop("to_country", "France"),
            date_from=date_from,
            date_to=date_to,
            reward=kwargs.pop("reward", 25.0),
            status=status,
            created_at=created_at,
            **kwargs,
        )
        test_db.add(announcement)
        test_db.commit()
        return announcement

    return _create_announcement


@pytest.fixture
def alert_factory(test_db, user_factory):
    """Factory fixture to create alerts directly in the database."""

    def _create_alert(user=None, type: str = "sender", **kwargs):
        alert = Alert(
            user_id=(user or user_factory()).id,
            type=type,
            is_active=kwargs.pop("is_active", True),
            match_count=kwargs.pop("match_count", 0),
            created_at=kwargs.pop("created_at", datetime(2024, 4, 1, 9, 0)),
            **kwargs,
        )
        test_db.add(alert)
        test_db.commit()
        return alert

    return _create_alert


# =============================================================================
# MOCK FIXTURES (For external services)
# =============================================================================


@pytest.fixture
def mock_notifier():
    """Notifier stub whose notify() always succeeds."""
    notifier = MagicMock()
    notifier.notify = AsyncMock(return_value=True)
    return notifier
