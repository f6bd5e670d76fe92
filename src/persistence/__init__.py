"""Database persistence layer."""
from .database import get_session, init_db
from .models import Alert, Announcement, Base, Trip, User
from .repository import SqlListingRepository

__all__ = [
    "Base",
    "User",
    "Announcement",
    "Trip",
    "Alert",
    "SqlListingRepository",
    "init_db",
    "get_session",
]
