"""Data-access protocol consumed by the matchers.

The matching core owns no storage; any object implementing this protocol
can feed it. SqlListingRepository is the SQLAlchemy implementation.
"""
from typing import Optional, Protocol, runtime_checkable

from src.matching.records import Alert, Announcement, ListingFilter, Trip, UserStats


@runtime_checkable
class ListingRepository(Protocol):
    """Read-only queries the matching core needs from storage."""

    def list_active_trips(self, listing_filter: ListingFilter) -> list[Trip]:
        """Trips in a searchable status satisfying the filter."""
        ...

    def list_active_announcements(self, listing_filter: ListingFilter) -> list[Announcement]:
        """Announcements in a searchable status satisfying the filter."""
        ...

    def get_alert_by_id(self, alert_id: str) -> Optional[Alert]:
        ...

    def get_trip_by_id(self, trip_id: str) -> Optional[Trip]:
        ...

    def get_announcement_by_id(self, announcement_id: str) -> Optional[Announcement]:
        ...

    def get_user_stats(self, user_id: str) -> Optional[UserStats]:
        ...

    def list_active_alerts(self, alert_type: str) -> list[Alert]:
        ...
