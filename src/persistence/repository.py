"""SQLAlchemy implementation of the matching data-access protocol."""
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import Session, selectinload

from src.matching.records import (
    Alert as AlertRecord,
    Announcement as AnnouncementRecord,
    ListingFilter,
    Trip as TripRecord,
    UserStats,
)
from src.persistence.models import Alert, Announcement, Trip, User, normalize_city_key


class SqlListingRepository:
    """ListingRepository backed by a SQLAlchemy session."""

    def __init__(self, session: Session):
        """
        Initialize repository.

        Args:
            session: Database session
        """
        self.session = session

    def list_active_trips(self, listing_filter: ListingFilter) -> list[TripRecord]:
        """Trips satisfying every constraint set on the filter."""
        f = listing_filter
        stmt = (
            select(Trip)
            .options(selectinload(Trip.user))
            .where(Trip.status.in_(f.statuses))
        )

        if f.from_city:
            stmt = stmt.where(Trip.from_city_key == normalize_city_key(f.from_city))
        if f.to_city:
            stmt = stmt.where(Trip.to_city_key == normalize_city_key(f.to_city))

        # Overlap with an open-ended window
        if f.date_to is not None:
            stmt = stmt.where(Trip.departure_date <= f.date_to)
        if f.date_from is not None:
            stmt = stmt.where(Trip.arrival_date >= f.date_from)

        if f.min_weight is not None:
            stmt = stmt.where(or_(Trip.available_kg.is_(None), Trip.available_kg >= f.min_weight))
        if f.max_weight is not None:
            stmt = stmt.where(or_(Trip.available_kg.is_(None), Trip.available_kg <= f.max_weight))
        if f.min_reward is not None:
            stmt = stmt.where(or_(Trip.price_per_kg.is_(None), Trip.price_per_kg >= f.min_reward))
        if f.max_reward is not None:
            stmt = stmt.where(or_(Trip.price_per_kg.is_(None), Trip.price_per_kg <= f.max_reward))

        stmt = stmt.order_by(Trip.created_at.desc())
        return [trip.to_record() for trip in self.session.execute(stmt).scalars()]

    def list_active_announcements(self, listing_filter: ListingFilter) -> list[AnnouncementRecord]:
        """Announcements satisfying every constraint set on the filter."""
        f = listing_filter
        stmt = (
            select(Announcement)
            .options(selectinload(Announcement.user))
            .where(Announcement.status.in_(f.statuses))
        )

        if f.from_city:
            stmt = stmt.where(Announcement.from_city_key == normalize_city_key(f.from_city))
        if f.to_city:
            stmt = stmt.where(Announcement.to_city_key == normalize_city_key(f.to_city))

        if f.date_to is not None:
            stmt = stmt.where(Announcement.date_from <= f.date_to)
        if f.date_from is not None:
            stmt = stmt.where(Announcement.date_to >= f.date_from)

        if f.min_weight is not None:
            stmt = stmt.where(or_(Announcement.weight.is_(None), Announcement.weight >= f.min_weight))
        if f.max_weight is not None:
            stmt = stmt.where(or_(Announcement.weight.is_(None), Announcement.weight <= f.max_weight))
        if f.min_reward is not None:
            stmt = stmt.where(Announcement.reward >= f.min_reward)
        if f.max_reward is not None:
            stmt = stmt.where(Announcement.reward <= f.max_reward)

        stmt = stmt.order_by(Announcement.created_at.desc())
        return [a.to_record() for a in self.session.execute(stmt).scalars()]

    def get_alert_by_id(self, alert_id: str) -> Optional[AlertRecord]:
        alert = self.session.get(Alert, alert_id)
        return alert.to_record() if alert else None

    def get_trip_by_id(self, trip_id: str) -> Optional[TripRecord]:
        trip = self.session.get(Trip, trip_id)
        return trip.to_record() if trip else None

    def get_announcement_by_id(self, announcement_id: str) -> Optional[AnnouncementRecord]:
        announcement = self.session.get(Announcement, announcement_id)
        return announcement.to_record() if announcement else None

    def get_user_stats(self, user_id: str) -> Optional[UserStats]:
        user = self.session.get(User, user_id)
        return user.stats() if user else None

    def list_active_alerts(self, alert_type: str) -> list[AlertRecord]:
        """Active alerts of one type, oldest first."""
        stmt = (
            select(Alert)
            .where(Alert.type == alert_type, Alert.is_active == True)  # noqa: E712
            .order_by(Alert.created_at.asc())
        )
        return [a.to_record() for a in self.session.execute(stmt).scalars()]
