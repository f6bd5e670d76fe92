"""SQLAlchemy models for ShipMatch."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, relationship

from src.matching.records import (
    Alert as AlertRecord,
    Announcement as AnnouncementRecord,
    Location,
    Trip as TripRecord,
    UserStats,
    normalize_city_key,
)


def utcnow() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def generate_uuid() -> str:
    """Generate a UUID string."""
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class User(Base):
    """Marketplace member; only the fields the matchers read are modelled."""

    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    role = Column(String, default="both")  # sender, shipper, both, admin
    status = Column(String, default="active")  # active, blocked, suspended

    # Trust signals
    verified = Column(Boolean, default=False)
    rating = Column(Float, nullable=True)  # Average of received reviews, 0-5
    total_reviews = Column(Integer, default=0)

    created_at = Column(DateTime, default=utcnow)

    # Relationships
    announcements = relationship("Announcement", back_populates="user", cascade="all, delete-orphan")
    trips = relationship("Trip", back_populates="user", cascade="all, delete-orphan")
    alerts = relationship("Alert", back_populates="user", cascade="all, delete-orphan")

    def stats(self) -> UserStats:
        return UserStats(rating=self.rating, verified=self.verified)

    def __repr__(self) -> str:
        return f"<User {self.name} ({self.email})>"


class Announcement(Base):
    """Sender's request to have a package carried."""

    __tablename__ = "announcements"

    id = Column(String, primary_key=True, default=generate_uuid)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    type = Column(String, nullable=False, default="package")  # package, shopping
    title = Column(String)
    description = Column(Text)

    # Route
    from_city = Column(String, nullable=False)
    from_country = Column(String)
    from_city_key = Column(String, index=True)
    to_city = Column(String, nullable=False)
    to_country = Column(String)
    to_city_key = Column(String, index=True)

    # Window and terms
    date_from = Column(Date, nullable=False)
    date_to = Column(Date, nullable=False)
    reward = Column(Float, nullable=False, default=0.0)
    currency = Column(String, default="EUR")
    weight = Column(Float)

    # Status: active, matched, completed, cancelled
    status = Column(String, nullable=False, default="active")

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="announcements")

    __table_args__ = (
        Index("ix_announcements_status_dates", "status", "date_from", "date_to"),
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if self.from_city and not self.from_city_key:
            self.from_city_key = normalize_city_key(self.from_city)
        if self.to_city and not self.to_city_key:
            self.to_city_key = normalize_city_key(self.to_city)

    def to_record(self) -> AnnouncementRecord:
        return AnnouncementRecord(
            id=self.id,
            user_id=self.user_id,
            type=self.type,
            origin=Location(self.from_city, self.from_country),
            destination=Location(self.to_city, self.to_country),
            date_from=self.date_from,
            date_to=self.date_to,
            reward=self.reward,
            currency=self.currency,
            weight=self.weight,
            owner=self.user.stats() if self.user else UserStats(),
            status=self.status,
            created_at=self.created_at,
        )

    def __repr__(self) -> str:
        return f"<Announcement {self.from_city} -> {self.to_city} ({self.status})>"


class Trip(Base):
    """Traveler's offer of spare luggage capacity."""

    __tablename__ = "trips"

    id = Column(String, primary_key=True, default=generate_uuid)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    notes = Column(Text)

    # Route
    from_city = Column(String, nullable=False)
    from_country = Column(String)
    from_city_key = Column(String, index=True)
    to_city = Column(String, nullable=False)
    to_country = Column(String)
    to_city_key = Column(String, index=True)

    # Travel window and capacity
    departure_date = Column(Date, nullable=False)
    arrival_date = Column(Date, nullable=False)
    available_kg = Column(Float, nullable=False, default=0.0)
    price_per_kg = Column(Float)

    # Status: active, matched, completed, cancelled
    status = Column(String, nullable=False, default="active")

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="trips")

    __table_args__ = (
        Index("ix_trips_status_dates", "status", "departure_date", "arrival_date"),
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if self.from_city and not self.from_city_key:
            self.from_city_key = normalize_city_key(self.from_city)
        if self.to_city and not self.to_city_key:
            self.to_city_key = normalize_city_key(self.to_city)

    def to_record(self) -> TripRecord:
        return TripRecord(
            id=self.id,
            user_id=self.user_id,
            origin=Location(self.from_city, self.from_country),
            destination=Location(self.to_city, self.to_country),
            departure_date=self.departure_date,
            arrival_date=self.arrival_date,
            available_kg=self.available_kg,
            price_per_kg=self.price_per_kg,
            owner=self.user.stats() if self.user else UserStats(),
            status=self.status,
            created_at=self.created_at,
        )

    def __repr__(self) -> str:
        return f"<Trip {self.from_city} -> {self.to_city} ({self.status})>"


class Alert(Base):
    """Saved search. 'sender' alerts watch trips, 'shipper' alerts watch announcements."""

    __tablename__ = "alerts"

    id = Column(String, primary_key=True, default=generate_uuid)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    type = Column(String, nullable=False)

    # Criteria (all optional)
    from_city = Column(String)
    from_country = Column(String)
    to_city = Column(String)
    to_country = Column(String)
    date_from = Column(Date)
    date_to = Column(Date)
    min_weight = Column(Float)
    max_weight = Column(Float)
    min_reward = Column(Float)
    max_reward = Column(Float)

    # Delivery
    is_active = Column(Boolean, default=True)
    notification_method = Column(String, default="both")  # email, push, both
    last_notified_at = Column(DateTime)
    match_count = Column(Integer, default=0)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="alerts")

    __table_args__ = (
        Index("ix_alerts_user_active", "user_id", "is_active"),
        Index("ix_alerts_type_active", "type", "is_active"),
    )

    def to_record(self) -> AlertRecord:
        return AlertRecord(
            id=self.id,
            user_id=self.user_id,
            type=self.type,
            from_city=self.from_city,
            from_country=self.from_country,
            to_city=self.to_city,
            to_country=self.to_country,
            date_from=self.date_from,
            date_to=self.date_to,
            min_weight=self.min_weight,
            max_weight=self.max_weight,
            min_reward=self.min_reward,
            max_reward=self.max_reward,
            is_active=bool(self.is_active),
            notification_method=self.notification_method,
            match_count=self.match_count or 0,
            last_notified_at=self.last_notified_at,
            created_at=self.created_at,
        )

    def __repr__(self) -> str:
        return f"<Alert {self.type} {self.from_city or '*'} -> {self.to_city or '*'}>"
