"""Domain records consumed by the scorer and matchers."""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

ANNOUNCEMENT_TYPES = ("package", "shopping")
LISTING_STATUSES = ("active", "matched", "completed", "cancelled")
ALERT_TYPES = ("sender", "shipper")
NOTIFICATION_METHODS = ("email", "push", "both")

# Only these statuses surface in match results
SEARCHABLE_STATUSES = ("active",)


def normalize_city_key(name: Optional[str]) -> str:
    """Normalize a city name to a lookup key for case-insensitive filters.

    Only used for filtering; the scorer compares the raw city strings.
    """
    if not name:
        return ""
    return " ".join(name.lower().split())


@dataclass(frozen=True)
class Location:
    """A city on a route."""

    city: str
    country: Optional[str] = None


@dataclass(frozen=True)
class UserStats:
    """Projection of the owning user read by the scorer."""

    rating: Optional[float] = None
    verified: Optional[bool] = None


@dataclass(frozen=True)
class Announcement:
    """A sender's request to have a package carried."""

    origin: Location
    destination: Location
    date_from: Optional[date]
    date_to: Optional[date]
    reward: float = 0.0
    type: str = "package"
    weight: Optional[float] = None
    currency: str = "EUR"
    id: Optional[str] = None
    user_id: Optional[str] = None
    owner: UserStats = field(default_factory=UserStats)
    status: str = "active"
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Trip:
    """A traveler's offer of spare luggage capacity."""

    origin: Location
    destination: Location
    departure_date: Optional[date]
    arrival_date: Optional[date]
    available_kg: float = 0.0
    price_per_kg: Optional[float] = None
    id: Optional[str] = None
    user_id: Optional[str] = None
    owner: UserStats = field(default_factory=UserStats)
    status: str = "active"
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Alert:
    """A saved search re-run to discover matching listings.

    ``sender`` alerts watch trips, ``shipper`` alerts watch announcements.
    """

    type: str
    user_id: Optional[str] = None
    id: Optional[str] = None
    from_city: Optional[str] = None
    from_country: Optional[str] = None
    to_city: Optional[str] = None
    to_country: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    min_weight: Optional[float] = None
    max_weight: Optional[float] = None
    min_reward: Optional[float] = None
    max_reward: Optional[float] = None
    is_active: bool = True
    notification_method: str = "both"
    match_count: int = 0
    last_notified_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def match_type(self) -> str:
        """Pool this alert searches: 'trips' or 'announcements'."""
        return "trips" if self.type == "sender" else "announcements"


@dataclass(frozen=True)
class ListingFilter:
    """Conjunction of optional constraints on a candidate pool.

    Unset fields impose no restriction. City comparison is case-insensitive.
    The date window matches listings whose own window overlaps it; an unset
    bound is open.
    """

    from_city: Optional[str] = None
    to_city: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    min_weight: Optional[float] = None
    max_weight: Optional[float] = None
    min_reward: Optional[float] = None
    max_reward: Optional[float] = None
    statuses: tuple[str, ...] = SEARCHABLE_STATUSES

    @classmethod
    def from_alert(cls, alert: Alert) -> "ListingFilter":
        return cls(
            from_city=alert.from_city,
            to_city=alert.to_city,
            date_from=alert.date_from,
            date_to=alert.date_to,
            min_weight=alert.min_weight,
            max_weight=alert.max_weight,
            min_reward=alert.min_reward,
            max_reward=alert.max_reward,
        )

    @property
    def has_date_window(self) -> bool:
        return self.date_from is not None or self.date_to is not None


@dataclass(frozen=True)
class RankedMatch:
    """A candidate listing with its relevance score."""

    listing: Announcement | Trip
    score: int

    @property
    def created_at(self) -> Optional[datetime]:
        return self.listing.created_at

    @property
    def listing_id(self) -> Optional[str]:
        return self.listing.id


@dataclass(frozen=True)
class AlertMatches:
    """Result of resolving an alert against the live pool."""

    match_type: str
    matches: list[RankedMatch] = field(default_factory=list)
