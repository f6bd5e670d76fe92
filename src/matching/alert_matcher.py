"""Resolve saved alerts into ranked counterpart listings."""
from datetime import date, datetime, timezone
from typing import Optional

from src.matching.exceptions import AlertNotFoundError, InvalidAlertError
from src.matching.records import (
    ALERT_TYPES,
    SEARCHABLE_STATUSES,
    Alert,
    AlertMatches,
    Announcement,
    ListingFilter,
    Location,
    RankedMatch,
    Trip,
    UserStats,
    normalize_city_key,
)
from src.matching.repository_protocol import ListingRepository
from src.matching.scorer import MatchScorer, rank_matches
from src.matching.scorer_protocol import Scorer


def _fill(preferred: Optional[date], fallback: Optional[date]) -> Optional[date]:
    return preferred if preferred is not None else fallback


def announcement_from_alert(alert: Alert, trip: Trip) -> Announcement:
    """
    Build the sender side implied by a 'sender' alert.

    Unset alert criteria mean "any", so they are filled from the candidate
    trip and earn their points; set criteria are used verbatim.
    """
    return Announcement(
        origin=Location(alert.from_city or trip.origin.city, alert.from_country),
        destination=Location(alert.to_city or trip.destination.city, alert.to_country),
        date_from=_fill(alert.date_from, trip.departure_date),
        date_to=_fill(alert.date_to, trip.arrival_date),
        user_id=alert.user_id,
    )


def trip_from_alert(alert: Alert, announcement: Announcement, owner: UserStats) -> Trip:
    """Build the traveler side implied by a 'shipper' alert, carrying the owner's stats."""
    return Trip(
        origin=Location(alert.from_city or announcement.origin.city, alert.from_country),
        destination=Location(alert.to_city or announcement.destination.city, alert.to_country),
        departure_date=_fill(alert.date_from, announcement.date_from),
        arrival_date=_fill(alert.date_to, announcement.date_to),
        user_id=alert.user_id,
        owner=owner,
    )


def _cities_agree(wanted: Optional[str], actual: Optional[str]) -> bool:
    if not wanted or not actual:
        return True
    return normalize_city_key(wanted) == normalize_city_key(actual)


def _within(value: Optional[float], low: Optional[float], high: Optional[float]) -> bool:
    # A listing without the value is never excluded
    if value is None:
        return True
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def listing_satisfies_alert(alert: Alert, listing: Announcement | Trip) -> bool:
    """
    Check a single newly published listing against an alert's criteria.

    The listing start date (announcement ``date_from`` or trip
    ``departure_date``) must fall inside the alert window. A listing with
    no start date never satisfies a dated alert.
    """
    if not _cities_agree(alert.from_city, listing.origin.city):
        return False
    if not _cities_agree(alert.to_city, listing.destination.city):
        return False

    if isinstance(listing, Announcement):
        start, weight, reward = listing.date_from, listing.weight, listing.reward
    else:
        start, weight, reward = listing.departure_date, listing.available_kg, listing.price_per_kg

    if alert.date_from is not None or alert.date_to is not None:
        if start is None:
            return False
        if alert.date_from is not None and start < alert.date_from:
            return False
        if alert.date_to is not None and start > alert.date_to:
            return False

    return _within(weight, alert.min_weight, alert.max_weight) and _within(
        reward, alert.min_reward, alert.max_reward
    )


class AlertMatcher:
    """Find and rank live listings for saved alerts."""

    def __init__(
        self,
        repository: ListingRepository,
        scorer: Optional[Scorer] = None,
        min_score: float = 0,
        limit: Optional[int] = None,
    ):
        """
        Initialize alert matcher.

        Args:
            repository: Data-access layer for listings and alerts
            scorer: Scoring engine (defaults to the heuristic MatchScorer)
            min_score: Drop matches scoring below this value
            limit: Maximum number of matches per alert (None for all)
        """
        self.repository = repository
        self.scorer = scorer or MatchScorer()
        self.min_score = min_score
        self.limit = limit

    def find_matches(self, alert_id: str, user_id: str) -> AlertMatches:
        """
        Resolve an alert owned by ``user_id`` into ranked matches.

        Raises:
            AlertNotFoundError: If the alert does not exist or belongs to another user
            InvalidAlertError: If the alert type is not 'sender' or 'shipper'
        """
        alert = self.repository.get_alert_by_id(alert_id)
        if alert is None or alert.user_id != user_id:
            raise AlertNotFoundError(alert_id)
        return self.match_alert(alert)

    def _owner_stats(self, alert: Alert) -> UserStats:
        stats = self.repository.get_user_stats(alert.user_id) if alert.user_id else None
        return stats or UserStats()

    def score_listing(self, alert: Alert, listing: Announcement | Trip, owner: Optional[UserStats] = None) -> int:
        """Score one listing against the counterpart implied by an alert."""
        if isinstance(listing, Trip):
            return self.scorer.score(announcement_from_alert(alert, listing), listing)
        if owner is None:
            owner = self._owner_stats(alert)
        return self.scorer.score(listing, trip_from_alert(alert, listing, owner))

    def match_alert(self, alert: Alert, created_after: Optional[datetime] = None) -> AlertMatches:
        """
        Rank the live pool for an already-loaded alert. Read-only.

        Args:
            alert: Alert to resolve
            created_after: Only keep listings created strictly after this
                instant. Applied before ``limit`` so older, higher-scoring
                listings cannot crowd out new ones.
        """
        if alert.type not in ALERT_TYPES:
            raise InvalidAlertError(alert.type)

        listing_filter = ListingFilter.from_alert(alert)
        owner = None

        if alert.type == "sender":
            candidates = self.repository.list_active_trips(listing_filter)
        else:
            owner = self._owner_stats(alert)
            candidates = self.repository.list_active_announcements(listing_filter)

        scored = [
            RankedMatch(listing=listing, score=self.score_listing(alert, listing, owner))
            for listing in candidates
            if listing.status in SEARCHABLE_STATUSES and created_since(listing, created_after)
        ]

        return AlertMatches(
            match_type=alert.match_type,
            matches=rank_matches(scored, min_score=self.min_score, limit=self.limit),
        )

    def alerts_for_listing(self, listing: Announcement | Trip) -> list[Alert]:
        """
        Active alerts that a newly published listing satisfies.

        Announcements are checked against 'shipper' alerts, trips against
        'sender' alerts. Read-only.
        """
        alert_type = "shipper" if isinstance(listing, Announcement) else "sender"
        return [
            alert
            for alert in self.repository.list_active_alerts(alert_type)
            if listing_satisfies_alert(alert, listing)
        ]


def _as_naive_utc(value: datetime) -> datetime:
    # Stored timestamps are naive UTC
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def created_since(listing: Announcement | Trip, cutoff: Optional[datetime]) -> bool:
    """True if the listing was created strictly after ``cutoff`` (or no cutoff is set)."""
    if cutoff is None:
        return True
    if listing.created_at is None:
        return False
    return _as_naive_utc(listing.created_at) > _as_naive_utc(cutoff)
