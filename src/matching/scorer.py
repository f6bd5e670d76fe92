"""Match scoring and ranking."""
import math
from dataclasses import dataclass
from datetime import date, datetime
from numbers import Real
from typing import Iterable, Optional

from src.matching.exceptions import InvalidInputError
from src.matching.records import Announcement, RankedMatch, Trip

# Points per signal; the nominal maximum adds up to MAX_SCORE
ORIGIN_POINTS = 20
DESTINATION_POINTS = 20
DATE_OVERLAP_POINTS = 30
RATING_POINTS_PER_STAR = 4
MAX_RATING_POINTS = 20
VERIFIED_POINTS = 10
MAX_SCORE = 100


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-signal contributions for one (announcement, trip) pair."""

    origin: int = 0
    destination: int = 0
    date_overlap: int = 0
    rating: float = 0.0
    verified: int = 0

    @property
    def total(self) -> int:
        raw = self.origin + self.destination + self.date_overlap + self.rating + self.verified
        return max(0, min(math.floor(raw), MAX_SCORE))


def dates_overlap(
    start1: Optional[date],
    end1: Optional[date],
    start2: Optional[date],
    end2: Optional[date],
) -> bool:
    """
    Check whether two inclusive date windows share at least one day.

    A window with a missing bound never overlaps anything.
    """
    if start1 is None or end1 is None or start2 is None or end2 is None:
        return False
    return _as_date(start1) <= _as_date(end2) and _as_date(start2) <= _as_date(end1)


def rating_points(rating: Optional[float]) -> float:
    """Linear 4 points per star, saturating at 20. Missing or negative -> 0."""
    if rating is None or rating <= 0:
        return 0.0
    return float(min(rating * RATING_POINTS_PER_STAR, MAX_RATING_POINTS))


def _as_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _check_scorable(announcement: Announcement, trip: Trip) -> None:
    """Reject structurally malformed records before any arithmetic."""
    bad: list[str] = []
    for prefix, record in (("announcement", announcement), ("trip", trip)):
        for leg in ("origin", "destination"):
            location = getattr(record, leg, None)
            city = getattr(location, "city", None)
            if not isinstance(city, str) or not city:
                bad.append(f"{prefix}.{leg}.city")

    rating = trip.owner.rating
    if rating is not None and (
        isinstance(rating, bool) or not isinstance(rating, Real) or not math.isfinite(rating)
    ):
        bad.append("trip.owner.rating")

    if bad:
        raise InvalidInputError(f"Cannot score malformed records: {', '.join(bad)}", bad)


class MatchScorer:
    """Score announcement/trip compatibility on a 0-100 scale."""

    def breakdown(self, announcement: Announcement, trip: Trip) -> ScoreBreakdown:
        """
        Compute each signal's contribution.

        Raises:
            InvalidInputError: If a city is missing or the rating is not a finite number
        """
        _check_scorable(announcement, trip)

        overlap = dates_overlap(
            announcement.date_from,
            announcement.date_to,
            trip.departure_date,
            trip.arrival_date,
        )

        return ScoreBreakdown(
            origin=ORIGIN_POINTS if announcement.origin.city == trip.origin.city else 0,
            destination=(
                DESTINATION_POINTS
                if announcement.destination.city == trip.destination.city
                else 0
            ),
            date_overlap=DATE_OVERLAP_POINTS if overlap else 0,
            rating=rating_points(trip.owner.rating),
            verified=VERIFIED_POINTS if trip.owner.verified is True else 0,
        )

    def score(self, announcement: Announcement, trip: Trip) -> int:
        """Score one pair; always an integer in [0, 100]."""
        return self.breakdown(announcement, trip).total


_default_scorer = MatchScorer()


def calculate_match_score(announcement: Announcement, trip: Trip) -> int:
    """Score one (announcement, trip) pair with the default scorer."""
    return _default_scorer.score(announcement, trip)


def _ranking_key(match: RankedMatch) -> tuple:
    created = match.created_at
    created_ts = created.timestamp() if created is not None else float("-inf")
    return (-match.score, -created_ts, match.listing_id or "")


def rank_matches(
    matches: Iterable[RankedMatch],
    min_score: float = 0,
    limit: Optional[int] = None,
) -> list[RankedMatch]:
    """
    Order matches by score descending, newest first on ties.

    Args:
        matches: Scored candidates
        min_score: Drop candidates scoring below this value
        limit: Keep at most this many results

    Returns:
        Ranked list of matches
    """
    ranked = sorted((m for m in matches if m.score >= min_score), key=_ranking_key)
    if limit is not None:
        ranked = ranked[:limit]
    return ranked
