"""Compatible counterparts for a single announcement or trip."""
from typing import Optional

from src.matching.exceptions import ListingNotFoundError
from src.matching.records import ListingFilter, RankedMatch
from src.matching.repository_protocol import ListingRepository
from src.matching.scorer import MatchScorer, rank_matches
from src.matching.scorer_protocol import Scorer


class ListingMatcher:
    """Rank trips for an announcement, or announcements for a trip.

    Candidates must share both cities and have an overlapping window, so
    every result already carries the route and date points; rating and
    verification decide the order.
    """

    def __init__(
        self,
        repository: ListingRepository,
        scorer: Optional[Scorer] = None,
        limit: Optional[int] = None,
    ):
        self.repository = repository
        self.scorer = scorer or MatchScorer()
        self.limit = limit

    def trips_for_announcement(self, announcement_id: str) -> list[RankedMatch]:
        """
        Active trips compatible with an announcement.

        Raises:
            ListingNotFoundError: If the announcement does not exist
        """
        announcement = self.repository.get_announcement_by_id(announcement_id)
        if announcement is None:
            raise ListingNotFoundError("announcement", announcement_id)

        trips = self.repository.list_active_trips(
            ListingFilter(
                from_city=announcement.origin.city,
                to_city=announcement.destination.city,
                date_from=announcement.date_from,
                date_to=announcement.date_to,
            )
        )
        scored = [RankedMatch(listing=t, score=self.scorer.score(announcement, t)) for t in trips]
        return rank_matches(scored, limit=self.limit)

    def announcements_for_trip(self, trip_id: str) -> list[RankedMatch]:
        """
        Active announcements compatible with a trip.

        Raises:
            ListingNotFoundError: If the trip does not exist
        """
        trip = self.repository.get_trip_by_id(trip_id)
        if trip is None:
            raise ListingNotFoundError("trip", trip_id)

        announcements = self.repository.list_active_announcements(
            ListingFilter(
                from_city=trip.origin.city,
                to_city=trip.destination.city,
                date_from=trip.departure_date,
                date_to=trip.arrival_date,
            )
        )
        scored = [RankedMatch(listing=a, score=self.scorer.score(a, trip)) for a in announcements]
        return rank_matches(scored, limit=self.limit)
