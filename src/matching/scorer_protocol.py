"""Scorer protocol for pluggable scoring engines.

Defines the interface that all scoring implementations must satisfy.
MatchScorer is the heuristic implementation; the matchers accept any
object implementing the same protocol.
"""
from typing import Protocol, runtime_checkable

from src.matching.records import Announcement, Trip


@runtime_checkable
class Scorer(Protocol):
    """Protocol for announcement/trip scoring engines."""

    def score(self, announcement: Announcement, trip: Trip) -> int:
        """Score a single pair and return an integer in [0, 100]."""
        ...
