"""Listing matching and scoring."""
from .alert_matcher import AlertMatcher
from .listing_matcher import ListingMatcher
from .scorer import MatchScorer, calculate_match_score

__all__ = ["AlertMatcher", "ListingMatcher", "MatchScorer", "calculate_match_score"]
