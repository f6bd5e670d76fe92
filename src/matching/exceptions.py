"""Matching exceptions for ShipMatch."""
from typing import Optional


class MatchingError(Exception):
    """Base exception for matching errors."""

    pass


class InvalidInputError(MatchingError):
    """Raised when a record is malformed and cannot be scored."""

    def __init__(self, message: str, fields: Optional[list[str]] = None):
        self.fields = fields or []
        super().__init__(message)


class NotFoundError(MatchingError):
    """Raised when a referenced record does not exist."""

    pass


class AlertNotFoundError(NotFoundError):
    """Raised when an alert id does not resolve to an alert owned by the user."""

    def __init__(self, alert_id: str):
        self.alert_id = alert_id
        super().__init__(f"Alert not found: {alert_id}")


class ListingNotFoundError(NotFoundError):
    """Raised when an announcement or trip id does not resolve."""

    def __init__(self, kind: str, listing_id: str):
        self.kind = kind
        self.listing_id = listing_id
        super().__init__(f"{kind.capitalize()} not found: {listing_id}")


class InvalidAlertError(MatchingError):
    """Raised when an alert type is neither 'sender' nor 'shipper'."""

    def __init__(self, alert_type: object):
        self.alert_type = alert_type
        super().__init__(f"Invalid alert type: {alert_type!r}")


class AlertLimitError(MatchingError):
    """Raised when a user already has the maximum number of active alerts."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"Active alert limit reached ({limit})")
