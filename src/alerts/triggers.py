"""Notify alert owners when a new listing is published."""
import logging

from sqlalchemy.orm import Session

from src.alerts.service import AlertService
from src.matching.alert_matcher import AlertMatcher
from src.matching.records import Alert, AlertMatches, Announcement, RankedMatch, Trip
from src.notifications.alert_notifier import AlertNotifier
from src.persistence.repository import SqlListingRepository

logger = logging.getLogger(__name__)


async def notify_matching_alerts(
    session: Session,
    listing: Announcement | Trip,
    notifier: AlertNotifier,
) -> list[Alert]:
    """
    Find the active alerts a new listing satisfies and notify their owners.

    A failed notification is logged and does not stop the remaining alerts;
    only alerts whose owner was notified are recorded.

    Args:
        session: Database session
        listing: The newly published announcement or trip
        notifier: Notification channel

    Returns:
        Alerts the listing satisfied
    """
    matcher = AlertMatcher(SqlListingRepository(session))
    alert_service = AlertService(session)

    matching = matcher.alerts_for_listing(listing)
    logger.info("Listing %s satisfies %d alerts", listing.id, len(matching))

    for alert in matching:
        result = AlertMatches(
            match_type=alert.match_type,
            matches=[RankedMatch(listing=listing, score=matcher.score_listing(alert, listing))],
        )
        if await notifier.notify(alert, result):
            alert_service.record_notification(alert.id, 1)
        else:
            logger.warning("Alert %s matched listing %s but was not notified", alert.id, listing.id)

    return matching
