#!/usr/bin/env python3
"""Store an announcement or trip from a JSON file and notify matching alerts.

Usage:
    python -m scripts.publish_listing announcement path/to/announcement.json
    python -m scripts.publish_listing trip path/to/trip.json --dry-run
"""
import argparse
import asyncio
import json
import logging
import sys

from scripts.bootstrap import get_session, init_db, settings
from src.alerts.triggers import notify_matching_alerts
from src.logging_config import setup_logging
from src.matching.alert_matcher import AlertMatcher
from src.matching.exceptions import MatchingError
from src.matching.validators import parse_announcement, parse_trip
from src.notifications.alert_notifier import AlertNotifier
from src.persistence.models import Announcement, Trip
from src.persistence.repository import SqlListingRepository

logger = logging.getLogger(__name__)


def _to_model(kind: str, record):
    if kind == "announcement":
        return Announcement(
            user_id=record.user_id,
            type=record.type,
            from_city=record.origin.city,
            from_country=record.origin.country,
            to_city=record.destination.city,
            to_country=record.destination.country,
            date_from=record.date_from,
            date_to=record.date_to,
            reward=record.reward,
            currency=record.currency,
            weight=record.weight,
        )
    return Trip(
        user_id=record.user_id,
        from_city=record.origin.city,
        from_country=record.origin.country,
        to_city=record.destination.city,
        to_country=record.destination.country,
        departure_date=record.departure_date,
        arrival_date=record.arrival_date,
        available_kg=record.available_kg,
        price_per_kg=record.price_per_kg,
    )


async def publish(kind: str, payload: dict, dry_run: bool = False) -> int:
    parse = parse_announcement if kind == "announcement" else parse_trip
    record = parse(payload)
    if not record.user_id:
        raise MatchingError("Listing payload needs a userId")

    with get_session() as session:
        if dry_run:
            alerts = AlertMatcher(SqlListingRepository(session)).alerts_for_listing(record)
            for alert in alerts:
                logger.info("Would notify alert %s (user %s)", alert.id, alert.user_id)
            return len(alerts)

        listing = _to_model(kind, record)
        session.add(listing)
        session.commit()
        logger.info("Stored %s %s", kind, listing.id)

        notifier = AlertNotifier(
            webhook_url=settings.slack_webhook_url,
            min_score=settings.notify_min_score,
        )
        alerts = await notify_matching_alerts(session, listing.to_record(), notifier)
        return len(alerts)


def main():
    setup_logging(level=settings.log_level)

    arg_parser = argparse.ArgumentParser(description="Publish a listing and notify matching alerts.")
    arg_parser.add_argument("kind", choices=["announcement", "trip"])
    arg_parser.add_argument("path", help="JSON file with the listing payload")
    arg_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the alerts that would fire without storing the listing.",
    )
    args = arg_parser.parse_args()

    init_db()

    with open(args.path, encoding="utf-8") as f:
        payload = json.load(f)

    try:
        count = asyncio.run(publish(args.kind, payload, dry_run=args.dry_run))
    except MatchingError as e:
        logger.error("Cannot publish %s: %s", args.kind, e)
        return 1

    logger.info("%d alerts matched", count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
