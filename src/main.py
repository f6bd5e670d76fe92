"""Main entry point for the ShipMatch alert scheduler."""
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from config.settings import settings
from src.alerts.service import AlertService
from src.logging_config import setup_logging
from src.matching.alert_matcher import AlertMatcher
from src.matching.exceptions import MatchingError
from src.notifications.alert_notifier import AlertNotifier
from src.persistence.database import get_session, init_db
from src.persistence.repository import SqlListingRepository

logger = logging.getLogger(__name__)


async def run_alert_scan(notifier: AlertNotifier | None = None) -> int:
    """Evaluate every active alert and notify owners about new matches.

    Returns:
        Number of alerts that produced a notification
    """
    logger.info("Starting alert scan at %s", datetime.now().strftime("%Y-%m-%d %H:%M:%S"))

    notifier = notifier or AlertNotifier(
        webhook_url=settings.slack_webhook_url,
        min_score=settings.notify_min_score,
    )
    notified = 0

    with get_session() as session:
        repository = SqlListingRepository(session)
        matcher = AlertMatcher(
            repository,
            min_score=settings.min_match_score,
            limit=settings.alert_match_limit,
        )
        alert_service = AlertService(session, max_active_alerts=settings.max_active_alerts)

        alerts = repository.list_active_alerts("sender") + repository.list_active_alerts("shipper")
        logger.info("Scanning %d active alerts", len(alerts))

        for alert in alerts:
            try:
                result = matcher.match_alert(alert, created_after=alert.last_notified_at)
            except MatchingError as e:
                logger.warning("Skipping alert %s: %s", alert.id, e)
                continue

            if not result.matches:
                continue

            logger.info("Alert %s: %d new %s", alert.id, len(result.matches), result.match_type)
            if await notifier.notify(alert, result):
                alert_service.record_notification(alert.id, len(result.matches))
                notified += 1

    logger.info("Alert scan completed: %d alerts notified", notified)
    return notified


async def async_main():
    """Async main entry point."""
    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file or None,
        log_sql=settings.log_sql,
    )
    logger.info("ShipMatch starting...")
    logger.info("Database: %s", settings.database_url)

    init_db()
    logger.info("Database initialized")

    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        run_alert_scan,
        IntervalTrigger(minutes=settings.alert_check_interval_minutes),
        id="alert_scan",
        name="Alert Scan",
        max_instances=1,
    )

    scheduler.start()
    logger.info("Scheduler started: alert scan every %d minutes", settings.alert_check_interval_minutes)

    try:
        await run_alert_scan()

        logger.info("ShipMatch running. Press Ctrl+C to stop.")
        while True:
            await asyncio.sleep(60)

    except asyncio.CancelledError:
        logger.info("Shutting down...")
    finally:
        scheduler.shutdown()


def main():
    """Main entry point."""
    try:
        asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Shutdown complete.")


if __name__ == "__main__":
    main()
