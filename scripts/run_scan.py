#!/usr/bin/env python3
"""Run one alert scan and exit.

For cron or CI environments where the long-running scheduler is not used.

Usage:
    python -m scripts.run_scan

Environment variables:
    DATABASE_URL: Database connection string
    SLACK_WEBHOOK_URL: Slack webhook for notifications (optional)
"""
import asyncio
import logging
import sys

from scripts.bootstrap import init_db, settings
from src.logging_config import setup_logging
from src.main import run_alert_scan

logger = logging.getLogger(__name__)


async def main():
    """Run a single alert scan."""
    setup_logging(level=settings.log_level)

    logger.info("ShipMatch - One-time Alert Scan")
    logger.info("=" * 40)

    init_db()

    notified = await run_alert_scan()
    logger.info("Scan complete: %d alerts notified. Exiting.", notified)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Interrupted.")
        sys.exit(1)
    except Exception as e:
        logger.error("Error: %s", e)
        sys.exit(1)
