#!/usr/bin/env python3
"""Check the Slack webhook used for alert notifications."""
import asyncio
import logging
import sys

from scripts.bootstrap import settings
from src.logging_config import setup_logging
from src.notifications.alert_notifier import AlertNotifier

logger = logging.getLogger(__name__)


async def test_webhook(webhook_url: str) -> bool:
    """Send a test message through the webhook."""
    notifier = AlertNotifier(webhook_url=webhook_url)
    return await notifier.send_test_message()


def main():
    """Run Slack setup."""
    setup_logging()

    print("Slack Webhook Setup")
    print("=" * 50)
    print()

    if settings.slack_webhook_url:
        logger.info("Testing configured webhook...")
        if asyncio.run(test_webhook(settings.slack_webhook_url)):
            logger.info("Webhook is working. Check your Slack channel for a test message.")
            return 0
        logger.error("Webhook test failed. Please check SLACK_WEBHOOK_URL.")
        print()

    print("Create an incoming webhook at https://api.slack.com/apps")
    print("('Incoming Webhooks' > 'Add New Webhook to Workspace') and paste it below.")
    print()

    webhook_url = input("Enter your Slack webhook URL (or press Enter to skip): ").strip()

    if not webhook_url:
        print("Skipped. Add the webhook URL to your .env file later:")
        print("SLACK_WEBHOOK_URL=https://hooks.slack.com/services/...")
        return 0

    logger.info("Testing webhook...")
    if not asyncio.run(test_webhook(webhook_url)):
        logger.error("Test failed. Please check the URL and try again.")
        return 1

    logger.info("Success! Check your Slack channel for a test message.")
    print()
    print("Add this to your .env file:")
    print("SLACK_WEBHOOK_URL=%s" % webhook_url)
    return 0


if __name__ == "__main__":
    sys.exit(main())
