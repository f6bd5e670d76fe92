"""Slack notifications for alert matches."""
import logging
from datetime import datetime
from typing import Optional

import aiohttp

from src.matching.records import Alert, AlertMatches, Announcement, RankedMatch

logger = logging.getLogger(__name__)

MAX_LISTED_MATCHES = 10


def _score_emoji(score: int) -> str:
    if score >= 80:
        return "🔥"
    if score >= 60:
        return "✨"
    return "📦"


def _route(origin: Optional[str], destination: Optional[str]) -> str:
    return f"{origin or 'Anywhere'} → {destination or 'Anywhere'}"


def _describe(match: RankedMatch) -> str:
    """One mrkdwn line for a matched listing."""
    listing = match.listing
    route = _route(listing.origin.city, listing.destination.city)

    if isinstance(listing, Announcement):
        window = f"{listing.date_from} – {listing.date_to}"
        weight = f"{listing.weight:g} kg" if listing.weight else "? kg"
        terms = f"{weight} | {listing.reward:g} {listing.currency}"
    else:
        window = f"{listing.departure_date} – {listing.arrival_date}"
        terms = f"{listing.available_kg:g} kg free"
        if listing.price_per_kg:
            terms += f" | {listing.price_per_kg:g}/kg"

    verified = " ✅" if listing.owner.verified else ""
    return f"{_score_emoji(match.score)} *{route}*{verified}\n{window} | {terms} | Score: {match.score}"


class AlertNotifier:
    """Send alert match summaries to Slack via webhook."""

    def __init__(self, webhook_url: Optional[str] = None, min_score: float = 60):
        """
        Initialize alert notifier.

        Args:
            webhook_url: Slack incoming webhook URL
            min_score: Minimum score for a match to be included
        """
        self.webhook_url = webhook_url
        self.min_score = min_score

    async def notify(self, alert: Alert, result: AlertMatches) -> bool:
        """
        Send one summary for an alert's new matches.

        Args:
            alert: Alert that produced the matches
            result: Ranked matches for the alert

        Returns:
            True if notification sent successfully
        """
        if not self.webhook_url:
            logger.info("Slack webhook not configured")
            return False

        eligible = [m for m in result.matches if m.score >= self.min_score]
        if not eligible:
            return False

        return await self._post(self._build_payload(alert, result.match_type, eligible))

    def _build_payload(self, alert: Alert, match_type: str, matches: list[RankedMatch]) -> dict:
        """Build Slack message payload for an alert's matches."""
        noun = "trip" if match_type == "trips" else "announcement"
        plural = "" if len(matches) == 1 else "s"

        blocks = [
            {
                "type": "header",
                "text": {
                    "type": "plain_text",
                    "text": f"🔔 {len(matches)} new {noun}{plural} for your alert",
                    "emoji": True,
                },
            },
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": f"*{_route(alert.from_city, alert.to_city)}*",
                },
            },
            {"type": "divider"},
        ]

        for match in matches[:MAX_LISTED_MATCHES]:
            blocks.append(
                {
                    "type": "section",
                    "text": {"type": "mrkdwn", "text": _describe(match)},
                }
            )

        if len(matches) > MAX_LISTED_MATCHES:
            blocks.append(
                {
                    "type": "context",
                    "elements": [
                        {
                            "type": "mrkdwn",
                            "text": f"_...and {len(matches) - MAX_LISTED_MATCHES} more_",
                        }
                    ],
                }
            )

        blocks.append(
            {
                "type": "context",
                "elements": [
                    {
                        "type": "mrkdwn",
                        "text": f"Checked at {datetime.now().strftime('%Y-%m-%d %H:%M')}",
                    }
                ],
            }
        )

        return {"blocks": blocks}

    async def _post(self, payload: dict) -> bool:
        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self.webhook_url,
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=10),
                ) as response:
                    return response.status == 200
        except Exception as e:
            logger.error("Slack notification error: %s", e)
            return False

    async def send_test_message(self) -> bool:
        """Send a test message to verify webhook is working."""
        if not self.webhook_url:
            return False

        payload = {
            "blocks": [
                {
                    "type": "section",
                    "text": {
                        "type": "mrkdwn",
                        "text": "✅ *ShipMatch Connected!*\nAlert notifications are working.",
                    },
                }
            ]
        }
        return await self._post(payload)
