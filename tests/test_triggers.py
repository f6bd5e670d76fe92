"""Tests for notifying alerts when a listing is published."""
from contextlib import contextmanager
from datetime import datetime
from unittest.mock import AsyncMock, patch

import pytest

from src.alerts.triggers import notify_matching_alerts
from src.main import run_alert_scan
from src.persistence.models import Alert


class TestNotifyMatchingAlerts:
    """Tests for notify_matching_alerts."""

    @pytest.mark.asyncio
    async def test_new_trip_notifies_sender_alerts(
        self, test_db, user_factory, trip_factory, alert_factory, mock_notifier
    ):
        wanted = alert_factory(type="sender", from_city="Paris", to_city="Lyon")
        alert_factory(type="sender", to_city="Nice")
        trip = trip_factory(user=user_factory("carrier", rating=5.0, verified=True)).to_record()

        matched = await notify_matching_alerts(test_db, trip, mock_notifier)

        assert [a.id for a in matched] == [wanted.id]
        alert, result = mock_notifier.notify.await_args.args
        assert alert.id == wanted.id
        assert result.match_type == "trips"
        assert [(m.listing_id, m.score) for m in result.matches] == [(trip.id, 100)]

        stored = test_db.get(Alert, wanted.id)
        assert stored.match_count == 1
        assert stored.last_notified_at is not None

    @pytest.mark.asyncio
    async def test_failed_notification_not_recorded(
        self, test_db, announcement_factory, alert_factory, mock_notifier
    ):
        alert = alert_factory(type="shipper")
        mock_notifier.notify = AsyncMock(return_value=False)

        matched = await notify_matching_alerts(test_db, announcement_factory().to_record(), mock_notifier)

        assert [a.id for a in matched] == [alert.id]
        stored = test_db.get(Alert, alert.id)
        assert stored.match_count == 0
        assert stored.last_notified_at is None

    @pytest.mark.asyncio
    async def test_no_matching_alerts(self, test_db, trip_factory, mock_notifier):
        matched = await notify_matching_alerts(test_db, trip_factory().to_record(), mock_notifier)

        assert matched == []
        mock_notifier.notify.assert_not_awaited()


class TestRunAlertScan:
    """Tests for the scheduled alert scan."""

    @staticmethod
    def _session_for(test_db):
        @contextmanager
        def _get_session():
            yield test_db
            test_db.commit()

        return _get_session

    @pytest.mark.asyncio
    async def test_scan_notifies_and_records(
        self, test_db, trip_factory, announcement_factory, alert_factory, mock_notifier
    ):
        sender_alert = alert_factory(type="sender", from_city="Paris")
        shipper_alert = alert_factory(type="shipper", to_city="Nice")
        alert_factory(type="sender", is_active=False)
        trip_factory()
        trip_factory()
        announcement_factory(to_city="Lyon")

        with patch("src.main.get_session", self._session_for(test_db)):
            notified = await run_alert_scan(notifier=mock_notifier)

        assert notified == 1
        alert, result = mock_notifier.notify.await_args.args
        assert alert.id == sender_alert.id
        assert len(result.matches) == 2

        assert test_db.get(Alert, sender_alert.id).match_count == 2
        assert test_db.get(Alert, shipper_alert.id).match_count == 0

    @pytest.mark.asyncio
    async def test_scan_skips_already_notified(self, test_db, trip_factory, alert_factory, mock_notifier):
        trip_factory(created_at=datetime(2024, 5, 1))
        alert_factory(type="sender", last_notified_at=datetime(2024, 5, 2))

        with patch("src.main.get_session", self._session_for(test_db)):
            notified = await run_alert_scan(notifier=mock_notifier)

        assert notified == 0
        mock_notifier.notify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_scan_is_idempotent_after_notifying(self, test_db, trip_factory, alert_factory, mock_notifier):
        trip_factory()
        alert_factory(type="sender")

        with patch("src.main.get_session", self._session_for(test_db)):
            first = await run_alert_scan(notifier=mock_notifier)
            second = await run_alert_scan(notifier=mock_notifier)

        assert (first, second) == (1, 0)
        assert mock_notifier.notify.await_count == 1

    @pytest.mark.asyncio
    async def test_scan_ignores_unknown_alert_types(self, test_db, trip_factory, alert_factory, mock_notifier):
        alert_factory(type="courier")
        good = alert_factory(type="sender")
        trip_factory()

        with patch("src.main.get_session", self._session_for(test_db)):
            notified = await run_alert_scan(notifier=mock_notifier)

        assert notified == 1
        assert mock_notifier.notify.await_args.args[0].id == good.id

    @pytest.mark.asyncio
    async def test_new_listing_not_crowded_out_by_older_matches(
        self, test_db, monkeypatch, user_factory, trip_factory, alert_factory, mock_notifier
    ):
        from src.main import settings

        monkeypatch.setattr(settings, "alert_match_limit", 3)
        star = user_factory("star", rating=5.0, verified=True)
        for _ in range(4):
            trip_factory(user=star, created_at=datetime(2024, 5, 1))
        fresh = trip_factory(created_at=datetime(2024, 5, 10))
        alert_factory(type="sender", last_notified_at=datetime(2024, 5, 5))

        with patch("src.main.get_session", self._session_for(test_db)):
            notified = await run_alert_scan(notifier=mock_notifier)

        assert notified == 1
        _, result = mock_notifier.notify.await_args.args
        assert [(m.listing_id, m.score) for m in result.matches] == [(fresh.id, 70)]
