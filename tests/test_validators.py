"""Tests for payload validation."""
from datetime import date

import pytest

from src.matching.exceptions import InvalidAlertError, InvalidInputError
from src.matching.validators import parse_alert, parse_announcement, parse_trip


def announcement_payload(**overrides):
    payload = {
        "_id": "ann-1",
        "type": "package",
        "from": {"city": "Paris", "country": "France"},
        "to": {"city": "Lyon", "country": "France"},
        "dateFrom": "2024-06-01",
        "dateTo": "2024-06-10",
        "reward": 30,
        "weight": 2.5,
    }
    payload.update(overrides)
    return payload


def trip_payload(**overrides):
    payload = {
        "_id": "trip-1",
        "from": {"city": "Paris", "country": "France"},
        "to": {"city": "Lyon", "country": "France"},
        "departureDate": "2024-06-05",
        "arrivalDate": "2024-06-08",
        "availableKg": 12,
        "pricePerKg": 5,
        "user": {"verified": True, "stats": {"rating": 4.5}},
    }
    payload.update(overrides)
    return payload


class TestParseAnnouncement:
    """Tests for announcement payloads."""

    def test_valid_payload(self):
        announcement = parse_announcement(announcement_payload())

        assert announcement.id == "ann-1"
        assert announcement.origin.city == "Paris"
        assert announcement.destination.country == "France"
        assert announcement.date_from == date(2024, 6, 1)
        assert announcement.date_to == date(2024, 6, 10)
        assert announcement.weight == 2.5
        assert announcement.status == "active"

    def test_snake_case_keys(self):
        announcement = parse_announcement(
            {
                "origin": {"city": "Paris"},
                "destination": {"city": "Lyon"},
                "date_from": date(2024, 6, 1),
                "date_to": date(2024, 6, 2),
            }
        )
        assert announcement.origin.city == "Paris"
        assert announcement.date_to == date(2024, 6, 2)

    def test_city_kept_verbatim(self):
        announcement = parse_announcement(announcement_payload(**{"from": {"city": "paris"}}))
        assert announcement.origin.city == "paris"

    def test_missing_city_rejected(self):
        with pytest.raises(InvalidInputError) as exc:
            parse_announcement(announcement_payload(**{"from": {"country": "France"}}))
        assert any("city" in field for field in exc.value.fields)

    def test_missing_route_rejected(self):
        payload = announcement_payload()
        del payload["to"]
        with pytest.raises(InvalidInputError):
            parse_announcement(payload)

    def test_malformed_date_rejected(self):
        with pytest.raises(InvalidInputError):
            parse_announcement(announcement_payload(dateFrom="not a date"))

    def test_reversed_window_rejected(self):
        with pytest.raises(InvalidInputError):
            parse_announcement(announcement_payload(dateFrom="2024-06-10", dateTo="2024-06-01"))

    def test_missing_dates_allowed(self):
        payload = announcement_payload()
        del payload["dateTo"]
        assert parse_announcement(payload).date_to is None

    def test_unknown_status_rejected(self):
        with pytest.raises(InvalidInputError):
            parse_announcement(announcement_payload(status="archived"))


class TestParseTrip:
    """Tests for trip payloads."""

    def test_valid_payload(self):
        trip = parse_trip(trip_payload())

        assert trip.departure_date == date(2024, 6, 5)
        assert trip.arrival_date == date(2024, 6, 8)
        assert trip.available_kg == 12
        assert trip.owner.rating == 4.5
        assert trip.owner.verified is True

    def test_legacy_date_keys(self):
        payload = trip_payload()
        del payload["departureDate"], payload["arrivalDate"]
        payload.update({"dateFrom": "2024-06-05T10:00:00Z", "dateTo": "2024-06-08"})

        trip = parse_trip(payload)
        assert trip.departure_date == date(2024, 6, 5)

    def test_missing_owner_stats(self):
        payload = trip_payload()
        del payload["user"]

        trip = parse_trip(payload)
        assert trip.owner.rating is None
        assert trip.owner.verified is None

    def test_non_numeric_rating_rejected(self):
        with pytest.raises(InvalidInputError):
            parse_trip(trip_payload(user={"stats": {"rating": "excellent"}}))

    def test_rating_out_of_range_rejected(self):
        with pytest.raises(InvalidInputError):
            parse_trip(trip_payload(user={"rating": 6}))

    def test_negative_capacity_rejected(self):
        with pytest.raises(InvalidInputError):
            parse_trip(trip_payload(availableKg=-1))


class TestParseAlert:
    """Tests for alert criteria."""

    def test_valid_alert(self):
        alert = parse_alert(
            {"type": "sender", "fromCity": "Paris", "dateFrom": "2024-06-01", "maxWeight": 5},
            user_id="user-1",
        )

        assert alert.type == "sender"
        assert alert.user_id == "user-1"
        assert alert.from_city == "Paris"
        assert alert.to_city is None
        assert alert.date_from == date(2024, 6, 1)
        assert alert.max_weight == 5
        assert alert.notification_method == "both"
        assert alert.match_type == "trips"

    def test_shipper_alert_watches_announcements(self):
        assert parse_alert({"type": "shipper"}).match_type == "announcements"

    @pytest.mark.parametrize("alert_type", ["courier", "", None, "SENDER"])
    def test_invalid_type(self, alert_type):
        with pytest.raises(InvalidAlertError):
            parse_alert({"type": alert_type})

    def test_missing_type(self):
        with pytest.raises(InvalidAlertError):
            parse_alert({"fromCity": "Paris"})

    def test_blank_city_means_any(self):
        assert parse_alert({"type": "sender", "toCity": "   "}).to_city is None

    def test_inverted_weight_range_rejected(self):
        with pytest.raises(InvalidInputError):
            parse_alert({"type": "sender", "minWeight": 10, "maxWeight": 2})

    def test_inverted_window_rejected(self):
        with pytest.raises(InvalidInputError):
            parse_alert({"type": "shipper", "dateFrom": "2024-07-01", "dateTo": "2024-06-01"})

    def test_unknown_notification_method_rejected(self):
        with pytest.raises(InvalidInputError):
            parse_alert({"type": "sender", "notificationMethod": "pigeon"})
