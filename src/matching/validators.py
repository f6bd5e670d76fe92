"""Pydantic validation models for listing and alert payloads.

Raw payloads (API bodies, seed files) are validated here and converted into
the immutable records the scorer consumes. Anything structurally malformed
is rejected before scoring.
"""

from datetime import date, datetime
from typing import Any, Literal, Optional

from dateutil import parser as dateutil_parser
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from src.matching.exceptions import InvalidAlertError, InvalidInputError
from src.matching.records import (
    ALERT_TYPES,
    Alert,
    Announcement,
    Location,
    Trip,
    UserStats,
)


def _parse_date(value: Any) -> Optional[date]:
    """Accept date, datetime or a free-form date string."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return dateutil_parser.parse(value).date()
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Invalid date: {value!r}") from e
    raise ValueError(f"Invalid date: {value!r}")


def _check_window(start: Optional[date], end: Optional[date], label: str) -> None:
    if start is not None and end is not None and start > end:
        raise ValueError(f"{label} start must be on or before its end")


def _check_range(low: Optional[float], high: Optional[float], label: str) -> None:
    if low is not None and high is not None and low > high:
        raise ValueError(f"Minimum {label} must be less than or equal to maximum {label}")


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class LocationIn(_Payload):
    """A city on a route. The city string is kept verbatim."""
    city: str = Field(min_length=1)
    country: Optional[str] = None


class UserStatsIn(_Payload):
    """Owner rating and verification flag."""
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    verified: Optional[bool] = None

    @model_validator(mode="before")
    @classmethod
    def flatten_stats(cls, data):
        """Accept the nested ``{"stats": {"rating": ...}}`` user shape."""
        if isinstance(data, dict) and "rating" not in data and isinstance(data.get("stats"), dict):
            data = {**data, "rating": data["stats"].get("rating")}
        return data


class AnnouncementIn(_Payload):
    """Sender's package request."""
    origin: LocationIn = Field(validation_alias=AliasChoices("from", "origin"))
    destination: LocationIn = Field(validation_alias=AliasChoices("to", "destination"))
    date_from: Optional[date] = Field(default=None, validation_alias=AliasChoices("dateFrom", "date_from"))
    date_to: Optional[date] = Field(default=None, validation_alias=AliasChoices("dateTo", "date_to"))
    reward: float = Field(default=0.0, ge=0)
    type: Literal["package", "shopping"] = "package"
    weight: Optional[float] = Field(default=None, ge=0)
    currency: str = "EUR"
    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    user_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("userId", "user_id"))
    owner: UserStatsIn = Field(default_factory=UserStatsIn, validation_alias=AliasChoices("owner", "user"))
    status: Literal["active", "matched", "completed", "cancelled"] = "active"
    created_at: Optional[datetime] = Field(default=None, validation_alias=AliasChoices("createdAt", "created_at"))

    @field_validator("date_from", "date_to", mode="before")
    @classmethod
    def parse_dates(cls, v):
        return _parse_date(v)

    @model_validator(mode="after")
    def validate_window(self):
        _check_window(self.date_from, self.date_to, "Date window")
        return self

    def to_record(self) -> Announcement:
        return Announcement(
            origin=Location(self.origin.city, self.origin.country),
            destination=Location(self.destination.city, self.destination.country),
            date_from=self.date_from,
            date_to=self.date_to,
            reward=self.reward,
            type=self.type,
            weight=self.weight,
            currency=self.currency,
            id=self.id,
            user_id=self.user_id,
            owner=UserStats(self.owner.rating, self.owner.verified),
            status=self.status,
            created_at=self.created_at,
        )


class TripIn(_Payload):
    """Traveler's capacity offer."""
    origin: LocationIn = Field(validation_alias=AliasChoices("from", "origin"))
    destination: LocationIn = Field(validation_alias=AliasChoices("to", "destination"))
    departure_date: Optional[date] = Field(
        default=None,
        validation_alias=AliasChoices("departureDate", "dateFrom", "departure_date"),
    )
    arrival_date: Optional[date] = Field(
        default=None,
        validation_alias=AliasChoices("arrivalDate", "dateTo", "arrival_date"),
    )
    available_kg: float = Field(default=0.0, ge=0, validation_alias=AliasChoices("availableKg", "available_kg"))
    price_per_kg: Optional[float] = Field(default=None, ge=0, validation_alias=AliasChoices("pricePerKg", "price_per_kg"))
    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    user_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("userId", "user_id"))
    owner: UserStatsIn = Field(default_factory=UserStatsIn, validation_alias=AliasChoices("owner", "user"))
    status: Literal["active", "matched", "completed", "cancelled"] = "active"
    created_at: Optional[datetime] = Field(default=None, validation_alias=AliasChoices("createdAt", "created_at"))

    @field_validator("departure_date", "arrival_date", mode="before")
    @classmethod
    def parse_dates(cls, v):
        return _parse_date(v)

    @model_validator(mode="after")
    def validate_window(self):
        _check_window(self.departure_date, self.arrival_date, "Travel window")
        return self

    def to_record(self) -> Trip:
        return Trip(
            origin=Location(self.origin.city, self.origin.country),
            destination=Location(self.destination.city, self.destination.country),
            departure_date=self.departure_date,
            arrival_date=self.arrival_date,
            available_kg=self.available_kg,
            price_per_kg=self.price_per_kg,
            id=self.id,
            user_id=self.user_id,
            owner=UserStats(self.owner.rating, self.owner.verified),
            status=self.status,
            created_at=self.created_at,
        )


class AlertIn(_Payload):
    """Saved search criteria."""
    type: Literal["sender", "shipper"]
    from_city: Optional[str] = Field(default=None, validation_alias=AliasChoices("fromCity", "from_city"))
    from_country: Optional[str] = Field(default=None, validation_alias=AliasChoices("fromCountry", "from_country"))
    to_city: Optional[str] = Field(default=None, validation_alias=AliasChoices("toCity", "to_city"))
    to_country: Optional[str] = Field(default=None, validation_alias=AliasChoices("toCountry", "to_country"))
    date_from: Optional[date] = Field(default=None, validation_alias=AliasChoices("dateFrom", "date_from"))
    date_to: Optional[date] = Field(default=None, validation_alias=AliasChoices("dateTo", "date_to"))
    min_weight: Optional[float] = Field(default=None, ge=0, validation_alias=AliasChoices("minWeight", "min_weight"))
    max_weight: Optional[float] = Field(default=None, ge=0, validation_alias=AliasChoices("maxWeight", "max_weight"))
    min_reward: Optional[float] = Field(default=None, ge=0, validation_alias=AliasChoices("minReward", "min_reward"))
    max_reward: Optional[float] = Field(default=None, ge=0, validation_alias=AliasChoices("maxReward", "max_reward"))
    notification_method: Literal["email", "push", "both"] = Field(
        default="both",
        validation_alias=AliasChoices("notificationMethod", "notification_method"),
    )

    @field_validator("from_city", "from_country", "to_city", "to_country", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        """Treat empty strings as 'any'."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("date_from", "date_to", mode="before")
    @classmethod
    def parse_dates(cls, v):
        return _parse_date(v)

    @model_validator(mode="after")
    def validate_ranges(self):
        _check_window(self.date_from, self.date_to, "Alert window")
        _check_range(self.min_weight, self.max_weight, "weight")
        _check_range(self.min_reward, self.max_reward, "reward")
        return self


def _invalid_input(error: ValidationError, what: str) -> InvalidInputError:
    fields = [".".join(str(part) for part in err["loc"]) for err in error.errors()]
    return InvalidInputError(f"Invalid {what}: {', '.join(fields) or error}", fields)


def parse_announcement(data: dict) -> Announcement:
    """
    Validate a raw announcement payload.

    Raises:
        InvalidInputError: If a city is missing or a date/number is malformed
    """
    try:
        return AnnouncementIn.model_validate(data).to_record()
    except ValidationError as e:
        raise _invalid_input(e, "announcement") from e


def parse_trip(data: dict) -> Trip:
    """
    Validate a raw trip payload.

    Raises:
        InvalidInputError: If a city is missing or a date/number is malformed
    """
    try:
        return TripIn.model_validate(data).to_record()
    except ValidationError as e:
        raise _invalid_input(e, "trip") from e


def validate_alert(data: dict) -> AlertIn:
    """
    Validate raw alert criteria.

    Raises:
        InvalidAlertError: If the type is not 'sender' or 'shipper'
        InvalidInputError: If any other field is malformed
    """
    if data.get("type") not in ALERT_TYPES:
        raise InvalidAlertError(data.get("type"))
    try:
        return AlertIn.model_validate(data)
    except ValidationError as e:
        raise _invalid_input(e, "alert") from e


def parse_alert(data: dict, user_id: Optional[str] = None) -> Alert:
    """Validate raw alert criteria and build an Alert record."""
    criteria = validate_alert(data)
    return Alert(user_id=user_id, **criteria.model_dump())
