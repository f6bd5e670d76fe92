"""Alert lifecycle service."""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from src.matching.exceptions import AlertLimitError, AlertNotFoundError
from src.matching.validators import validate_alert
from src.persistence.models import Alert


class AlertService:
    """Service for managing saved alerts."""

    DEFAULT_MAX_ACTIVE_ALERTS = 5

    def __init__(self, session: Session, max_active_alerts: Optional[int] = None):
        """
        Initialize alert service.

        Args:
            session: Database session
            max_active_alerts: Active alerts allowed per user
        """
        self.session = session
        self.max_active_alerts = max_active_alerts or self.DEFAULT_MAX_ACTIVE_ALERTS

    def create_alert(self, user_id: str, data: dict) -> Alert:
        """
        Create a new alert from raw criteria.

        Args:
            user_id: Owner of the alert
            data: Criteria payload (camelCase or snake_case keys)

        Returns:
            Created Alert

        Raises:
            InvalidAlertError: If the type is not 'sender' or 'shipper'
            InvalidInputError: If any criterion is malformed
            AlertLimitError: If the user already has the maximum active alerts
        """
        criteria = validate_alert(data)

        if self.count_active_alerts(user_id) >= self.max_active_alerts:
            raise AlertLimitError(self.max_active_alerts)

        alert = Alert(user_id=user_id, is_active=True, match_count=0, **criteria.model_dump())
        self.session.add(alert)
        self.session.commit()
        self.session.refresh(alert)

        return alert

    def count_active_alerts(self, user_id: str) -> int:
        """Number of active alerts owned by a user."""
        stmt = select(func.count(Alert.id)).where(
            Alert.user_id == user_id,
            Alert.is_active == True,  # noqa: E712
        )
        return self.session.execute(stmt).scalar() or 0

    def list_alerts(self, user_id: str) -> list[Alert]:
        """All alerts owned by a user, newest first."""
        stmt = (
            select(Alert)
            .where(Alert.user_id == user_id)
            .order_by(Alert.created_at.desc())
        )
        return list(self.session.execute(stmt).scalars())

    def get_alert(self, alert_id: str, user_id: str) -> Alert:
        """
        Get an alert owned by a user.

        Raises:
            AlertNotFoundError: If the alert does not exist or belongs to another user
        """
        alert = self.session.get(Alert, alert_id)
        if alert is None or alert.user_id != user_id:
            raise AlertNotFoundError(alert_id)
        return alert

    def update_alert(self, alert_id: str, user_id: str, data: dict) -> Alert:
        """
        Replace an alert's criteria.

        The payload is validated as a whole, so fields omitted from it are
        cleared back to "any".
        """
        alert = self.get_alert(alert_id, user_id)
        criteria = validate_alert({"type": alert.type, **data})

        for key, value in criteria.model_dump().items():
            setattr(alert, key, value)

        self.session.commit()
        self.session.refresh(alert)
        return alert

    def toggle_alert(self, alert_id: str, user_id: str) -> Alert:
        """
        Flip an alert between active and inactive.

        Raises:
            AlertLimitError: If re-activating would exceed the active limit
        """
        alert = self.get_alert(alert_id, user_id)

        if not alert.is_active and self.count_active_alerts(user_id) >= self.max_active_alerts:
            raise AlertLimitError(self.max_active_alerts)

        alert.is_active = not alert.is_active
        self.session.commit()
        self.session.refresh(alert)
        return alert

    def delete_alert(self, alert_id: str, user_id: str) -> None:
        """Delete an alert owned by a user."""
        alert = self.get_alert(alert_id, user_id)
        self.session.delete(alert)
        self.session.commit()

    def record_notification(
        self,
        alert_id: str,
        match_count: int = 1,
        notified_at: Optional[datetime] = None,
    ) -> Alert:
        """
        Record that an alert's owner was notified about new matches.

        Args:
            alert_id: Alert that fired
            match_count: Number of new matches in the notification
            notified_at: Notification time (defaults to now)
        """
        alert = self.session.get(Alert, alert_id)
        if alert is None:
            raise AlertNotFoundError(alert_id)

        alert.match_count = (alert.match_count or 0) + match_count
        alert.last_notified_at = notified_at or datetime.now(timezone.utc)
        self.session.commit()
        self.session.refresh(alert)
        return alert
