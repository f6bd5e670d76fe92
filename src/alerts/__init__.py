"""Saved alerts."""
from src.alerts.service import AlertService

__all__ = ["AlertService"]
