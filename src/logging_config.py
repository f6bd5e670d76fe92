"""Logging configuration for ShipMatch."""
import logging
import logging.handlers
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# apscheduler logs every alert_scan run at INFO; the scan logs its own summary
QUIET_LOGGERS = (
    "aiohttp.access",
    "aiohttp.client",
    "apscheduler.scheduler",
    "apscheduler.executors.default",
)


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    log_sql: bool = False,
) -> None:
    """Configure application-wide logging.

    Call once at startup (main.py, scripts). Later calls are no-ops.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path for rotating file handler
        log_sql: Echo SQLAlchemy statements, e.g. to inspect alert filter queries
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    fmt = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console = logging.StreamHandler()
    console.setFormatter(fmt)
    root.addHandler(console)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
        )
        file_handler.setFormatter(fmt)
        root.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if log_sql else logging.WARNING)
