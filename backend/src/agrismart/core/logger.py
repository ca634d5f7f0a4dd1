"""
Logger centralisé pour AgriSmart.

Usage:
    from agrismart.core.logger import get_logger
    logger = get_logger(__name__)
"""

import logging
import sys
from typing import Optional

from agrismart.core.settings import settings

_configured = False


def _init_sentry_if_needed(level: int = logging.INFO) -> Optional[object]:
    """Initialise Sentry SDK si `SENTRY_DSN` est présent dans les settings.

    Returns the sentry module or None if not initialized / not available.
    """
    dsn = getattr(settings, "SENTRY_DSN", "")
    if not dsn:
        return None

    try:
        import sentry_sdk
        from sentry_sdk.integrations.logging import LoggingIntegration

        sentry_logging = LoggingIntegration(
            level=level,        # Capture info and above as breadcrumbs
            event_level=logging.ERROR,  # Send errors as events
        )

        sentry_sdk.init(
            dsn=dsn,
            integrations=[sentry_logging],
            environment=getattr(settings, "SENTRY_ENVIRONMENT", "production"),
            release=f"{settings.APP_NAME}@{settings.APP_VERSION}",
        )
        logging.getLogger("AgriSmart").info("Sentry initialized")
        return sentry_sdk
    except Exception:
        logging.getLogger("AgriSmart").warning("Sentry SDK not available or failed to init")
        return None


def setup_logging(level: Optional[int] = None, log_file: Optional[str] = None) -> None:
    """Configure le logging une seule fois, appelé au startup.

    Le niveau par défaut vient de `LOG_LEVEL`, le fichier de `LOG_FILE`.
    Un fichier vide ("") désactive le handler fichier.
    """
    global _configured
    if _configured:
        return

    if level is None:
        level = logging.getLevelName(settings.LOG_LEVEL.upper())
        if not isinstance(level, int):
            level = logging.INFO

    fmt = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"

    if log_file is None:
        log_file = settings.LOG_FILE

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format=fmt,
        datefmt=datefmt,
        handlers=handlers,
    )

    # Reduce noise from libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    _init_sentry_if_needed(level=level)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Retourne un logger standard Python, nommé par module."""
    return logging.getLogger(name)


__all__ = ["setup_logging", "get_logger"]
