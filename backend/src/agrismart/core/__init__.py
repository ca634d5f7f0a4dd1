"""
Core Module — Fondations transverses AgriSmart.

- settings  : Configuration centralisée (Pydantic Settings)
- database  : Engine / sessions SQLAlchemy
- logger    : Logging unifié (stdlib)
- security  : Request ID et sanitisation
"""

from .settings import settings
from .logger import setup_logging, get_logger
from .database import create_db_engine, create_session_factory, check_connection
from .security import generate_request_id, sanitize_user_input

__all__ = [
    "settings",
    "setup_logging", "get_logger",
    "create_db_engine", "create_session_factory", "check_connection",
    "generate_request_id", "sanitize_user_input",
]
