"""Core application components."""

from .config import Settings, settings
from .database import Database, create_engine
from .logging import get_logger, setup_logging

__all__ = [
    "settings",
    "Settings",
    "Database",
    "create_engine",
    "get_logger",
    "setup_logging",
]
