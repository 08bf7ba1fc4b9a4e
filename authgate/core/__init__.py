"""Core app configuration, errors, security and database."""

from authgate.core.config import get_settings, settings
from authgate.core.database import MongoConnection

__all__ = ["get_settings", "settings", "MongoConnection"]
