"""Core app configuration, store and security."""

from houser.core.config import Settings, get_settings
from houser.core.database import get_db

__all__ = ["Settings", "get_settings", "get_db"]
