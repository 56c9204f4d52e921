"""SQLAlchemy ORM models."""

from houser.models.base import Base
from houser.models.house import House
from houser.models.user import User

__all__ = ["Base", "House", "User"]
