"""ORM model for application users."""

from sqlalchemy import Column, DateTime, String, Uuid, func

from houser.models.base import Base


class User(Base):
    """
    User account; signs in with email and password and owns houses.

    password holds a bcrypt hash unless LEGACY_PLAINTEXT_PASSWORDS is enabled.
    """

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True)
    name = Column(String(255), nullable=False, default="")
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
