"""ORM model for houses owned by users."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, Uuid, func

from houser.models.base import Base


class House(Base):
    """A house listing; only its owner may update or delete it."""

    __tablename__ = "houses"

    id = Column(Uuid, primary_key=True)
    description = Column(Text, nullable=False, default="")
    address = Column(String(255), nullable=False, default="")
    owner_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
