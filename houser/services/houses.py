"""Data access for houses: one SQL statement per call, committed immediately.

Owner existence is not checked here; the foreign key is the only guard.
"""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from houser.models import House
from houser.schemas.house import HouseFields


def list_houses(db: Session) -> list[House]:
    return db.query(House).order_by(House.created_at, House.id).all()


def get_house_by_id(db: Session, house_id: UUID) -> House | None:
    return db.query(House).filter(House.id == house_id).first()


def create_house(db: Session, fields: HouseFields) -> House:
    house = House(
        id=fields.id,
        description=fields.description,
        address=fields.address,
        owner_id=fields.owner_id,
        created_at=datetime.now(UTC),
    )
    db.add(house)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(house)
    return house


def update_house(db: Session, house_id: UUID, fields: HouseFields) -> None:
    """Overwrite description and address; the owner never changes."""
    stmt = (
        update(House)
        .where(House.id == house_id)
        .values(description=fields.description, address=fields.address)
    )
    try:
        db.execute(stmt)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def delete_house(db: Session, house_id: UUID) -> None:
    try:
        db.execute(delete(House).where(House.id == house_id))
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
