"""Data access for users: one SQL statement per call, committed immediately."""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from houser.core.config import Settings
from houser.core.security import hash_password
from houser.models import User
from houser.schemas.user import UserFields


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.created_at, User.id).all()


def get_user_by_id(db: Session, user_id: UUID) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def create_user(db: Session, fields: UserFields, settings: Settings) -> User:
    """Insert a new user; the password is hashed unless legacy mode is on."""
    user = User(
        id=fields.id,
        name=fields.name,
        email=str(fields.email),
        password=hash_password(fields.password, settings),
        created_at=datetime.now(UTC),
    )
    db.add(user)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(user)
    return user


def update_user(db: Session, user_id: UUID, fields: UserFields, settings: Settings) -> None:
    """Overwrite name, email and password of the user with the given id."""
    stmt = (
        update(User)
        .where(User.id == user_id)
        .values(
            name=fields.name,
            email=str(fields.email),
            password=hash_password(fields.password, settings),
        )
    )
    try:
        db.execute(stmt)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def delete_user(db: Session, user_id: UUID) -> None:
    try:
        db.execute(delete(User).where(User.id == user_id))
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
