"""Credential lookup for sign-in."""

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.orm import Session

from houser.core.config import Settings
from houser.core.security import verify_password
from houser.models import User
from houser.services.users import get_user_by_email


def normalize_email(email: str) -> str:
    """
    Normalize an email the way EmailStr does at sign-up (domain lowercased).

    Strings that are not valid addresses are returned unchanged; they simply match no user.
    """
    try:
        return validate_email(email, check_deliverability=False).normalized
    except EmailNotValidError:
        return email


def find_user_for_sign_in(db: Session, email: str, password: str, settings: Settings) -> User | None:
    """Return the user whose email and password match, or None."""
    user = get_user_by_email(db, normalize_email(email))
    if user is None:
        return None
    if not verify_password(password, user.password, settings):
        return None
    return user
