"""
Create a user directly in the store. Run from project root:
  python -m houser.scripts.create_user NAME EMAIL PASSWORD
Example:
  python -m houser.scripts.create_user "Jane Doe" jane@example.com your-password
"""
import argparse
import logging
import sys
from uuid import uuid4

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from houser.core.config import get_settings
from houser.core.database import create_db_engine, create_session_factory
from houser.schemas.user import UserFields
from houser.services.users import create_user, get_user_by_email

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Houser user without going through sign-up.")
    parser.add_argument("name", help="Display name (up to 30 chars)")
    parser.add_argument("email", help="Email address (must be unique)")
    parser.add_argument("password", help="Password (3-30 chars)")
    args = parser.parse_args(argv)

    try:
        fields = UserFields(
            id=uuid4(),
            name=args.name.strip(),
            email=args.email.strip(),
            password=args.password,
        )
    except ValidationError as e:
        for err in e.errors():
            print(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}", file=sys.stderr)
        return 1

    settings = get_settings()
    engine = create_db_engine(settings)
    db = create_session_factory(engine)()
    try:
        if get_user_by_email(db, str(fields.email)) is not None:
            print(f"User '{fields.email}' already exists.", file=sys.stderr)
            return 1
        user = create_user(db, fields, settings)
        print(f"Created user '{user.email}' with id {user.id}.")
        return 0
    except SQLAlchemyError as e:
        logger.exception("Creating user failed: %s", e)
        return 1
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
