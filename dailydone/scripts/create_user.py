"""
Provision a user out of band (the only way to create an admin). Run from project root:
  USER_STORE=database python -m dailydone.scripts.create_user USERNAME EMAIL PASSWORD NAME [role]
Example:
  USER_STORE=database python -m dailydone.scripts.create_user ops ops@dailydone.com 'a-long-password' 'Ops Team' admin
"""
import argparse
import logging
import sys

from dailydone.core.config import get_settings
from dailydone.core.exceptions import DuplicateKeyError
from dailydone.core.security import hash_password
from dailydone.repositories import build_user_repository
from dailydone.schemas.user import NewUser, Role
from dailydone.services.auth import PASSWORD_MIN_LEN, is_valid_email, is_valid_username

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a DailyDone user (including admins).")
    parser.add_argument("username", help="Username (3-20 chars: letters, digits, underscore)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help=f"Password (at least {PASSWORD_MIN_LEN} chars)")
    parser.add_argument("name", help="Display name")
    parser.add_argument("role", nargs="?", default="user", choices=[r.value for r in Role])
    args = parser.parse_args(argv)

    settings = get_settings()
    if settings.USER_STORE != "database":
        print("USER_STORE must be 'database'; the in-memory store does not outlive this process.", file=sys.stderr)
        return 1
    if not is_valid_username(args.username):
        print("Invalid username.", file=sys.stderr)
        return 1
    if not is_valid_email(args.email):
        print("Invalid email.", file=sys.stderr)
        return 1
    if len(args.password) < PASSWORD_MIN_LEN:
        print(f"Password must be at least {PASSWORD_MIN_LEN} characters.", file=sys.stderr)
        return 1

    repository = build_user_repository(settings)
    try:
        user = repository.insert(
            NewUser(
                username=args.username.lower(),
                email=args.email.lower(),
                name=args.name,
                role=Role(args.role),
                password_hash=hash_password(args.password, rounds=settings.BCRYPT_ROUNDS),
            )
        )
    except DuplicateKeyError as e:
        print(e.message, file=sys.stderr)
        return 1
    logger.info("Provisioned user", extra={"user_id": user.id, "role": user.role.value})
    print(f"Created user '{user.username}' (id {user.id}) with role '{user.role.value}'.")
    return 0


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    sys.exit(main())
