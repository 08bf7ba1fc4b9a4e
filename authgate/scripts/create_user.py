"""
Create a local user in whichever store is active (MongoDB if reachable, else the users file).
Run from project root:
  python -m authgate.scripts.create_user USERNAME EMAIL PASSWORD
Example:
  python -m authgate.scripts.create_user alice alice@example.com your-secure-password
"""
import argparse
import sys

from authgate.api.deps import get_identity_store
from authgate.core.config import settings
from authgate.core.errors import ConflictError
from authgate.core.logging_config import configure_logging
from authgate.core.security import hash_password
from authgate.models.user import User


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an authgate user.")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (8-128 chars)")
    args = parser.parse_args(argv)

    configure_logging(settings.LOG_LEVEL)

    username = args.username.strip()
    email = args.email.strip()
    if not username or len(username) > 255:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if "@" not in email:
        print("Invalid email address.", file=sys.stderr)
        return 1
    if len(args.password) < 8 or len(args.password) > 128:
        print("Password must be 8-128 characters.", file=sys.stderr)
        return 1

    identity_store = get_identity_store()
    try:
        store = identity_store.select()
        if store.find_conflict(email, username) is not None:
            print(f"User '{username}' or email '{email}' already exists.", file=sys.stderr)
            return 1
        user_id = store.create(
            User(username=username, email=email, password_hash=hash_password(args.password))
        )
    except ConflictError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        identity_store.connection.close()
    print(f"Created user '{username}' (id {user_id}) in the {store.backend} store.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
