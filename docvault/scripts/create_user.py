"""
Create a principal (e.g. the first admin). Run from project root:
  python -m docvault.scripts.create_user USERNAME PASSWORD ID_CARD [role] [--names NAMES]
Example:
  python -m docvault.scripts.create_user admin your-secure-password 0000000001 ADMIN
"""
import argparse
import sys

from sqlalchemy import func, select

from docvault.core.database import SessionLocal
from docvault.core.security import PASSWORD_MAX_LEN, USERNAME_MAX_LEN, hash_password
from docvault.models.user import Role, User
from docvault.services.auditing import stamp


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a DocVault principal (no registration UI).")
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password (8-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("id_card", help="Identity document number (unique)")
    parser.add_argument("role", nargs="?", default=Role.USER.value, choices=[r.value for r in Role])
    parser.add_argument("--names", help="Display name (defaults to the username)")
    args = parser.parse_args()

    username = args.username.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if len(args.password) < 8 or len(args.password) > PASSWORD_MAX_LEN:
        print(f"Password must be 8-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        existing = db.execute(
            select(User.id).where(func.lower(User.username) == username.lower())
        ).first()
        if existing:
            print(f"User '{username}' already exists.", file=sys.stderr)
            return 1
        user = User(
            username=username,
            password_hash=hash_password(args.password),
            role=args.role,
            names=args.names or username,
            id_card=args.id_card,
        )
        stamp(user)
        db.add(user)
        db.commit()
        print(f"Created user '{username}' with role '{args.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
