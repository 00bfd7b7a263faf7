"""Create (or promote) an admin account.

Usage: python -m scripts.create_admin_user <email> <name>
The password is read from ``CYB_ADMIN_PASSWORD`` or prompted for.
"""
from __future__ import annotations

import getpass
import os
import sys

from dotenv import load_dotenv

load_dotenv()

from cybershield.db import get_sessionmaker, init_engine
from cybershield.models.user import User, UserRole
from cybershield.security import hash_password
from cybershield.services.auth import get_user_by_email
from cybershield.utils.time import utcnow


def main(argv: list[str]) -> int:
    if len(argv) < 2:
        print(__doc__)
        return 2
    email, name = argv[0].lower(), " ".join(argv[1:])

    init_engine()
    db = get_sessionmaker()()
    try:
        user = get_user_by_email(db, email)
        if user is not None:
            user.role = UserRole.admin
            user.is_active = True
            db.commit()
            print(f"Promoted existing user #{user.id} to admin")
            return 0

        password = os.getenv("CYB_ADMIN_PASSWORD") or getpass.getpass("Admin password: ")
        if len(password) < 6:
            print("Password must be at least 6 characters")
            return 1
        user = User(
            name=name,
            email=email,
            password_hash=hash_password(password),
            is_active=True,
            role=UserRole.admin,
            created_at=utcnow(),
        )
        db.add(user)
        db.commit()
        print(f"Admin user created (id: {user.id}, email: {user.email})")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
