#!/usr/bin/env python3
"""
Create an admin account, or promote an existing account to admin.

Usage:
    python scripts/create_admin.py --email admin@example.com --name "Site Admin"
    python scripts/create_admin.py --email someone@example.com --promote
"""

import argparse
import logging
import os
import sys
from getpass import getpass

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.api.endpoints.auth import normalize_email
from app.core.security import PASSWORD_RULE_MESSAGE, get_password_hash, is_valid_password
from app.db.database import SessionLocal
from app.db import models
from app.main import init_db
from app.services.resources import seed_user_defaults

logger = logging.getLogger(__name__)


def promote_to_admin(db, email: str) -> models.User:
    user = db.query(models.User).filter(models.User.email == email).first()
    if user is None:
        raise ValueError(f"User {email} not found")
    user.role_id = models.ADMIN_ROLE_ID
    db.commit()
    logger.info(f"User promoted to admin: {email}")
    return user


def create_admin_user(db, name: str, email: str, password: str) -> models.User:
    if not is_valid_password(password):
        raise ValueError(PASSWORD_RULE_MESSAGE)
    if db.query(models.User).filter(models.User.email == email).first():
        raise ValueError(f"User with email {email} already exists")

    user = models.User(
        name=name,
        email=email,
        password_hash=get_password_hash(password),
        role_id=models.ADMIN_ROLE_ID,
    )
    try:
        db.add(user)
        db.flush()
        seed_user_defaults(db, user)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    logger.info(f"Admin user created: {email}")
    return user


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create or promote an admin user.")
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", default="Admin")
    parser.add_argument("--password", help="Prompted for when omitted")
    parser.add_argument("--promote", action="store_true", help="Promote an existing user")
    args = parser.parse_args(argv)

    email = normalize_email(args.email)
    init_db()
    db = SessionLocal()
    try:
        if args.promote:
            user = promote_to_admin(db, email)
        else:
            password = args.password or getpass("Password: ")
            user = create_admin_user(db, args.name.strip(), email, password)
        print(f"Admin ready: {user.email} ({user.id})")
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
