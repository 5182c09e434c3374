# scripts/seed_admin.py
"""
Create the first admin account. Safe to run more than once.

The insert relies on the unique email constraint instead of checking
first, so two concurrent runs still end up with a single admin.

Usage:
    RASOI_ADMIN_EMAIL=owner@rasoi.com RASOI_ADMIN_PASSWORD=... python -m scripts.seed_admin
"""

import logging

from sqlalchemy import insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from rasoi import config
from rasoi.db.engine import get_engine
from rasoi.db.schema import metadata, users
from rasoi.security import hash_password

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def seed_admin(engine: Engine, name: str, email: str, password: str) -> bool:
    """Returns True if the admin was created, False if the email already exists."""
    try:
        with engine.begin() as conn:
            conn.execute(
                insert(users).values(
                    name=name,
                    email=email.lower(),
                    password_hash=hash_password(password),
                    role="admin",
                )
            )
    except IntegrityError:
        return False
    return True


def main():
    engine = get_engine()
    metadata.create_all(engine)

    if seed_admin(engine, config.ADMIN_NAME, config.ADMIN_EMAIL, config.ADMIN_PASSWORD):
        logger.info("Admin user created: %s", config.ADMIN_EMAIL)
    else:
        logger.info("Admin user already exists: %s", config.ADMIN_EMAIL)


if __name__ == "__main__":
    main()
