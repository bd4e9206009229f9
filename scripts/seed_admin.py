"""Create the bootstrap admin account if it does not exist yet.

Usage: python scripts/seed_admin.py  (reads DATABASE_URL / ADMIN_PASSWORD from the environment)
"""

import logging
import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

from app.Auth.service import hash_password
from app.Core.config import Settings, get_settings
from app.DB.base import Base
from app.DB.session import build_engine, build_session_factory
import app.DB.models  # noqa: F401
from app.features.profiles.models import UserRole
from app.features.profiles.repository import profile_repository

logger = logging.getLogger("seed")

ADMIN_EMAIL = "admin@yopmail.com"


def seed_admin(settings: Settings, password: str) -> bool:
    """Returns True when the admin row was created, False when it already existed."""
    engine = build_engine(settings)
    if settings.db_auto_create:
        Base.metadata.create_all(bind=engine)
    session_factory = build_session_factory(engine)
    with session_factory() as db:
        if profile_repository.get_by_email(db, ADMIN_EMAIL):
            logger.info("seed.admin_exists email=%s", ADMIN_EMAIL)
            return False
        profile_repository.create_user(
            db,
            email=ADMIN_EMAIL,
            password=hash_password(password, settings.bcrypt_rounds),
            name="Admin",
            first_name="Admin",
            last_name="User",
            role=UserRole.admin,
            is_active=True,
            is_email_verified=True,
        )
    logger.info("seed.admin_created email=%s", ADMIN_EMAIL)
    return True


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s %(message)s")
    seed_admin(get_settings(), os.getenv("ADMIN_PASSWORD", "Admin#123.."))
