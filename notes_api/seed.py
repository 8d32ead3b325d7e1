"""
Seed the database with demo tenants and users.

Clears all tenants, users and notes, then creates two free-plan tenants
(Acme and Globex), each with an admin and a member. Every account's
password is "password".

Usage:
    python -m notes_api.seed
"""
from typing import Dict, List

from sqlalchemy.orm import Session

from notes_api.config import get_settings
from notes_api.core.security import get_password_hash
from notes_api.database import Database
from notes_api.models import Note, SubscriptionPlan, Tenant, User, UserRole
from notes_api.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)

DEFAULT_PASSWORD = "password"

SEED_TENANTS: List[Dict[str, str]] = [
    {"name": "Acme", "slug": "acme"},
    {"name": "Globex", "slug": "globex"},
]

SEED_USERS: List[Dict[str, str]] = [
    {"email": "admin@acme.test", "role": UserRole.ADMIN, "tenant": "acme"},
    {"email": "user@acme.test", "role": UserRole.MEMBER, "tenant": "acme"},
    {"email": "admin@globex.test", "role": UserRole.ADMIN, "tenant": "globex"},
    {"email": "user@globex.test", "role": UserRole.MEMBER, "tenant": "globex"},
]


def seed_database(db: Session, password: str = DEFAULT_PASSWORD) -> Dict[str, Tenant]:
    """Replace all data with the demo tenants and users. Returns tenants by slug."""
    db.query(Note).delete()
    db.query(User).delete()
    db.query(Tenant).delete()
    db.flush()
    logger.info("Cleared existing data")

    tenants = {}
    for entry in SEED_TENANTS:
        tenant = Tenant(name=entry["name"], slug=entry["slug"], subscription_plan=SubscriptionPlan.FREE)
        db.add(tenant)
        tenants[entry["slug"]] = tenant
    db.flush()
    logger.info(f"Tenants created: {', '.join(tenants)}")

    # bcrypt is slow; one hash is shared by all demo accounts
    hashed_password = get_password_hash(password)
    for entry in SEED_USERS:
        db.add(User(
            email=entry["email"],
            hashed_password=hashed_password,
            role=entry["role"],
            tenant_id=tenants[entry["tenant"]].id,
        ))

    db.commit()
    logger.info(f"Users created: {len(SEED_USERS)}")

    return tenants


def main() -> None:
    settings = get_settings()
    setup_logging(log_level=settings.LOG_LEVEL)

    database = Database(settings.DATABASE_URL)
    database.create_all()

    session = database.session()
    try:
        seed_database(session)
        logger.info("Database seeding completed successfully")
    except Exception:
        session.rollback()
        logger.exception("Error seeding database")
        raise
    finally:
        session.close()
        database.dispose()


if __name__ == "__main__":
    main()
