"""Create tables and seed the default access groups."""

import logging

from lead_hunter.database import SessionLocal, init_db
from lead_hunter.logging_config import configure_logging
from lead_hunter.services.access_group_service import seed_default_groups

logger = logging.getLogger(__name__)


def seed():
    """Seed access groups (Administradores, Supervisores, Vendedores)."""
    init_db()

    db = SessionLocal()
    try:
        groups = seed_default_groups(db)
        print("🌱 Access groups:")
        for group in groups:
            print(f"  - {group.name}: {group.description}")
        print("\n🎉 Database seeded successfully!")
    finally:
        db.close()


if __name__ == "__main__":
    configure_logging()
    seed()
