"""Database reset script.

Drops every table and reinitializes the database. All templates,
profiles, preferences and audit entries are lost.

Usage:
    python -m scripts.reset_db
"""

import asyncio

from app.core.config import get_settings
from app.db.session import close_db, drop_all_tables, init_db


async def main() -> None:
    """Reset the database by dropping all tables and reinitializing."""
    settings = get_settings()

    try:
        print("Dropping all database tables...")
        await drop_all_tables(settings)
        print("All tables dropped successfully!")

        print("Recreating tables and default data...")
        await init_db(settings)
        print("Database reinitialized successfully!")
    finally:
        await close_db(settings)


if __name__ == "__main__":
    asyncio.run(main())
