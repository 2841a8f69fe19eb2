"""Database initialization script.

Creates the tables and seeds the default admin profile and categories.

Usage:
    python -m scripts.init_db
"""

import asyncio

from app.core.config import get_settings
from app.db.session import DEFAULT_ADMIN_ID, close_db, init_db


async def main() -> None:
    """Initialize the database."""
    settings = get_settings()
    try:
        await init_db(settings)
    finally:
        await close_db(settings)
    print("Database initialized successfully!")
    print(f"Default admin profile: send 'X-User-ID: {DEFAULT_ADMIN_ID}'")


if __name__ == "__main__":
    asyncio.run(main())
