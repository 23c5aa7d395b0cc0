#!/usr/bin/env python3
"""Initialize database tables.

Usage:
    python scripts/init_db.py
"""

import asyncio

from parley.db.session import close_db, init_db


async def main():
    """Create all database tables."""
    await init_db()
    await close_db()
    print("Database tables created successfully.")


if __name__ == "__main__":
    asyncio.run(main())
