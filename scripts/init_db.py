"""
Database initialization script

Run once (or after adding indexes) to create collections and indexes:
    python scripts/init_db.py
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.config import settings
from app.core.logging import setup_logging, get_logger
from app.db.indexes import create_indexes
from app.db.mongo import connect_to_mongo, close_mongo_connection, get_database

logger = get_logger("scripts.init_db")

COLLECTIONS = ["users", "categories", "sub_categories", "products", "customers", "quotes"]


async def main():
    """Main initialization"""
    setup_logging()
    logger.info("=" * 60)
    logger.info(f"  Billing Habit Database Setup ({settings.MONGODB_DB_NAME})")
    logger.info("=" * 60)

    await connect_to_mongo()
    try:
        await create_indexes()

        db = await get_database()
        logger.info("🔍 Verifying indexes...")
        for collection_name in COLLECTIONS:
            indexes = await db[collection_name].index_information()
            count = await db[collection_name].count_documents({})
            names = ", ".join(name for name in indexes if name != "_id_") or "-"
            logger.info(f"  {collection_name}: {count} documents, indexes: {names}")

        logger.info("✅ Database initialization complete!")
    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    asyncio.run(main())
