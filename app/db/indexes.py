"""
app/db/indexes.py

Purpose: Database index management

- Creates unique and performance indexes
- Enforces per-account uniqueness (category names, quote idempotency keys)
"""

from pymongo import ASCENDING, DESCENDING

from app.db.mongo import (
    get_users_collection,
    get_categories_collection,
    get_sub_categories_collection,
    get_products_collection,
    get_customers_collection,
    get_quotes_collection,
)
from app.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes():
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        users = get_users_collection()
        categories = get_categories_collection()
        sub_categories = get_sub_categories_collection()
        products = get_products_collection()
        customers = get_customers_collection()
        quotes = get_quotes_collection()

        logger.info("Creating database indexes...")

        # ==============================================
        # USERS
        # ==============================================

        await users.create_index("number", unique=True, name="number_unique")
        logger.debug("Created unique index on users.number")

        # Unverified-account sweep
        await users.create_index(
            [("is_verified", ASCENDING), ("created_at", ASCENDING)],
            name="verified_created_idx"
        )
        logger.debug("Created compound index on users.is_verified + created_at")

        # ==============================================
        # CATALOG
        # ==============================================

        await categories.create_index(
            [("user", ASCENDING), ("name", ASCENDING)],
            unique=True,
            name="user_category_name_unique"
        )
        logger.debug("Created unique index on categories.user + name")

        await sub_categories.create_index(
            [("user", ASCENDING), ("category", ASCENDING)],
            name="user_category_idx"
        )
        logger.debug("Created compound index on sub_categories.user + category")

        await products.create_index(
            [("user", ASCENDING), ("sub_category", ASCENDING)],
            name="user_sub_category_idx"
        )
        logger.debug("Created compound index on products.user + sub_category")

        # ==============================================
        # CUSTOMERS & QUOTES
        # ==============================================

        await customers.create_index(
            [("user", ASCENDING), ("created_at", DESCENDING)],
            name="user_customers_idx"
        )
        logger.debug("Created compound index on customers.user + created_at")

        await quotes.create_index(
            [("user", ASCENDING), ("created_at", DESCENDING)],
            name="user_quotes_idx"
        )
        logger.debug("Created compound index on quotes.user + created_at")

        await quotes.create_index(
            [("user", ASCENDING), ("idempotency_key", ASCENDING)],
            unique=True,
            partialFilterExpression={"idempotency_key": {"$type": "string"}},
            name="user_idempotency_key_unique"
        )
        logger.debug("Created partial unique index on quotes.user + idempotency_key")

        logger.info("✅ All database indexes created successfully")

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise


if __name__ == "__main__":
    """
    Run this script directly to create indexes manually.
    """
    import asyncio
    from app.db.mongo import connect_to_mongo, close_mongo_connection

    async def main():
        await connect_to_mongo()
        await create_indexes()
        await close_mongo_connection()

    asyncio.run(main())
