"""
MongoDB Database Connector (Singleton Pattern).
"""
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from core.config import config
from core.logging import get_logger

logger = get_logger("database")

_db_client: MongoClient | None = None
_database: Database | None = None

PRODUCTS = "products"
SHIPPING_PROFILES = "shipping_profiles"
SALES_CHANNELS = "sales_channels"
STOCK_LOCATIONS = "stock_locations"
SALES_CHANNEL_LOCATIONS = "sales_channel_locations"
STORES = "stores"


def get_db() -> Database:
    """
    Returns the MongoDB database instance (Singleton).

    Returns:
        Database: The MongoDB database object.
    """
    global _db_client, _database

    if _database is None:
        try:
            logger.info("Connecting to MongoDB", extra={"database": config.DATABASE_NAME})
            _db_client = MongoClient(config.MONGO_URI, tz_aware=True)
            _database = _db_client[config.DATABASE_NAME]
            logger.info("Successfully connected to MongoDB", extra={"database": config.DATABASE_NAME})
        except Exception:
            logger.error("Failed to connect to MongoDB", exc_info=True)
            raise

    return _database


def ensure_indexes(db: Database) -> None:
    """
    Create the indexes the importer relies on.

    The unique external_id index is what keeps two concurrent imports of the
    same auction from creating two products. Products created outside the
    importer may have no external_id, hence the partial filter.
    """
    db[PRODUCTS].create_index(
        [("external_id", ASCENDING)],
        unique=True,
        name="uniq_external_id",
        partialFilterExpression={"external_id": {"$type": "string"}},
    )
    db[PRODUCTS].create_index([("handle", ASCENDING)], name="handle")
    db[PRODUCTS].create_index([("metadata.source", ASCENDING)], name="metadata_source")
    db[SALES_CHANNEL_LOCATIONS].create_index(
        [("stock_location_id", ASCENDING), ("sales_channel_id", ASCENDING)],
        unique=True,
        name="uniq_channel_location",
    )
    logger.debug("Indexes ensured", extra={"database": db.name})


def close_db():
    """Close the database connection."""
    global _db_client, _database

    if _db_client:
        try:
            _db_client.close()
            _db_client = None
            _database = None
            logger.info("Database connection closed")
        except Exception:
            logger.error("Error closing database connection", exc_info=True)
