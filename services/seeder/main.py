#!/usr/bin/env python3
"""
Store Seeder - creates the commerce setup the Yahoo importer depends on.

Creates (idempotently) the default shipping profile, the default sales channel,
the default stock location, the link between them and the store document.
Existing documents are left untouched, so running it twice is safe.

Usage:
    python main.py
    python main.py --store-name "My Store" --location-name "Sydney Warehouse"
"""
import sys
from pathlib import Path

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import argparse
import uuid
from datetime import datetime, timezone
from typing import Dict

from pymongo.database import Database

from core import database
from core.database import close_db, ensure_indexes, get_db
from core.logging import get_logger, log_execution_time
from core.models.store import SalesChannel, ShippingProfile, StockLocation, Store

# Initialize logger for this service
logger = get_logger("seeder")

DEFAULT_SHIPPING_PROFILE_ID = "sp_default"
DEFAULT_SALES_CHANNEL_ID = "sc_default"
DEFAULT_STOCK_LOCATION_ID = "sloc_default"
DEFAULT_STORE_ID = "store_default"


def _insert_if_missing(db: Database, collection: str, document: dict) -> bool:
    """Insert document unless one with the same _id exists. Returns True if inserted."""
    result = db[collection].update_one(
        {"_id": document["_id"]},
        {"$setOnInsert": {**document, "created_at": datetime.now(timezone.utc)}},
        upsert=True,
    )
    return result.upserted_id is not None


@log_execution_time(logger)
def seed_store(
    db: Database,
    store_name: str = "Default Store",
    sales_channel_name: str = "Default Sales Channel",
    location_name: str = "Default Warehouse",
) -> Dict[str, bool]:
    """
    Seed the store setup.

    An existing default-type shipping profile or store document is reused
    rather than duplicated.

    Returns:
        Mapping of collection name to whether a document was created
    """
    ensure_indexes(db)
    created: Dict[str, bool] = {}

    if db[database.SHIPPING_PROFILES].find_one({"type": "default"}):
        created[database.SHIPPING_PROFILES] = False
    else:
        profile = ShippingProfile(id=DEFAULT_SHIPPING_PROFILE_ID, name="Default Shipping Profile", type="default")
        created[database.SHIPPING_PROFILES] = _insert_if_missing(
            db, database.SHIPPING_PROFILES, profile.model_dump(by_alias=True)
        )

    channel = SalesChannel(id=DEFAULT_SALES_CHANNEL_ID, name=sales_channel_name)
    created[database.SALES_CHANNELS] = _insert_if_missing(
        db, database.SALES_CHANNELS, channel.model_dump(by_alias=True)
    )

    location = StockLocation(id=DEFAULT_STOCK_LOCATION_ID, name=location_name)
    created[database.STOCK_LOCATIONS] = _insert_if_missing(
        db, database.STOCK_LOCATIONS, location.model_dump(by_alias=True)
    )

    link = db[database.SALES_CHANNEL_LOCATIONS].update_one(
        {"stock_location_id": location.id, "sales_channel_id": channel.id},
        {"$setOnInsert": {"created_at": datetime.now(timezone.utc)}},
        upsert=True,
    )
    created[database.SALES_CHANNEL_LOCATIONS] = link.upserted_id is not None

    if db[database.STORES].find_one({}):
        created[database.STORES] = False
    else:
        store = Store(
            id=DEFAULT_STORE_ID,
            name=store_name,
            default_sales_channel_id=channel.id,
            default_location_id=location.id,
        )
        created[database.STORES] = _insert_if_missing(db, database.STORES, store.model_dump(by_alias=True))

    for collection, was_created in created.items():
        logger.info(
            f"{collection}: {'created' if was_created else 'already present'}",
            extra={"collection": collection, "inserted": was_created},
        )
    return created


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Store setup seeder for the Yahoo importer")
    parser.add_argument("--store-name", default="Default Store", help="Name of the store document")
    parser.add_argument("--sales-channel-name", default="Default Sales Channel", help="Name of the default sales channel")
    parser.add_argument("--location-name", default="Default Warehouse", help="Name of the default stock location")

    args = parser.parse_args()

    # Log session start
    session_id = str(uuid.uuid4())[:8]
    logger.info("=" * 60)
    logger.info("AUCTIONBRIDGE - STORE SEEDER")
    logger.info("=" * 60)
    logger.info("Starting seeder session", extra={"session_id": session_id})

    try:
        created = seed_store(
            get_db(),
            store_name=args.store_name,
            sales_channel_name=args.sales_channel_name,
            location_name=args.location_name,
        )
    except Exception:
        logger.error("Seeding failed", exc_info=True, extra={"session_id": session_id})
        raise
    finally:
        close_db()

    logger.info("=" * 60)
    logger.info(
        f"SEEDING COMPLETE: {sum(created.values())} document(s) created",
        extra={"session_id": session_id, **created},
    )
    logger.info("=" * 60)


if __name__ == "__main__":
    main()
