"""
MongoDB adapter for the commerce platform port.

Collections (see core.database):
    products, shipping_profiles, sales_channels, stock_locations,
    sales_channel_locations, stores
"""
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from pymongo import ASCENDING
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from core import database
from core.commerce.base import CommercePlatform
from core.errors import DuplicateProductError
from core.logging import get_logger
from core.models.product import ProductRecord
from core.models.store import Store

logger = get_logger("commerce-mongo")


class MongoCommercePlatform(CommercePlatform):
    """
    CommercePlatform backed by MongoDB.

    Example:
        platform = MongoCommercePlatform(get_db())
        product = platform.find_product_by_external_id("yahoo:x1234567890")
    """

    def __init__(self, db: Database, create_indexes: bool = True):
        self.db = db
        self.products = db[database.PRODUCTS]
        if create_indexes:
            database.ensure_indexes(db)

    # --- Store setup ---

    def get_default_shipping_profile_id(self) -> Optional[str]:
        doc = self.db[database.SHIPPING_PROFILES].find_one(
            {"type": "default"}, sort=[("_id", ASCENDING)]
        )
        return doc["_id"] if doc else None

    def get_store(self) -> Optional[Store]:
        doc = self.db[database.STORES].find_one({}, sort=[("_id", ASCENDING)])
        return Store.model_validate(doc) if doc else None

    def list_sales_channel_ids(self) -> List[str]:
        return [
            doc["_id"]
            for doc in self.db[database.SALES_CHANNELS].find({}, {"_id": 1}).sort("_id", ASCENDING)
        ]

    def link_sales_channels_to_location(self, location_id: str, sales_channel_ids: Iterable[str]) -> int:
        created = 0
        links = self.db[database.SALES_CHANNEL_LOCATIONS]
        for sales_channel_id in sales_channel_ids:
            result = links.update_one(
                {"stock_location_id": location_id, "sales_channel_id": sales_channel_id},
                {"$setOnInsert": {"created_at": datetime.now(timezone.utc)}},
                upsert=True,
            )
            if result.upserted_id is not None:
                created += 1
        if created:
            logger.info(
                "Linked sales channels to stock location",
                extra={"stock_location_id": location_id, "new_links": created},
            )
        return created

    # --- Products ---

    def _find_one(self, query: dict) -> Optional[ProductRecord]:
        doc = self.products.find_one(query)
        return ProductRecord.from_db(doc) if doc else None

    def find_product_by_external_id(self, external_id: str) -> Optional[ProductRecord]:
        return self._find_one({"external_id": external_id})

    def find_product_by_handle(self, handle: str) -> Optional[ProductRecord]:
        return self._find_one({"handle": handle})

    def create_product(self, product: ProductRecord) -> ProductRecord:
        try:
            self.products.insert_one(product.to_dict_for_db())
        except DuplicateKeyError:
            logger.warning(
                "Duplicate external_id on insert",
                extra={"external_id": product.external_id},
            )
            raise DuplicateProductError(product.external_id or product.id)
        return product

    def update_product(self, product: ProductRecord) -> ProductRecord:
        product.updated_at = datetime.now(timezone.utc)
        result = self.products.replace_one({"_id": product.id}, product.to_dict_for_db())
        if result.matched_count == 0:
            raise LookupError(f"Product {product.id} no longer exists")
        return product

    def list_products_by_source(self, source: str) -> List[ProductRecord]:
        return [ProductRecord.from_db(doc) for doc in self.products.find({"metadata.source": source})]

    def update_variant_flags(
        self,
        variant_ids: List[str],
        manage_inventory: bool,
        allow_backorder: bool,
    ) -> int:
        if not variant_ids:
            return 0
        wanted = set(variant_ids)
        updated = 0
        for doc in self.products.find({"variants.id": {"$in": variant_ids}}, {"variants": 1}):
            variants = doc.get("variants") or []
            for variant in variants:
                if variant.get("id") in wanted:
                    variant["manage_inventory"] = manage_inventory
                    variant["allow_backorder"] = allow_backorder
                    updated += 1
            self.products.update_one(
                {"_id": doc["_id"]},
                {"$set": {"variants": variants, "updated_at": datetime.now(timezone.utc)}},
            )
        return updated
