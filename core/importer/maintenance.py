"""
Maintenance jobs for imported products and store setup.

- fix_yahoo_inventory: imported auction items are one-offs sold without
  stock tracking; reset the inventory flags of every imported variant
- fix_sales_channel_stock_links: link every sales channel to the store's
  default stock location so published products are purchasable
"""
from typing import List

from core.commerce.base import CommercePlatform
from core.errors import ConfigurationError
from core.importer.reconcile import SOURCE_NAME
from core.logging import get_logger

logger = get_logger("importer-maintenance")

VARIANT_BATCH_SIZE = 50


def fix_yahoo_inventory(platform: CommercePlatform, batch_size: int = VARIANT_BATCH_SIZE) -> int:
    """
    Set manage_inventory=False, allow_backorder=True on every variant of
    every imported product.

    Returns:
        Number of variants updated
    """
    products = platform.list_products_by_source(SOURCE_NAME)
    variant_ids: List[str] = [
        variant.id
        for product in products
        for variant in product.variants
        if variant.id
    ]

    if not variant_ids:
        logger.info("No Yahoo imported variants found. Nothing to fix.")
        return 0

    updated = 0
    for start in range(0, len(variant_ids), batch_size):
        batch = variant_ids[start:start + batch_size]
        updated += platform.update_variant_flags(batch, manage_inventory=False, allow_backorder=True)
        logger.debug("Variant batch updated", extra={"batch_start": start, "batch_size": len(batch)})

    logger.info(
        f"Updated {updated} Yahoo variant(s): manage_inventory=false, allow_backorder=true",
        extra={"products": len(products), "variants": updated},
    )
    return updated


def fix_sales_channel_stock_links(platform: CommercePlatform) -> int:
    """
    Link all sales channels to the default stock location.

    Returns:
        Number of sales channels submitted for linking

    Raises:
        ConfigurationError: store, default location or sales channels missing
    """
    store = platform.get_store()
    if store is None:
        raise ConfigurationError("Store not found")
    if not store.default_location_id:
        raise ConfigurationError("Store default_location_id is missing. Run seed/setup first.")

    channel_ids = platform.list_sales_channel_ids()
    if not channel_ids:
        raise ConfigurationError("No sales channels found")

    platform.link_sales_channels_to_location(store.default_location_id, channel_ids)
    logger.info(
        f"Linked {len(channel_ids)} sales channel(s) to stock location {store.default_location_id}",
        extra={"stock_location_id": store.default_location_id, "sales_channels": len(channel_ids)},
    )
    return len(channel_ids)
