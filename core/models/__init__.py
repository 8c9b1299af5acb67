"""
AuctionBridge Core Models

Exports for the parsed auction, the product record it becomes, store setup
documents and the import API bodies.
"""

# Parsed auction (ephemeral, one per import request)
from core.models.auction import ParsedAuction, MAX_IMAGES

# Product record (durable, 'products' collection)
from core.models.product import (
    # Enums
    ProductStatus,
    # Nested models
    VariantPrice,
    ProductVariant,
    ProductOption,
    ProductImage,
    SalesChannelRef,
    ImportProvenance,
    # Main model
    ProductRecord,
    # Helpers
    generate_id,
)

# Store setup
from core.models.store import (
    ShippingProfile,
    SalesChannel,
    StockLocation,
    Store,
    StoreDefaults,
)

# API bodies
from core.models.api import (
    ImportMode,
    ImportRequest,
    ImportResponse,
    ProductSummary,
    ParsedSummary,
)

__all__ = [
    # Parsed auction
    "ParsedAuction",
    "MAX_IMAGES",
    # Product record
    "ProductStatus",
    "VariantPrice",
    "ProductVariant",
    "ProductOption",
    "ProductImage",
    "SalesChannelRef",
    "ImportProvenance",
    "ProductRecord",
    "generate_id",
    # Store setup
    "ShippingProfile",
    "SalesChannel",
    "StockLocation",
    "Store",
    "StoreDefaults",
    # API bodies
    "ImportMode",
    "ImportRequest",
    "ImportResponse",
    "ProductSummary",
    "ParsedSummary",
]
