"""
Commerce platform access.

Usage:
    from core.commerce import get_commerce_platform

    platform = get_commerce_platform()
    defaults = platform.resolve_store_defaults()
"""

from core.commerce.base import CommercePlatform
from core.commerce.mongo import MongoCommercePlatform


def get_commerce_platform() -> CommercePlatform:
    """MongoDB-backed platform on the configured database."""
    from core.database import get_db

    return MongoCommercePlatform(get_db())


__all__ = [
    "CommercePlatform",
    "MongoCommercePlatform",
    "get_commerce_platform",
]
