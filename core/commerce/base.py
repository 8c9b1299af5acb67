"""
Commerce Platform - the port the importer talks to.

The importer never owns products: it looks them up, creates them and updates
them through this interface. The MongoDB adapter in core.commerce.mongo is the
shipped implementation; tests use an in-memory one.

Design Patterns:
    - Ports and Adapters: importer logic depends on CommercePlatform only
"""
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from core.models.product import ProductRecord
from core.models.store import Store, StoreDefaults


class CommercePlatform(ABC):
    """Product and store-setup operations the importer needs."""

    # --- Store setup ---

    @abstractmethod
    def get_default_shipping_profile_id(self) -> Optional[str]:
        """Id of the first shipping profile of type 'default', if any."""
        pass

    @abstractmethod
    def get_store(self) -> Optional[Store]:
        pass

    @abstractmethod
    def list_sales_channel_ids(self) -> List[str]:
        pass

    @abstractmethod
    def link_sales_channels_to_location(self, location_id: str, sales_channel_ids: Iterable[str]) -> int:
        """
        Link sales channels to a stock location. Idempotent.

        Returns:
            Number of links that did not exist before
        """
        pass

    def resolve_store_defaults(self) -> StoreDefaults:
        """
        Resolve the ids an import needs.

        The sales channel falls back to the first existing channel when the
        store names none.
        """
        store = self.get_store()
        sales_channel_id = store.default_sales_channel_id if store else None
        if not sales_channel_id:
            channel_ids = self.list_sales_channel_ids()
            sales_channel_id = channel_ids[0] if channel_ids else None

        return StoreDefaults(
            shipping_profile_id=self.get_default_shipping_profile_id(),
            sales_channel_id=sales_channel_id,
            stock_location_id=store.default_location_id if store else None,
        )

    # --- Products ---

    @abstractmethod
    def find_product_by_external_id(self, external_id: str) -> Optional[ProductRecord]:
        pass

    @abstractmethod
    def find_product_by_handle(self, handle: str) -> Optional[ProductRecord]:
        pass

    @abstractmethod
    def create_product(self, product: ProductRecord) -> ProductRecord:
        """
        Persist a new product.

        Raises:
            DuplicateProductError: a product with the same external_id exists
        """
        pass

    @abstractmethod
    def update_product(self, product: ProductRecord) -> ProductRecord:
        """Replace the stored product with the given state."""
        pass

    @abstractmethod
    def list_products_by_source(self, source: str) -> List[ProductRecord]:
        """Products whose metadata.source equals source."""
        pass

    @abstractmethod
    def update_variant_flags(
        self,
        variant_ids: List[str],
        manage_inventory: bool,
        allow_backorder: bool,
    ) -> int:
        """
        Set inventory flags on the given variants.

        Returns:
            Number of variants updated
        """
        pass
