"""
Reconciliation - decide create vs update for an imported auction and build
the product record.

Lookup order:
    1. external_id == "yahoo:<auction id>"   (durable key)
    2. handle == slug("yahoo-<auction id>")  (products imported before
       external ids were tracked)

A create that loses a race against a concurrent import of the same auction
hits the unique external_id index; the winner is re-read and updated instead.
"""
import time
from dataclasses import dataclass
from typing import Callable, Literal, Optional

from core.commerce.base import CommercePlatform
from core.errors import DuplicateProductError, ReconciliationError
from core.llm.tasks.translation import TranslationResult
from core.logging import get_logger
from core.models.auction import ParsedAuction
from core.models.product import (
    ImportProvenance,
    ProductImage,
    ProductOption,
    ProductRecord,
    ProductStatus,
    ProductVariant,
    SalesChannelRef,
    VariantPrice,
)
from core.pricing import CURRENCY_CODE, resolve_price_cents
from core.text import to_handle

logger = get_logger("reconcile")

EXTERNAL_ID_PREFIX = "yahoo:"
SOURCE_NAME = "yahoo_auctions"
OPTION_TITLE = "Condition"
OPTION_VALUE = "Auction Import"
VARIANT_TITLE = "Default"


@dataclass
class ReconcileOutcome:
    mode: Literal["created", "updated"]
    product: ProductRecord


def external_id_for(auction_id: str) -> str:
    return f"{EXTERNAL_ID_PREFIX}{auction_id}"


def handle_for(auction_id: str) -> str:
    return to_handle(f"yahoo-{auction_id}") or f"yahoo-{auction_id}"


def sku_prefix(auction_id: str) -> str:
    return f"YAHOO-{auction_id}-"


def generate_sku(auction_id: str, clock: Callable[[], float] = time.time) -> str:
    """YAHOO-<id>-<last 6 digits of epoch milliseconds>."""
    suffix = str(int(clock() * 1000))[-6:]
    return f"{sku_prefix(auction_id)}{suffix}"


def build_provenance(
    parsed: ParsedAuction,
    translated: Optional[TranslationResult],
    translation_error: Optional[str],
) -> ImportProvenance:
    return ImportProvenance(
        source=SOURCE_NAME,
        source_url=parsed.source_url,
        source_auction_id=parsed.auction_id,
        source_price_jpy=parsed.price_jpy,
        source_title_original=parsed.title,
        source_description_original=parsed.description,
        translated_title=translated.title if translated else None,
        translated_description=translated.description if translated else None,
        translation_provider=translated.provider if translated else None,
        translation_source_lang=translated.source_language if translated else None,
        translation_target_lang=translated.target_language if translated else None,
        translation_error=translation_error,
    )


def find_existing_product(platform: CommercePlatform, auction_id: str) -> Optional[ProductRecord]:
    existing = platform.find_product_by_external_id(external_id_for(auction_id))
    if existing is None:
        existing = platform.find_product_by_handle(handle_for(auction_id))
        if existing is not None:
            logger.info(
                "Matched legacy product by handle",
                extra={"auction_id": auction_id, "product_id": existing.id},
            )
    return existing


class Reconciler:
    """
    Merge one parsed (and possibly translated) auction into the catalogue.

    Example:
        reconciler = Reconciler(platform)
        outcome = reconciler.reconcile(parsed, translated=None, publish=True,
                                       shipping_profile_id="sp_default")
        outcome.mode  # "created"
    """

    def __init__(self, platform: CommercePlatform, clock: Callable[[], float] = time.time):
        self.platform = platform
        self.clock = clock

    def reconcile(
        self,
        parsed: ParsedAuction,
        translated: Optional[TranslationResult] = None,
        override_price_aud: Optional[float] = None,
        publish: bool = True,
        translation_error: Optional[str] = None,
        shipping_profile_id: Optional[str] = None,
        sales_channel_id: Optional[str] = None,
    ) -> ReconcileOutcome:
        amount = resolve_price_cents(parsed.price_jpy, override_price_aud)
        provenance = build_provenance(parsed, translated, translation_error)

        fields = {
            "title": (translated.title if translated else None) or parsed.title,
            "subtitle": parsed.title,
            "handle": handle_for(parsed.auction_id),
            "external_id": external_id_for(parsed.auction_id),
            "description": (translated.description if translated else None) or parsed.description,
            "status": (ProductStatus.DRAFT if publish is False else ProductStatus.PUBLISHED).value,
            "shipping_profile_id": shipping_profile_id,
            "metadata": provenance.model_dump(),
            "images": [ProductImage(url=url) for url in parsed.image_urls],
        }
        if sales_channel_id:
            fields["sales_channels"] = [SalesChannelRef(id=sales_channel_id)]

        existing = find_existing_product(self.platform, parsed.auction_id)
        if existing is not None:
            return self._update(existing, parsed, fields, amount)

        try:
            return self._create(parsed, fields, amount)
        except DuplicateProductError:
            winner = self.platform.find_product_by_external_id(external_id_for(parsed.auction_id))
            if winner is None:
                raise ReconciliationError(
                    f"Product for auction {parsed.auction_id} was created concurrently but cannot be read back"
                )
            logger.info(
                "Concurrent import created the product first, updating instead",
                extra={"auction_id": parsed.auction_id, "product_id": winner.id},
            )
            return self._update(winner, parsed, fields, amount)

    def _variant_fields(self, amount: int, sku: str) -> dict:
        return {
            "title": VARIANT_TITLE,
            "sku": sku,
            "manage_inventory": False,
            "allow_backorder": True,
            "prices": [VariantPrice(currency_code=CURRENCY_CODE, amount=amount)],
        }

    def _create(self, parsed: ParsedAuction, fields: dict, amount: int) -> ReconcileOutcome:
        variant = ProductVariant(
            options={OPTION_TITLE: OPTION_VALUE},
            **self._variant_fields(amount, generate_sku(parsed.auction_id, self.clock)),
        )
        product = ProductRecord(
            **fields,
            options=[ProductOption(title=OPTION_TITLE, values=[OPTION_VALUE])],
            variants=[variant],
        )
        created = self.platform.create_product(product)
        logger.info(
            "Created product",
            extra={"auction_id": parsed.auction_id, "product_id": created.id, "sku": variant.sku},
        )
        return ReconcileOutcome(mode="created", product=created)

    def _update(
        self,
        existing: ProductRecord,
        parsed: ParsedAuction,
        fields: dict,
        amount: int,
    ) -> ReconcileOutcome:
        update = dict(fields)

        # Only refresh a variant that still exists; never add one on update
        first_variant = existing.first_variant
        if first_variant is not None:
            sku = first_variant.sku
            if not sku or not sku.startswith(sku_prefix(parsed.auction_id)):
                sku = generate_sku(parsed.auction_id, self.clock)
            refreshed = first_variant.model_copy(
                update=self._variant_fields(amount, sku)
            )
            update["variants"] = [refreshed, *existing.variants[1:]]

        product = existing.model_copy(update=update)
        saved = self.platform.update_product(product)
        logger.info(
            "Updated product",
            extra={
                "auction_id": parsed.auction_id,
                "product_id": saved.id,
                "variant_refreshed": first_variant is not None,
            },
        )
        return ReconcileOutcome(mode="updated", product=saved)
