"""
Yahoo import pipeline.

One request runs one linear pass:

    Validate -> Fetch -> Parse -> (Translate) -> Setup -> Reconcile -> Respond

Each stage either hands its output to the next one or raises an
AuctionImportError that ends the request. The translation stage is the only
soft one: its failure is recorded in the response and the import continues.
Nothing is retried.
"""
import uuid
from typing import Callable, Optional

from core.commerce.base import CommercePlatform
from core.config import config
from core.errors import AuctionImportError, ConfigurationError, ReconciliationError, TranslationError
from core.importer.reconcile import ReconcileOutcome, Reconciler
from core.llm.client import LLMClient
from core.llm.tasks.translation import TranslationResult, normalize_language_tag, translate_listing
from core.logging import get_logger, log_execution_time
from core.models.api import ImportRequest, ImportResponse, ParsedSummary, ProductSummary
from core.models.auction import ParsedAuction
from core.models.store import StoreDefaults
from core.yahoo.fetcher import PageFetcher
from core.yahoo.parser import parse_auction_page
from core.yahoo.urls import validate_auction_url

logger = get_logger("importer")

CREATED_MESSAGE = "Import successful"
UPDATED_MESSAGE = "Import successful (updated existing product)"
MISSING_SHIPPING_PROFILE_MESSAGE = "Default shipping profile not found. Run seed first."

# (title, description, source_lang, target_lang) -> Optional[TranslationResult]
Translator = Callable[[str, str, str, str], Optional[TranslationResult]]


def default_translator(client: Optional[LLMClient] = None) -> Translator:
    def _translate(title: str, description: str, source_lang: str, target_lang: str):
        return translate_listing(title, description, source_lang, target_lang, client=client)

    return _translate


class YahooImportPipeline:
    """
    Import one Yahoo! Auctions listing into the commerce platform.

    Collaborators are injected so every stage can be exercised without
    network or database.

    Example:
        pipeline = YahooImportPipeline(
            fetcher=get_page_fetcher(),
            platform=get_commerce_platform(),
        )
        response = pipeline.run(ImportRequest(url="https://auctions.yahoo.co.jp/jp/auction/x1234567890"))
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        platform: CommercePlatform,
        translator: Optional[Translator] = None,
        reconciler: Optional[Reconciler] = None,
        source_lang: Optional[str] = None,
        default_target_lang: Optional[str] = None,
    ):
        self.fetcher = fetcher
        self.platform = platform
        self.translator = translator or default_translator()
        self.reconciler = reconciler or Reconciler(platform)
        self.source_lang = normalize_language_tag(source_lang or config.TRANSLATE_SOURCE_LANG, "ja")
        self.default_target_lang = normalize_language_tag(
            default_target_lang or config.TRANSLATE_TARGET_LANG
        )

    # --- stages ---

    def fetch_and_parse(self, url: str) -> ParsedAuction:
        html = self.fetcher.fetch(url)
        return parse_auction_page(url, html)

    def translate(
        self,
        parsed: ParsedAuction,
        target_lang: Optional[str],
        correlation_id: Optional[str] = None,
    ) -> tuple[Optional[TranslationResult], Optional[str]]:
        """
        Run the translation step.

        Returns:
            (translation or None, error message or None); never raises
        """
        target = normalize_language_tag(target_lang or self.default_target_lang)
        try:
            translated = self.translator(parsed.title, parsed.description, self.source_lang, target)
        except TranslationError as e:
            logger.warning(
                f"Translation failed, continuing without it: {e}",
                extra={"correlation_id": correlation_id, "auction_id": parsed.auction_id},
            )
            return None, str(e) or "Translation failed"
        except Exception as e:
            logger.warning(
                "Translation raised unexpectedly, continuing without it",
                exc_info=True,
                extra={"correlation_id": correlation_id, "auction_id": parsed.auction_id},
            )
            return None, str(e) or "Translation failed"
        return translated, None

    def prepare_store(self, correlation_id: Optional[str] = None) -> StoreDefaults:
        """
        Check the platform setup and make sure the sales channel can sell
        from the default stock location.

        Raises:
            ConfigurationError: no default shipping profile
        """
        defaults = self.platform.resolve_store_defaults()
        if not defaults.shipping_profile_id:
            raise ConfigurationError(MISSING_SHIPPING_PROFILE_MESSAGE)

        if defaults.sales_channel_id and defaults.stock_location_id:
            self.platform.link_sales_channels_to_location(
                defaults.stock_location_id, [defaults.sales_channel_id]
            )
        else:
            logger.debug(
                "Skipping sales channel / stock location link",
                extra={
                    "correlation_id": correlation_id,
                    "sales_channel_id": defaults.sales_channel_id,
                    "stock_location_id": defaults.stock_location_id,
                },
            )
        return defaults

    # --- entry point ---

    @log_execution_time(logger)
    def run(self, request: ImportRequest) -> ImportResponse:
        """
        Run the whole import for one request.

        Raises:
            AuctionImportError: any stage failure; status_code tells the API
                what to answer
        """
        correlation_id = str(uuid.uuid4())[:8]

        url = validate_auction_url(request.url)
        logger.info(
            "Starting Yahoo import",
            extra={
                "correlation_id": correlation_id,
                "url": url,
                "translate": request.translate,
                "publish": request.publish,
            },
        )

        parsed = self.fetch_and_parse(url)
        logger.info(
            "Parsed auction",
            extra={
                "correlation_id": correlation_id,
                "auction_id": parsed.auction_id,
                "price_jpy": parsed.price_jpy,
                "image_count": len(parsed.image_urls),
            },
        )

        translated, translation_error = (None, None)
        if request.translate:
            translated, translation_error = self.translate(parsed, request.target_lang, correlation_id)

        defaults = self.prepare_store(correlation_id)

        try:
            outcome = self.reconciler.reconcile(
                parsed,
                translated=translated,
                override_price_aud=request.price_aud,
                publish=request.publish,
                translation_error=translation_error,
                shipping_profile_id=defaults.shipping_profile_id,
                sales_channel_id=defaults.sales_channel_id,
            )
        except AuctionImportError:
            raise
        except Exception as e:
            logger.error(
                "Reconciliation failed",
                exc_info=True,
                extra={"correlation_id": correlation_id, "auction_id": parsed.auction_id},
            )
            raise ReconciliationError(getattr(e, "detail", None) or str(e) or "Import failed")

        logger.info(
            "Import finished",
            extra={
                "correlation_id": correlation_id,
                "auction_id": parsed.auction_id,
                "mode": outcome.mode,
                "product_id": outcome.product.id,
            },
        )
        return self.build_response(parsed, translated, translation_error, outcome)

    @staticmethod
    def build_response(
        parsed: ParsedAuction,
        translated: Optional[TranslationResult],
        translation_error: Optional[str],
        outcome: ReconcileOutcome,
    ) -> ImportResponse:
        product = outcome.product
        return ImportResponse(
            message=UPDATED_MESSAGE if outcome.mode == "updated" else CREATED_MESSAGE,
            mode=outcome.mode,
            product=ProductSummary(
                id=product.id,
                title=product.title or parsed.title,
                handle=product.handle,
            ),
            parsed=ParsedSummary(
                auction_id=parsed.auction_id,
                original_title=parsed.title,
                translated_title=translated.title if translated else None,
                price_jpy=parsed.price_jpy,
                image_count=len(parsed.image_urls),
                image_urls=list(parsed.image_urls),
                translation_error=translation_error,
            ),
        )
