"""
Yahoo! Auctions page parser.

Turns the raw HTML of one auction detail page into a ParsedAuction:

    html --> meta tags (og:title / og:description / og:image, <title>)
         --> image candidates (core.yahoo.images)
         --> price rules (embedded JSON, priority ordered)

Parsing is pure and deterministic: the same (url, html) always produces the
same ParsedAuction.
"""
import re
from dataclasses import dataclass
from typing import Optional, Pattern, Tuple

from core.logging import get_logger
from core.models.auction import ParsedAuction
from core.text import normalize_text
from core.yahoo.images import extract_images
from core.yahoo.meta import extract_meta, extract_title_tag
from core.yahoo.urls import extract_auction_id

logger = get_logger("yahoo-parser")

_NON_DIGIT_RE = re.compile(r"[^\d]")


@dataclass(frozen=True)
class PriceRule:
    """A named regex capturing a JPY amount from embedded page JSON."""
    name: str
    pattern: Pattern[str]

    def extract(self, html: str) -> Optional[int]:
        match = self.pattern.search(html)
        if not match or not match.group(1):
            return None
        digits = _NON_DIGIT_RE.sub("", match.group(1))
        if not digits:
            return None
        value = int(digits)
        return value if value > 0 else None


def _price_pattern(field_name: str) -> Pattern[str]:
    # Tolerates "currentPrice": 12,000 / "currentPrice":"JPY 12,000"
    return re.compile(rf'"{field_name}"\s*:\s*"?(?:JPY)?\s*([\d,]+)"?', re.IGNORECASE)


PRICE_RULES: Tuple[PriceRule, ...] = (
    PriceRule("current_price", _price_pattern("currentPrice")),
    PriceRule("bid_or_buy_price", _price_pattern("bidOrBuyPrice")),
    PriceRule("price", _price_pattern("price")),
    PriceRule("current_price_value", _price_pattern("currentPriceValue")),
)


def extract_price_jpy(html: str, rules: Tuple[PriceRule, ...] = PRICE_RULES) -> Optional[int]:
    """First plausible (> 0) price across the rules, in priority order."""
    for rule in rules:
        value = rule.extract(html)
        if value is not None:
            logger.debug("Price matched", extra={"rule": rule.name, "price_jpy": value})
            return value
    return None


def parse_auction_page(url: str, html: str) -> ParsedAuction:
    """
    Parse an auction detail page.

    Args:
        url: Auction URL the HTML was fetched from
        html: Raw page HTML

    Returns:
        ParsedAuction

    Raises:
        ParseError: if the URL has no /auction/<id> path segment
    """
    auction_id = extract_auction_id(url)

    og_title = extract_meta(html, "og:title")
    og_description = extract_meta(html, "og:description")
    og_image = extract_meta(html, "og:image")
    title_tag = extract_title_tag(html)

    title = normalize_text(og_title or title_tag or f"Yahoo Auction {auction_id}")
    description = normalize_text(og_description or f"Imported from Yahoo Auctions: {url}")

    parsed = ParsedAuction(
        auction_id=auction_id,
        title=title,
        description=description,
        image_urls=extract_images(html, og_image),
        price_jpy=extract_price_jpy(html),
        source_url=url,
    )

    logger.debug(
        "Parsed auction page",
        extra={
            "auction_id": auction_id,
            "image_count": len(parsed.image_urls),
            "price_jpy": parsed.price_jpy,
        },
    )
    return parsed
