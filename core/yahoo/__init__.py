"""
Yahoo! Auctions extraction.

Usage:
    from core.yahoo import validate_auction_url, get_page_fetcher, parse_auction_page

    url = validate_auction_url("https://auctions.yahoo.co.jp/jp/auction/x1234567890")
    html = get_page_fetcher().fetch(url)
    parsed = parse_auction_page(url, html)
"""

from core.yahoo.urls import (
    YAHOO_HOST,
    extract_auction_id,
    find_auction_id,
    percent_encode_url,
    validate_auction_url,
)
from core.yahoo.meta import extract_meta, extract_title_tag
from core.yahoo.images import (
    ImageRule,
    IMAGE_RULES,
    clean_image_url,
    extract_images,
    is_likely_product_image,
)
from core.yahoo.parser import PriceRule, PRICE_RULES, extract_price_jpy, parse_auction_page
from core.yahoo.fetcher import (
    PageFetcher,
    HttpPageFetcher,
    BrowserPageFetcher,
    get_page_fetcher,
)

__all__ = [
    # URLs
    "YAHOO_HOST",
    "extract_auction_id",
    "find_auction_id",
    "percent_encode_url",
    "validate_auction_url",
    # Extraction
    "extract_meta",
    "extract_title_tag",
    "ImageRule",
    "IMAGE_RULES",
    "clean_image_url",
    "extract_images",
    "is_likely_product_image",
    "PriceRule",
    "PRICE_RULES",
    "extract_price_jpy",
    "parse_auction_page",
    # Fetching
    "PageFetcher",
    "HttpPageFetcher",
    "BrowserPageFetcher",
    "get_page_fetcher",
]
