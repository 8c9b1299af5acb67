"""
Yahoo! Auctions URL handling.

Only auction detail pages on the main auction host are importable, e.g.
https://auctions.yahoo.co.jp/jp/auction/x1234567890
"""
import re
from typing import Optional
from urllib.parse import quote, urlsplit, urlunsplit, SplitResult

from core.errors import InputValidationError, ParseError

YAHOO_HOST = "auctions.yahoo.co.jp"

# The id has to be the whole path segment: "/auction/ab-12" is rejected
AUCTION_PATH_RE = re.compile(r"/auction/([a-zA-Z0-9]+)(?:/|$)")

MISSING_URL_MESSAGE = "Missing URL"
INVALID_URL_MESSAGE = "Invalid URL format"
UNSUPPORTED_URL_MESSAGE = f"Only {YAHOO_HOST} auction detail URLs are supported"

# Reserved and already-escaped characters stay as they are
_SAFE_PATH_CHARS = "/%:@!$&'()*+,;=-._~"
_SAFE_QUERY_CHARS = _SAFE_PATH_CHARS + "?"


def percent_encode_url(url: str) -> str:
    """
    Percent-encode the path, query and fragment of a URL.

    Non-ASCII characters and spaces are escaped; existing escapes are kept,
    so encoding twice gives the same result.

    Example:
        percent_encode_url("https://auctions.yahoo.co.jp/jp/auction/x1?ref=カメラ")
        # "https://auctions.yahoo.co.jp/jp/auction/x1?ref=%E3%82%AB%E3%83%A1%E3%83%A9"
    """
    parts = urlsplit(url)
    return urlunsplit(
        parts._replace(
            path=quote(parts.path, safe=_SAFE_PATH_CHARS),
            query=quote(parts.query, safe=_SAFE_QUERY_CHARS),
            fragment=quote(parts.fragment, safe=_SAFE_QUERY_CHARS),
        )
    )


def find_auction_id(path: str) -> Optional[str]:
    """Return the auction id from a URL path, or None."""
    match = AUCTION_PATH_RE.search(path)
    return match.group(1) if match else None


def extract_auction_id(url: str) -> str:
    """
    Extract the auction id from an auction URL.

    Raises:
        ParseError: if the path has no /auction/<alphanumeric-id> segment
    """
    auction_id = find_auction_id(urlsplit(url).path)
    if not auction_id:
        raise ParseError("Cannot parse auction ID from URL")
    return auction_id


def validate_auction_url(raw: Optional[str]) -> str:
    """
    Validate user input before anything touches the network.

    Returns the trimmed, percent-encoded URL.

    Raises:
        InputValidationError: missing, malformed, wrong host or wrong path shape
    """
    url = (raw or "").strip()
    if not url:
        raise InputValidationError(MISSING_URL_MESSAGE)

    try:
        parts: SplitResult = urlsplit(url)
        hostname = parts.hostname
    except ValueError:
        raise InputValidationError(INVALID_URL_MESSAGE)

    if parts.scheme.lower() not in ("http", "https") or not hostname:
        raise InputValidationError(INVALID_URL_MESSAGE)

    if hostname != YAHOO_HOST or not find_auction_id(parts.path):
        raise InputValidationError(UNSUPPORTED_URL_MESSAGE)

    return percent_encode_url(url)
