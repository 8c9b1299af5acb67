"""
<meta> and <title> extraction.

Yahoo renders meta tags with attributes in varying order depending on the
page template, so each lookup tries all four property/name x content orderings.
"""
import re
from typing import List, Optional, Pattern

from core.text import normalize_text

_TITLE_TAG_RE = re.compile(r"<title[^>]*>([^<]+)</title>", re.IGNORECASE)


def _meta_patterns(key: str) -> List[Pattern[str]]:
    key = re.escape(key)
    return [
        re.compile(
            rf"""<meta[^>]+property=["']{key}["'][^>]+content=["']([^"']+)["'][^>]*>""",
            re.IGNORECASE,
        ),
        re.compile(
            rf"""<meta[^>]+content=["']([^"']+)["'][^>]+property=["']{key}["'][^>]*>""",
            re.IGNORECASE,
        ),
        re.compile(
            rf"""<meta[^>]+name=["']{key}["'][^>]+content=["']([^"']+)["'][^>]*>""",
            re.IGNORECASE,
        ),
        re.compile(
            rf"""<meta[^>]+content=["']([^"']+)["'][^>]+name=["']{key}["'][^>]*>""",
            re.IGNORECASE,
        ),
    ]


def extract_meta(html: str, key: str) -> Optional[str]:
    """
    Return the normalized content of the first <meta> tag matching key.

    Example:
        extract_meta(html, "og:title")
    """
    for pattern in _meta_patterns(key):
        match = pattern.search(html)
        if match and match.group(1):
            return normalize_text(match.group(1)) or None
    return None


def extract_title_tag(html: str) -> Optional[str]:
    """Raw text of the <title> element, if any."""
    match = _TITLE_TAG_RE.search(html)
    return match.group(1) if match else None
