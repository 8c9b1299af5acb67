"""
Text helpers shared by the auction extractors.

The HTML handling here is regex based: auction pages are only
scanned for a handful of fields, and the same rules are applied to HTML
attributes and to JSON blobs embedded in script tags.
"""
import re
from typing import Optional

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")

# Order matters: "&amp;" goes first so "&amp;lt;" decodes to "<"
_ENTITIES = (
    ("&amp;", "&"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&lt;", "<"),
    ("&gt;", ">"),
)

HANDLE_MAX_LENGTH = 80


def decode_html(text: str) -> str:
    """Decode the five entities auction pages actually use."""
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text


def strip_tags(text: str) -> str:
    return _TAG_RE.sub(" ", text)


def normalize_text(raw: Optional[str]) -> str:
    """
    Turn an HTML fragment into a single line of plain text.

    Tags are replaced with spaces, entities decoded, whitespace collapsed and
    the result trimmed. Never raises; None or "" give "".

    Example:
        normalize_text("<b>A</b> &amp; B")  # "A & B"
    """
    if not raw:
        return ""
    return _WHITESPACE_RE.sub(" ", decode_html(strip_tags(raw))).strip()


def to_handle(text: str) -> str:
    """Slugify text into a lowercase, dash separated handle (max 80 chars)."""
    slug = _NON_SLUG_RE.sub("-", text.lower()).strip("-")
    return slug[:HANDLE_MAX_LENGTH]
