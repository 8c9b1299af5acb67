"""
Product image discovery for Yahoo! Auctions pages.

Auction pages reference a lot of images that are not the item itself: seller
avatars, display-name badges, ads and cropped previews. Rather than trying to
deny every kind of noise, candidates must come from one of the known auction
image CDNs (allow-list) and must not carry tracking markers.

Extraction is an ordered list of named rules. Each rule scans the raw HTML
independently; results are merged in rule order and deduplicated.
"""
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Pattern, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from core.models.auction import MAX_IMAGES
from core.text import decode_html

_IMAGE_EXTENSION_RE = re.compile(r"\.(jpg|jpeg|png|webp)(\?|$)", re.IGNORECASE)
_HTTP_RE = re.compile(r"^https?://", re.IGNORECASE)

BLOCKED_HOST_MARKERS: Tuple[str, ...] = (
    "displayname-pctr.c.yimg.jp",
    "auc-pctr.c.yimg.jp",
)
BLOCKED_URL_MARKERS: Tuple[str, ...] = ("nf_src=", "/d/display-name/")

# (exact host, required path substring)
ALLOWED_SOURCES: Tuple[Tuple[str, str], ...] = (
    ("images.auctions.yahoo.co.jp", "/image/"),
    ("auctions.c.yimg.jp", "/images.auctions.yahoo.co.jp/image/"),
    ("auctions.afimg.jp", "/image/"),
)

# Tracking / thumbnail sizing parameters
TRACKING_PARAMS = frozenset({"nf_src", "nf_path", "nf_st", "tag", "w", "h", "up"})


@dataclass(frozen=True)
class ImageRule:
    """A named regex whose first group captures an image URL candidate."""
    name: str
    pattern: Pattern[str]

    def candidates(self, html: str) -> Iterable[str]:
        for match in self.pattern.finditer(html):
            yield match.group(1) or ""


IMAGE_RULES: Tuple[ImageRule, ...] = (
    ImageRule("json_img_href", re.compile(r'"imgHref"\s*:\s*"([^"]+)"', re.IGNORECASE)),
    ImageRule("json_image_url", re.compile(r'"imageUrl"\s*:\s*"([^"]+)"', re.IGNORECASE)),
    ImageRule("json_full_image_url", re.compile(r'"fullImageUrl"\s*:\s*"([^"]+)"', re.IGNORECASE)),
    ImageRule("img_src", re.compile(r"""<img[^>]+src=["']([^"']+)["']""", re.IGNORECASE)),
    ImageRule("source_srcset", re.compile(r"""<source[^>]+srcset=["']([^"']+)["']""", re.IGNORECASE)),
)


def is_likely_product_image(url: str) -> bool:
    """
    Decide whether a URL points at an actual auction item photo.

    The URL must parse, end in a raster image extension, avoid the avatar
    hosts and tracking markers, and come from an allow-listed CDN path.
    """
    try:
        parts = urlsplit(url)
        host = (parts.hostname or "").lower()
    except ValueError:
        return False
    if not parts.scheme or not host:
        return False

    path = parts.path.lower()
    href = url.lower()

    if not _IMAGE_EXTENSION_RE.search(href):
        return False

    if any(marker in host for marker in BLOCKED_HOST_MARKERS):
        return False
    if any(marker in href for marker in BLOCKED_URL_MARKERS):
        return False

    return any(
        host == allowed_host and path_marker in path
        for allowed_host, path_marker in ALLOWED_SOURCES
    )


def clean_image_url(url: str) -> str:
    """Drop tracking/sizing query parameters so variants of one image collapse."""
    try:
        parts = urlsplit(url)
        params = parse_qsl(parts.query, keep_blank_values=True)
    except ValueError:
        return url

    kept = [(key, value) for key, value in params if key not in TRACKING_PARAMS]
    return urlunsplit(parts._replace(query=urlencode(kept)))


def _first_token(raw: str) -> str:
    # srcset lists look like "a.jpg 1x, b.jpg 2x"
    return raw.split(",")[0].strip().split(" ")[0].strip()


def extract_images(
    html: str,
    og_image: Optional[str] = None,
    rules: Tuple[ImageRule, ...] = IMAGE_RULES,
    limit: int = MAX_IMAGES,
) -> List[str]:
    """
    Collect up to `limit` cleaned product image URLs in first-seen order.

    The Open Graph image, when it qualifies, always comes first; then each
    rule's matches in declared order.
    """
    # dict keeps insertion order and gives set semantics
    found = {}

    if og_image and _HTTP_RE.match(og_image) and is_likely_product_image(og_image):
        found[clean_image_url(og_image)] = None

    for rule in rules:
        for candidate in rule.candidates(html):
            raw = decode_html(candidate).replace("\\/", "/").strip()
            if not _HTTP_RE.match(raw) or "/icon/" in raw:
                continue
            base = _first_token(raw)
            if is_likely_product_image(base):
                found[clean_image_url(base)] = None

    return list(found)[:limit]
