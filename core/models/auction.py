"""
Parsed auction schema - the structured view of one Yahoo! Auctions page.

A ParsedAuction only lives for the duration of one import request; nothing
about it is persisted except what the reconciliation step copies into the
product record.
"""
from typing import List, Optional
from pydantic import BaseModel, Field

MAX_IMAGES = 20


class ParsedAuction(BaseModel):
    """
    Fields recovered from an auction page.

    Example:
        parsed = ParsedAuction(
            auction_id="x1234567890",
            title="Canon EOS R5 ボディ",
            description="美品です",
            image_urls=["https://auctions.c.yimg.jp/images.auctions.yahoo.co.jp/image/dr000/a.jpg"],
            price_jpy=320000,
            source_url="https://auctions.yahoo.co.jp/jp/auction/x1234567890",
        )
    """

    auction_id: str = Field(..., min_length=1, description="Alphanumeric auction id from the URL path")
    title: str = Field(..., description="Normalized listing title")
    description: str = Field(..., description="Normalized listing description")
    image_urls: List[str] = Field(
        default_factory=list,
        max_length=MAX_IMAGES,
        description="Cleaned product image URLs in discovery order",
    )
    price_jpy: Optional[int] = Field(None, gt=0, description="Current price in JPY, when found")
    source_url: str = Field(..., description="URL the page was fetched from")

    @property
    def external_id(self) -> str:
        """Durable cross-system key for this auction."""
        return f"yahoo:{self.auction_id}"
