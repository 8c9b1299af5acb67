"""
Import API schemas - request and response bodies of the Yahoo import endpoint.
"""
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

ImportMode = Literal["created", "updated"]


class ImportRequest(BaseModel):
    """
    Body of POST /admin/custom/yahoo-import.

    url is optional at the schema level so a missing URL is reported as a
    400 "Missing URL" by the pipeline rather than as a schema error.
    """
    url: Optional[str] = Field(None, description="Yahoo! Auctions detail page URL")
    price_aud: Optional[float] = Field(None, description="Explicit AUD price; used when > 0")
    publish: bool = Field(True, description="False stores the product as a draft")
    translate: bool = Field(True, description="Run the translation step")
    target_lang: Optional[str] = Field(None, description="BCP-47 target language (default zh-CN)")


class ProductSummary(BaseModel):
    id: str
    title: str
    handle: str


class ParsedSummary(BaseModel):
    auction_id: str
    original_title: str
    translated_title: Optional[str] = None
    price_jpy: Optional[int] = None
    image_count: int = 0
    image_urls: List[str] = Field(default_factory=list)
    translation_error: Optional[str] = None


class ImportResponse(BaseModel):
    message: str
    mode: ImportMode
    product: ProductSummary
    parsed: ParsedSummary
