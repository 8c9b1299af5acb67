"""
Product Schema - the commerce record an imported auction becomes.

Architecture:
- ProductRecord mirrors the commerce platform's product shape (product,
  options, variants, prices, images, sales channel links)
- ImportProvenance is stored in the product metadata so every import can be
  audited and re-imports can be diagnosed
- The record is keyed by external_id ("yahoo:<auction id>"); the storage layer
  enforces one record per external id
"""
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_id(prefix: str) -> str:
    """Generate a platform style id, e.g. 'prod_3f2a...'."""
    return f"{prefix}_{uuid.uuid4().hex[:26]}"


# ============================================================================
# ENUMS
# ============================================================================

class ProductStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


# ============================================================================
# NESTED MODELS
# ============================================================================

class VariantPrice(BaseModel):
    currency_code: str = Field("aud", description="ISO currency code (lowercase)")
    amount: int = Field(..., ge=0, description="Amount in minor units (cents)")


class ProductVariant(BaseModel):
    id: str = Field(default_factory=lambda: generate_id("variant"))
    title: str = "Default"
    sku: Optional[str] = None
    manage_inventory: bool = False
    allow_backorder: bool = True
    options: Dict[str, str] = Field(default_factory=dict)
    prices: List[VariantPrice] = Field(default_factory=list)


class ProductOption(BaseModel):
    title: str
    values: List[str] = Field(default_factory=list)


class ProductImage(BaseModel):
    url: str


class SalesChannelRef(BaseModel):
    id: str


class ImportProvenance(BaseModel):
    """
    Where an imported product came from and how it was translated.

    Stored as the product's metadata block.
    """
    model_config = ConfigDict(extra="allow")

    source: str = "yahoo_auctions"
    source_url: str
    source_auction_id: str
    source_price_jpy: Optional[int] = None
    source_title_original: str
    source_description_original: str
    translated_title: Optional[str] = None
    translated_description: Optional[str] = None
    translation_provider: Optional[str] = None
    translation_source_lang: Optional[str] = None
    translation_target_lang: Optional[str] = None
    translation_error: Optional[str] = None


# ============================================================================
# PRODUCT RECORD
# ============================================================================

class ProductRecord(BaseModel):
    """
    A product as stored in the 'products' collection.

    Example:
        product = ProductRecord(
            title="佳能 EOS R5 机身",
            subtitle="Canon EOS R5 ボディ",
            handle="yahoo-x1234567890",
            external_id="yahoo:x1234567890",
            description="...",
            status=ProductStatus.PUBLISHED,
            shipping_profile_id="sp_default",
            variants=[ProductVariant(sku="YAHOO-x1234567890-123456",
                                     prices=[VariantPrice(amount=32000)])],
        )
    """

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, validate_default=True)

    id: str = Field(default_factory=lambda: generate_id("prod"), alias="_id")
    title: str
    subtitle: Optional[str] = None
    handle: str
    external_id: Optional[str] = None
    description: Optional[str] = None
    status: ProductStatus = ProductStatus.DRAFT
    shipping_profile_id: Optional[str] = None
    images: List[ProductImage] = Field(default_factory=list)
    sales_channels: List[SalesChannelRef] = Field(default_factory=list)
    options: List[ProductOption] = Field(default_factory=list)
    variants: List[ProductVariant] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def first_variant(self) -> Optional[ProductVariant]:
        return self.variants[0] if self.variants else None

    def to_dict_for_db(self) -> dict:
        """
        Convert to dictionary for MongoDB insertion.

        Returns:
            Dictionary with _id alias; datetimes stay datetime objects
        """
        return self.model_dump(by_alias=True, mode="python")

    @classmethod
    def from_db(cls, document: Dict[str, Any]) -> "ProductRecord":
        return cls.model_validate(document)
