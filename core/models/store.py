"""
Store setup schemas - the commerce platform configuration an import relies on.

Seeded once by services/seeder and read on every import:
- shipping_profiles: at least one profile of type "default" is required
- sales_channels / stock_locations: products are published to the store's
  default sales channel, which must be linked to the default stock location
- stores: a single document naming the defaults
"""
from typing import Literal, Optional
from pydantic import BaseModel, Field, ConfigDict


class ShippingProfile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: str
    type: Literal["default", "gift_card", "custom"] = "default"


class SalesChannel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: str
    is_disabled: bool = False


class StockLocation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: str


class Store(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: str
    default_sales_channel_id: Optional[str] = None
    default_location_id: Optional[str] = None


class StoreDefaults(BaseModel):
    """Resolved defaults for one import; any id may be missing."""
    shipping_profile_id: Optional[str] = None
    sales_channel_id: Optional[str] = None
    stock_location_id: Optional[str] = None
