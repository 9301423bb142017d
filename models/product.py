"""
Product schemas for barcode lookup.
"""

from pydantic import Field
from typing import Optional
from datetime import datetime
from decimal import Decimal

from models.base import BaseSchema


class ProductResponse(BaseSchema):
    """
    Product as stored in the products table.

    Used for lookup responses.
    """

    barcode_number: str = Field(..., description="Product barcode")
    product_name: str = Field(..., description="Display name")
    price: Optional[Decimal] = Field(None, description="Shelf price")
    category: Optional[str] = Field(None, description="Product category")


class ProductLookupResult(BaseSchema):
    """Outcome of one lookup scan."""

    barcode: str = Field(..., description="Scanned barcode")
    product: Optional[ProductResponse] = Field(None, description="Product when found")
    looked_up_at: datetime = Field(..., description="When the lookup finished")

    @property
    def found(self) -> bool:
        return self.product is not None


class ProductLookupView(BaseSchema):
    """Current lookup and recent history for the lookup screen."""

    current: Optional[ProductLookupResult] = None
    history: list[ProductLookupResult] = Field(default_factory=list)
