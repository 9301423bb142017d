"""
Missing product report schemas.

Operators report barcodes that are not in the products table so
the catalogue can be completed.
"""

from pydantic import Field
from typing import Optional
from datetime import datetime

from models.base import BaseSchema


class MissingProductCreate(BaseSchema):
    """
    Report a missing product.

    Required: barcode_number, description
    """

    barcode_number: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="Barcode that returned no product"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="What the product is (name, brand, size)"
    )


class MissingProductResponse(BaseSchema):
    """Stored missing product report."""

    id: str = Field(..., description="Report UUID")
    barcode_number: str = Field(..., description="Reported barcode")
    description: Optional[str] = Field(None, description="Operator description")
    reported_at: datetime = Field(..., description="When it was reported")


class MissingProductListResponse(BaseSchema):
    """All open reports."""

    data: list[MissingProductResponse]
    total: int


class ClearMissingProductsResponse(BaseSchema):
    """Result of clearing the report list."""

    deleted: int
