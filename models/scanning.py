"""
Barcode routing schemas.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Awaitable, Callable, Optional
from enum import Enum

from models.base import BaseSchema


class ScanMode(str, Enum):
    """Who consumes scans."""
    PRODUCT_LOOKUP = "product_lookup"
    SHELF_ORGANIZATION = "shelf_organization"


class ScanOutcome(str, Enum):
    """What the router did with a scan."""
    ACCEPTED = "accepted"
    IGNORED_EMPTY = "ignored_empty"
    SUPPRESSED_DUPLICATE = "suppressed_duplicate"
    NO_HANDLER = "no_handler"
    HANDLER_FAILED = "handler_failed"
    REJECTED = "rejected"
    INACTIVE = "inactive"


ScanHandler = Callable[[str], Awaitable[Any]]


class RouterConfig(BaseModel):
    """
    Routing configuration.

    Frozen: the router swaps whole snapshots, so a scan never sees
    a half-updated handler set.
    """
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True
    )

    mode: ScanMode = ScanMode.PRODUCT_LOOKUP
    product_lookup_handler: Optional[ScanHandler] = None
    shelf_organization_handler: Optional[ScanHandler] = None

    def handler_for(self, mode: ScanMode) -> Optional[ScanHandler]:
        if mode == ScanMode.PRODUCT_LOOKUP:
            return self.product_lookup_handler
        return self.shelf_organization_handler


# ===================
# API SCHEMAS
# ===================

class ScanRequest(BaseSchema):
    """Decoded barcode pushed by the scanner."""

    barcode: str = Field(
        default="",
        max_length=128,
        description="Decoded barcode text"
    )


class ScanResponse(BaseSchema):
    """Outcome of a pushed scan."""

    barcode: str
    outcome: ScanOutcome
    mode: ScanMode


class ModeSwitchRequest(BaseSchema):
    """Switch the active scan mode."""

    mode: ScanMode
