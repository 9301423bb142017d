"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema
from models.organization import (
    WorkflowState,
    PanelState,
    VALID_TRANSITIONS,
    CAPTURING_STATES,
    STATE_DESCRIPTIONS,
    is_valid_transition,
    get_available_next_states,
    ScannedProduct,
    OrganizationEvent,
    ShelfProductRow,
    StartShelfRequest,
    ReviewToggleRequest,
    OrganizationSnapshot,
    SaveShelfResponse,
)
from models.scanning import (
    ScanMode,
    ScanOutcome,
    ScanHandler,
    RouterConfig,
    ScanRequest,
    ScanResponse,
    ModeSwitchRequest,
)
from models.product import (
    ProductResponse,
    ProductLookupResult,
    ProductLookupView,
)
from models.missing_product import (
    MissingProductCreate,
    MissingProductResponse,
    MissingProductListResponse,
    ClearMissingProductsResponse,
)
from models.notification import (
    NotificationCode,
    NotificationLevel,
    Notification,
    NotificationListResponse,
)

__all__ = [
    # Base
    "BaseSchema",

    # Organization
    "WorkflowState",
    "PanelState",
    "VALID_TRANSITIONS",
    "CAPTURING_STATES",
    "STATE_DESCRIPTIONS",
    "is_valid_transition",
    "get_available_next_states",
    "ScannedProduct",
    "OrganizationEvent",
    "ShelfProductRow",
    "StartShelfRequest",
    "ReviewToggleRequest",
    "OrganizationSnapshot",
    "SaveShelfResponse",

    # Scanning
    "ScanMode",
    "ScanOutcome",
    "ScanHandler",
    "RouterConfig",
    "ScanRequest",
    "ScanResponse",
    "ModeSwitchRequest",

    # Product
    "ProductResponse",
    "ProductLookupResult",
    "ProductLookupView",

    # Missing products
    "MissingProductCreate",
    "MissingProductResponse",
    "MissingProductListResponse",
    "ClearMissingProductsResponse",

    # Notifications
    "NotificationCode",
    "NotificationLevel",
    "Notification",
    "NotificationListResponse",
]
