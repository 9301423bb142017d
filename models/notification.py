"""
Operator notification schemas.

Short, code-keyed messages the UI shows as toasts.
"""

from pydantic import Field
from typing import Any, Optional
from enum import Enum
from datetime import datetime

from models.base import BaseSchema


class NotificationCode(str, Enum):
    """Notification codes."""

    # Organization workflow
    EVENT_STARTED = "EVENT_STARTED"
    EVENT_ENDED = "EVENT_ENDED"
    SHELF_SCAN_STARTED = "SHELF_SCAN_STARTED"
    INVALID_SHELF_ID = "INVALID_SHELF_ID"
    REVIEW_MODE = "REVIEW_MODE"
    SCAN_MODE = "SCAN_MODE"
    SAVE_SUCCEEDED = "SAVE_SUCCEEDED"
    SAVE_FAILED = "SAVE_FAILED"
    NOTHING_TO_SAVE = "NOTHING_TO_SAVE"
    NEW_SHELF = "NEW_SHELF"
    SHELF_CANCELLED = "SHELF_CANCELLED"

    # Scanning
    SCAN_ACCEPTED = "SCAN_ACCEPTED"
    DUPLICATE_SCAN = "DUPLICATE_SCAN"
    SCAN_REJECTED_SAVING = "SCAN_REJECTED_SAVING"
    ROUTER_NOT_CONFIGURED = "ROUTER_NOT_CONFIGURED"
    SCAN_FAILED = "SCAN_FAILED"

    # Product lookup
    PRODUCT_FOUND = "PRODUCT_FOUND"
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    MISSING_PRODUCT_REPORTED = "MISSING_PRODUCT_REPORTED"


class NotificationLevel(str, Enum):
    """How the UI should style the message."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notification(BaseSchema):
    """One operator message."""

    code: NotificationCode = Field(..., description="Message code")
    level: NotificationLevel = Field(default=NotificationLevel.INFO)
    title: str = Field(..., min_length=1, max_length=200)
    message: Optional[str] = Field(None, max_length=1000)
    details: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(..., description="When it was raised")


class NotificationListResponse(BaseSchema):
    """Pending notifications for the UI."""

    data: list[Notification]
    total: int
