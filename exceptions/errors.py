"""
Custom exception classes for the application.

Every error carries a stable code so the operator UI can pick its message.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "PRODUCT_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ConflictError(AppError):
    """Request conflicts with the current state (409)."""

    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )


# ===================
# PRODUCT ERRORS
# ===================

class ProductNotFoundError(NotFoundError):
    """No product registered for a barcode."""

    def __init__(self, barcode: str):
        super().__init__(
            resource="Product",
            identifier=barcode,
            code="PRODUCT_NOT_FOUND"
        )


# ===================
# ORGANIZATION ERRORS
# ===================

class BlankShelfIdError(ValidationError):
    """Shelf code missing or whitespace only."""

    def __init__(self, shelf_id: Optional[str] = None):
        super().__init__(
            code="INVALID_SHELF_ID",
            message="Enter a valid shelf code",
            details={"provided": shelf_id}
        )


class EmptyShelfError(ValidationError):
    """Save attempted without scanned products."""

    def __init__(self):
        super().__init__(
            code="EMPTY_SHELF",
            message="There are no scanned products to save"
        )


class MissingEventError(ValidationError):
    """No organization event is running."""

    def __init__(self):
        super().__init__(
            code="NO_ACTIVE_EVENT",
            message="Start an organization event first"
        )


class ConfirmationRequiredError(ConflictError):
    """Destructive action on unsaved items needs operator confirmation."""

    def __init__(self, action: str, unsaved_count: int):
        super().__init__(
            code="CONFIRMATION_REQUIRED",
            message=f"{unsaved_count} unsaved items will be discarded",
            details={"action": action, "unsaved_count": unsaved_count}
        )


class SaveInProgressError(ConflictError):
    """A shelf save is already running."""

    def __init__(self, shelf_id: str):
        super().__init__(
            code="SAVE_IN_PROGRESS",
            message="The shelf is already being saved",
            details={"shelf_id": shelf_id}
        )


class ShelfSaveError(DatabaseError):
    """
    Bulk insert of a shelf failed.

    Keeps the PostgREST error fields (message, details, hint, code)
    so the operator sees why the save was refused.
    """

    def __init__(
        self,
        shelf_id: str,
        message: str,
        details: Optional[str] = None,
        hint: Optional[str] = None,
        db_code: Optional[str] = None
    ):
        super().__init__(
            operation="insert",
            message=message,
            details={
                "shelf_id": shelf_id,
                "details": details,
                "hint": hint,
                "db_code": db_code,
            }
        )
        self.code = "SHELF_SAVE_FAILED"
        self.reason = message


class ScanRejectedError(ConflictError):
    """
    A routed scan was not added to the shelf.

    Raised by the ingestion handler so the router does not count the
    scan as accepted or start its cooldown.
    """

    def __init__(self, barcode: str, reason: str):
        super().__init__(
            code="SCAN_REJECTED",
            message=f"Scan {barcode} was not added: {reason}",
            details={"barcode": barcode, "reason": reason}
        )
        self.reason = reason
