"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ConflictError,
    DatabaseError,

    # Products
    ProductNotFoundError,

    # Organization
    BlankShelfIdError,
    EmptyShelfError,
    MissingEventError,
    ConfirmationRequiredError,
    SaveInProgressError,
    ShelfSaveError,
    ScanRejectedError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "DatabaseError",

    # Products
    "ProductNotFoundError",

    # Organization
    "BlankShelfIdError",
    "EmptyShelfError",
    "MissingEventError",
    "ConfirmationRequiredError",
    "SaveInProgressError",
    "ShelfSaveError",
    "ScanRejectedError",
]
