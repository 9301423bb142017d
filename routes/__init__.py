"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.products import router as products_router
from routes.scans import router as scans_router
from routes.organization import router as organization_router
from routes.missing_products import router as missing_products_router

__all__ = [
    "products_router",
    "scans_router",
    "organization_router",
    "missing_products_router",
]
