"""
Business logic services.

Each service handles one domain area.
"""

from services.product_service import ProductService, get_product_service
from services.missing_product_service import MissingProductService, get_missing_product_service
from services.shelf_persistence_service import (
    ShelfPersistenceService,
    get_shelf_persistence_service,
)
from services.barcode_router import BarcodeRouter
from services.organization_service import OrganizationWorkflow
from services.scan_ingestion_service import ScanIngestionPipeline
from services.panel_service import PanelVisibility
from services.scan_session_service import (
    ModeController,
    ProductLookupController,
    ShelfOrganizationController,
    ScanStation,
    build_scan_station,
    get_scan_station,
    reset_scan_station,
)

__all__ = [
    "ProductService",
    "get_product_service",
    "MissingProductService",
    "get_missing_product_service",
    "ShelfPersistenceService",
    "get_shelf_persistence_service",
    "BarcodeRouter",
    "OrganizationWorkflow",
    "ScanIngestionPipeline",
    "PanelVisibility",
    "ModeController",
    "ProductLookupController",
    "ShelfOrganizationController",
    "ScanStation",
    "build_scan_station",
    "get_scan_station",
    "reset_scan_station",
]
