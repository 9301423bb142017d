"""
Missing product report API routes.
"""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse, PlainTextResponse
import structlog

from models.missing_product import (
    MissingProductCreate,
    MissingProductResponse,
    MissingProductListResponse,
    ClearMissingProductsResponse,
)
from models.notification import NotificationCode
from services.missing_product_service import get_missing_product_service
from services.scan_session_service import get_scan_station
from exceptions import AppError, ConfirmationRequiredError

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/missing-products", tags=["Missing products"])


def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


@router.get("", response_model=MissingProductListResponse)
async def list_missing_products():
    """List open missing product reports."""
    try:
        reports = get_missing_product_service().get_all()
        return MissingProductListResponse(data=reports, total=len(reports))

    except Exception as e:
        return handle_error(e)


@router.post("", response_model=MissingProductResponse, status_code=201)
async def report_missing_product(data: MissingProductCreate):
    """
    Report a barcode that has no product.

    Raises:
        422: Missing description
    """
    try:
        report = get_missing_product_service().report(data)
        get_scan_station().notifier.notify(
            NotificationCode.MISSING_PRODUCT_REPORTED,
            barcode=report.barcode_number
        )
        return report

    except Exception as e:
        return handle_error(e)


@router.get("/export", response_class=PlainTextResponse)
async def export_missing_barcodes():
    """Reported barcodes, one per line (for copy/paste)."""
    try:
        return get_missing_product_service().export_barcodes()

    except Exception as e:
        return handle_error(e)


@router.delete("", response_model=ClearMissingProductsResponse)
async def clear_missing_products(
    confirm: bool = Query(False, description="Confirm deleting every report")
):
    """
    Delete every report.

    Raises:
        409: Not confirmed
    """
    try:
        service = get_missing_product_service()
        if not confirm:
            pending = len(service.get_all())
            if pending:
                raise ConfirmationRequiredError("clear_missing_products", pending)
        return ClearMissingProductsResponse(deleted=service.clear_all())

    except Exception as e:
        return handle_error(e)
