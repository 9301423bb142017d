"""
Product lookup API routes.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import structlog

from models.product import ProductResponse, ProductLookupView
from services.product_service import get_product_service
from services.scan_session_service import get_scan_station
from exceptions import AppError, ProductNotFoundError

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    # Unexpected error
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


# ===================
# ROUTES
# ===================

@router.get("/barcode/{barcode}", response_model=ProductResponse)
async def get_product_by_barcode(barcode: str):
    """
    Get a product by barcode.

    Raises:
        404: Product not found
    """
    try:
        service = get_product_service()
        return service.get_by_barcode(barcode)

    except ProductNotFoundError as e:
        return handle_error(e)
    except Exception as e:
        return handle_error(e)


@router.get("/lookup", response_model=ProductLookupView)
async def get_lookup_view():
    """Current lookup result and recent history of the lookup screen."""
    try:
        return get_scan_station().lookup.view()

    except Exception as e:
        return handle_error(e)


@router.post("/lookup/history/{barcode}", response_model=ProductLookupView)
async def select_from_history(barcode: str):
    """
    Show a past lookup again.

    Raises:
        404: Barcode not in history
    """
    try:
        lookup = get_scan_station().lookup
        if lookup.select_from_history(barcode) is None:
            raise ProductNotFoundError(barcode)
        return lookup.view()

    except Exception as e:
        return handle_error(e)


@router.post("/lookup/clear", response_model=ProductLookupView)
async def clear_lookup():
    """Clear the current result so the same product can be scanned again."""
    try:
        lookup = get_scan_station().lookup
        lookup.clear()
        return lookup.view()

    except Exception as e:
        return handle_error(e)
