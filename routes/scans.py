"""
Scanner API routes.

The camera client decodes barcodes itself and pushes the text here.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import structlog

from models.scanning import ModeSwitchRequest, ScanRequest, ScanResponse
from services.scan_session_service import get_scan_station
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/scans", tags=["Scans"])


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


@router.post("", response_model=ScanResponse)
async def push_scan(data: ScanRequest):
    """
    Push one decoded barcode.

    Always 200: the outcome says whether the scan was used, ignored
    or suppressed.
    """
    try:
        station = get_scan_station()
        outcome = await station.on_barcode(data.barcode)
        return ScanResponse(barcode=data.barcode, outcome=outcome, mode=station.mode)

    except Exception as e:
        return handle_error(e)


@router.put("/mode", response_model=ModeSwitchRequest)
async def switch_mode(data: ModeSwitchRequest):
    """Hand the scanner to another mode."""
    try:
        mode = get_scan_station().switch_mode(data.mode)
        return ModeSwitchRequest(mode=mode)

    except Exception as e:
        return handle_error(e)
