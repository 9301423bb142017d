"""
Shelf organization API routes.

Thin layer over the organization workflow of the scan station. Every
route answers with the workflow snapshot so the UI can re-render from
one payload.
"""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
import structlog

from models.notification import NotificationListResponse
from models.organization import (
    OrganizationSnapshot,
    ReviewToggleRequest,
    SaveShelfResponse,
    StartShelfRequest,
    WorkflowState,
)
from models.scanning import ScanMode
from services.scan_session_service import get_scan_station
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/organization", tags=["Organization"])


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
# STATE
# ===================

@router.get("", response_model=OrganizationSnapshot)
async def get_organization_state():
    """Current workflow state, shelf and scanned products."""
    try:
        return get_scan_station().organization.snapshot()

    except Exception as e:
        return handle_error(e)


@router.get("/notifications", response_model=NotificationListResponse)
async def get_notifications():
    """Pending operator notifications (cleared once read)."""
    try:
        pending = get_scan_station().notifier.drain()
        return NotificationListResponse(data=pending, total=len(pending))

    except Exception as e:
        return handle_error(e)


# ===================
# EVENT
# ===================

@router.post("/event/start", response_model=OrganizationSnapshot)
async def start_event():
    """Start an organization event and hand the scanner to shelf organization."""
    try:
        station = get_scan_station()
        station.organization.workflow.start_organization_event()
        if station.organization.workflow.state != WorkflowState.IDLE:
            station.switch_mode(ScanMode.SHELF_ORGANIZATION)
        return station.organization.snapshot()

    except Exception as e:
        return handle_error(e)


@router.post("/event/end", response_model=OrganizationSnapshot)
async def end_event(
    confirm: bool = Query(False, description="Discard unsaved products")
):
    """
    End the organization event and give the scanner back to product lookup.

    Raises:
        409: Unsaved products and no confirmation, or a save is running
    """
    try:
        station = get_scan_station()
        state = station.organization.workflow.end_organization_event(confirmed=confirm)
        if state == WorkflowState.IDLE:
            station.switch_mode(ScanMode.PRODUCT_LOOKUP)
        return station.organization.snapshot()

    except Exception as e:
        return handle_error(e)


# ===================
# SHELF
# ===================

@router.post("/shelf/start", response_model=OrganizationSnapshot)
async def start_shelf(data: StartShelfRequest):
    """
    Start scanning a shelf.

    Raises:
        422: Blank shelf code
    """
    try:
        organization = get_scan_station().organization
        organization.workflow.start_shelf_scan(data.shelf_id)
        return organization.snapshot()

    except Exception as e:
        return handle_error(e)


@router.post("/shelf/review", response_model=OrganizationSnapshot)
async def toggle_review(data: ReviewToggleRequest):
    """Switch between scanning and reviewing the shelf."""
    try:
        organization = get_scan_station().organization
        organization.workflow.toggle_scanning_mode(data.reviewing)
        return organization.snapshot()

    except Exception as e:
        return handle_error(e)


@router.post("/shelf/save", response_model=SaveShelfResponse)
async def save_shelf():
    """
    Save the scanned products of the current shelf.

    Raises:
        409: Save already running or state cannot save
        422: Nothing scanned
        500: Database insert failed (products are kept for a retry)
    """
    try:
        workflow = get_scan_station().organization.workflow
        shelf_id = workflow.event.current_shelf_id if workflow.event else ""
        count = await workflow.save_shelf()
        if count is None:
            return JSONResponse(
                status_code=409,
                content={
                    "error": {
                        "code": "INVALID_STATE",
                        "message": f"Cannot save a shelf while {workflow.state.value}"
                    }
                }
            )
        return SaveShelfResponse(shelf_id=shelf_id, saved_count=count, state=workflow.state)

    except Exception as e:
        return handle_error(e)


@router.post("/shelf/new", response_model=OrganizationSnapshot)
async def new_shelf():
    """Continue with the next shelf after a save."""
    try:
        organization = get_scan_station().organization
        organization.workflow.start_new_shelf()
        return organization.snapshot()

    except Exception as e:
        return handle_error(e)


@router.post("/shelf/cancel", response_model=OrganizationSnapshot)
async def cancel_shelf(
    confirm: bool = Query(False, description="Discard scanned products")
):
    """
    Discard the shelf being scanned.

    Raises:
        409: Products scanned and no confirmation, or a save is running
    """
    try:
        organization = get_scan_station().organization
        organization.workflow.cancel_current_shelf(confirmed=confirm)
        return organization.snapshot()

    except Exception as e:
        return handle_error(e)


# ===================
# PANEL
# ===================

@router.post("/panel/expand", response_model=OrganizationSnapshot)
async def expand_panel():
    """Open the organizer panel."""
    try:
        organization = get_scan_station().organization
        organization.panel.expand()
        return organization.snapshot()

    except Exception as e:
        return handle_error(e)


@router.post("/panel/collapse", response_model=OrganizationSnapshot)
async def collapse_panel():
    """Fold the organizer panel away (scanning stays active)."""
    try:
        organization = get_scan_station().organization
        organization.panel.collapse()
        return organization.snapshot()

    except Exception as e:
        return handle_error(e)
