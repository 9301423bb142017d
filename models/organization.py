"""
Shelf organization schemas and workflow states.

The transition table lives here, next to the states, so services
and tests share one source for what moves are legal.
"""

from pydantic import Field
from typing import Optional
from enum import Enum
from datetime import datetime
from uuid import uuid4

from models.base import BaseSchema


class WorkflowState(str, Enum):
    """Organization workflow states."""
    IDLE = "idle"
    AWAITING_SHELF_ID = "awaiting_shelf_id"
    SCANNING_ACTIVE = "scanning_active"
    REVIEWING_SHELF = "reviewing_shelf"
    SHELF_SAVED_OPTIONS = "shelf_saved_options"


VALID_TRANSITIONS: dict[WorkflowState, tuple[WorkflowState, ...]] = {
    WorkflowState.IDLE: (
        WorkflowState.AWAITING_SHELF_ID,
    ),
    WorkflowState.AWAITING_SHELF_ID: (
        WorkflowState.SCANNING_ACTIVE,
        WorkflowState.IDLE,
    ),
    WorkflowState.SCANNING_ACTIVE: (
        WorkflowState.REVIEWING_SHELF,
        WorkflowState.SHELF_SAVED_OPTIONS,
        WorkflowState.AWAITING_SHELF_ID,
    ),
    WorkflowState.REVIEWING_SHELF: (
        WorkflowState.SCANNING_ACTIVE,
        WorkflowState.SHELF_SAVED_OPTIONS,
        WorkflowState.AWAITING_SHELF_ID,
    ),
    WorkflowState.SHELF_SAVED_OPTIONS: (
        WorkflowState.AWAITING_SHELF_ID,
        WorkflowState.IDLE,
    ),
}

# States in which scans are appended to the shelf
CAPTURING_STATES = frozenset({
    WorkflowState.SCANNING_ACTIVE,
    WorkflowState.REVIEWING_SHELF,
})

STATE_DESCRIPTIONS: dict[WorkflowState, str] = {
    WorkflowState.IDLE: "No organization event is active",
    WorkflowState.AWAITING_SHELF_ID: "Event started, waiting for shelf ID input",
    WorkflowState.SCANNING_ACTIVE: "Actively scanning products for a shelf",
    WorkflowState.REVIEWING_SHELF: "Reviewing scanned products",
    WorkflowState.SHELF_SAVED_OPTIONS: "Shelf saved, showing options for next steps",
}


def is_valid_transition(current: WorkflowState, new: WorkflowState) -> bool:
    """
    Check if a workflow transition is allowed.

    Rules:
    - Only edges listed in VALID_TRANSITIONS are allowed
    - Staying in the same state is not a transition
    - idle is a resting state, not a terminal one
    """
    return new in VALID_TRANSITIONS.get(current, ())


def get_available_next_states(current: WorkflowState) -> list[WorkflowState]:
    """States reachable from current in one step."""
    return list(VALID_TRANSITIONS.get(current, ()))


class PanelState(str, Enum):
    """Visibility of the organizer panel."""
    EXPANDED = "expanded"
    COLLAPSED = "collapsed"


# ===================
# SHELF CAPTURE
# ===================

class ScannedProduct(BaseSchema):
    """
    One scan captured for the current shelf.

    The same barcode may appear several times on a shelf, so entries
    are identified by (barcode, timestamp).
    """

    barcode: str = Field(
        ...,
        min_length=1,
        description="Scanned barcode"
    )
    timestamp: datetime = Field(
        ...,
        description="When the scan was accepted (unique within a shelf)"
    )
    product_name: Optional[str] = Field(
        None,
        description="Product name, filled in once the lookup completes"
    )

    @property
    def key(self) -> tuple[str, datetime]:
        return (self.barcode, self.timestamp)


def new_capture_id() -> str:
    return uuid4().hex


class OrganizationEvent(BaseSchema):
    """
    Shelf organization session.

    capture_id changes every time the product list is cleared, so
    late name lookups can tell their shelf is gone.
    """

    event_id: str = Field(..., min_length=1, description="Event identifier")
    current_shelf_id: str = Field(default="", description="Shelf being scanned")
    products: list[ScannedProduct] = Field(default_factory=list)
    capture_id: str = Field(default_factory=new_capture_id)

    @property
    def has_unsaved_products(self) -> bool:
        return len(self.products) > 0


class ShelfProductRow(BaseSchema):
    """One row of the org_products bulk insert."""

    shelf: str = Field(..., min_length=1)
    barcode_number: str = Field(..., min_length=1)
    event_id: str = Field(..., min_length=1)


# ===================
# API SCHEMAS
# ===================

class StartShelfRequest(BaseSchema):
    """Start scanning a shelf."""

    shelf_id: str = Field(
        ...,
        max_length=50,
        description="Shelf code entered by the operator",
        examples=["A1", "B-12"]
    )


class ReviewToggleRequest(BaseSchema):
    """Switch between capture and review."""

    reviewing: bool = Field(..., description="True to review, False to keep scanning")


class OrganizationSnapshot(BaseSchema):
    """Read-only view of the workflow for the operator UI."""

    state: WorkflowState
    state_description: str
    event_id: Optional[str] = None
    shelf_id: Optional[str] = None
    products: list[ScannedProduct] = Field(default_factory=list)
    product_count: int = 0
    is_loading: bool = False
    panel: PanelState = PanelState.EXPANDED
    available_transitions: list[WorkflowState] = Field(default_factory=list)


class SaveShelfResponse(BaseSchema):
    """Result of a successful shelf save."""

    shelf_id: str
    saved_count: int
    state: WorkflowState
