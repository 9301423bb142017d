"""
Shelf organization workflow.

Finite state machine for an organization event. The transition table
is in models.organization; every state change goes through
OrganizationWorkflow.transition, which refuses edges that are not in
the table and leaves the state as it was.

Subscribers (panel visibility, UI bridges) are told about every
successful change as (previous, current).
"""

import random
from typing import Callable, Optional
import structlog

from integrations.notifications import Notifier
from models.notification import NotificationCode
from models.organization import (
    CAPTURING_STATES,
    STATE_DESCRIPTIONS,
    OrganizationEvent,
    OrganizationSnapshot,
    PanelState,
    ScannedProduct,
    WorkflowState,
    get_available_next_states,
    is_valid_transition,
    new_capture_id,
)
from services.shelf_persistence_service import ShelfPersistenceService
from exceptions import (
    BlankShelfIdError,
    ConfirmationRequiredError,
    EmptyShelfError,
    SaveInProgressError,
    ShelfSaveError,
)

logger = structlog.get_logger(__name__)


WorkflowListener = Callable[[WorkflowState, WorkflowState], None]


def generate_event_id() -> str:
    """Random 8-digit event id."""
    return str(random.randint(10_000_000, 99_999_999))


class OrganizationWorkflow:
    """
    Organization event state machine.

    Owns the current OrganizationEvent. The product list is mutated
    only by the ingestion pipeline (appends, names) and by the reset
    operations here.
    """

    def __init__(
        self,
        persistence: ShelfPersistenceService,
        notifier: Optional[Notifier] = None
    ):
        self.persistence = persistence
        self.notifier = notifier or Notifier()
        self.state = WorkflowState.IDLE
        self.event: Optional[OrganizationEvent] = None
        self.is_loading = False
        self._listeners: list[WorkflowListener] = []

    # ===================
    # STATE MACHINE
    # ===================

    def subscribe(self, listener: WorkflowListener) -> Callable[[], None]:
        """
        Register a state change listener.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def can_transition(self, new_state: WorkflowState) -> bool:
        return is_valid_transition(self.state, new_state)

    def transition(self, new_state: WorkflowState) -> WorkflowState:
        """
        Move to new_state if the edge exists.

        Args:
            new_state: Target state

        Returns:
            The state after the call (unchanged when refused)
        """
        previous = self.state
        if not is_valid_transition(previous, new_state):
            logger.error(
                "invalid_state_transition",
                current=previous.value,
                requested=new_state.value
            )
            return previous

        self.state = new_state
        logger.info(
            "workflow_state_changed",
            previous=previous.value,
            current=new_state.value
        )

        for listener in list(self._listeners):
            listener(previous, new_state)

        return new_state

    def _refuse(self, operation: str, requested: WorkflowState) -> WorkflowState:
        logger.error(
            "invalid_state_transition",
            operation=operation,
            current=self.state.value,
            requested=requested.value
        )
        return self.state

    # ===================
    # READ
    # ===================

    @property
    def products(self) -> list[ScannedProduct]:
        """Copy of the current product list."""
        if self.event is None:
            return []
        return [p.model_copy() for p in self.event.products]

    @property
    def is_capturing(self) -> bool:
        return self.event is not None and self.state in CAPTURING_STATES

    def snapshot(self, panel: PanelState = PanelState.EXPANDED) -> OrganizationSnapshot:
        """Read-only view for the UI."""
        products = self.products
        return OrganizationSnapshot(
            state=self.state,
            state_description=STATE_DESCRIPTIONS[self.state],
            event_id=self.event.event_id if self.event else None,
            shelf_id=(self.event.current_shelf_id or None) if self.event else None,
            products=products,
            product_count=len(products),
            is_loading=self.is_loading,
            panel=panel,
            available_transitions=get_available_next_states(self.state),
        )

    # ===================
    # EVENT LIFECYCLE
    # ===================

    def start_organization_event(self) -> WorkflowState:
        """
        Start a new organization event.

        Only meaningful from idle.

        Returns:
            The state after the call
        """
        if self.state != WorkflowState.IDLE:
            return self._refuse("start_organization_event", WorkflowState.AWAITING_SHELF_ID)

        self.event = OrganizationEvent(event_id=generate_event_id())
        logger.info("organization_event_started", event_id=self.event.event_id)

        state = self.transition(WorkflowState.AWAITING_SHELF_ID)
        self.notifier.notify(NotificationCode.EVENT_STARTED, event_id=self.event.event_id)
        return state

    def end_organization_event(self, confirmed: bool = False) -> WorkflowState:
        """
        End the event and drop all its state.

        From scanning_active or reviewing_shelf the workflow passes
        through awaiting_shelf_id, the only legal way back to idle.

        Args:
            confirmed: Operator confirmed discarding unsaved products

        Returns:
            The state after the call

        Raises:
            SaveInProgressError: A shelf save is running
            ConfirmationRequiredError: Unsaved products and no confirmation
        """
        if self.state == WorkflowState.IDLE or self.event is None:
            return self._refuse("end_organization_event", WorkflowState.IDLE)

        if self.is_loading:
            raise SaveInProgressError(self.event.current_shelf_id)

        unsaved = len(self.event.products)
        if unsaved and not confirmed:
            raise ConfirmationRequiredError("end_organization_event", unsaved)

        event_id = self.event.event_id

        if self.state in CAPTURING_STATES:
            self.transition(WorkflowState.AWAITING_SHELF_ID)

        state = self.transition(WorkflowState.IDLE)
        if state != WorkflowState.IDLE:
            return state

        self.event = None
        logger.info("organization_event_ended", event_id=event_id, discarded=unsaved)
        self.notifier.notify(NotificationCode.EVENT_ENDED, event_id=event_id)
        return state

    # ===================
    # SHELF LIFECYCLE
    # ===================

    def start_shelf_scan(self, shelf_id: Optional[str]) -> WorkflowState:
        """
        Start scanning a shelf.

        Args:
            shelf_id: Shelf code entered by the operator

        Returns:
            The state after the call

        Raises:
            BlankShelfIdError: If shelf_id is blank
        """
        if not shelf_id or not shelf_id.strip():
            self.notifier.notify(NotificationCode.INVALID_SHELF_ID)
            raise BlankShelfIdError(shelf_id)

        if self.event is None or self.state != WorkflowState.AWAITING_SHELF_ID:
            return self._refuse("start_shelf_scan", WorkflowState.SCANNING_ACTIVE)

        shelf_id = shelf_id.strip()
        self._clear_products()
        self.event.current_shelf_id = shelf_id

        state = self.transition(WorkflowState.SCANNING_ACTIVE)
        self.notifier.notify(NotificationCode.SHELF_SCAN_STARTED, shelf_id=shelf_id)
        return state

    def toggle_scanning_mode(self, to_reviewing: bool) -> WorkflowState:
        """
        Switch between capturing and reviewing the shelf.

        The product list and the scan stream are left alone; scans keep
        being added while reviewing.

        Returns:
            The state after the call
        """
        target = WorkflowState.REVIEWING_SHELF if to_reviewing else WorkflowState.SCANNING_ACTIVE
        if self.state == target:
            return self.state
        if self.state not in CAPTURING_STATES:
            return self._refuse("toggle_scanning_mode", target)

        state = self.transition(target)
        self.notifier.notify(
            NotificationCode.REVIEW_MODE if to_reviewing else NotificationCode.SCAN_MODE
        )
        return state

    async def save_shelf(self) -> Optional[int]:
        """
        Save the current shelf.

        On success the list is cleared and the workflow moves to
        shelf_saved_options. On failure nothing changes, so the operator
        can retry without scanning again. While the insert runs, scans are
        refused and the shelf cannot be cancelled or the event ended.

        Returns:
            Saved row count, or None when the current state cannot save

        Raises:
            SaveInProgressError: A save is already running
            EmptyShelfError: Nothing scanned
            BlankShelfIdError: No shelf id
            ShelfSaveError: The bulk insert failed
        """
        event = self.event

        if self.is_loading:
            raise SaveInProgressError(event.current_shelf_id if event else "")

        if event is None or not event.products:
            self.notifier.notify(NotificationCode.NOTHING_TO_SAVE)
            raise EmptyShelfError()

        if not event.current_shelf_id:
            self.notifier.notify(NotificationCode.INVALID_SHELF_ID)
            raise BlankShelfIdError(event.current_shelf_id)

        if not self.can_transition(WorkflowState.SHELF_SAVED_OPTIONS):
            self._refuse("save_shelf", WorkflowState.SHELF_SAVED_OPTIONS)
            return None

        shelf_id = event.current_shelf_id
        products = list(event.products)

        self.is_loading = True
        try:
            count = await self.persistence.save_shelf_products(event.event_id, shelf_id, products)
        except ShelfSaveError as e:
            self.notifier.notify(NotificationCode.SAVE_FAILED, shelf_id=shelf_id, reason=e.reason)
            raise
        finally:
            self.is_loading = False

        self._clear_products()
        self.transition(WorkflowState.SHELF_SAVED_OPTIONS)
        self.notifier.notify(NotificationCode.SAVE_SUCCEEDED, shelf_id=shelf_id, count=count)
        return count

    def start_new_shelf(self) -> WorkflowState:
        """
        Prepare for the next shelf after a save.

        Returns:
            The state after the call
        """
        if self.event is None or self.state != WorkflowState.SHELF_SAVED_OPTIONS:
            return self._refuse("start_new_shelf", WorkflowState.AWAITING_SHELF_ID)

        self._clear_products()
        self.event.current_shelf_id = ""

        state = self.transition(WorkflowState.AWAITING_SHELF_ID)
        self.notifier.notify(NotificationCode.NEW_SHELF)
        return state

    def cancel_current_shelf(self, confirmed: bool = False) -> WorkflowState:
        """
        Discard the shelf being scanned.

        Args:
            confirmed: Operator confirmed discarding scanned products

        Returns:
            The state after the call

        Raises:
            SaveInProgressError: The shelf is being saved
            ConfirmationRequiredError: Products scanned and no confirmation
        """
        if self.event is None or self.state not in CAPTURING_STATES:
            return self._refuse("cancel_current_shelf", WorkflowState.AWAITING_SHELF_ID)

        if self.is_loading:
            raise SaveInProgressError(self.event.current_shelf_id)

        discarded = len(self.event.products)
        if discarded and not confirmed:
            raise ConfirmationRequiredError("cancel_current_shelf", discarded)

        shelf_id = self.event.current_shelf_id
        self._clear_products()
        self.event.current_shelf_id = ""

        state = self.transition(WorkflowState.AWAITING_SHELF_ID)
        logger.info("shelf_cancelled", shelf_id=shelf_id, discarded=discarded)
        self.notifier.notify(NotificationCode.SHELF_CANCELLED, shelf_id=shelf_id, count=discarded)
        return state

    def _clear_products(self) -> None:
        # New capture id: pending name lookups for the old list are dropped
        self.event.products = []
        self.event.capture_id = new_capture_id()
