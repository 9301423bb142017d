"""
Organizer panel visibility.

A second, independent state machine: the panel follows workflow changes
as a subscriber instead of the workflow flipping UI flags itself.

- awaiting_shelf_id / shelf_saved_options: expand (the operator must type
  or choose something)
- scanning_active: collapse when collapse_panel_while_scanning is set
- anything else: leave as is
"""

from typing import Callable, Optional
import structlog

from config import settings
from models.organization import PanelState, WorkflowState
from services.organization_service import OrganizationWorkflow

logger = structlog.get_logger(__name__)


EXPAND_ON = frozenset({
    WorkflowState.AWAITING_SHELF_ID,
    WorkflowState.SHELF_SAVED_OPTIONS,
})


class PanelVisibility:
    """Expanded/collapsed state of the organizer panel."""

    def __init__(
        self,
        collapse_while_scanning: Optional[bool] = None,
        initial: PanelState = PanelState.COLLAPSED
    ):
        self.state = initial
        self.collapse_while_scanning = (
            settings.collapse_panel_while_scanning
            if collapse_while_scanning is None
            else collapse_while_scanning
        )
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def is_expanded(self) -> bool:
        return self.state == PanelState.EXPANDED

    def attach(self, workflow: OrganizationWorkflow) -> None:
        """Follow state changes of a workflow."""
        self.detach()
        self._unsubscribe = workflow.subscribe(self.on_workflow_change)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def on_workflow_change(self, previous: WorkflowState, current: WorkflowState) -> None:
        if current in EXPAND_ON:
            self.expand()
        elif current == WorkflowState.SCANNING_ACTIVE and self.collapse_while_scanning:
            self.collapse()

    def expand(self) -> PanelState:
        if self.state != PanelState.EXPANDED:
            logger.debug("panel_expanded")
        self.state = PanelState.EXPANDED
        return self.state

    def collapse(self) -> PanelState:
        if self.state != PanelState.COLLAPSED:
            logger.debug("panel_collapsed")
        self.state = PanelState.COLLAPSED
        return self.state
