"""
Scan sessions: which mode owns the scanner.

Each mode controller builds its own BarcodeRouter when the mode is
entered and resets and drops it when the mode is left, so cooldown
state never carries over from one mode to the other. ScanStation is the
single consumer of the scanner and forwards scans to the active
controller.
"""

import asyncio
from collections import deque
from datetime import datetime, timezone
from typing import Optional
import structlog

from config import settings
from integrations.notifications import Notifier
from models.notification import NotificationCode
from models.organization import OrganizationSnapshot
from models.product import ProductLookupResult, ProductLookupView
from models.scanning import RouterConfig, ScanMode, ScanOutcome
from services.barcode_router import BarcodeRouter
from services.organization_service import OrganizationWorkflow
from services.panel_service import PanelVisibility
from services.product_service import ProductService, get_product_service
from services.scan_ingestion_service import ScanIngestionPipeline
from services.shelf_persistence_service import (
    ShelfPersistenceService,
    get_shelf_persistence_service,
)

logger = structlog.get_logger(__name__)


class ModeController:
    """
    Base for mode controllers.

    Subclasses set `mode` and implement `router_config()`.
    """

    mode: ScanMode

    def __init__(self, notifier: Notifier, cooldown_seconds: Optional[float] = None):
        self.notifier = notifier
        self.cooldown_seconds = cooldown_seconds
        self.router: Optional[BarcodeRouter] = None

    @property
    def active(self) -> bool:
        return self.router is not None

    def router_config(self) -> RouterConfig:
        raise NotImplementedError

    def enter(self) -> BarcodeRouter:
        """Build this mode's router."""
        if self.router is None:
            self.router = BarcodeRouter(
                self.router_config(),
                cooldown_seconds=self.cooldown_seconds,
                notifier=self.notifier,
            )
            logger.info("scan_mode_entered", mode=self.mode.value)
        return self.router

    def exit(self) -> None:
        """Reset and drop the router."""
        if self.router is not None:
            self.router.reset()
            self.router = None
            logger.info("scan_mode_exited", mode=self.mode.value)

    async def handle_scan(self, barcode: Optional[str]) -> ScanOutcome:
        if self.router is None:
            logger.warning("scan_while_mode_inactive", mode=self.mode.value)
            return ScanOutcome.INACTIVE
        return await self.router.handle_scan(barcode)


class ProductLookupController(ModeController):
    """Single-product lookup mode."""

    mode = ScanMode.PRODUCT_LOOKUP

    def __init__(
        self,
        products: ProductService,
        notifier: Notifier,
        cooldown_seconds: Optional[float] = None,
        history_size: Optional[int] = None
    ):
        super().__init__(notifier, cooldown_seconds)
        self.products = products
        self.current: Optional[ProductLookupResult] = None
        self.history: deque[ProductLookupResult] = deque(
            maxlen=history_size or settings.lookup_history_size
        )

    def router_config(self) -> RouterConfig:
        return RouterConfig(
            mode=self.mode,
            product_lookup_handler=self.lookup,
        )

    async def lookup(self, barcode: str) -> ProductLookupResult:
        """
        Look a product up by barcode.

        Database errors propagate; the router reports them.
        """
        product = await asyncio.to_thread(self.products.find_by_barcode, barcode)
        result = ProductLookupResult(
            barcode=barcode,
            product=product,
            looked_up_at=datetime.now(timezone.utc),
        )
        self.current = result

        if product is None:
            self.notifier.notify(NotificationCode.PRODUCT_NOT_FOUND, barcode=barcode)
        else:
            self.history.appendleft(result)
            self.notifier.notify(
                NotificationCode.PRODUCT_FOUND,
                barcode=barcode,
                product_name=product.product_name
            )

        return result

    def select_from_history(self, barcode: str) -> Optional[ProductLookupResult]:
        """Show a past lookup again without querying."""
        for result in self.history:
            if result.barcode == barcode:
                self.current = result
                return result
        return None

    def clear(self) -> None:
        """Clear the current result so the same product can be scanned again."""
        self.current = None
        if self.router is not None:
            self.router.reset()

    def view(self) -> ProductLookupView:
        return ProductLookupView(current=self.current, history=list(self.history))


class ShelfOrganizationController(ModeController):
    """Shelf organization mode: workflow, ingestion and panel."""

    mode = ScanMode.SHELF_ORGANIZATION

    def __init__(
        self,
        persistence: ShelfPersistenceService,
        notifier: Notifier,
        cooldown_seconds: Optional[float] = None,
        panel: Optional[PanelVisibility] = None
    ):
        super().__init__(notifier, cooldown_seconds)
        self.workflow = OrganizationWorkflow(persistence, notifier)
        self.pipeline = ScanIngestionPipeline(self.workflow, persistence)
        self.panel = panel or PanelVisibility()
        self.panel.attach(self.workflow)

    def router_config(self) -> RouterConfig:
        return RouterConfig(
            mode=self.mode,
            shelf_organization_handler=self.pipeline.handle_scan,
        )

    def snapshot(self) -> OrganizationSnapshot:
        return self.workflow.snapshot(panel=self.panel.state)


class ScanStation:
    """
    Sole consumer of scanner output.

    Exactly one controller is active at a time.
    """

    def __init__(
        self,
        lookup: ProductLookupController,
        organization: ShelfOrganizationController,
        notifier: Notifier,
        initial_mode: ScanMode = ScanMode.PRODUCT_LOOKUP
    ):
        self.notifier = notifier
        self.controllers: dict[ScanMode, ModeController] = {
            ScanMode.PRODUCT_LOOKUP: lookup,
            ScanMode.SHELF_ORGANIZATION: organization,
        }
        self.mode = initial_mode
        self.active.enter()

    @property
    def active(self) -> ModeController:
        return self.controllers[self.mode]

    @property
    def lookup(self) -> ProductLookupController:
        return self.controllers[ScanMode.PRODUCT_LOOKUP]

    @property
    def organization(self) -> ShelfOrganizationController:
        return self.controllers[ScanMode.SHELF_ORGANIZATION]

    def switch_mode(self, mode: ScanMode) -> ScanMode:
        """Leave the current mode and enter another."""
        if mode == self.mode:
            return self.mode

        logger.info("switching_scan_mode", previous=self.mode.value, current=mode.value)
        self.active.exit()
        self.mode = mode
        self.active.enter()
        return self.mode

    async def on_barcode(self, text: Optional[str]) -> ScanOutcome:
        """Scanner callback."""
        return await self.active.handle_scan(text)

    def close(self) -> None:
        self.active.exit()


def build_scan_station(
    products: Optional[ProductService] = None,
    persistence: Optional[ShelfPersistenceService] = None,
    notifier: Optional[Notifier] = None,
    cooldown_seconds: Optional[float] = None,
    initial_mode: ScanMode = ScanMode.PRODUCT_LOOKUP
) -> ScanStation:
    """Wire a station with both controllers sharing one notifier."""
    notifier = notifier or Notifier()
    return ScanStation(
        lookup=ProductLookupController(
            products or get_product_service(),
            notifier,
            cooldown_seconds=cooldown_seconds,
        ),
        organization=ShelfOrganizationController(
            persistence or get_shelf_persistence_service(),
            notifier,
            cooldown_seconds=cooldown_seconds,
        ),
        notifier=notifier,
        initial_mode=initial_mode,
    )


# Singleton instance
_scan_station: Optional[ScanStation] = None


def get_scan_station() -> ScanStation:
    """Get or create the ScanStation."""
    global _scan_station
    if _scan_station is None:
        _scan_station = build_scan_station()
    return _scan_station


def reset_scan_station() -> None:
    """Drop the station (tests, shutdown)."""
    global _scan_station
    if _scan_station is not None:
        _scan_station.close()
    _scan_station = None
