"""
Scan ingestion and name resolution.

Turns routed shelf-organization scans into list entries:

1. The entry is appended right away with no name, so the operator
   sees the scan immediately.
2. The name lookup runs as its own task; the scan stream never waits
   for it.
3. A finished lookup writes only to the entry its scan created,
   identified by (barcode, timestamp), and only if the shelf it was
   scanned on is still the current one.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Optional
import structlog

from models.notification import NotificationCode
from models.organization import OrganizationEvent, ScannedProduct
from services.organization_service import OrganizationWorkflow
from services.shelf_persistence_service import ShelfPersistenceService
from exceptions import ScanRejectedError

logger = structlog.get_logger(__name__)


class ScanIngestionPipeline:
    """
    Appends scans to the workflow's shelf and resolves their names.

    Repeated barcodes are kept as separate entries; the operator gets
    a "scanned again" notice instead of a rejection.
    """

    def __init__(
        self,
        workflow: OrganizationWorkflow,
        persistence: ShelfPersistenceService
    ):
        self.workflow = workflow
        self.persistence = persistence
        self._tasks: set[asyncio.Task] = set()

    @property
    def notifier(self):
        return self.workflow.notifier

    @property
    def pending_resolutions(self) -> int:
        return len(self._tasks)

    # ===================
    # INGESTION
    # ===================

    async def handle_scan(self, barcode: str) -> Optional[ScannedProduct]:
        """Router handler for shelf organization mode."""
        return self.ingest(barcode)

    def ingest(self, barcode: str) -> Optional[ScannedProduct]:
        """
        Append a scan to the current shelf and start its name lookup.

        Must run inside the event loop.

        Args:
            barcode: Router-accepted barcode

        Returns:
            The new entry (None for a blank barcode)

        Raises:
            ScanRejectedError: No shelf is being captured, or the shelf
                is being saved
        """
        barcode = (barcode or "").strip()
        if not barcode:
            return None

        workflow = self.workflow
        event = workflow.event

        if event is None or not workflow.is_capturing:
            logger.info(
                "scan_ignored_not_capturing",
                barcode=barcode,
                state=workflow.state.value
            )
            raise ScanRejectedError(barcode, "not_capturing")

        if workflow.is_loading:
            logger.warning(
                "scan_rejected_while_saving",
                barcode=barcode,
                shelf_id=event.current_shelf_id
            )
            self.notifier.notify(NotificationCode.SCAN_REJECTED_SAVING, barcode=barcode)
            raise ScanRejectedError(barcode, "saving")

        previous = sum(1 for p in event.products if p.barcode == barcode)

        product = ScannedProduct(
            barcode=barcode,
            timestamp=self._next_timestamp(event),
            product_name=None,
        )
        event.products.append(product)

        logger.info(
            "product_scanned",
            barcode=barcode,
            shelf_id=event.current_shelf_id,
            position=len(event.products),
            repeat=previous > 0
        )

        if previous:
            self.notifier.notify(
                NotificationCode.DUPLICATE_SCAN,
                barcode=barcode,
                count=previous + 1
            )
        else:
            self.notifier.notify(NotificationCode.SCAN_ACCEPTED, barcode=barcode)

        task = asyncio.get_running_loop().create_task(
            self._resolve_name(event.capture_id, product.barcode, product.timestamp)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        return product

    @staticmethod
    def _next_timestamp(event: OrganizationEvent) -> datetime:
        # Timestamps identify entries, so they must strictly increase
        now = datetime.now(timezone.utc)
        if event.products:
            last = event.products[-1].timestamp
            if now <= last:
                now = last + timedelta(microseconds=1)
        return now

    # ===================
    # NAME RESOLUTION
    # ===================

    async def _resolve_name(self, capture_id: str, barcode: str, timestamp: datetime) -> None:
        name = await self.persistence.lookup_product_name(barcode)
        if name is None:
            logger.debug("product_name_unresolved", barcode=barcode)
            return
        self.apply_product_name(capture_id, barcode, timestamp, name)

    def apply_product_name(
        self,
        capture_id: str,
        barcode: str,
        timestamp: datetime,
        name: str
    ) -> bool:
        """
        Set the name on the entry created by one scan.

        Args:
            capture_id: Capture the scan was appended to
            barcode: Scanned barcode
            timestamp: Scan timestamp
            name: Resolved product name

        Returns:
            True if an entry was updated. False when the shelf was
            cleared since, the entry is gone, or it already has a name.
        """
        event = self.workflow.event
        if event is None or event.capture_id != capture_id:
            logger.info("stale_name_resolution_discarded", barcode=barcode)
            return False

        # Newest entries first: the target is usually at the end
        for product in reversed(event.products):
            if product.barcode == barcode and product.timestamp == timestamp:
                if product.product_name is not None:
                    return False
                product.product_name = name
                logger.debug("product_name_resolved", barcode=barcode, product_name=name)
                return True

        return False

    async def drain(self) -> None:
        """Wait for all pending name lookups."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
