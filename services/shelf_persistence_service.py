"""
Shelf persistence.

Writes saved shelves to org_products and resolves product names for
scanned barcodes. The Supabase client is synchronous, so the async
entry points run the queries with asyncio.to_thread and the event
loop keeps accepting scans meanwhile.
"""

import asyncio
from typing import Optional, Sequence
import structlog

from config import get_supabase_client
from models.organization import ScannedProduct, ShelfProductRow
from exceptions import (
    BlankShelfIdError,
    EmptyShelfError,
    MissingEventError,
    ShelfSaveError,
)

logger = structlog.get_logger(__name__)


class ShelfPersistenceService:
    """
    Persistence glue for the organization workflow.

    Handles the bulk shelf insert and the best-effort name lookup.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "org_products"
        self.products_table = "products"

    # ===================
    # NAME RESOLUTION
    # ===================

    def fetch_product_name(self, barcode: str) -> Optional[str]:
        """
        Read the product name for a barcode.

        Args:
            barcode: Scanned barcode

        Returns:
            Product name, or None if no product matches
        """
        result = (
            self.db.table(self.products_table)
            .select("product_name")
            .eq("barcode_number", barcode)
            .limit(1)
            .execute()
        )

        if not result or not result.data:
            return None

        return result.data[0].get("product_name") or None

    async def lookup_product_name(self, barcode: str) -> Optional[str]:
        """
        Resolve a product name without blocking the event loop.

        Any failure counts as "no match": an unresolved name never
        stops a shelf from being saved.

        Args:
            barcode: Scanned barcode

        Returns:
            Product name or None
        """
        logger.debug("looking_up_product_name", barcode=barcode)

        try:
            name = await asyncio.to_thread(self.fetch_product_name, barcode)
        except Exception as e:
            logger.warning(
                "product_name_lookup_failed",
                barcode=barcode,
                error=str(e),
                error_type=type(e).__name__
            )
            return None

        logger.debug("product_name_lookup_complete", barcode=barcode, found=name is not None)
        return name

    # ===================
    # SAVE
    # ===================

    def build_rows(
        self,
        event_id: Optional[str],
        shelf_id: Optional[str],
        products: Sequence[ScannedProduct]
    ) -> list[dict]:
        """
        Validate inputs and map scans to org_products rows.

        Raises:
            MissingEventError: No event id
            BlankShelfIdError: No shelf id
            EmptyShelfError: No products
        """
        if not event_id:
            raise MissingEventError()
        if not shelf_id or not shelf_id.strip():
            raise BlankShelfIdError(shelf_id)
        if not products:
            raise EmptyShelfError()

        return [
            ShelfProductRow(
                shelf=shelf_id,
                barcode_number=product.barcode,
                event_id=event_id,
            ).model_dump()
            for product in products
        ]

    def insert_rows(self, shelf_id: str, rows: list[dict]) -> int:
        """
        Bulk insert shelf rows.

        Returns:
            Number of inserted rows (row count of the batch if the
            response carries no data)

        Raises:
            ShelfSaveError: If the insert fails
        """
        try:
            result = self.db.table(self.table).insert(rows).execute()
        except Exception as e:
            logger.error(
                "save_shelf_products_failed",
                shelf_id=shelf_id,
                rows=len(rows),
                error=str(e),
                error_type=type(e).__name__
            )
            raise ShelfSaveError(
                shelf_id=shelf_id,
                message=getattr(e, "message", None) or str(e) or type(e).__name__,
                details=getattr(e, "details", None),
                hint=getattr(e, "hint", None),
                db_code=getattr(e, "code", None),
            ) from e

        inserted = len(result.data) if result is not None and result.data else 0
        return inserted or len(rows)

    async def save_shelf_products(
        self,
        event_id: Optional[str],
        shelf_id: Optional[str],
        products: Sequence[ScannedProduct]
    ) -> int:
        """
        Save a shelf as one bulk write.

        The write is all-or-nothing from the caller's view: either a count
        comes back or ShelfSaveError is raised.

        Args:
            event_id: Organization event id
            shelf_id: Shelf code
            products: Scanned products, in scan order

        Returns:
            Number of saved rows

        Raises:
            MissingEventError, BlankShelfIdError, EmptyShelfError: Invalid input
            ShelfSaveError: If the insert fails
        """
        rows = self.build_rows(event_id, shelf_id, products)

        logger.info(
            "saving_shelf_products",
            event_id=event_id,
            shelf_id=shelf_id,
            rows=len(rows)
        )

        count = await asyncio.to_thread(self.insert_rows, shelf_id, rows)

        logger.info(
            "shelf_products_saved",
            event_id=event_id,
            shelf_id=shelf_id,
            count=count
        )

        return count


# Singleton instance
_shelf_persistence_service: Optional[ShelfPersistenceService] = None


def get_shelf_persistence_service() -> ShelfPersistenceService:
    """Get or create ShelfPersistenceService instance."""
    global _shelf_persistence_service
    if _shelf_persistence_service is None:
        _shelf_persistence_service = ShelfPersistenceService()
    return _shelf_persistence_service
