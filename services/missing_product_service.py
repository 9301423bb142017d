"""
Missing product reports.

Barcodes that returned no product are reported with a short
description so the catalogue can be completed later.
"""

from typing import Optional
import structlog

from config import get_supabase_client, get_admin_client
from models.missing_product import MissingProductCreate, MissingProductResponse
from exceptions import DatabaseError

logger = structlog.get_logger(__name__)


class MissingProductService:
    """
    Missing product report operations.

    Handles reporting, listing, exporting and clearing reports.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "missing_products"

    def report(self, data: MissingProductCreate) -> MissingProductResponse:
        """
        Store a missing product report.

        Args:
            data: Barcode and description

        Returns:
            Stored report

        Raises:
            DatabaseError: If the insert fails
        """
        logger.info("reporting_missing_product", barcode=data.barcode_number)

        try:
            result = (
                self.db.table(self.table)
                .insert(data.model_dump())
                .execute()
            )
        except Exception as e:
            logger.error("report_missing_product_failed", barcode=data.barcode_number, error=str(e))
            raise DatabaseError("insert", str(e))

        row = result.data[0]
        row.setdefault("reported_at", row.get("created_at"))
        return MissingProductResponse(**row)

    def get_all(self) -> list[MissingProductResponse]:
        """
        Get all open reports, oldest first.

        Raises:
            DatabaseError: If the query fails
        """
        try:
            result = (
                self.db.table(self.table)
                .select("id, barcode_number, description, reported_at")
                .order("reported_at")
                .execute()
            )
        except Exception as e:
            logger.error("get_missing_products_failed", error=str(e))
            raise DatabaseError("select", str(e))

        reports = [MissingProductResponse(**row) for row in result.data]
        logger.info("missing_products_retrieved", count=len(reports))
        return reports

    def export_barcodes(self) -> str:
        """Reported barcodes, one per line."""
        return "\n".join(
            report.barcode_number
            for report in self.get_all()
            if report.barcode_number
        )

    def clear_all(self) -> int:
        """
        Delete every report.

        Uses the service role client when configured, since operators
        can only read and insert reports.

        Returns:
            Number of deleted reports (0 if the list was already empty)

        Raises:
            DatabaseError: If the delete fails
        """
        reports = self.get_all()
        if not reports:
            logger.info("missing_products_already_empty")
            return 0

        client = get_admin_client() or self.db
        ids = [report.id for report in reports]

        try:
            client.table(self.table).delete().in_("id", ids).execute()
        except Exception as e:
            logger.error("clear_missing_products_failed", count=len(ids), error=str(e))
            raise DatabaseError("delete", str(e))

        logger.info("missing_products_cleared", count=len(ids))
        return len(ids)


# Singleton instance
_missing_product_service: Optional[MissingProductService] = None


def get_missing_product_service() -> MissingProductService:
    """Get or create MissingProductService instance."""
    global _missing_product_service
    if _missing_product_service is None:
        _missing_product_service = MissingProductService()
    return _missing_product_service
