"""
Product service for barcode lookups.
"""

from typing import Optional
import structlog

from config import get_supabase_client
from models.product import ProductResponse
from exceptions import (
    ProductNotFoundError,
    DatabaseError
)

logger = structlog.get_logger(__name__)


class ProductService:
    """
    Product catalogue reads.

    The catalogue is maintained outside this service; scans only read it.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "products"
        self.columns = "product_name, price, barcode_number, category"

    def get_by_barcode(self, barcode: str) -> ProductResponse:
        """
        Get a product by barcode.

        Args:
            barcode: Scanned barcode

        Returns:
            ProductResponse

        Raises:
            ProductNotFoundError: If no product has this barcode
            DatabaseError: If the query fails
        """
        barcode = barcode.strip()
        logger.debug("getting_product_by_barcode", barcode=barcode)

        try:
            result = (
                self.db.table(self.table)
                .select(self.columns)
                .eq("barcode_number", barcode)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error("get_product_by_barcode_failed", barcode=barcode, error=str(e))
            raise DatabaseError("select", str(e))

        if not result.data:
            raise ProductNotFoundError(barcode)

        product = ProductResponse(**result.data[0])

        logger.info(
            "product_retrieved",
            barcode=barcode,
            product_name=product.product_name
        )

        return product

    def find_by_barcode(self, barcode: str) -> Optional[ProductResponse]:
        """Same as get_by_barcode, but None when not found."""
        try:
            return self.get_by_barcode(barcode)
        except ProductNotFoundError:
            return None


# Singleton instance
_product_service: Optional[ProductService] = None


def get_product_service() -> ProductService:
    """Get or create ProductService instance."""
    global _product_service
    if _product_service is None:
        _product_service = ProductService()
    return _product_service
