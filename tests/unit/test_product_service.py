"""
Unit tests for ProductService.

Run: pytest tests/unit/test_product_service.py -v
"""

from decimal import Decimal

import pytest

# Import what we're testing
from services.product_service import ProductService, get_product_service
from exceptions import ProductNotFoundError, DatabaseError

# Import test utilities
from tests.factories import ProductRowFactory


class TestProductServiceGetByBarcode:
    """Tests for ProductService.get_by_barcode()"""

    def test_get_by_barcode_returns_product(self, mock_db, mock_supabase, sample_products_list):
        """Should return the product with the barcode."""
        # Arrange
        mock_supabase.set_table_data("products", sample_products_list)
        service = ProductService()

        # Act
        product = service.get_by_barcode("7501000111206")

        # Assert
        assert product.product_name == "Galletas Marías"
        assert product.price == Decimal("18.00")
        assert product.category == "Galletas"

    def test_get_by_barcode_strips_input(self, mock_db, mock_supabase, sample_products_list):
        """Should ignore surrounding whitespace."""
        mock_supabase.set_table_data("products", sample_products_list)
        service = ProductService()

        product = service.get_by_barcode("  7501030411024 ")

        assert product.product_name == "Atún en Agua"
        assert product.category is None

    def test_get_by_barcode_not_found_raises_error(self, mock_db, mock_supabase):
        """Should raise ProductNotFoundError for unknown barcodes."""
        mock_supabase.set_table_data("products", ProductRowFactory.create_batch(3))
        service = ProductService()

        with pytest.raises(ProductNotFoundError) as exc_info:
            service.get_by_barcode("0000")

        assert exc_info.value.status_code == 404
        assert exc_info.value.details == {"id": "0000"}

    def test_get_by_barcode_query_failure(self, mock_db, mock_supabase):
        """Should raise DatabaseError when the query fails."""
        mock_supabase.set_table_error("products", RuntimeError("timeout"))
        service = ProductService()

        with pytest.raises(DatabaseError):
            service.get_by_barcode("111")


class TestProductServiceFindByBarcode:
    """Tests for ProductService.find_by_barcode()"""

    def test_find_returns_none_when_missing(self, mock_db, mock_supabase):
        """Should return None instead of raising."""
        service = ProductService()

        assert service.find_by_barcode("0000") is None

    def test_find_propagates_database_errors(self, mock_db, mock_supabase):
        """Should not hide query failures."""
        mock_supabase.set_table_error("products", RuntimeError("timeout"))
        service = ProductService()

        with pytest.raises(DatabaseError):
            service.find_by_barcode("111")


class TestGetProductService:
    """Tests for singleton getter."""

    def test_returns_same_instance(self, mock_db):
        """Should return singleton instance."""
        import services.product_service as module

        module._product_service = None
        try:
            assert get_product_service() is get_product_service()
        finally:
            module._product_service = None
