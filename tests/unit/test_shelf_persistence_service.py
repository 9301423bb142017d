"""
Unit tests for ShelfPersistenceService.

Run: pytest tests/unit/test_shelf_persistence_service.py -v
"""

import pytest

from services.shelf_persistence_service import (
    ShelfPersistenceService,
    get_shelf_persistence_service,
)
from exceptions import (
    BlankShelfIdError,
    EmptyShelfError,
    MissingEventError,
    ShelfSaveError,
)

from tests.conftest import MockPostgrestError
from tests.factories import ProductRowFactory, ScannedProductFactory


class TestBuildRows:
    """Tests for build_rows()"""

    def test_one_row_per_scan(self, persistence):
        """Should map each scan to (shelf, barcode_number, event_id)."""
        products = ScannedProductFactory.create_batch(3)

        rows = persistence.build_rows("12345678", "A1", products)

        assert rows == [
            {"shelf": "A1", "barcode_number": p.barcode, "event_id": "12345678"}
            for p in products
        ]

    def test_missing_event(self, persistence):
        with pytest.raises(MissingEventError):
            persistence.build_rows(None, "A1", ScannedProductFactory.create_batch(1))

    @pytest.mark.parametrize("shelf_id", [None, "", "  "])
    def test_blank_shelf(self, persistence, shelf_id):
        with pytest.raises(BlankShelfIdError):
            persistence.build_rows("12345678", shelf_id, ScannedProductFactory.create_batch(1))

    def test_no_products(self, persistence):
        with pytest.raises(EmptyShelfError):
            persistence.build_rows("12345678", "A1", [])


class TestSaveShelfProducts:
    """Tests for save_shelf_products()"""

    async def test_bulk_insert(self, persistence, mock_supabase):
        """Should insert all rows in one call."""
        products = ScannedProductFactory.create_batch(4)

        count = await persistence.save_shelf_products("12345678", "A1", products)

        assert count == 4
        assert mock_supabase.calls.count("org_products") == 1
        assert len(mock_supabase.inserted["org_products"]) == 4

    async def test_insert_error_carries_postgrest_fields(self, persistence, mock_supabase):
        """Should raise ShelfSaveError with message, details, hint and code."""
        mock_supabase.set_table_error(
            "org_products",
            MockPostgrestError(
                "new row violates row-level security policy",
                code="42501",
                details="Failing row contains (A1, 111, 12345678)",
                hint="Check the policy"
            )
        )

        with pytest.raises(ShelfSaveError) as exc_info:
            await persistence.save_shelf_products("12345678", "A1", ScannedProductFactory.create_batch(1))

        error = exc_info.value
        assert error.code == "SHELF_SAVE_FAILED"
        assert error.status_code == 500
        assert error.reason == "new row violates row-level security policy"
        assert error.details["shelf_id"] == "A1"
        assert error.details["hint"] == "Check the policy"
        assert error.details["db_code"] == "42501"

    async def test_plain_exception_wrapped(self, persistence, mock_supabase):
        """Should wrap errors without PostgREST fields too."""
        mock_supabase.set_table_error("org_products", RuntimeError("network down"))

        with pytest.raises(ShelfSaveError) as exc_info:
            await persistence.save_shelf_products("12345678", "A1", ScannedProductFactory.create_batch(1))

        assert exc_info.value.reason == "network down"
        assert exc_info.value.details["db_code"] is None

    async def test_validation_before_insert(self, persistence, mock_supabase):
        """Should not reach the database with invalid input."""
        with pytest.raises(EmptyShelfError):
            await persistence.save_shelf_products("12345678", "A1", [])

        assert mock_supabase.calls == []


class TestLookupProductName:
    """Tests for lookup_product_name()"""

    async def test_found(self, persistence, mock_supabase):
        row = ProductRowFactory.create(barcode_number="111", product_name="Agua")
        mock_supabase.set_table_data("products", [row])

        assert await persistence.lookup_product_name("111") == "Agua"

    async def test_not_found(self, persistence, mock_supabase):
        mock_supabase.set_table_data("products", ProductRowFactory.create_batch(2))

        assert await persistence.lookup_product_name("nope") is None

    async def test_error_is_no_match(self, persistence, mock_supabase):
        """Should swallow lookup errors and return None."""
        mock_supabase.set_table_error("products", RuntimeError("timeout"))

        assert await persistence.lookup_product_name("111") is None


class TestSingleton:

    def test_get_shelf_persistence_service_returns_same_instance(self, mock_db):
        import services.shelf_persistence_service as module

        module._shelf_persistence_service = None
        try:
            assert get_shelf_persistence_service() is get_shelf_persistence_service()
            assert isinstance(get_shelf_persistence_service(), ShelfPersistenceService)
        finally:
            module._shelf_persistence_service = None
