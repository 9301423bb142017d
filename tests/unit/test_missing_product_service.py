"""
Unit tests for MissingProductService.

Run: pytest tests/unit/test_missing_product_service.py -v
"""

from unittest.mock import patch

import pytest

from services.missing_product_service import MissingProductService
from models.missing_product import MissingProductCreate
from exceptions import DatabaseError

from tests.conftest import MockSupabaseClient
from tests.factories import MissingProductRowFactory


class TestReport:
    """Tests for MissingProductService.report()"""

    def test_report_inserts_row(self, mock_db, mock_supabase):
        """Should store barcode and description."""
        service = MissingProductService()

        report = service.report(MissingProductCreate(
            barcode_number=" 7509999 ",
            description="Refresco sin etiqueta"
        ))

        assert report.barcode_number == "7509999"
        assert report.description == "Refresco sin etiqueta"
        assert report.id
        rows = mock_supabase.inserted["missing_products"]
        assert rows[0]["barcode_number"] == "7509999"

    def test_report_insert_failure(self, mock_db, mock_supabase):
        mock_supabase.set_table_error("missing_products", RuntimeError("denied"))
        service = MissingProductService()

        with pytest.raises(DatabaseError):
            service.report(MissingProductCreate(barcode_number="1", description="x"))

    def test_blank_description_rejected(self):
        """Should require a description."""
        with pytest.raises(ValueError):
            MissingProductCreate(barcode_number="1", description="   ")


class TestListAndExport:
    """Tests for get_all() and export_barcodes()"""

    def test_get_all(self, mock_db, mock_supabase):
        rows = [MissingProductRowFactory.create(barcode_number=b) for b in ["111", "222"]]
        mock_supabase.set_table_data("missing_products", rows)

        reports = MissingProductService().get_all()

        assert [r.barcode_number for r in reports] == ["111", "222"]

    def test_export_one_barcode_per_line(self, mock_db, mock_supabase):
        """Should join barcodes with newlines."""
        rows = [MissingProductRowFactory.create(barcode_number=b) for b in ["111", "222", "333"]]
        mock_supabase.set_table_data("missing_products", rows)

        assert MissingProductService().export_barcodes() == "111\n222\n333"

    def test_export_empty(self, mock_db, mock_supabase):
        assert MissingProductService().export_barcodes() == ""


class TestClearAll:
    """Tests for clear_all()"""

    def test_clear_deletes_every_report(self, mock_db, mock_supabase):
        rows = [MissingProductRowFactory.create() for _ in range(3)]
        mock_supabase.set_table_data("missing_products", rows)

        deleted = MissingProductService().clear_all()

        assert deleted == 3
        assert mock_supabase.deleted["missing_products"] == rows

    def test_clear_empty_list(self, mock_db, mock_supabase):
        """Should not issue a delete when there is nothing to clear."""
        assert MissingProductService().clear_all() == 0
        assert "missing_products" not in mock_supabase.deleted

    def test_clear_uses_admin_client(self, mock_db, mock_supabase):
        """Should delete through the service role client when configured."""
        rows = [MissingProductRowFactory.create()]
        mock_supabase.set_table_data("missing_products", rows)
        admin = MockSupabaseClient()
        admin.set_table_data("missing_products", rows)

        with patch("services.missing_product_service.get_admin_client", return_value=admin):
            deleted = MissingProductService().clear_all()

        assert deleted == 1
        assert admin.deleted["missing_products"] == rows
        assert "missing_products" not in mock_supabase.deleted
