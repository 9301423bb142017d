"""
Shared test fixtures.

Database access is replaced by MockSupabaseClient; nothing here talks
to a real Supabase project.
"""

import os
import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Settings are read at import time
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import pytest
from unittest.mock import patch
from datetime import datetime, timezone
from typing import Generator

# ===================
# MOCK SUPABASE CLIENT
# ===================

class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data: list = None, count: int = None):
        self.data = data or []
        self.count = count if count is not None else len(self.data)


class MockSupabaseQuery:
    """Mock Supabase query builder with chainable methods."""

    def __init__(self, client, table_name: str, data: list = None, count: int = None):
        self._client = client
        self._table_name = table_name
        self._data = data or []
        self._count = count
        self._filters: list = []
        self._limit = None
        self._is_delete = False

    def select(self, *args, **kwargs):
        return self

    def insert(self, data):
        # Simulate insert - add id and timestamps
        if isinstance(data, dict):
            data = [data]
        rows = []
        for item in data:
            row = dict(item)
            row.setdefault("id", self._client.next_id())
            row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
            rows.append(row)
        self._client.inserted.setdefault(self._table_name, []).extend(rows)
        self._data = rows
        return self

    def delete(self):
        self._is_delete = True
        return self

    def eq(self, column, value):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self._filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, **kwargs):
        return self

    def limit(self, count):
        self._limit = count
        return self

    def execute(self) -> MockSupabaseResponse:
        error = self._client.errors.get(self._table_name)
        if error is not None:
            raise error

        self._client.calls.append(self._table_name)
        rows = [row for row in self._data if all(f(row) for f in self._filters)]

        if self._is_delete:
            self._client.deleted.setdefault(self._table_name, []).extend(rows)
            return MockSupabaseResponse(data=rows)

        if self._limit is not None:
            rows = rows[:self._limit]
        return MockSupabaseResponse(
            data=rows,
            count=self._count if self._count is not None else len(rows)
        )


class MockSupabaseTable:
    """Mock Supabase table with configurable responses."""

    def __init__(self, client, name: str, data: list = None, count: int = None):
        self._client = client
        self._name = name
        self._data = data or []
        self._count = count

    def _query(self) -> MockSupabaseQuery:
        return MockSupabaseQuery(self._client, self._name, self._data.copy(), self._count)

    def select(self, *args, **kwargs):
        return self._query()

    def insert(self, data):
        return self._query().insert(data)

    def delete(self):
        return self._query().delete()


class MockSupabaseClient:
    """
    Mock Supabase client.

    Inserted and deleted rows are recorded per table for assertions.
    """

    def __init__(self):
        self._tables = {}
        self._id = 0
        self.errors: dict[str, Exception] = {}
        self.inserted: dict[str, list] = {}
        self.deleted: dict[str, list] = {}
        self.calls: list[str] = []

    def next_id(self) -> str:
        self._id += 1
        return f"test-uuid-{self._id}"

    def set_table_data(self, table_name: str, data: list, count: int = None):
        """Configure mock data for a table."""
        self._tables[table_name] = {"data": data, "count": count}

    def set_table_error(self, table_name: str, error: Exception):
        """Make every query on a table raise error."""
        self.errors[table_name] = error

    def clear_table_error(self, table_name: str):
        self.errors.pop(table_name, None)

    def table(self, name: str) -> MockSupabaseTable:
        """Get mock table."""
        config = self._tables.get(name, {"data": [], "count": None})
        return MockSupabaseTable(self, name, config["data"], config["count"])


class MockPostgrestError(Exception):
    """Shaped like postgrest.exceptions.APIError."""

    def __init__(self, message: str, code: str = None, details: str = None, hint: str = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.hint = hint


# ===================
# FIXTURES
# ===================

@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("products", [
                {"barcode_number": "7501", "product_name": "Agua", ...}
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def mock_db(mock_supabase) -> Generator:
    """
    Patch the database client with mock.

    Usage:
        def test_something(mock_db, mock_supabase):
            mock_supabase.set_table_data("products", [...])
            # Now any service calling get_supabase_client() gets the mock
    """
    with patch("config.database.get_supabase_client", return_value=mock_supabase):
        with patch("services.product_service.get_supabase_client", return_value=mock_supabase):
            with patch("services.shelf_persistence_service.get_supabase_client", return_value=mock_supabase):
                with patch("services.missing_product_service.get_supabase_client", return_value=mock_supabase):
                    with patch("services.missing_product_service.get_admin_client", return_value=None):
                        yield mock_supabase


@pytest.fixture
def sample_products_list() -> list:
    """Sample catalogue rows."""
    return [
        {
            "barcode_number": "7501055300075",
            "product_name": "Agua Mineral 600ml",
            "price": "12.50",
            "category": "Bebidas"
        },
        {
            "barcode_number": "7501000111206",
            "product_name": "Galletas Marías",
            "price": "18.00",
            "category": "Galletas"
        },
        {
            "barcode_number": "7501030411024",
            "product_name": "Atún en Agua",
            "price": "24.90",
            "category": None
        }
    ]


@pytest.fixture
def persistence(mock_db):
    """ShelfPersistenceService on the mock client."""
    from services.shelf_persistence_service import ShelfPersistenceService

    return ShelfPersistenceService()


@pytest.fixture
def notifier():
    from integrations.notifications import Notifier

    return Notifier(buffer_size=100, lang="en")


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def station(mock_db, notifier):
    """
    ScanStation on the mock client with a short cooldown.

    Installed as the app-wide station so routes use it too.
    """
    import services.scan_session_service as scan_session_service
    from services.product_service import ProductService
    from services.shelf_persistence_service import ShelfPersistenceService

    scan_session_service.reset_scan_station()
    station = scan_session_service.build_scan_station(
        products=ProductService(),
        persistence=ShelfPersistenceService(),
        notifier=notifier,
        cooldown_seconds=0.1,
    )
    scan_session_service._scan_station = station
    yield station
    scan_session_service._scan_station = None


@pytest.fixture
def test_client_with_mock_db(mock_supabase, station):
    """
    Create FastAPI test client with mocked database.

    Usage:
        def test_endpoint(test_client_with_mock_db, mock_supabase):
            mock_supabase.set_table_data("products", [...])
            response = test_client_with_mock_db.get("/api/products/lookup")
    """
    import services.missing_product_service as missing_product_service
    import services.product_service as product_service
    from fastapi.testclient import TestClient
    from main import app

    # Route singletons must pick up this test's mock client
    product_service._product_service = None
    missing_product_service._missing_product_service = None

    # Entered so all requests share one event loop (cooldown timers, name lookups)
    with TestClient(app) as client:
        yield client

    product_service._product_service = None
    missing_product_service._missing_product_service = None
