"""
Test data factories.

Uses factory pattern to generate consistent test data.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from models.organization import ScannedProduct


class ProductRowFactory:
    """
    Factory for products table rows.

    Usage:
        row = ProductRowFactory.create()
        row = ProductRowFactory.create(barcode_number="123", product_name="Agua")
        rows = ProductRowFactory.create_batch(5)
    """

    _counter = 0

    @classmethod
    def _next_counter(cls) -> int:
        cls._counter += 1
        return cls._counter

    @classmethod
    def create(
        cls,
        barcode_number: Optional[str] = None,
        product_name: Optional[str] = None,
        price: Optional[str] = "10.00",
        category: Optional[str] = "Abarrotes"
    ) -> dict:
        n = cls._next_counter()
        return {
            "barcode_number": barcode_number or f"750000000{n:04d}",
            "product_name": product_name or f"Producto {n}",
            "price": price,
            "category": category,
        }

    @classmethod
    def create_batch(cls, count: int, **kwargs) -> list[dict]:
        return [cls.create(**kwargs) for _ in range(count)]


class ScannedProductFactory:
    """Factory for ScannedProduct entries with increasing timestamps."""

    _base = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)
    _counter = 0

    @classmethod
    def create(
        cls,
        barcode: Optional[str] = None,
        product_name: Optional[str] = None,
        timestamp: Optional[datetime] = None
    ) -> ScannedProduct:
        cls._counter += 1
        return ScannedProduct(
            barcode=barcode or f"75010{cls._counter:08d}",
            timestamp=timestamp or cls._base + timedelta(seconds=cls._counter),
            product_name=product_name,
        )

    @classmethod
    def create_batch(cls, count: int) -> list[ScannedProduct]:
        return [cls.create() for _ in range(count)]


class MissingProductRowFactory:
    """Factory for missing_products rows."""

    _counter = 0

    @classmethod
    def create(
        cls,
        id: Optional[str] = None,
        barcode_number: Optional[str] = None,
        description: Optional[str] = "Sin registro en catálogo",
        reported_at: Optional[str] = None
    ) -> dict:
        cls._counter += 1
        return {
            "id": id or f"report-{cls._counter}",
            "barcode_number": barcode_number or f"99900{cls._counter:08d}",
            "description": description,
            "reported_at": reported_at or "2025-03-01T09:00:00+00:00",
        }
