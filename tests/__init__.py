"""
Test suite for Shelf Organizer.

Run all tests: pytest
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_barcode_router.py -v
"""
