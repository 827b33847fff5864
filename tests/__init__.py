"""
Test suite for Trade Journal Import.

Run all tests: pytest
Run with coverage: pytest --cov=. --cov-report=html
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_column_matcher_service.py -v
"""
