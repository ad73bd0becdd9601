"""
Test suite for Seller Ops Forecasting.

Run all tests: pytest
Run with coverage: pytest --cov=. --cov-report=html
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_capacity_service.py -v
"""
