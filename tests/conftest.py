"""
Shared test fixtures.
"""

import os
import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Settings require Supabase credentials at import time
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import pytest
from unittest.mock import patch
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
    """
    Mock Supabase query builder with chainable methods.

    Filters are recorded but not applied: tests configure exactly the
    rows a query should return. range() is applied, so paged reads see
    one slice per request.
    """

    def __init__(self, data: list = None, count: int = None, error: Exception = None):
        self._data = data or []
        self._count = count
        self._error = error
        self.filters = []
        self._range = None

    def select(self, *args, **kwargs):
        return self

    def eq(self, column, value):
        self.filters.append(("eq", column, value))
        return self

    def in_(self, column, values):
        self.filters.append(("in", column, list(values)))
        return self

    def gte(self, column, value):
        self.filters.append(("gte", column, value))
        return self

    def order(self, column, **kwargs):
        return self

    def limit(self, count):
        return self

    def range(self, start, end):
        self._range = (start, end)
        return self

    def execute(self) -> MockSupabaseResponse:
        if self._error is not None:
            raise self._error
        data = self._data
        if self._range is not None:
            start, end = self._range
            data = data[start:end + 1]
        return MockSupabaseResponse(
            data=data,
            count=self._count if self._count is not None else len(self._data)
        )


class MockSupabaseTable:
    """Mock Supabase table with configurable responses."""

    def __init__(self, data: list = None, count: int = None, error: Exception = None):
        self._data = data or []
        self._count = count
        self._error = error

    def select(self, *args, **kwargs):
        return MockSupabaseQuery(self._data.copy(), self._count, self._error)


class MockSupabaseClient:
    """Mock Supabase client."""

    def __init__(self):
        self._tables = {}

    def set_table_data(self, table_name: str, data: list, count: int = None):
        """Configure mock data for a table."""
        self._tables[table_name] = {"data": data, "count": count, "error": None}

    def set_table_error(self, table_name: str, error: Exception):
        """Make every query on a table raise."""
        self._tables[table_name] = {"data": [], "count": None, "error": error}

    def table(self, name: str) -> MockSupabaseTable:
        """Get mock table."""
        config = self._tables.get(name, {"data": [], "count": None, "error": None})
        return MockSupabaseTable(config["data"], config["count"], config["error"])


# ===================
# FIXTURES
# ===================

@pytest.fixture(autouse=True)
def reset_service_singletons(monkeypatch):
    """Drop cached service instances so each test sees its own mocks."""
    import services.demand_profile_service as demand_profile_service
    import services.fba_forecast_service as fba_forecast_service
    import services.sales_service as sales_service
    import services.seasonality_service as seasonality_service

    monkeypatch.setattr(demand_profile_service, "_demand_profile_service", None)
    monkeypatch.setattr(fba_forecast_service, "_fba_forecast_service", None)
    monkeypatch.setattr(sales_service, "_sales_service", None)
    monkeypatch.setattr(seasonality_service, "_seasonality_service", None)


@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("sku_mappings", [
                {"master_sku": "MUG-01", "channel_sku": "MUG-01-US", ...}
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
            # Now any service using get_supabase_client() gets the mock
    """
    with patch("config.database.get_supabase_client", return_value=mock_supabase):
        with patch("services.demand_profile_service.get_supabase_client", return_value=mock_supabase):
            with patch("services.sales_service.get_supabase_client", return_value=mock_supabase):
                with patch("services.seasonality_service.get_supabase_client", return_value=mock_supabase):
                    yield mock_supabase


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client_with_mock_db(mock_db):
    """
    Create FastAPI test client with mocked database.

    Usage:
        def test_endpoint(test_client_with_mock_db, mock_supabase):
            mock_supabase.set_table_data("sku_mappings", [...])
            response = test_client_with_mock_db.post("/api/forecasting/fba-shipments")
    """
    from fastapi.testclient import TestClient
    from main import app

    yield TestClient(app)
