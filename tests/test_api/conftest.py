"""Pytest fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def api_store(sample_records, today):
    """Store over the sample records, used in place of the record file."""
    from src.filtering.store import DashboardStore

    return DashboardStore(sample_records, today=today)


@pytest.fixture
def client(api_store):
    """Create a TestClient for the FastAPI application."""
    from api.main import app
    from api.services.store import get_store

    app.dependency_overrides[get_store] = lambda: api_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def date_range():
    """Query parameters covering every sample record."""
    return {"from": "2024-01-01", "to": "2024-06-30"}
