import pytest
from fastapi.testclient import TestClient

from pubcal.api.deps import (
    get_calendar_service,
    get_lifecycle_service,
    get_scheduling_service,
)
from pubcal.api.main import app


@pytest.fixture
def client(scheduling, lifecycle, calendar):
    """Test client backed by the in-memory store and a fixed clock."""
    app.dependency_overrides[get_scheduling_service] = lambda: scheduling
    app.dependency_overrides[get_lifecycle_service] = lambda: lifecycle
    app.dependency_overrides[get_calendar_service] = lambda: calendar

    # No context manager: the lifespan would touch the real data dir
    yield TestClient(app)

    app.dependency_overrides.clear()
