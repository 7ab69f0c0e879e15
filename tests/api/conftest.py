"""
API test fixtures

The TestClient is used without a ``with`` block, so startup events do not
run; the database is initialized by the ``db_path`` fixture instead.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from klaviyo_dashboard.api.app import create_app
from klaviyo_dashboard.security import TOKEN_TYPE_ADMIN, TOKEN_TYPE_CLIENT, issue_token


@pytest.fixture
def client(db_path):
    """Test client against a fresh app and database."""
    return TestClient(create_app())


@pytest.fixture
def client_token(sample_client) -> str:
    return issue_token(sample_client.id, sample_client.email, TOKEN_TYPE_CLIENT)


@pytest.fixture
def admin_token(sample_admin) -> str:
    return issue_token(sample_admin, "admin@agency.com", TOKEN_TYPE_ADMIN)


@pytest.fixture
def client_headers(client_token) -> dict[str, str]:
    return {"Authorization": f"Bearer {client_token}"}


@pytest.fixture
def admin_headers(admin_token) -> dict[str, str]:
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def mock_collect():
    """Replace live Klaviyo collection in the API module."""
    with patch("klaviyo_dashboard.api.app.collect_metrics", new_callable=AsyncMock) as mock:
        yield mock
