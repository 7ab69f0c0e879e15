"""
Pytest configuration and shared fixtures

Every test runs against its own SQLite file and a known signing secret.
"""

from pathlib import Path

import pytest

TEST_JWT_SECRET = "test-signing-secret-0123456789abcdef"
TEST_API_KEY = "pk_a1b2c3d4e5f6a1b2c3d4e5f6a1b2"


@pytest.fixture(autouse=True)
def test_env(tmp_path, monkeypatch) -> Path:
    """Isolated configuration: temp database, test secret, no Sentry."""
    db_path = tmp_path / "klaviyo_test.db"
    monkeypatch.setenv("JWT_SECRET", TEST_JWT_SECRET)
    monkeypatch.setenv("DATABASE_PATH", str(db_path))
    monkeypatch.delenv("SENTRY_DSN", raising=False)
    monkeypatch.delenv("TOKEN_TTL_HOURS", raising=False)
    monkeypatch.delenv("KLAVIYO_BASE_URL", raising=False)
    return db_path


@pytest.fixture
def db_path(test_env) -> Path:
    """Initialized database path."""
    from klaviyo_dashboard.storage import init_database

    return init_database(test_env)


@pytest.fixture
def sample_client(db_path):
    """A registered client (password: 'client-pass-123')."""
    from klaviyo_dashboard.storage import ClientRepository

    return ClientRepository().create("Acme Store", "owner@acme.com", "client-pass-123", TEST_API_KEY)


@pytest.fixture
def sample_admin(db_path) -> int:
    """A registered admin (password: 'admin-pass-123'); returns its id."""
    from klaviyo_dashboard.storage import AdminRepository

    return AdminRepository().create("admin@agency.com", "admin-pass-123")


# ===== Klaviyo Payload Fixtures =====


@pytest.fixture
def campaign_payloads():
    """Campaign listing and per-campaign messages as returned by get_all()."""
    campaigns = [
        {"id": "C1", "type": "campaign", "attributes": {"name": "Spring Sale"}},
        {"id": "C2", "type": "campaign", "attributes": {"name": "No Messages", "statistics": {"opens": 5, "sent": 50}}},
    ]
    messages = {
        "C1": [
            {"id": "M1", "attributes": {"statistics": {"opens": 100, "clicks": 25, "sent": 1000, "bounces": 3}}},
            {
                "id": "M2",
                "attributes": {
                    "statistics": {"opened_count": 40, "clicked_count": 10, "delivered": "500", "revenue": "120.5"}
                },
            },
        ],
        "C2": [],
    }
    return campaigns, messages


@pytest.fixture
def api_key() -> str:
    """Klaviyo private key stored for sample_client."""
    return TEST_API_KEY
