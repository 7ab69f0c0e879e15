"""
Tests for the Client domain model
"""

from klaviyo_dashboard.domain import Client


class TestClient:
    """Test Client"""

    def test_from_row(self):
        row = {"id": "7", "name": "Acme", "email": "a@acme.com", "created_at": "2024-01-01 10:00:00"}
        client = Client.from_row(row)

        assert client.id == 7
        assert client.created_at == "2024-01-01 10:00:00"

    def test_public_dict_has_no_created_at_by_default(self):
        client = Client(id=1, name="Acme", email="a@acme.com", created_at="2024-01-01")

        assert client.to_public_dict() == {"id": 1, "name": "Acme", "email": "a@acme.com"}
        assert client.to_public_dict(include_created_at=True)["created_at"] == "2024-01-01"
