"""
Tests for bearer token issuance and validation
"""

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from klaviyo_dashboard.core import ConfigurationError
from klaviyo_dashboard.security import TOKEN_TYPE_ADMIN, TOKEN_TYPE_CLIENT, TokenError, decode_token, issue_token

SECRET = "test-signing-secret-0123456789abcdef"


class TestIssueToken:
    """Test token issuance"""

    def test_claims(self):
        token = issue_token(5, "owner@acme.com")

        payload = jwt.decode(token, SECRET, algorithms=["HS256"])
        assert payload["id"] == 5
        assert payload["email"] == "owner@acme.com"
        assert payload["type"] == TOKEN_TYPE_CLIENT

    def test_default_lifetime_is_seven_days(self):
        claims = decode_token(issue_token(5, "owner@acme.com"))

        remaining = claims.expires_at - datetime.now(UTC)
        assert timedelta(days=6, hours=23) < remaining <= timedelta(days=7)

    def test_ttl_from_environment(self, monkeypatch):
        monkeypatch.setenv("TOKEN_TTL_HOURS", "2")

        claims = decode_token(issue_token(5, "owner@acme.com"))

        assert claims.expires_at - datetime.now(UTC) <= timedelta(hours=2)

    def test_admin_token(self):
        assert decode_token(issue_token(1, "admin@agency.com", TOKEN_TYPE_ADMIN)).type == TOKEN_TYPE_ADMIN

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            issue_token(1, "a@b.com", "superuser")

    def test_requires_secret(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", "short")

        with pytest.raises(ConfigurationError):
            issue_token(1, "a@b.com")


class TestDecodeToken:
    """Test token validation"""

    def test_valid(self):
        claims = decode_token(issue_token(9, "owner@acme.com"))

        assert claims.id == 9
        assert claims.email == "owner@acme.com"

    def test_expired(self):
        token = issue_token(9, "owner@acme.com", ttl_hours=-1)

        with pytest.raises(TokenError, match="expired"):
            decode_token(token)

    def test_wrong_signature(self):
        token = jwt.encode(
            {"id": 1, "type": "client", "exp": datetime.now(UTC) + timedelta(hours=1)},
            "a-completely-different-secret-value",
            algorithm="HS256",
        )

        with pytest.raises(TokenError):
            decode_token(token)

    def test_missing_claims(self):
        token = jwt.encode({"id": 1, "exp": datetime.now(UTC) + timedelta(hours=1)}, SECRET, algorithm="HS256")

        with pytest.raises(TokenError):
            decode_token(token)

    def test_unknown_type_claim(self):
        token = jwt.encode(
            {"id": 1, "type": "root", "exp": datetime.now(UTC) + timedelta(hours=1)}, SECRET, algorithm="HS256"
        )

        with pytest.raises(TokenError, match="type"):
            decode_token(token)

    def test_non_numeric_subject(self):
        token = jwt.encode(
            {"id": "abc", "type": "client", "exp": datetime.now(UTC) + timedelta(hours=1)}, SECRET, algorithm="HS256"
        )

        with pytest.raises(TokenError, match="subject"):
            decode_token(token)

    def test_none_algorithm_rejected(self):
        token = jwt.encode(
            {"id": 1, "type": "client", "exp": datetime.now(UTC) + timedelta(hours=1)}, None, algorithm="none"
        )

        with pytest.raises(TokenError):
            decode_token(token)

    def test_empty_token(self):
        with pytest.raises(TokenError):
            decode_token("")
