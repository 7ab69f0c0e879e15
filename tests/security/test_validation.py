"""
Tests for input validation
"""

import pytest

from klaviyo_dashboard.security import (
    ValidationError,
    normalize_email,
    validate_api_key,
    validate_email,
    validate_required,
)


class TestEmailValidation:
    """Test validate_email"""

    def test_normalizes(self):
        assert validate_email("  Owner@Acme.COM ") == "owner@acme.com"
        assert normalize_email(None) == ""

    @pytest.mark.parametrize("email", ["", "   ", "owner", "owner@", "@acme.com", "owner@acme", "a b@acme.com"])
    def test_rejects_invalid(self, email):
        with pytest.raises(ValidationError):
            validate_email(email)


class TestApiKeyValidation:
    """Test validate_api_key"""

    def test_accepts_private_key(self):
        assert validate_api_key(" pk_a1b2c3d4e5f6a1b2c3d4e5f6 ") == "pk_a1b2c3d4e5f6a1b2c3d4e5f6"

    @pytest.mark.parametrize("key", ["", "pk_", "pk_short", "sk_a1b2c3d4e5f6a1b2c3d4e5f6", "a1b2c3d4e5f6a1b2c3d4e5f6"])
    def test_rejects_invalid(self, key):
        with pytest.raises(ValidationError):
            validate_api_key(key)

    def test_error_does_not_echo_key(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_api_key("sk_secret_value_1234567890")

        assert "secret_value" not in str(exc_info.value)


class TestRequiredFields:
    """Test validate_required"""

    def test_all_present(self):
        validate_required(name="Acme", password="pw")

    def test_lists_missing_fields(self):
        with pytest.raises(ValidationError, match="name, password"):
            validate_required(name=" ", email="a@b.com", password=None)
