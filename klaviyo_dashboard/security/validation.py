"""
Input validation for client and admin records.

Raises ``ValidationError`` with a message that is safe to show to the
caller (no secrets are echoed back).
"""

import re

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

# Klaviyo private keys look like "pk_" followed by alphanumeric characters
API_KEY_PATTERN = re.compile(r"^pk_[A-Za-z0-9]{20,}$")


class ValidationError(Exception):
    """
    Raised when input validation fails.

    This exception should be caught and handled appropriately,
    ensuring sensitive details are not leaked to users.
    """

    pass


def normalize_email(email: str) -> str:
    """Trim and lowercase an email address."""
    return (email or "").strip().lower()


def validate_email(email: str) -> str:
    """
    Validate and normalise an email address.

    Returns:
        The lowercased, trimmed address

    Raises:
        ValidationError: If the address is empty or malformed
    """
    normalized = normalize_email(email)
    if not normalized:
        raise ValidationError("Email is required")
    if not EMAIL_PATTERN.match(normalized):
        raise ValidationError(f"Invalid email address: {normalized}")
    return normalized


def validate_api_key(api_key: str) -> str:
    """
    Validate a Klaviyo private API key.

    Raises:
        ValidationError: If the key is empty or not a private key
    """
    key = (api_key or "").strip()
    if not key:
        raise ValidationError("Klaviyo private key is required")
    if not API_KEY_PATTERN.match(key):
        raise ValidationError("Klaviyo private key must start with 'pk_' followed by at least 20 characters")
    return key


def validate_required(**values: str) -> None:
    """
    Ensure every named value is a non-blank string.

    Example:
        validate_required(name=name, password=password)
    """
    missing = [name for name, value in values.items() if not (value or "").strip()]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
