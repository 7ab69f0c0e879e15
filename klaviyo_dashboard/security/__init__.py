"""
Security Utilities - Passwords, Tokens, Input Validation

Usage:
    from klaviyo_dashboard.security import hash_password, issue_token, decode_token

    token = issue_token(client.id, client.email)
    claims = decode_token(token)
"""

from .passwords import hash_password, verify_password
from .tokens import TOKEN_TYPE_ADMIN, TOKEN_TYPE_CLIENT, TokenClaims, TokenError, decode_token, issue_token
from .validation import ValidationError, normalize_email, validate_api_key, validate_email, validate_required

__all__ = [
    "hash_password",
    "verify_password",
    "issue_token",
    "decode_token",
    "TokenClaims",
    "TokenError",
    "TOKEN_TYPE_CLIENT",
    "TOKEN_TYPE_ADMIN",
    "ValidationError",
    "normalize_email",
    "validate_email",
    "validate_api_key",
    "validate_required",
]
