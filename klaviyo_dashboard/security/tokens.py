"""
Bearer token issuance and validation (HS256 JWT).

Tokens carry the subject id, email and a ``type`` claim that separates
client tokens from admin tokens. They are signed with ``JWT_SECRET``.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from klaviyo_dashboard.core import get_config

TOKEN_TYPE_CLIENT = "client"
TOKEN_TYPE_ADMIN = "admin"
TOKEN_TYPES = (TOKEN_TYPE_CLIENT, TOKEN_TYPE_ADMIN)


class TokenError(Exception):
    """Raised when a token is missing, malformed, expired or wrongly signed."""

    pass


@dataclass(frozen=True)
class TokenClaims:
    """Decoded, validated token payload."""

    id: int
    email: str
    type: str
    expires_at: datetime


def issue_token(subject_id: int, email: str, token_type: str = TOKEN_TYPE_CLIENT, ttl_hours: int | None = None) -> str:
    """
    Sign a token for a client or admin.

    Args:
        subject_id: Client or admin id
        email: Subject email (informational claim)
        token_type: "client" or "admin"
        ttl_hours: Lifetime override (defaults to TOKEN_TTL_HOURS)

    Returns:
        Encoded JWT string
    """
    if token_type not in TOKEN_TYPES:
        raise ValueError(f"Unknown token type: {token_type}")

    auth_config = get_config().get_auth_config()
    now = datetime.now(UTC)
    lifetime = timedelta(hours=ttl_hours if ttl_hours is not None else auth_config.token_ttl_hours)

    payload = {
        "id": subject_id,
        "email": email,
        "type": token_type,
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(payload, auth_config.jwt_secret, algorithm=auth_config.algorithm)


def decode_token(token: str) -> TokenClaims:
    """
    Validate a token's signature and expiry.

    Raises:
        TokenError: If the token cannot be trusted
    """
    if not token:
        raise TokenError("Missing token")

    auth_config = get_config().get_auth_config()
    try:
        payload = jwt.decode(
            token,
            auth_config.jwt_secret,
            algorithms=[auth_config.algorithm],
            options={"require": ["exp", "id", "type"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenError("Token expired") from e
    except jwt.InvalidTokenError as e:
        raise TokenError("Invalid token") from e

    if payload["type"] not in TOKEN_TYPES:
        raise TokenError("Invalid token type")

    try:
        subject_id = int(payload["id"])
    except (TypeError, ValueError) as e:
        raise TokenError("Invalid token subject") from e

    return TokenClaims(
        id=subject_id,
        email=str(payload.get("email", "")),
        type=payload["type"],
        expires_at=datetime.fromtimestamp(payload["exp"], UTC),
    )
