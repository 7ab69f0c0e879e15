"""
Authentication dependencies.

Routes declare who may call them:

    @app.get("/api/metrics/all")
    async def all_metrics(claims: TokenClaims = Depends(require_client)): ...

A missing or untrusted bearer token is a 401; a valid token of the wrong
type (an admin token on a client route, or vice versa) is a 403.
"""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from klaviyo_dashboard.core import ConfigurationError, get_logger
from klaviyo_dashboard.security import TOKEN_TYPE_ADMIN, TOKEN_TYPE_CLIENT, TokenClaims, TokenError, decode_token

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_token_claims(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TokenClaims:
    """Validate the bearer token and return its claims."""
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Access token required")

    try:
        return decode_token(credentials.credentials)
    except TokenError as e:
        client_ip = request.client.host if request.client else "unknown"
        logger.warning("Token rejected", extra={"reason": str(e), "path": request.url.path, "ip": client_ip})
        raise _unauthorized("Invalid or expired token")
    except ConfigurationError as e:
        logger.error("Token validation not configured", extra={"error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Authentication not configured",
        )


def require_client(claims: TokenClaims = Depends(get_token_claims)) -> TokenClaims:
    if claims.type != TOKEN_TYPE_CLIENT:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Client access required")
    return claims


def require_admin(claims: TokenClaims = Depends(get_token_claims)) -> TokenClaims:
    if claims.type != TOKEN_TYPE_ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return claims
