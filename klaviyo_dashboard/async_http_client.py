"""
Async Secure HTTP Client Wrapper

Provides async HTTP methods with enforced SSL verification and timeouts.
Built on httpx so the collectors can fan out many upstream calls at once.

Usage:
    from klaviyo_dashboard.async_http_client import AsyncSecureHTTPClient

    async with AsyncSecureHTTPClient(timeout=30) as client:
        response = await client.get(url, headers=headers, params=params)

Security Features:
    - SSL verification always enabled (verify=True)
    - Default 30-second timeout on all requests
    - Connection pooling for efficient concurrent requests
    - HTTP/2 support
"""

import httpx


class AsyncSecureHTTPClient:
    """
    Async HTTP client with enforced SSL verification and connection pooling.

    Features:
    - Context manager for automatic connection cleanup
    - Connection pooling (configurable max connections)
    - HTTP/2 support for multiplexing
    - Request timeouts
    """

    DEFAULT_TIMEOUT = 30  # seconds
    DEFAULT_MAX_CONNECTIONS = 50
    DEFAULT_MAX_KEEPALIVE = 10

    def __init__(
        self,
        max_connections: int = DEFAULT_MAX_CONNECTIONS,
        max_keepalive_connections: int = DEFAULT_MAX_KEEPALIVE,
        timeout: float = DEFAULT_TIMEOUT,
        http2: bool = True,
    ):
        """
        Initialize async HTTP client.

        Args:
            max_connections: Maximum number of concurrent connections
            max_keepalive_connections: Max persistent connections
            timeout: Default timeout in seconds
            http2: Enable HTTP/2 support
        """
        self.limits = httpx.Limits(max_connections=max_connections, max_keepalive_connections=max_keepalive_connections)
        self.timeout_seconds = timeout
        self.timeout = httpx.Timeout(timeout)
        self.http2 = http2
        self.client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "AsyncSecureHTTPClient":
        """Context manager entry - create async client"""
        self.client = httpx.AsyncClient(
            limits=self.limits,
            timeout=self.timeout,
            verify=True,  # CRITICAL: Force SSL verification
            http2=self.http2,
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, *args):
        """Context manager exit - close connections"""
        if self.client:
            await self.client.aclose()
            self.client = None

    def _require_client(self) -> httpx.AsyncClient:
        if not self.client:
            raise RuntimeError("Client not initialized. Use 'async with AsyncSecureHTTPClient()' context manager")
        return self.client

    async def get(self, url: str, **kwargs) -> httpx.Response:
        """
        Async GET request with SSL verification enforced.

        Args:
            url: URL to fetch
            **kwargs: Additional arguments to pass to httpx (headers, params, ...)

        Returns:
            httpx.Response: HTTP response
        """
        client = self._require_client()
        kwargs.setdefault("timeout", self.timeout_seconds)
        return await client.get(url, **kwargs)

