"""
Klaviyo REST API Client

Thin async wrapper over the Klaviyo JSON:API endpoints used by the
dashboard. Uses AsyncSecureHTTPClient for HTTP/2, connection pooling and
SSL enforcement.

Upstream failures never raise: an unreachable API, an HTTP error or an
undecodable body is logged and returned as an empty ``{"data": []}``
payload, so one bad endpoint only zeroes the numbers that depend on it.

Usage:
    from klaviyo_dashboard.async_http_client import AsyncSecureHTTPClient
    from klaviyo_dashboard.collectors.klaviyo_client import KlaviyoClient

    async with AsyncSecureHTTPClient() as http:
        client = KlaviyoClient(api_key, http)
        campaigns = await client.get_all("/campaigns")

API Documentation:
    https://developers.klaviyo.com/en/reference/api_overview
"""

from typing import Any

import httpx

from klaviyo_dashboard.async_http_client import AsyncSecureHTTPClient
from klaviyo_dashboard.core import KlaviyoConfig, get_config, get_logger

logger = get_logger(__name__)


def empty_payload() -> dict[str, Any]:
    return {"data": []}


class KlaviyoClient:
    """
    Klaviyo API client bound to one private API key.

    Features:
    - Klaviyo-API-Key authentication with a pinned API revision
    - ``links.next`` pagination capped at ``max_pages``
    - Failures logged and replaced with empty payloads
    """

    def __init__(self, api_key: str, http_client: AsyncSecureHTTPClient, config: KlaviyoConfig | None = None):
        """
        Args:
            api_key: Client's Klaviyo private key ("pk_...")
            http_client: Open AsyncSecureHTTPClient
            config: Klaviyo settings (defaults to environment configuration)

        Raises:
            ValueError: If api_key is empty
        """
        if not api_key:
            raise ValueError("api_key is required")

        self.api_key = api_key
        self.http_client = http_client
        self.config = config or get_config().get_klaviyo_config()
        self.base_url = self.config.base_url.rstrip("/")

    def _get_headers(self) -> dict[str, str]:
        """Get Klaviyo API headers"""
        return {
            "Authorization": f"Klaviyo-API-Key {self.api_key}",
            "revision": self.config.revision,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def _build_url(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    async def get(self, endpoint: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        GET one page from the API.

        Args:
            endpoint: Path such as "/campaigns", or an absolute ``links.next`` URL
            params: Query parameters (filter, sort, page[size]...)

        Returns:
            Decoded JSON:API document, or ``{"data": []}`` on any failure
        """
        url = self._build_url(endpoint)
        try:
            response = await self.http_client.get(url, headers=self._get_headers(), params=params or None)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"Klaviyo API error for {endpoint}: HTTP {e.response.status_code}",
                extra={
                    "endpoint": endpoint,
                    "status_code": e.response.status_code,
                    "reason": e.response.reason_phrase,
                    "body": e.response.text[:500],
                },
            )
            return empty_payload()
        except httpx.HTTPError as e:
            logger.warning(
                f"Klaviyo API request failed for {endpoint}: {e}",
                extra={"endpoint": endpoint, "exception_class": e.__class__.__name__},
            )
            return empty_payload()
        except ValueError as e:
            logger.warning(f"Klaviyo API returned invalid JSON for {endpoint}: {e}", extra={"endpoint": endpoint})
            return empty_payload()

        if not isinstance(payload, dict):
            logger.warning(f"Klaviyo API returned unexpected payload for {endpoint}", extra={"endpoint": endpoint})
            return empty_payload()
        return payload

    async def get_all(self, endpoint: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """
        GET every page of a collection, following ``links.next``.

        Stops after ``max_pages`` pages. ``page[size]`` is always sent on the
        first request; subsequent requests use the cursor URL as given.

        Returns:
            Concatenated ``data`` items (empty list on failure)
        """
        request_params = {"page[size]": self.config.page_size, **(params or {})}
        items: list[dict[str, Any]] = []
        next_url: str | None = endpoint
        pages = 0

        while next_url and pages < self.config.max_pages:
            payload = await self.get(next_url, request_params if pages == 0 else None)
            pages += 1

            data = payload.get("data") or []
            if isinstance(data, list):
                items.extend(item for item in data if isinstance(item, dict))

            links = payload.get("links")
            next_url = links.get("next") if isinstance(links, dict) else None

        if next_url:
            logger.debug(f"Stopped paging {endpoint} after {pages} pages", extra={"endpoint": endpoint})

        return items
