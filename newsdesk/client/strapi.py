"""
HTTP Client for the content backend.

Provides an async HTTP client for the Strapi REST API the forms write to.
All requests include X-Frontend-ID: newsdesk so backend access logs can tell
form traffic apart from editor traffic.
"""

import asyncio
from typing import Any

import httpx

from newsdesk.core.config import get_app_config, get_backend_base_url
from newsdesk.core.logging import get_logger, log_with_source

logger = get_logger(__name__)


def _get_client_config() -> tuple[str, float]:
    """Load base URL and request timeout from backend.yaml / .env."""
    timeout = float(get_app_config().backend.request_timeout)
    return get_backend_base_url(), timeout


def bearer_headers(token: str) -> dict[str, str]:
    """Authorization header for a composed bearer token."""
    return {"Authorization": f"Bearer {token}"}


class StrapiClient:
    """
    HTTP client for content backend communication.

    Features:
    - Base URL and timeout from settings
    - Every request is individually bounded by the timeout
    - Structured logging of requests/responses
    - Transport errors re-raised as httpx.HTTPError for the caller to classify

    Usage:
        client = StrapiClient()
        response = await client.list_tags()
        response = await client.create_record({"data": {...}}, token="...")
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the backend client.

        Args:
            base_url: Backend base URL. If None, reads from settings.
            timeout: Request timeout in seconds. If None, reads from backend.yaml.
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        if base_url is None or timeout is None:
            config_base_url, config_timeout = _get_client_config()
        else:
            config_base_url, config_timeout = base_url, timeout

        self.base_url = (base_url or config_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else config_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        endpoints = get_app_config().backend.endpoints
        self.tags_path = endpoints.tags
        self.records_path = endpoints.records

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"X-Frontend-ID": "newsdesk"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make an HTTP request to the backend.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: API path (e.g., /api/tags)
            **kwargs: Additional arguments for httpx

        Returns:
            httpx.Response

        Raises:
            httpx.HTTPError: On transport failure or timeout. The timeout
                bounds the whole exchange, body included; httpx's own
                timeouts only bound each connect, write and read.
        """
        client = await self._get_client()

        log_with_source(logger, "client", "debug", "Backend request", method=method, path=path)

        try:
            try:
                async with asyncio.timeout(self.timeout):
                    response = await client.request(method, path, **kwargs)
            except TimeoutError as e:
                raise httpx.TimeoutException(
                    f"No complete response within {self.timeout:g} seconds"
                ) from e
        except httpx.HTTPError as e:
            log_with_source(
                logger,
                "client",
                "error",
                "Backend request failed",
                method=method,
                path=path,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        log_with_source(
            logger,
            "client",
            "debug",
            "Backend response",
            method=method,
            path=path,
            status_code=response.status_code,
        )
        return response

    async def list_tags(self) -> httpx.Response:
        """GET the full tag collection."""
        return await self.request("GET", self.tags_path)

    async def create_tag(self, payload: dict[str, Any], token: str) -> httpx.Response:
        """POST a new tag."""
        return await self.request(
            "POST", self.tags_path, json=payload, headers=bearer_headers(token)
        )

    async def create_record(self, payload: dict[str, Any], token: str) -> httpx.Response:
        """POST a new record."""
        return await self.request(
            "POST", self.records_path, json=payload, headers=bearer_headers(token)
        )

    async def link_tags(
        self, record_id: int | str, payload: dict[str, Any], token: str
    ) -> httpx.Response:
        """PUT tag relations onto an existing record."""
        return await self.request(
            "PUT",
            f"{self.records_path}/{record_id}",
            json=payload,
            headers=bearer_headers(token),
        )


# Module-level client instance
_client: StrapiClient | None = None


def get_strapi_client() -> StrapiClient:
    """Get or create the backend client singleton."""
    global _client
    if _client is None:
        _client = StrapiClient()
    return _client


async def close_strapi_client() -> None:
    """Close the backend client."""
    global _client
    if _client:
        await _client.close()
        _client = None
