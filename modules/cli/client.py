"""
HTTP Client for the Inventory Service.

Async httpx client that carries the session token.
All requests include an X-Frontend-ID header identifying the client, and an
Authorization: Bearer header while a session token is held.
"""

from typing import Any

import httpx

from modules.core.config import get_server_base_url
from modules.core.logging import get_logger, log_with_source

logger = get_logger(__name__)


class APIClient:
    """
    HTTP client for inventory service communication.

    Features:
    - Base URL and timeout from config/settings/application.yaml
    - Bearer token attached while logged in
    - Structured logging of requests/responses

    Usage:
        client = APIClient(source="cli")
        response = await client.post("/login", json={"email": e, "password": p})
        client.set_token(response.json()["token"])
        response = await client.get("/api/products")
    """

    def __init__(
        self,
        source: str,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the API client.

        Args:
            source: Frontend identifier for the X-Frontend-ID header.
            base_url: Service base URL. If None, read from configuration.
            timeout: Request timeout in seconds. If None, read from configuration.
            transport: Optional httpx transport, used by tests.
        """
        config_base_url, config_timeout = get_server_base_url()

        self.source = source
        self.base_url = (base_url or config_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else config_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._token = ""

    @property
    def token(self) -> str:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def set_token(self, token: str) -> None:
        """Store the session token sent with subsequent requests."""
        self._token = token

    def clear_token(self) -> None:
        self._token = ""

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"X-Frontend-ID": self.source},
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
        Make an HTTP request to the inventory service.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: API path (e.g., /login, /api/products)
            **kwargs: Additional arguments for httpx

        Returns:
            httpx.Response

        Raises:
            httpx.HTTPError: On request failure
        """
        client = await self._get_client()

        if self._token:
            headers = dict(kwargs.pop("headers", None) or {})
            headers["Authorization"] = f"Bearer {self._token}"
            kwargs["headers"] = headers

        log_with_source(
            logger,
            "api",
            "debug",
            "API request",
            method=method,
            path=path,
            authenticated=self.is_authenticated,
        )

        try:
            response = await client.request(method, path, **kwargs)

            log_with_source(
                logger,
                "api",
                "debug",
                "API response",
                method=method,
                path=path,
                status_code=response.status_code,
            )

            return response

        except httpx.HTTPError as e:
            log_with_source(
                logger,
                "api",
                "error",
                "API request failed",
                method=method,
                path=path,
                error=str(e),
            )
            raise

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a GET request."""
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a POST request."""
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a PUT request."""
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a PATCH request."""
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a DELETE request."""
        return await self.request("DELETE", path, **kwargs)


# Module-level client instance
_client: APIClient | None = None


def get_api_client(
    source: str = "cli",
    base_url: str | None = None,
    timeout: float | None = None,
) -> APIClient:
    """Get or create the API client singleton."""
    global _client
    if _client is None:
        _client = APIClient(source=source, base_url=base_url, timeout=timeout)
    return _client


async def close_api_client() -> None:
    """Close the API client."""
    global _client
    if _client:
        await _client.close()
        _client = None
