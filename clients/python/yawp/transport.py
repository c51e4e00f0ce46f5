"""HTTP transport for yawp endpoints."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

Transport = Callable[[str, dict[str, Any]], Awaitable[Any]]
"""Signature of the injected transport: ``await transport(url, options)``."""


class HttpxTransport:
    """Async HTTP transport backed by ``httpx.AsyncClient``.

    Args:
        base_url: Prefix for relative request URLs (e.g., "http://localhost:8080").
        timeout: Request timeout in seconds. Applied per request, so it also
            holds for a given ``client``; None keeps the client timeout.
        headers: Headers sent with every request, also with a given ``client``.
        client: Preconfigured client to use instead of creating one.

    Example:
        >>> async with HttpxTransport("http://localhost:8080") as transport:
        ...     people = Yawp(transport)("/people")
        ...     active = await people.where({"active": True}).list()
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float | None = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = dict(headers or {})
        self._client = client or httpx.AsyncClient()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def __call__(self, url: str, options: dict[str, Any]) -> Any:
        """Send one request described by builder options.

        Args:
            url: Request URL, relative URLs are joined to ``base_url``.
            options: ``method``, optional ``query``, ``body`` (JSON string),
                ``headers`` and ``timeout``.

        Returns:
            Decoded JSON response, or None when the body is empty.

        Raises:
            httpx.HTTPStatusError: On non-2xx responses.
            httpx.HTTPError: On network failures.
        """
        headers = {"Accept": "application/json", **self.headers, **options.get("headers", {})}
        body = options.get("body")
        if body is not None:
            headers.setdefault("Content-Type", "application/json")

        extra: dict[str, Any] = {}
        timeout = options.get("timeout", self.timeout)
        if timeout is not None:
            extra["timeout"] = timeout

        response = await self._client.request(
            options.get("method", "GET"),
            self._build_url(url),
            params=options.get("query"),
            content=body,
            headers=headers,
            **extra,
        )
        logger.debug(
            "Response received",
            extra={"method": response.request.method, "url": str(response.url), "status": response.status_code},
        )
        response.raise_for_status()
        if not response.content:
            return None
        return response.json()

    def _build_url(self, url: str) -> str:
        if url.startswith("http"):
            return url
        return f"{self.base_url}{url}"
