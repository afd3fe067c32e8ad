"""Helius enhanced-transactions client with optional Redis caching.

This module provides the chain history provider used by the wallet
scanner:
- Parsed ``RawTransaction`` records per wallet address
- Redis caching of the raw JSON to avoid redundant API calls
- Typed errors on HTTP or decode failure (no retries)
"""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import httpx
from redis.asyncio import Redis

from crypt_cards.ingestor.models import RawTransaction

logger = logging.getLogger(__name__)

# Default configuration
DEFAULT_BASE_URL = "https://api.helius.xyz/v0"
DEFAULT_HISTORY_LIMIT = 100
DEFAULT_CACHE_TTL_SECONDS = 300  # 5 minutes
DEFAULT_REQUEST_TIMEOUT = 30.0


class HeliusClientError(Exception):
    """Base exception for Helius client errors."""


class HeliusHTTPError(HeliusClientError):
    """Raised when the API answers with a non-success status."""

    def __init__(self, status_code: int, body: str = "") -> None:
        super().__init__(f"Helius {status_code}: {body[:200]}")
        self.status_code = status_code
        self.body = body


class HeliusDecodeError(HeliusClientError):
    """Raised when the API response is not a JSON list of transactions."""


class HistoryProvider(Protocol):
    """Anything that can fetch a wallet's transaction history."""

    async def get_history(self, address: str, limit: int = ...) -> list[RawTransaction]: ...


class HeliusClient:
    """Helius enhanced-transactions API client.

    Example:
        ```python
        async with httpx.AsyncClient() as http:
            client = HeliusClient(api_key="...", http=http)
            txs = await client.get_history("9WzDXwBb...", limit=100)
        ```
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        http: httpx.AsyncClient | None = None,
        redis: Redis | None = None,
        cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        """Initialize the Helius client.

        Args:
            api_key: Helius API key. Without it every lookup returns [].
            base_url: REST API base URL.
            http: Optional shared httpx client; one is created if omitted.
            redis: Optional Redis client for caching.
            cache_ttl_seconds: Cache TTL in seconds (0 disables caching).
            timeout: Request timeout in seconds.
        """
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._http = http
        self._owns_http = http is None
        self._redis = redis
        self._cache_ttl = cache_ttl_seconds
        self._timeout = timeout
        self._cache_prefix = "helius:history:"

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None

    async def __aenter__(self) -> HeliusClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self._timeout)
        return self._http

    def _cache_key(self, address: str, limit: int) -> str:
        return f"{self._cache_prefix}{address}:{limit}"

    async def _get_cached(self, key: str) -> str | None:
        """Get value from cache."""
        if not self._redis or self._cache_ttl <= 0:
            return None
        try:
            value = await self._redis.get(key)
            if isinstance(value, bytes):
                return value.decode()
            return str(value) if value is not None else None
        except Exception as e:
            logger.warning("Cache get failed: %s", e)
            return None

    async def _set_cached(self, key: str, value: str) -> None:
        """Set value in cache."""
        if not self._redis or self._cache_ttl <= 0:
            return
        try:
            await self._redis.set(key, value, ex=self._cache_ttl)
        except Exception as e:
            logger.warning("Cache set failed: %s", e)

    async def _fetch_raw(self, address: str, limit: int) -> list[dict[str, Any]]:
        url = f"{self._base_url}/addresses/{address}/transactions"
        try:
            response = await self._client().get(
                url, params={"api-key": self._api_key, "limit": limit}
            )
        except httpx.HTTPError as e:
            raise HeliusClientError(f"Helius request failed: {e}") from e

        if response.status_code >= 400:
            raise HeliusHTTPError(response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError as e:
            raise HeliusDecodeError(f"Invalid JSON from Helius: {e}") from e
        if not isinstance(payload, list):
            raise HeliusDecodeError(
                f"Expected a list of transactions, got {type(payload).__name__}"
            )
        return [item for item in payload if isinstance(item, dict)]

    async def get_history(
        self, address: str, limit: int = DEFAULT_HISTORY_LIMIT
    ) -> list[RawTransaction]:
        """Fetch a wallet's recent enhanced transactions, newest first.

        Args:
            address: Wallet address (base58).
            limit: Maximum number of transactions.

        Returns:
            Parsed transactions; empty when no API key is configured.

        Raises:
            HeliusClientError: On transport, HTTP or decode failure.
        """
        if not self._api_key:
            logger.warning("No Helius API key configured; returning empty history")
            return []

        cache_key = self._cache_key(address, limit)
        cached = await self._get_cached(cache_key)
        if cached is not None:
            try:
                return [RawTransaction.from_dict(item) for item in json.loads(cached)]
            except (ValueError, TypeError, AttributeError) as e:
                logger.warning("Ignoring corrupt cached history for %s: %s", address[:10] + "...", e)

        items = await self._fetch_raw(address, limit)
        logger.debug("Fetched %d transactions for %s", len(items), address[:10] + "...")
        await self._set_cached(cache_key, json.dumps(items))
        return [RawTransaction.from_dict(item) for item in items]
