"""Tapestry social graph client.

Resolves a wallet address to a social identity and publishes cards and
likes as Tapestry content. Social data is decoration: a missing API key
or any upstream failure yields None, never an exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

from crypt_cards.cards.models import Card

if TYPE_CHECKING:
    from crypt_cards.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.usetapestry.dev/v1"
DEFAULT_REQUEST_TIMEOUT = 15.0
DEFAULT_SEARCH_LIMIT = 5
BLOCKCHAIN = "SOLANA"
EXECUTION = "FAST_UNCONFIRMED"
APP_TAG = "crypt"


class TapestryClientError(Exception):
    """Base exception for Tapestry client errors."""


@dataclass(frozen=True)
class SocialIdentity:
    """A wallet's social profile."""

    username: str | None = None
    bio: str | None = None
    image: str | None = None
    namespace: str | None = None
    profile_id: str | None = None

    @classmethod
    def from_profile(cls, profile: dict[str, Any]) -> SocialIdentity:
        """Create from a Tapestry profile record."""
        props = profile.get("customProperties") or {}
        if not isinstance(props, dict):
            props = {}
        return cls(
            username=profile.get("username") or None,
            bio=props.get("bio") or None,
            image=props.get("profileImage") or None,
            namespace=profile.get("namespace") or None,
            profile_id=profile.get("id") or None,
        )

    @property
    def display_name(self) -> str | None:
        return self.username

    def to_dict(self) -> dict[str, Any]:
        return {
            "username": self.username,
            "bio": self.bio,
            "image": self.image,
            "namespace": self.namespace,
            "profile_id": self.profile_id,
        }


def _pick_profile(profiles: list[dict[str, Any]]) -> dict[str, Any]:
    """Prefer a profile with username and image, then any with a username."""
    for profile in profiles:
        props = profile.get("customProperties") or {}
        if profile.get("username") and isinstance(props, dict) and props.get("profileImage"):
            return profile
    for profile in profiles:
        if profile.get("username"):
            return profile
    return profiles[0]


class TapestryClient:
    """Tapestry REST client.

    Example:
        ```python
        client = TapestryClient(api_key="...")
        identity = await client.resolve_identity("9WzDXwBb...")
        if identity:
            print(identity.username)
        ```
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        api_url: str = DEFAULT_API_URL,
        http: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        """Initialize the Tapestry client.

        Args:
            api_key: Tapestry API key. Without it every call returns None.
            api_url: REST API base URL.
            http: Optional shared httpx client.
            timeout: Request timeout in seconds.
        """
        self._api_key = api_key
        self._api_url = api_url.rstrip("/")
        self._http = http
        self._owns_http = http is None
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> TapestryClient:
        """Build a client from application settings."""
        key = settings.tapestry.api_key
        return cls(
            key.get_secret_value() if key else None, api_url=settings.tapestry.api_url
        )

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None

    async def __aenter__(self) -> TapestryClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self._timeout)
        return self._http

    async def _post(self, path: str, body: dict[str, Any]) -> Any:
        """POST a JSON body.

        Raises:
            TapestryClientError: On transport failure, non-success status or
                an invalid JSON answer.
        """
        try:
            response = await self._client().post(
                f"{self._api_url}/{path}", params={"apiKey": self._api_key}, json=body
            )
        except httpx.HTTPError as e:
            raise TapestryClientError(f"Tapestry {path} failed: {e}") from e
        if response.status_code >= 400:
            raise TapestryClientError(f"Tapestry {path} returned {response.status_code}")
        try:
            return response.json()
        except ValueError as e:
            raise TapestryClientError(f"Invalid JSON from Tapestry {path}: {e}") from e

    async def resolve_identity(self, wallet_address: str) -> SocialIdentity | None:
        """Resolve a wallet address to its best social profile.

        Returns:
            The identity, or None when unavailable.
        """
        if not self._api_key:
            return None
        try:
            data = await self._post(
                "profiles/search",
                {
                    "walletAddress": wallet_address,
                    "shouldIncludeExternalProfiles": True,
                    "limit": DEFAULT_SEARCH_LIMIT,
                },
            )
        except TapestryClientError as e:
            logger.warning("Tapestry resolve failed for %s: %s", wallet_address[:10] + "...", e)
            return None

        profiles = data.get("profiles") if isinstance(data, dict) else data
        profiles = [p for p in profiles or [] if isinstance(p, dict)]
        if not profiles:
            return None
        return SocialIdentity.from_profile(_pick_profile(profiles))

    async def find_or_create_profile(
        self, wallet_address: str, username: str | None = None
    ) -> dict[str, Any] | None:
        """Find the wallet's profile, creating one if needed.

        Args:
            wallet_address: Wallet address (base58).
            username: Desired username; defaults to the first 8 address chars.
        """
        if not self._api_key:
            return None
        try:
            return await self._post(
                "profiles/findOrCreate",
                {
                    "walletAddress": wallet_address,
                    "username": username or wallet_address[:8],
                    "blockchain": BLOCKCHAIN,
                    "execution": EXECUTION,
                },
            )
        except TapestryClientError as e:
            logger.warning("Tapestry profile create failed: %s", e)
            return None

    async def like_content(self, profile_id: str | None, content_id: str) -> dict[str, Any] | None:
        """Like a content node on behalf of a profile."""
        if not self._api_key or not profile_id:
            return None
        try:
            return await self._post(
                "likes/create",
                {
                    "profileId": profile_id,
                    "contentId": content_id,
                    "blockchain": BLOCKCHAIN,
                    "execution": EXECUTION,
                },
            )
        except TapestryClientError as e:
            logger.warning("Tapestry like failed: %s", e)
            return None

    async def post_card(self, profile_id: str | None, card: Card) -> dict[str, Any] | None:
        """Publish a card as a text content node."""
        if not self._api_key or not profile_id:
            return None
        properties = {
            "txHash": card.full_tx or card.tx,
            "title": card.title,
            "rarity": card.rarity.value,
            "type": card.type.value,
            "platform": card.platform,
            "app": APP_TAG,
        }
        try:
            return await self._post(
                "contents/create",
                {
                    "profileId": profile_id,
                    "content": card.narration or card.title,
                    "contentType": "text",
                    "customProperties": [{"key": k, "value": v} for k, v in properties.items()],
                    "blockchain": BLOCKCHAIN,
                    "execution": EXECUTION,
                },
            )
        except TapestryClientError as e:
            logger.warning("Tapestry post failed for card %d: %s", card.id, e)
            return None
