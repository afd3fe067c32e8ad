"""Configuration management service with Pydantic Settings.

This module provides centralized configuration management for the
crypt-cards application, loading and validating environment variables
at startup.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_FILE = ".env"
_ENV_FILE_ENCODING = "utf-8"

_PLACEHOLDER_API_KEYS = {"your_helius_api_key_here", "changeme"}


def _validate_http_url(v: str) -> str:
    if not v.startswith(("http://", "https://")):
        raise ValueError("URL must be an HTTP(S) endpoint")
    return v.rstrip("/")


class HeliusSettings(BaseSettings):
    """Helius enhanced-transactions API settings (chain history provider)."""

    model_config = SettingsConfigDict(env_prefix="HELIUS_", extra="ignore")

    api_key: SecretStr | None = Field(
        default=None,
        alias="HELIUS_API_KEY",
        description="Helius API key; without it wallet scans return no history",
    )
    base_url: str = Field(
        default="https://api.helius.xyz/v0",
        alias="HELIUS_BASE_URL",
        description="Helius REST API base URL",
    )
    history_limit: int = Field(
        default=100,
        alias="HELIUS_HISTORY_LIMIT",
        ge=1,
        le=100,
        description="Maximum transactions fetched per wallet scan",
    )
    cache_ttl_seconds: int = Field(
        default=300,
        alias="HELIUS_CACHE_TTL_SECONDS",
        ge=0,
        le=86_400,
        description="Redis TTL for cached wallet history (0 disables caching)",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        alias="HELIUS_REQUEST_TIMEOUT_SECONDS",
        gt=0.0,
        le=300.0,
        description="HTTP timeout for history requests",
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate Helius base URL format."""
        return _validate_http_url(v)

    @field_validator("api_key")
    @classmethod
    def drop_placeholder_key(cls, v: SecretStr | None) -> SecretStr | None:
        """Treat template placeholder keys as unset."""
        if v is None:
            return None
        raw = v.get_secret_value().strip()
        if not raw or raw in _PLACEHOLDER_API_KEYS:
            return None
        return v


class RedisSettings(BaseSettings):
    """Redis connection settings (optional history cache)."""

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")

    url: str | None = Field(
        default=None,
        alias="REDIS_URL",
        description="Redis connection string; unset disables caching",
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        """Validate Redis URL format."""
        if v is None:
            return v
        if not v.startswith(("redis://", "rediss://")):
            raise ValueError("REDIS_URL must start with redis:// or rediss://")
        return v


class DatabaseSettings(BaseSettings):
    """Mint ledger database settings."""

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")

    url: str = Field(
        default="sqlite+aiosqlite:///crypt_cards.db",
        alias="DATABASE_URL",
        description="SQLAlchemy database URL for the mint ledger",
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate database URL format."""
        if not v.startswith(("sqlite", "postgresql://", "postgresql+asyncpg://")):
            raise ValueError("DATABASE_URL must be a SQLite or PostgreSQL connection string")
        return v


class SolanaSettings(BaseSettings):
    """Solana RPC settings for memo minting."""

    model_config = SettingsConfigDict(env_prefix="SOLANA_", extra="ignore")

    rpc_url: str = Field(
        default="https://api.devnet.solana.com",
        alias="SOLANA_RPC_URL",
        description="Solana JSON-RPC endpoint used for minting",
    )
    keypair: SecretStr | None = Field(
        default=None,
        alias="SOLANA_KEYPAIR",
        description="Minting keypair: base58 secret or JSON array of 64 bytes",
    )
    airdrop_on_low_balance: bool = Field(
        default=True,
        alias="SOLANA_AIRDROP_ON_LOW_BALANCE",
        description="Request a devnet airdrop when the minting wallet is nearly empty",
    )

    @field_validator("rpc_url")
    @classmethod
    def validate_rpc_url(cls, v: str) -> str:
        """Validate RPC URL format."""
        return _validate_http_url(v)

    @property
    def is_devnet(self) -> bool:
        """Check if the RPC endpoint points at devnet."""
        return "devnet" in self.rpc_url


class AudiusSettings(BaseSettings):
    """Audius soundtrack search settings."""

    model_config = SettingsConfigDict(env_prefix="AUDIUS_", extra="ignore")

    host: str = Field(
        default="https://api.audius.co",
        alias="AUDIUS_HOST",
        description="Audius API host",
    )
    app_name: str = Field(
        default="CRYPT",
        alias="AUDIUS_APP_NAME",
        description="app_name query parameter sent with every request",
    )

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        """Validate Audius host format."""
        return _validate_http_url(v)


class TapestrySettings(BaseSettings):
    """Tapestry social identity settings."""

    model_config = SettingsConfigDict(env_prefix="TAPESTRY_", extra="ignore")

    api_url: str = Field(
        default="https://api.usetapestry.dev/v1",
        alias="TAPESTRY_API_URL",
        description="Tapestry API base URL",
    )
    api_key: SecretStr | None = Field(
        default=None,
        alias="TAPESTRY_API_KEY",
        description="Tapestry API key; without it identity lookups return nothing",
    )

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Validate Tapestry URL format."""
        return _validate_http_url(v)

    @property
    def enabled(self) -> bool:
        """Check if Tapestry lookups are enabled."""
        return self.api_key is not None


class ScanSettings(BaseSettings):
    """Wallet scan selection settings."""

    model_config = SettingsConfigDict(env_prefix="SCAN_", extra="ignore")

    max_per_type: int = Field(
        default=2,
        alias="SCAN_MAX_PER_TYPE",
        ge=1,
        le=100,
        description="Diversity cap: maximum cards sharing one transaction type",
    )
    max_cards: int = Field(
        default=8,
        alias="SCAN_MAX_CARDS",
        ge=1,
        le=100,
        description="Maximum cards admitted by the primary selection pass",
    )
    relax_below: int = Field(
        default=5,
        alias="SCAN_RELAX_BELOW",
        ge=0,
        le=100,
        description="Run the relaxed pass when fewer cards than this were admitted",
    )
    relax_target: int = Field(
        default=6,
        alias="SCAN_RELAX_TARGET",
        ge=1,
        le=100,
        description="Stop the relaxed pass once this many cards are selected",
    )


class RenderSettings(BaseSettings):
    """Soul signature renderer settings."""

    model_config = SettingsConfigDict(env_prefix="RENDER_", extra="ignore")

    width: int = Field(default=420, alias="RENDER_WIDTH", ge=64, le=4096)
    height: int = Field(default=560, alias="RENDER_HEIGHT", ge=64, le=4096)
    fps: int = Field(default=60, alias="RENDER_FPS", ge=1, le=240)


class Settings(BaseSettings):
    """Main application settings.

    Loads configuration from environment variables with support for
    .env files via python-dotenv.

    Example:
        ```python
        from crypt_cards.config import get_settings

        settings = get_settings()
        print(settings.helius.base_url)
        print(settings.log_level)
        ```
    """

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE,
        env_file_encoding=_ENV_FILE_ENCODING,
        extra="ignore",
    )

    # NOTE: Each nested BaseSettings must be given the same env_file, otherwise it
    # will only read from the process environment (and ignore `.env`).
    helius: HeliusSettings = Field(
        default_factory=lambda: HeliusSettings(
            _env_file=_ENV_FILE,
            _env_file_encoding=_ENV_FILE_ENCODING,
        )
    )
    redis: RedisSettings = Field(
        default_factory=lambda: RedisSettings(
            _env_file=_ENV_FILE,
            _env_file_encoding=_ENV_FILE_ENCODING,
        )
    )
    database: DatabaseSettings = Field(
        default_factory=lambda: DatabaseSettings(
            _env_file=_ENV_FILE,
            _env_file_encoding=_ENV_FILE_ENCODING,
        )
    )
    solana: SolanaSettings = Field(
        default_factory=lambda: SolanaSettings(
            _env_file=_ENV_FILE,
            _env_file_encoding=_ENV_FILE_ENCODING,
        )
    )
    audius: AudiusSettings = Field(
        default_factory=lambda: AudiusSettings(
            _env_file=_ENV_FILE,
            _env_file_encoding=_ENV_FILE_ENCODING,
        )
    )
    tapestry: TapestrySettings = Field(
        default_factory=lambda: TapestrySettings(
            _env_file=_ENV_FILE,
            _env_file_encoding=_ENV_FILE_ENCODING,
        )
    )
    scan: ScanSettings = Field(
        default_factory=lambda: ScanSettings(
            _env_file=_ENV_FILE,
            _env_file_encoding=_ENV_FILE_ENCODING,
        )
    )
    render: RenderSettings = Field(
        default_factory=lambda: RenderSettings(
            _env_file=_ENV_FILE,
            _env_file_encoding=_ENV_FILE_ENCODING,
        )
    )

    # Application settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level",
    )
    dry_run: bool = Field(
        default=False,
        alias="DRY_RUN",
        description="Build mint transactions without submitting them",
    )

    def get_logging_level(self) -> int:
        """Get the numeric logging level."""
        level: int = getattr(logging, self.log_level)
        return level

    def redacted_summary(self) -> dict[str, str | dict[str, str]]:
        """Get a summary of settings with secrets redacted.

        Returns:
            Dictionary of settings with sensitive values masked.
        """
        return {
            "helius": {
                "base_url": self.helius.base_url,
                "api_key": "(set)" if self.helius.api_key else "(not set)",
                "history_limit": str(self.helius.history_limit),
            },
            "redis_url": self._redact_url(self.redis.url) if self.redis.url else "(not set)",
            "database_url": self._redact_url(self.database.url),
            "solana": {
                "rpc_url": self.solana.rpc_url,
                "keypair": "(set)" if self.solana.keypair else "(not set)",
            },
            "audius_host": self.audius.host,
            "tapestry_enabled": str(self.tapestry.enabled),
            "scan": {
                "max_per_type": str(self.scan.max_per_type),
                "max_cards": str(self.scan.max_cards),
            },
            "log_level": self.log_level,
            "dry_run": str(self.dry_run),
        }

    @staticmethod
    def _redact_url(url: str) -> str:
        """Redact password from URL if present."""
        if "@" in url and "://" in url:
            protocol_end = url.index("://") + 3
            at_pos = url.index("@")
            creds_part = url[protocol_end:at_pos]
            if ":" in creds_part:
                username = creds_part.split(":")[0]
                return f"{url[:protocol_end]}{username}:***@{url[at_pos + 1 :]}"
        return url


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Uses LRU cache to ensure settings are loaded only once and
    reused across the application.

    Returns:
        The Settings instance.

    Raises:
        ValidationError: If environment variables have invalid values.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Useful for testing when you need to reload settings with
    different environment variables.
    """
    get_settings.cache_clear()
