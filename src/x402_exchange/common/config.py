"""x402 Exchange configuration via pydantic-settings."""

import warnings
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_DEFAULTS = {
    "secret_key": "insecure-dev-key-change-me",
}

NETWORKS = {
    "base-mainnet": "Base Mainnet",
    "base-sepolia": "Base Sepolia (Testnet)",
}
CURRENCIES = ("USDC", "USDT", "PYUSD")


class ExchangeSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="X402X_")

    environment: str = "development"
    secret_key: str = "insecure-dev-key-change-me"

    # Database
    db_url: str = "sqlite+aiosqlite:///./data/x402_exchange.db"

    # API
    api_title: str = "x402 Exchange"
    api_version: str = "0.1.0"
    host: str = "0.0.0.0"
    port: int = 8080
    api_prefix: str = ""
    cors_origins: list[str] = ["*"]
    public_url: str = "http://localhost:8080"

    # Manifest
    asset: str = "USDC"
    api_key_prefix: str = "402x_"

    # Auth
    access_token_ttl: int = 3600  # seconds
    session_ttl: int = 8 * 3600  # seconds

    # Dashboard
    recent_calls_limit: int = 100
    seed_call_count: int = 20

    log_level: str = "INFO"

    def validate_for_production(self) -> None:
        """Raise if insecure defaults are used in non-development environments."""
        insecure_fields = [
            field
            for field, default in _INSECURE_DEFAULTS.items()
            if getattr(self, field) == default
        ]

        if self.environment != "development" and insecure_fields:
            env_vars = ", ".join(f"X402X_{f.upper()}" for f in insecure_fields)
            raise RuntimeError(
                f"Insecure default values detected in '{self.environment}' environment. "
                f"Set these environment variables to secure values: {env_vars}. "
                "Generate secrets with: python -c \"import secrets; print(secrets.token_urlsafe(48))\""
            )

        if insecure_fields:
            warnings.warn(
                "Using insecure default secret key, set X402X_SECRET_KEY for production",
                UserWarning,
                stacklevel=2,
            )


@lru_cache
def get_settings() -> ExchangeSettings:
    settings = ExchangeSettings()
    settings.validate_for_production()
    return settings
