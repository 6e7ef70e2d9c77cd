"""
Configuration loader for the checkout relay
"""

import os
import yaml
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field, ValidationError, field_validator
import logging

from src.error_handler import ConfigError

logger = logging.getLogger(__name__)

_MOCK_MODES = {"mock", "test"}
_REAL_MODES = {"real", "live"}
_SECRET_KEY_PREFIXES = ("sk_", "rk_")


class SiteConfig(BaseModel):
    """Where the processor sends customers back to"""

    production_url: str = "https://kenyaonabudgetsafaris.co.uk"
    success_page: str = "payment-successa.html"
    cancel_page: str = "payment-cancelled.html"
    local_success_page: str = "payment-success.html"
    local_cancel_page: str = "payment-cancelled.html"

    @field_validator("production_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class CheckoutConfig(BaseModel):
    """Line item defaults"""

    currency: str = Field(default="gbp", min_length=3, max_length=3)
    package_product_name: str = "Travel Package Booking"
    activity_product_name: str = "Activity"

    @field_validator("currency")
    @classmethod
    def _lower_currency(cls, value: str) -> str:
        return value.lower()


class RelayConfig(BaseModel):
    """Complete site configuration (config/relay_config.yml)"""

    allowed_origins: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:5500",
            "http://127.0.0.1:5500",
            "https://kenyaonabudgetsafaris.co.uk",
        ]
    )
    site: SiteConfig = Field(default_factory=SiteConfig)
    checkout: CheckoutConfig = Field(default_factory=CheckoutConfig)


class Settings(BaseModel):
    """Process settings read from the environment at startup."""

    integrations_mode: str = "real"
    stripe_secret_key: Optional[str] = None
    stripe_timeout_seconds: float = Field(default=20.0, gt=0, le=120)
    port: int = Field(default=3000, ge=1, le=65535)
    relay: RelayConfig = Field(default_factory=RelayConfig)

    @property
    def use_mock_processor(self) -> bool:
        return self.integrations_mode in _MOCK_MODES


def load_relay_config(config_path: Optional[Path] = None) -> RelayConfig:
    """
    Load and validate the site configuration from YAML

    Args:
        config_path: Path to config file. Defaults to config/relay_config.yml

    Returns:
        Validated RelayConfig; built-in defaults when the default file is absent

    Raises:
        FileNotFoundError: If an explicitly given config file doesn't exist
        ValidationError: If config doesn't match schema
    """
    if config_path is None:
        config_path = Path(__file__).parent.parent.parent / "config" / "relay_config.yml"
        if not config_path.exists():
            logger.info("No relay config at %s; using built-in defaults", config_path)
            return RelayConfig()

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f) or {}

    try:
        config = RelayConfig(**config_data)
        logger.info("Successfully loaded relay config from %s", config_path)
        return config
    except ValidationError as e:
        logger.error("Relay config validation failed: %s", e)
        raise


def load_settings(env: Optional[dict] = None, relay: Optional[RelayConfig] = None) -> Settings:
    """
    Build Settings from the process environment.

    Raises ConfigError when the processor credential is missing or malformed
    in real mode, or when any value fails validation.
    """
    env = os.environ if env is None else env

    mode = (env.get("INTEGRATIONS_MODE") or "real").strip().lower()
    if mode not in _MOCK_MODES | _REAL_MODES:
        raise ConfigError(f"Unsupported INTEGRATIONS_MODE '{mode}'. Expected one of: mock, test, real, live.")

    secret_key = (env.get("STRIPE_SECRET_KEY") or "").strip() or None
    if mode in _REAL_MODES:
        if not secret_key:
            raise ConfigError("STRIPE_SECRET_KEY is not set; the payment processor cannot be initialised.")
        if not secret_key.startswith(_SECRET_KEY_PREFIXES):
            raise ConfigError("STRIPE_SECRET_KEY does not look like a Stripe secret key (expected sk_... or rk_...).")

    config_path = env.get("RELAY_CONFIG_PATH")
    try:
        if relay is None:
            relay = load_relay_config(Path(config_path) if config_path else None)
        return Settings(
            integrations_mode=mode,
            stripe_secret_key=secret_key,
            stripe_timeout_seconds=env.get("STRIPE_TIMEOUT_SECONDS") or 20.0,
            port=env.get("PORT") or 3000,
            relay=relay,
        )
    except (ValidationError, FileNotFoundError, yaml.YAMLError) as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
