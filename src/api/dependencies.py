"""
Process-wide collaborators for the checkout routes.

Both are set once by the startup hook in src/api/main.py before traffic is
accepted; the routes only read them through FastAPI dependencies.
"""

import logging
from typing import Optional

from src.error_handler import ConfigError, UpstreamFailureError
from src.integrations.clients.mocks.stripe_checkout import MockStripeCheckoutClient
from src.integrations.clients.real_http.stripe_checkout import StripeCheckoutClient
from src.integrations.contracts.interfaces import PaymentSessionProvider
from src.utils.config_loader import Settings

logger = logging.getLogger(__name__)

settings: Optional[Settings] = None
payment_client: Optional[PaymentSessionProvider] = None


def build_payment_client(cfg: Settings) -> PaymentSessionProvider:
    if cfg.use_mock_processor:
        logger.warning("INTEGRATIONS_MODE=%s: using the in-memory mock payment processor", cfg.integrations_mode)
        return MockStripeCheckoutClient()

    if not cfg.stripe_secret_key:
        raise ConfigError("STRIPE_SECRET_KEY is not set; the payment processor cannot be initialised.")
    return StripeCheckoutClient(api_key=cfg.stripe_secret_key, timeout_seconds=cfg.stripe_timeout_seconds)


def init_processor(cfg: Settings) -> PaymentSessionProvider:
    global settings, payment_client

    client = build_payment_client(cfg)
    settings = cfg
    payment_client = client
    logger.info("Payment processor initialized successfully (%s)", type(client).__name__)
    return client


def reset_processor() -> None:
    global settings, payment_client
    settings = None
    payment_client = None


def get_settings() -> Settings:
    if settings is None:
        raise UpstreamFailureError("Service configuration is not initialised")
    return settings


def get_payment_client() -> PaymentSessionProvider:
    if payment_client is None:
        raise UpstreamFailureError("Payment processor is not initialised")
    return payment_client
