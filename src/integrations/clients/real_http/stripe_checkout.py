"""
Real Stripe Checkout client.

Used whenever INTEGRATIONS_MODE is real/live (the default). Talks to the
Stripe API through the official SDK over httpx, asynchronously.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import stripe

from src.integrations.contracts.interfaces import (
    CheckoutSession,
    CheckoutSessionRequest,
    LineItem,
    PaymentProviderError,
    PaymentSessionProvider,
)
from src.integrations.policy.response_wrappers import IntegrationResponseError, normalize_checkout_session

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 20.0


class StripeCheckoutClient(PaymentSessionProvider):
    def __init__(
        self,
        api_key: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        stripe_client: Optional[stripe.StripeClient] = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self._client = stripe_client or stripe.StripeClient(
            api_key,
            http_client=stripe.HTTPXClient(timeout=timeout_seconds),
            max_network_retries=0,
        )

    async def create_checkout_session(self, request: CheckoutSessionRequest) -> CheckoutSession:
        params: Dict[str, Any] = {
            "payment_method_types": list(request.payment_method_types),
            "line_items": [_line_item_params(item) for item in request.line_items],
            "mode": request.mode,
            "success_url": request.success_url,
            "cancel_url": request.cancel_url,
            "client_reference_id": request.client_reference_id,
            "metadata": dict(request.metadata),
        }

        try:
            session = await self._client.v1.checkout.sessions.create_async(params=params)
        except stripe.StripeError as e:
            raise _provider_error(e, "Error creating checkout session") from e

        return _to_checkout_session(session)

    async def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        try:
            session = await self._client.v1.checkout.sessions.retrieve_async(session_id)
        except stripe.StripeError as e:
            raise _provider_error(e, "Error verifying payment") from e

        return _to_checkout_session(session)


def _line_item_params(item: LineItem) -> Dict[str, Any]:
    product_data: Dict[str, Any] = {"name": item.name}
    if item.description:
        product_data["description"] = item.description
    return {
        "price_data": {
            "currency": item.currency,
            "product_data": product_data,
            "unit_amount": item.unit_amount,
        },
        "quantity": item.quantity,
    }


def _to_checkout_session(session: Any) -> CheckoutSession:
    try:
        return normalize_checkout_session(_as_mapping(session)).to_session()
    except IntegrationResponseError as e:
        raise PaymentProviderError(str(e)) from e


def _as_mapping(obj: Any) -> Mapping[str, Any]:
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    return dict(obj)


def _provider_error(error: stripe.StripeError, fallback: str) -> PaymentProviderError:
    message = error.user_message or str(error) or fallback
    logger.error("Stripe call failed: status=%s code=%s message=%s", error.http_status, error.code, message)
    return PaymentProviderError(message, code=error.code, http_status=error.http_status)
