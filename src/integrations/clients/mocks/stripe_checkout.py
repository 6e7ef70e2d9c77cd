"""
Stripe Checkout: MOCK client.

Purpose:
- Stands in for the hosted-checkout processor during local development and tests
- Does NOT make any network calls
- Keeps created sessions in memory so /verify-payment can find them

Behavior:
- create_checkout_session(...) returns a cs_test_... id, a fake hosted URL and "unpaid"
- retrieve_checkout_session(...) returns the stored session; unknown ids fail the way Stripe does
- mark_paid(...) flips a stored session to "paid" (simulates the customer completing checkout)
- Only the newest max_sessions sessions (and their requests) are kept; older ones are evicted
"""

import logging
import uuid
from typing import Dict, List, Optional

from src.integrations.contracts.interfaces import (
    CheckoutSession,
    CheckoutSessionRequest,
    PaymentProviderError,
    PaymentSessionProvider,
    SessionPaymentStatus,
)

logger = logging.getLogger(__name__)

MOCK_CHECKOUT_HOST = "https://checkout.stripe.test/c/pay"
DEFAULT_MAX_SESSIONS = 1000


class MockStripeCheckoutClient(PaymentSessionProvider):
    def __init__(self, fail_with: Optional[str] = None, max_sessions: int = DEFAULT_MAX_SESSIONS) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.fail_with = fail_with
        self.max_sessions = max_sessions
        self.sessions: Dict[str, CheckoutSession] = {}
        self.requests: List[CheckoutSessionRequest] = []

    async def create_checkout_session(self, request: CheckoutSessionRequest) -> CheckoutSession:
        if self.fail_with:
            raise PaymentProviderError(self.fail_with)

        self.requests.append(request)
        session_id = f"cs_test_{uuid.uuid4().hex}"
        session = CheckoutSession(
            session_id=session_id,
            payment_status=SessionPaymentStatus.UNPAID.value,
            url=f"{MOCK_CHECKOUT_HOST}/{session_id}",
            amount_total=sum(item.unit_amount * item.quantity for item in request.line_items),
            client_reference_id=request.client_reference_id,
            metadata=dict(request.metadata),
        )
        self.sessions[session_id] = session
        while len(self.sessions) > self.max_sessions:
            # dicts keep insertion order, so the first key is the oldest session
            del self.sessions[next(iter(self.sessions))]
            del self.requests[0]
        logger.info("[MOCK] Created checkout session %s (%s minor units)", session_id, session.amount_total)
        return session

    async def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        if self.fail_with:
            raise PaymentProviderError(self.fail_with)

        session = self.sessions.get(session_id)
        if session is None:
            raise PaymentProviderError(f"No such checkout.session: '{session_id}'", code="resource_missing", http_status=404)
        return session

    def mark_paid(self, session_id: str, customer_id: str = "cus_mock") -> CheckoutSession:
        session = self.sessions[session_id]
        session.payment_status = SessionPaymentStatus.PAID.value
        session.customer_id = customer_id
        return session
