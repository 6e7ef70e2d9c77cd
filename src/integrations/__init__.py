"""
Integrations layer.
This package contains all code used to communicate with the hosted payment processor.

Key rule:
- Routes MUST NOT call the processor SDK directly.
- Routes call a PaymentSessionProvider (under src/integrations/clients).
- The in-memory MOCK client serves development/tests; the Stripe client serves real traffic.

Switching implementations:
- The selection of mock vs real clients happens in ONE place (src/api/dependencies.py).
"""

from .contracts.interfaces import (
    CheckoutSession,
    CheckoutSessionRequest,
    CheckoutType,
    LineItem,
    PaymentProviderError,
    PaymentSessionProvider,
    SessionPaymentStatus,
)
from .contracts.checkout import (
    build_line_items,
    build_redirect_urls,
    build_session_metadata,
    is_local_origin,
    to_minor_units,
)

__all__ = [
    # interfaces
    "CheckoutSession", "CheckoutSessionRequest", "CheckoutType", "LineItem",
    "PaymentProviderError", "PaymentSessionProvider", "SessionPaymentStatus",
    # checkout helpers
    "build_line_items", "build_redirect_urls", "build_session_metadata",
    "is_local_origin", "to_minor_units",
]
