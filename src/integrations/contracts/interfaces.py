from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class CheckoutType(str, Enum):
    PACKAGE = "package"
    ACTIVITY_UPGRADE = "activity_upgrade"


class SessionPaymentStatus(str, Enum):
    PAID = "paid"
    UNPAID = "unpaid"
    NO_PAYMENT_REQUIRED = "no_payment_required"


# ---------------------------------------------------------------------------
# Shared data models
# ---------------------------------------------------------------------------

@dataclass
class LineItem:
    currency: str
    name: str
    unit_amount: int                     # minor currency units (pence)
    quantity: int = 1
    description: Optional[str] = None


@dataclass
class CheckoutSessionRequest:
    line_items: List[LineItem]
    success_url: str
    cancel_url: str
    client_reference_id: str
    mode: str = "payment"
    payment_method_types: List[str] = field(default_factory=lambda: ["card"])
    metadata: Dict[str, str] = field(default_factory=dict)


@dataclass
class CheckoutSession:
    session_id: str
    payment_status: str
    url: Optional[str] = None
    amount_total: Optional[int] = None   # minor currency units
    customer_id: Optional[str] = None
    client_reference_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == SessionPaymentStatus.PAID.value


# ---------------------------------------------------------------------------
# Abstract processor interface
# ---------------------------------------------------------------------------

class PaymentSessionProvider(ABC):
    """Every hosted-checkout processor client must implement this interface."""

    @abstractmethod
    async def create_checkout_session(self, request: CheckoutSessionRequest) -> CheckoutSession:
        """Create a hosted payment session and return its id and redirect URL."""

    @abstractmethod
    async def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        """Fetch a previously created session's payment status and metadata."""


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class PaymentProviderError(RuntimeError):
    """Raised by processor clients when a session call fails for any reason."""

    def __init__(self, message: str, *, code: Optional[str] = None, http_status: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code
        self.http_status = http_status
