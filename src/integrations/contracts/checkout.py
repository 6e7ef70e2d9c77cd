"""
Checkout contract: translation helpers between a website cart and the
processor's hosted-checkout session.

Everything here is pure (no I/O) so both the mock and the real processor
clients receive identically shaped requests.

Currency rule: every major-unit price is converted with
round-half-away-from-zero on its decimal representation, so 10.005 -> 1001
and 49.99 -> 4999 regardless of binary float error.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlencode, urlparse

from .interfaces import CheckoutType, LineItem

SESSION_ID_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"
LOCAL_HOSTS = {"localhost", "127.0.0.1"}


def to_minor_units(amount: Any) -> int:
    """Convert a major-unit amount (pounds) to integer minor units (pence)."""
    if amount is None:
        return 0
    minor = Decimal(str(amount)) * 100
    return int(minor.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def build_line_items(
    checkout_type: str,
    amount: Optional[float],
    items: Optional[Sequence[Any]],
    *,
    currency: str = "gbp",
    package_product_name: str = "Travel Package Booking",
    activity_product_name: str = "Activity",
) -> List[LineItem]:
    """
    Activity upgrades with a non-empty cart get one line item per cart entry;
    everything else is a single package line item built from `amount`.

    Cart entries may be mappings or objects exposing title/quantity/price.
    """
    if checkout_type == CheckoutType.ACTIVITY_UPGRADE.value and items:
        line_items: List[LineItem] = []
        for item in items:
            title = _field(item, "title") or activity_product_name
            quantity = _field(item, "quantity") or 1
            price = _field(item, "price") or 0
            line_items.append(
                LineItem(
                    currency=currency,
                    name=title,
                    description=f"Quantity: {quantity}",
                    unit_amount=to_minor_units(price),
                    quantity=int(quantity),
                )
            )
        return line_items

    return [
        LineItem(
            currency=currency,
            name=package_product_name,
            unit_amount=to_minor_units(amount),
            quantity=1,
        )
    ]


def is_local_origin(origin: Optional[str], allowed_origins: Sequence[str]) -> bool:
    """True only for allow-listed origins served from a local development host."""
    if not origin or origin not in allowed_origins:
        return False
    return urlparse(origin).hostname in LOCAL_HOSTS


def build_redirect_urls(
    *,
    user_id: str,
    timestamp: int,
    checkout_type: str,
    base_url: str,
    success_page: str,
    cancel_page: str,
) -> Tuple[str, str]:
    """Return (success_url, cancel_url) for the hosted checkout page."""
    # The placeholder must stay unescaped so the processor can substitute it.
    query = f"session_id={SESSION_ID_PLACEHOLDER}&" + urlencode(
        {"userId": user_id, "timestamp": timestamp, "type": checkout_type}
    )
    base_url = base_url.rstrip("/")
    return f"{base_url}/{success_page}?{query}", f"{base_url}/{cancel_page}?{query}"


def build_session_metadata(
    *,
    user_id: str,
    timestamp: int,
    checkout_type: str,
    package_id: Optional[str],
    items: Optional[Sequence[Any]],
) -> Dict[str, str]:
    # Processor metadata values are strings.
    return {
        "userId": user_id,
        "timestamp": str(timestamp),
        "packageId": package_id or "",
        "type": checkout_type,
        "itemCount": str(len(items) if items is not None else 1),
    }


def _field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)
