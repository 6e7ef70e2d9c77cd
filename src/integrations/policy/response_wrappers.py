from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

from src.integrations.contracts.interfaces import CheckoutSession


class IntegrationResponseError(ValueError):
    def __init__(self, message: str, *, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.payload = payload or {}


class CheckoutSessionModel(BaseModel):
    id: str
    payment_status: str
    url: Optional[str] = None
    amount_total: Optional[int] = None
    customer: Optional[str] = None
    client_reference_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def to_session(self) -> CheckoutSession:
        return CheckoutSession(
            session_id=self.id,
            payment_status=self.payment_status,
            url=self.url,
            amount_total=self.amount_total,
            customer_id=self.customer,
            client_reference_id=self.client_reference_id,
            metadata=dict(self.metadata),
        )


def normalize_checkout_session(raw: Mapping[str, Any]) -> CheckoutSessionModel:
    """Validate a processor checkout session object and keep only what the relay returns."""
    data = dict(raw or {})
    session_id = _first_non_empty(data, "id")
    payment_status = str(_first_non_empty(data, "payment_status", "paymentStatus")).strip().lower()

    return _build_model(
        CheckoutSessionModel,
        {
            "id": str(session_id),
            "payment_status": payment_status,
            "url": data.get("url"),
            "amount_total": data.get("amount_total"),
            "customer": _customer_id(data.get("customer")),
            "client_reference_id": data.get("client_reference_id"),
            "metadata": dict(data.get("metadata") or {}),
        },
        data,
    )


def _customer_id(value: Any) -> Optional[str]:
    # Expanded sessions carry the whole customer object.
    if isinstance(value, Mapping):
        value = value.get("id")
    return str(value) if value else None


def _first_non_empty(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    if default is not None:
        return default
    raise IntegrationResponseError(f"Missing required field. Checked keys: {', '.join(keys)}", payload=data)


def _build_model(model_type, payload: Dict[str, Any], raw: Dict[str, Any]):
    try:
        return model_type(**payload)
    except ValidationError as exc:
        raise IntegrationResponseError(f"Response validation failed: {exc}", payload=raw) from exc
