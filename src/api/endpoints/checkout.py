import logging
import time
from typing import Any, List, Literal, Optional

from fastapi import APIRouter, Depends, Header
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.api.dependencies import get_payment_client, get_settings
from src.error_handler import MethodNotAllowedError, UpstreamFailureError
from src.integrations.contracts.checkout import (
    build_line_items,
    build_redirect_urls,
    build_session_metadata,
    is_local_origin,
)
from src.integrations.contracts.interfaces import CheckoutSessionRequest, CheckoutType, PaymentSessionProvider
from src.utils.config_loader import Settings

logger = logging.getLogger(__name__)

api = APIRouter()
checkout_api = api


def _require_text(value: Any, message: str) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(message)
    return value


class CartItem(BaseModel):
    title: Optional[str] = None
    quantity: Optional[int] = Field(default=1, ge=1)
    price: Optional[float] = Field(default=0, ge=0, allow_inf_nan=False)


class CheckoutRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    amount: Optional[float] = Field(default=None, allow_inf_nan=False, description="Package total in pounds")
    items: Optional[List[CartItem]] = None
    checkout_type: Optional[Literal["activity_upgrade", "package"]] = Field(default=None, alias="type")
    package_id: Optional[str] = Field(default=None, alias="packageId")

    @field_validator("user_id", mode="before")
    @classmethod
    def _user_id_present(cls, value: Any) -> Any:
        return _require_text(value, "Missing userId")

    @field_validator("package_id", mode="before")
    @classmethod
    def _package_id_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @model_validator(mode="after")
    def _payment_details_present(self) -> "CheckoutRequest":
        if self.amount is None and not self.items:
            raise ValueError("Missing payment details (amount or items)")
        # Cart items carry their own prices; the amount only prices a package.
        if not self.is_activity_upgrade:
            if self.amount is None:
                raise ValueError("Missing amount for package checkout")
            if self.amount <= 0:
                raise ValueError("Invalid amount: must be greater than 0")
        return self

    @property
    def resolved_type(self) -> str:
        return self.checkout_type or CheckoutType.PACKAGE.value

    @property
    def is_activity_upgrade(self) -> bool:
        return self.checkout_type == CheckoutType.ACTIVITY_UPGRADE.value and bool(self.items)


class VerifyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(default=None, alias="sessionId", validate_default=True)

    @field_validator("session_id", mode="before")
    @classmethod
    def _session_id_present(cls, value: Any) -> Any:
        return _require_text(value, "Session ID is required")


class CancellationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(default=None, alias="userId", validate_default=True)
    timestamp: Optional[Any] = None

    @field_validator("user_id", mode="before")
    @classmethod
    def _user_id_present(cls, value: Any) -> Any:
        return _require_text(value, "User ID is required")


def _redirect_urls(request: CheckoutRequest, timestamp: int, origin: Optional[str], settings: Settings):
    site = settings.relay.site
    if is_local_origin(origin, settings.relay.allowed_origins):
        base_url, success_page, cancel_page = origin, site.local_success_page, site.local_cancel_page
    else:
        base_url, success_page, cancel_page = site.production_url, site.success_page, site.cancel_page

    return build_redirect_urls(
        user_id=request.user_id,
        timestamp=timestamp,
        checkout_type=request.resolved_type,
        base_url=base_url,
        success_page=success_page,
        cancel_page=cancel_page,
    )


@api.post("/create-checkout-session", tags=["Checkout"])
async def create_checkout_session(
    request: CheckoutRequest,
    origin: Optional[str] = Header(default=None),
    client: PaymentSessionProvider = Depends(get_payment_client),
    settings: Settings = Depends(get_settings),
):
    logger.info(
        "Received checkout request: userId=%s type=%s amount=%s items=%s",
        request.user_id,
        request.resolved_type,
        request.amount,
        len(request.items) if request.items is not None else None,
    )

    timestamp = int(time.time() * 1000)
    checkout_cfg = settings.relay.checkout

    if request.is_activity_upgrade:
        logger.info("Processing activity upgrade with %d items", len(request.items))
    else:
        logger.info("Processing package booking with amount: %s", request.amount)

    line_items = build_line_items(
        request.resolved_type,
        request.amount,
        request.items,
        currency=checkout_cfg.currency,
        package_product_name=checkout_cfg.package_product_name,
        activity_product_name=checkout_cfg.activity_product_name,
    )
    success_url, cancel_url = _redirect_urls(request, timestamp, origin, settings)
    logger.info("Success URL: %s", success_url)
    logger.info("Cancel URL: %s", cancel_url)

    session_request = CheckoutSessionRequest(
        line_items=line_items,
        success_url=success_url,
        cancel_url=cancel_url,
        client_reference_id=request.user_id,
        metadata=build_session_metadata(
            user_id=request.user_id,
            timestamp=timestamp,
            checkout_type=request.resolved_type,
            package_id=request.package_id,
            items=request.items,
        ),
    )

    try:
        session = await client.create_checkout_session(session_request)
    except Exception as e:
        raise UpstreamFailureError(str(e) or "Error creating checkout session") from e

    logger.info("Checkout session created: %s", session.session_id)
    return {"id": session.session_id, "url": session.url, "timestamp": timestamp, "success": True}


@api.get("/create-checkout-session", tags=["Checkout"], include_in_schema=False)
async def create_checkout_session_get():
    raise MethodNotAllowedError("GET method not allowed for this endpoint. Use POST instead.")


@api.post("/verify-payment", tags=["Checkout"])
async def verify_payment(
    request: VerifyRequest,
    client: PaymentSessionProvider = Depends(get_payment_client),
):
    logger.info("Retrieving checkout session: %s", request.session_id)
    try:
        session = await client.retrieve_checkout_session(request.session_id)
    except Exception as e:
        raise UpstreamFailureError(str(e) or "Error verifying payment") from e

    logger.info("Session retrieved: %s status=%s", session.session_id, session.payment_status)

    if session.is_paid:
        return {
            "paid": True,
            "amount": (session.amount_total or 0) / 100,
            "customerId": session.customer_id,
            "metadata": session.metadata,
            "success": True,
        }
    return {
        "paid": False,
        "status": session.payment_status,
        "metadata": session.metadata,
        "success": True,
    }


@api.post("/handle-cancellation", tags=["Checkout"])
async def handle_cancellation(request: CancellationRequest):
    # Acknowledgement only; nothing is persisted.
    logger.info("Cancellation acknowledged: userId=%s timestamp=%s", request.user_id, request.timestamp)
    return {
        "success": True,
        "message": "Cancellation processed",
        "userId": request.user_id,
        "timestamp": request.timestamp,
    }
