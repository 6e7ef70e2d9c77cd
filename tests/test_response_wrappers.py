import pytest

from src.integrations.policy.response_wrappers import IntegrationResponseError, normalize_checkout_session


def test_normalize_keeps_relay_fields_only():
    model = normalize_checkout_session(
        {
            "id": "cs_1",
            "object": "checkout.session",
            "payment_status": "PAID",
            "amount_total": 12050,
            "customer": "cus_1",
            "client_reference_id": "u1",
            "metadata": {"userId": "u1"},
            "livemode": False,
        }
    )

    session = model.to_session()
    assert session.session_id == "cs_1"
    assert session.payment_status == "paid"
    assert session.is_paid
    assert session.customer_id == "cus_1"
    assert session.client_reference_id == "u1"


def test_normalize_tolerates_missing_optional_fields():
    session = normalize_checkout_session({"id": "cs_2", "payment_status": "unpaid"}).to_session()
    assert session.amount_total is None
    assert session.customer_id is None
    assert session.metadata == {}


@pytest.mark.parametrize("raw", [{}, {"id": "cs_3"}, {"payment_status": "paid"}, {"id": " ", "payment_status": "paid"}])
def test_normalize_rejects_sessions_without_id_or_status(raw):
    with pytest.raises(IntegrationResponseError):
        normalize_checkout_session(raw)


def test_normalize_rejects_non_integer_totals():
    with pytest.raises(IntegrationResponseError, match="Response validation failed"):
        normalize_checkout_session({"id": "cs_4", "payment_status": "paid", "amount_total": "lots"})
