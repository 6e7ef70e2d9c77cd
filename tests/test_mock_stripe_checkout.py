import pytest

from src.integrations.clients.mocks.stripe_checkout import MockStripeCheckoutClient
from src.integrations.contracts.interfaces import CheckoutSessionRequest, LineItem, PaymentProviderError


def _request():
    return CheckoutSessionRequest(
        line_items=[
            LineItem(currency="gbp", name="Safari", unit_amount=4999, quantity=2),
            LineItem(currency="gbp", name="Dinner", unit_amount=1500),
        ],
        success_url="https://site.test/ok",
        cancel_url="https://site.test/cancel",
        client_reference_id="u1",
        metadata={"userId": "u1"},
    )


@pytest.mark.asyncio
async def test_mock_session_totals_line_items_and_starts_unpaid():
    client = MockStripeCheckoutClient()

    session = await client.create_checkout_session(_request())

    assert session.session_id.startswith("cs_test_")
    assert session.url.endswith(session.session_id)
    assert session.amount_total == 4999 * 2 + 1500
    assert session.payment_status == "unpaid"
    assert not session.is_paid
    assert client.requests == [_request()]


@pytest.mark.asyncio
async def test_mock_session_can_be_marked_paid_and_retrieved():
    client = MockStripeCheckoutClient()
    session = await client.create_checkout_session(_request())

    client.mark_paid(session.session_id, customer_id="cus_1")
    retrieved = await client.retrieve_checkout_session(session.session_id)

    assert retrieved.is_paid
    assert retrieved.customer_id == "cus_1"
    assert retrieved.metadata == {"userId": "u1"}


@pytest.mark.asyncio
async def test_mock_unknown_session_fails_like_stripe():
    client = MockStripeCheckoutClient()

    with pytest.raises(PaymentProviderError) as exc_info:
        await client.retrieve_checkout_session("cs_test_nope")

    assert exc_info.value.code == "resource_missing"
    assert exc_info.value.http_status == 404


@pytest.mark.asyncio
async def test_mock_can_simulate_processor_outage():
    client = MockStripeCheckoutClient(fail_with="Stripe is unavailable")

    with pytest.raises(PaymentProviderError, match="unavailable"):
        await client.create_checkout_session(_request())
    assert client.requests == []


@pytest.mark.asyncio
async def test_mock_evicts_oldest_sessions_beyond_cap():
    client = MockStripeCheckoutClient(max_sessions=2)

    first = await client.create_checkout_session(_request())
    second = await client.create_checkout_session(_request())
    third = await client.create_checkout_session(_request())

    assert list(client.sessions) == [second.session_id, third.session_id]
    assert len(client.requests) == 2
    with pytest.raises(PaymentProviderError) as exc_info:
        await client.retrieve_checkout_session(first.session_id)
    assert exc_info.value.code == "resource_missing"


def test_mock_rejects_non_positive_cap():
    with pytest.raises(ValueError, match="max_sessions"):
        MockStripeCheckoutClient(max_sessions=0)
