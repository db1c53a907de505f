"""Temporal activities, run through ActivityEnvironment (no server needed)."""

import pytest
from temporalio.exceptions import ApplicationError
from temporalio.testing import ActivityEnvironment

from food_order.activities import confirm_delivery, place_order, process_payment, search_catalog
from food_order.domain.models import DeliveryInput, OrderInput, PaymentInput, SearchInput


@pytest.mark.asyncio
async def test_happy_path_activities():
    env = ActivityEnvironment()

    entry = await env.run(search_catalog, SearchInput(name="pasta hub"))
    assert entry.name == "Pasta Hub"

    order = await env.run(place_order, OrderInput(restaurant_name="Pasta Hub", item="Alfredo Pasta"))
    assert order.amount == 7

    payment = await env.run(process_payment, PaymentInput(order_id=order.order_id, amount=order.amount))
    assert payment.payment_id.startswith("PAY-")

    delivery = await env.run(confirm_delivery, DeliveryInput(order_id=order.order_id))
    assert delivery.delivered_at is not None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "activity_fn, payload, kind",
    [
        (search_catalog, SearchInput(name="Nowhere"), "NotFound"),
        (search_catalog, SearchInput(), "InvalidInput"),
        (place_order, OrderInput(restaurant_name="Pasta Hub", item="Pizza"), "ItemUnavailable"),
        (process_payment, PaymentInput(order_id="ORD-ABC123", amount=7, force_fail=True), "PaymentDeclined"),
        (confirm_delivery, DeliveryInput(), "InvalidInput"),
    ],
)
async def test_stage_failures_are_non_retryable_application_errors(activity_fn, payload, kind):
    env = ActivityEnvironment()
    with pytest.raises(ApplicationError) as exc:
        await env.run(activity_fn, payload)
    assert exc.value.type == kind
    assert exc.value.non_retryable
