"""Order, payment and delivery stage tests."""

import math
import random
import re
from datetime import datetime, timezone

import pytest

from food_order.config import DelayRange, LatencyConfig
from food_order.domain.errors import (
    InvalidInputError,
    ItemUnavailableError,
    NotFoundError,
    PaymentDeclinedError,
)
from food_order.domain.models import Stage
from food_order.services.delivery import DeliveryService
from food_order.services.ids import new_token
from food_order.services.latency import LatencySimulator
from food_order.services.payment import PaymentService


def no_latency():
    return LatencySimulator(LatencyConfig(enabled=False))


# ── Order stage ──────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_place_order_returns_price_of_matched_item(services):
    order = await services.get_order_service().place_order("burger palace", "cheese burger")
    assert order.amount == 5
    assert re.fullmatch(r"ORD-[A-Z0-9]{6}", order.order_id)


@pytest.mark.asyncio
async def test_place_order_generates_fresh_ids(services):
    orders = [await services.get_order_service().place_order("Pasta Hub", "Pesto Pasta") for _ in range(20)]
    assert len({order.order_id for order in orders}) == 20
    assert {order.amount for order in orders} == {8}


@pytest.mark.asyncio
async def test_place_order_unknown_restaurant(services):
    with pytest.raises(NotFoundError, match="Restaurant not found."):
        await services.get_order_service().place_order("Taco Town", "Taco")


@pytest.mark.asyncio
async def test_place_order_unknown_item(services):
    with pytest.raises(ItemUnavailableError, match="Item not available."):
        await services.get_order_service().place_order("Burger Palace", "Alfredo Pasta")


@pytest.mark.asyncio
@pytest.mark.parametrize("restaurant, item", [("", "Fries"), ("Burger Palace", "  "), (None, None)])
async def test_place_order_requires_both_fields(services, restaurant, item):
    with pytest.raises(InvalidInputError, match="restaurantName and item required."):
        await services.get_order_service().place_order(restaurant, item)


# ── Payment stage ────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_force_fail_always_declines():
    service = PaymentService(no_latency(), decline_probability=0.0)
    for _ in range(25):
        with pytest.raises(PaymentDeclinedError, match="Payment declined."):
            await service.process_payment("ORD-ABC123", 7, force_fail=True)


@pytest.mark.asyncio
async def test_decline_rate_converges_to_configured_probability():
    service = PaymentService(no_latency(), decline_probability=0.15, rng=random.Random(20240601))
    trials = 4000
    declined = 0
    for _ in range(trials):
        try:
            await service.process_payment("ORD-ABC123", 7)
        except PaymentDeclinedError:
            declined += 1
    assert abs(declined / trials - 0.15) < 0.03


@pytest.mark.asyncio
async def test_missing_force_flag_is_not_forced():
    service = PaymentService(no_latency(), decline_probability=0.0)
    assert (await service.process_payment("ORD-ABC123", 7, force_fail=None)).payment_id


@pytest.mark.asyncio
async def test_payment_can_be_retried_with_same_order():
    service = PaymentService(no_latency(), decline_probability=0.0)
    with pytest.raises(PaymentDeclinedError):
        await service.process_payment("ORD-ABC123", 7, force_fail=True)

    result = await service.process_payment("ORD-ABC123", 7)
    assert re.fullmatch(r"PAY-[A-Z0-9]{8}", result.payment_id)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "order_id, amount",
    [("", 7), (None, 7), ("ORD-ABC123", None), ("ORD-ABC123", "7"), ("ORD-ABC123", -1),
     ("ORD-ABC123", math.nan), ("ORD-ABC123", math.inf), ("ORD-ABC123", True)],
)
async def test_payment_rejects_bad_input(order_id, amount):
    service = PaymentService(no_latency(), decline_probability=0.0)
    with pytest.raises(InvalidInputError, match="orderId and numeric amount required."):
        await service.process_payment(order_id, amount)


@pytest.mark.asyncio
async def test_payment_accepts_zero_amount():
    service = PaymentService(no_latency(), decline_probability=0.0)
    assert (await service.process_payment("ORD-ABC123", 0)).payment_id


# ── Delivery stage ───────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_delivery_timestamp_not_before_call():
    service = DeliveryService(no_latency())
    started = datetime.now(timezone.utc)
    result = await service.confirm_delivery("ORD-ABC123")
    assert result.delivered_at >= started


@pytest.mark.asyncio
async def test_repeated_delivery_is_a_fresh_confirmation():
    service = DeliveryService(no_latency())
    first = await service.confirm_delivery("ORD-ABC123")
    second = await service.confirm_delivery("ORD-ABC123")
    assert second.delivered_at >= first.delivered_at


@pytest.mark.asyncio
async def test_delivery_requires_order_id():
    with pytest.raises(InvalidInputError, match="orderId required."):
        await DeliveryService(no_latency()).confirm_delivery("")


# ── Helpers ──────────────────────────────────────────────────────────


def test_new_token_format():
    token = new_token("ORD", 6, random.Random(1))
    assert re.fullmatch(r"ORD-[A-Z0-9]{6}", token)


def test_latency_ranges_grow_per_stage_and_scale():
    config = LatencyConfig(scale=0.5, payment=DelayRange(low=2, high=2))
    simulator = LatencySimulator(config, rng=random.Random(3))
    assert simulator.delay_for(Stage.PAYMENT) == 1.0
    assert 0.3 <= simulator.delay_for(Stage.SEARCH) <= 0.6

    assert LatencySimulator(LatencyConfig(scale=0)).delay_for(Stage.DELIVERY) == 0.0
    assert LatencySimulator(LatencyConfig(enabled=False)).delay_for(Stage.DELIVERY) == 0.0


def test_delay_range_must_be_ordered():
    with pytest.raises(ValueError):
        DelayRange(low=2, high=1)


@pytest.mark.asyncio
async def test_simulate_sleeps_for_the_stage_delay(monkeypatch):
    slept = []

    async def fake_sleep(seconds):
        slept.append(seconds)

    monkeypatch.setattr("food_order.services.latency.asyncio.sleep", fake_sleep)
    simulator = LatencySimulator(LatencyConfig(delivery=DelayRange(low=1.5, high=1.5)))
    await simulator.simulate(Stage.DELIVERY)
    await no_latency().simulate(Stage.DELIVERY)
    assert slept == [1.5]
