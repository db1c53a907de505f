"""
Temporal activities: thin wrappers delegating to the service layer.

One activity per stage. Each accepts a single Pydantic model, calls the
matching service from ServiceFactory, and returns the stage's result model.

Stage failures (FulfillmentError) are raised as non-retryable
ApplicationErrors typed with the error kind, so Temporal does not retry a
declined payment or an unknown restaurant; the workflow turns them back into
FulfillmentErrors. Anything else propagates unchanged and is retried per the
workflow's RetryPolicy.
"""

import logging
from typing import Awaitable, TypeVar

from temporalio import activity
from temporalio.exceptions import ApplicationError

from food_order.domain.errors import FulfillmentError
from food_order.domain.models import (
    CatalogEntry,
    DeliveryInput,
    DeliveryResult,
    OrderInput,
    OrderRecord,
    PaymentInput,
    PaymentResult,
    SearchInput,
)
from food_order.services.factory import ServiceFactory

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _stage(name: str, call: Awaitable[T]) -> T:
    logger.info("Activity %s started", name)
    try:
        result = await call
    except FulfillmentError as e:
        logger.info("Activity %s failed: %s (%s)", name, e.message, e.kind.value)
        raise ApplicationError(e.message, type=e.kind.value, non_retryable=True) from e
    logger.info("Activity %s completed", name)
    return result


@activity.defn
async def search_catalog(input: SearchInput) -> CatalogEntry:
    """Resolve a restaurant name to its menu."""
    return await _stage("search_catalog", ServiceFactory.get_catalog_service().find_catalog(input.name))


@activity.defn
async def place_order(input: OrderInput) -> OrderRecord:
    return await _stage(
        "place_order",
        ServiceFactory.get_order_service().place_order(input.restaurant_name, input.item),
    )


@activity.defn
async def process_payment(input: PaymentInput) -> PaymentResult:
    """Charge the order via PaymentService.

    A decline is reported once; retrying it is the caller's decision.
    """
    return await _stage(
        "process_payment",
        ServiceFactory.get_payment_service().process_payment(input.order_id, input.amount, input.force_fail),
    )


@activity.defn
async def confirm_delivery(input: DeliveryInput) -> DeliveryResult:
    return await _stage("confirm_delivery", ServiceFactory.get_delivery_service().confirm_delivery(input.order_id))


ALL_ACTIVITIES = [search_catalog, place_order, process_payment, confirm_delivery]
