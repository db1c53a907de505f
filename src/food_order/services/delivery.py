"""
Delivery stage.

Models a dispatch system that always eventually confirms. Every call is a
fresh confirmation with its own timestamp; repeated calls for the same order
are not deduplicated.
"""

import logging
from datetime import datetime, timezone

from food_order.domain.errors import InvalidInputError
from food_order.domain.models import DeliveryResult, Stage
from food_order.services.latency import LatencySimulator

logger = logging.getLogger(__name__)


class DeliveryService:
    """Simulates confirming delivery of an order."""

    def __init__(self, latency: LatencySimulator) -> None:
        self.latency = latency

    async def confirm_delivery(self, order_id: str | None) -> DeliveryResult:
        await self.latency.simulate(Stage.DELIVERY)
        if not order_id:
            raise InvalidInputError("orderId required.")
        result = DeliveryResult(delivered_at=datetime.now(timezone.utc))
        logger.info("Order %s delivered at %s", order_id, result.delivered_at.isoformat())
        return result
