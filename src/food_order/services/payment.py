"""
Payment stage.

Simulates authorizing a charge. ``force_fail`` declines deterministically;
otherwise a fixed share of attempts (``decline_probability``) is declined at
random. Attempts are stateless: a declined order can be retried with the
same id and amount, with no lockout and no attempt counter.

The amount is taken from the caller as-is. There is no stored order to
re-verify it against.
"""

import logging
import math
import random

from food_order.domain.errors import InvalidInputError, PaymentDeclinedError
from food_order.domain.models import PaymentResult, Stage
from food_order.services.ids import new_token
from food_order.services.latency import LatencySimulator

logger = logging.getLogger(__name__)


class PaymentService:
    """Simulates charging a customer for an order."""

    def __init__(
        self,
        latency: LatencySimulator,
        decline_probability: float = 0.15,
        rng: random.Random | None = None,
    ) -> None:
        self.latency = latency
        self.decline_probability = decline_probability
        self._rng = rng or random.Random()

    async def process_payment(
        self, order_id: str | None, amount: float | None, force_fail: bool | None = False
    ) -> PaymentResult:
        await self.latency.simulate(Stage.PAYMENT)
        force_fail = bool(force_fail)
        if not order_id or not _is_valid_amount(amount):
            raise InvalidInputError("orderId and numeric amount required.")

        logger.info("Charging order %s for $%s", order_id, amount)
        if force_fail or self._rng.random() < self.decline_probability:  # noqa: S311
            logger.info("Payment declined for order %s (forced=%s)", order_id, force_fail)
            raise PaymentDeclinedError("Payment declined.")

        result = PaymentResult(payment_id=new_token("PAY", 8, self._rng))
        logger.info("Charge %s successful for order %s", result.payment_id, order_id)
        return result


def _is_valid_amount(amount) -> bool:
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        return False
    return math.isfinite(amount) and amount >= 0
