"""
Workflow tracker and receipt book.

The tracker holds one flag per stage. Flags are independent: a later stage
may be done while an earlier one is still pending when it was invoked on its
own. The only way to move a flag is through the named transitions below, so
the allowed moves are enforced here and nowhere else:

    reset()            every flag → pending
    start(stage)       any → pending     (a fresh invocation of that stage)
    mark_done(stage)   pending → done
    mark_failed(stage) pending → failed

Both classes are deterministic (no clock, no randomness) so the durable
workflow can use them as-is.
"""

from food_order.domain.errors import InvalidTransitionError
from food_order.domain.models import (
    DeliveryResult,
    OrderRecord,
    PaymentResult,
    Receipt,
    Stage,
    StageStatus,
    TrackerSnapshot,
)


class Tracker:
    """Per-stage pending/done/failed flags for one workflow run."""

    def __init__(self) -> None:
        self._flags: dict[Stage, StageStatus] = {}
        self.reset()

    def reset(self) -> None:
        self._flags = {stage: StageStatus.PENDING for stage in Stage}

    def start(self, stage: Stage) -> None:
        self._flags[stage] = StageStatus.PENDING

    def mark_done(self, stage: Stage) -> None:
        self._finish(stage, StageStatus.DONE)

    def mark_failed(self, stage: Stage) -> None:
        self._finish(stage, StageStatus.FAILED)

    def status(self, stage: Stage) -> StageStatus:
        return self._flags[stage]

    def snapshot(self) -> TrackerSnapshot:
        return TrackerSnapshot(**{stage.value: status for stage, status in self._flags.items()})

    def _finish(self, stage: Stage, outcome: StageStatus) -> None:
        current = self._flags[stage]
        if current is not StageStatus.PENDING:
            raise InvalidTransitionError(
                f"{stage.value} is already {current.value}; start it again before marking it {outcome.value}"
            )
        self._flags[stage] = outcome


class ReceiptBook:
    """Accumulates stage results into a Receipt.

    A fresh order starts a new receipt; payment and delivery results are
    merged into whatever receipt is current, so a standalone retry keeps the
    order it was made for.
    """

    def __init__(self, receipt: Receipt | None = None) -> None:
        self._receipt = receipt

    @property
    def receipt(self) -> Receipt | None:
        return self._receipt

    @property
    def order(self) -> OrderRecord | None:
        return self._receipt.order if self._receipt else None

    def clear(self) -> None:
        self._receipt = None

    def record_order(self, order: OrderRecord) -> Receipt:
        self._receipt = Receipt(stage="order_placed", order=order)
        return self._receipt

    def record_payment(self, payment: PaymentResult, order: OrderRecord | None = None) -> Receipt:
        self._receipt = self._current(order).model_copy(update={"stage": "paid", "payment": payment})
        return self._receipt

    def record_delivery(
        self, delivery: DeliveryResult, order: OrderRecord | None = None, replace: bool = False
    ) -> Receipt:
        """Merge a delivery into the receipt; ``replace`` starts a receipt holding only the delivery."""
        base = Receipt(order=order) if replace else self._current(order)
        self._receipt = base.model_copy(update={"stage": "delivered", "delivery": delivery})
        return self._receipt

    def _current(self, order: OrderRecord | None) -> Receipt:
        if self._receipt is None:
            return Receipt(order=order)
        if order is not None and (self._receipt.order is None or self._receipt.order.order_id != order.order_id):
            # Explicitly supplied order replaces the held one.
            return Receipt(order=order)
        return self._receipt
