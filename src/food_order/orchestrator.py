"""
Workflow orchestrator.

Two ways to drive the stages:

  * ``run_chain``: search → order → payment → delivery, strictly in order.
    Each stage is awaited before the next one is issued, and the chain stops
    at the first failure: later stages are never invoked and their tracker
    flags stay pending.
  * ``retry_payment`` / ``retry_delivery``: run one stage on its own with
    the order id (and amount) held in the receipt, or supplied by the caller.
    No server-side session exists; the receipt is the only carried state.

Stage errors are reported verbatim through the presenter and re-raised as
StageFailed; they are never translated or swallowed.

This module does no I/O of its own (all of it goes through the gateway and
the presenter), so the durable workflow runs it unchanged.
"""

from typing import Awaitable, Callable, Optional, TypeVar

from food_order.domain.errors import FulfillmentError, InvalidInputError
from food_order.domain.models import (
    CatalogEntry,
    ChainResult,
    ChainStatus,
    DeliveryResult,
    OrderRecord,
    PaymentResult,
    Stage,
)
from food_order.domain.tracker import ReceiptBook, Tracker
from food_order.gateway import StageGateway
from food_order.presenters import LoggingPresenter, Presenter, format_money

T = TypeVar("T")

_FAILURE_LABELS = {
    Stage.SEARCH: "Search",
    Stage.ORDER: "Order",
    Stage.PAYMENT: "Payment",
    Stage.DELIVERY: "Delivery",
}


class StageFailed(Exception):
    """A stage call failed. Wraps the stage's own error unchanged."""

    def __init__(self, stage: Stage, error: FulfillmentError) -> None:
        super().__init__(f"{_FAILURE_LABELS[stage]} failed: {error.message}")
        self.stage = stage
        self.error = error


class FulfillmentOrchestrator:
    def __init__(
        self,
        gateway: StageGateway,
        presenter: Optional[Presenter] = None,
        tracker: Optional[Tracker] = None,
        receipts: Optional[ReceiptBook] = None,
    ) -> None:
        self.gateway = gateway
        self.presenter = presenter or LoggingPresenter()
        self.tracker = tracker or Tracker()
        self.receipts = receipts or ReceiptBook()

    # ── Single stages ────────────────────────────────────────────

    async def search(self, name: str) -> CatalogEntry:
        """Look up a restaurant. Starts a fresh tracker."""
        self.tracker.reset()
        name = name.strip()
        entry = await self._run_stage(
            Stage.SEARCH,
            f"Searching for restaurant: {name} ...",
            lambda: self.gateway.search(name),
        )
        self.presenter.show_catalog(entry)
        self.presenter.show_status(f"Found restaurant: {entry.name}")
        return entry

    async def retry_payment(
        self,
        force_fail: bool = False,
        order_id: Optional[str] = None,
        amount: Optional[float] = None,
    ) -> PaymentResult:
        """Run the payment stage alone for the held (or supplied) order."""
        if order_id is None:
            order = self._held_order("No order to pay for - place order first")
        elif amount is not None:
            # Left unvalidated: the payment stage rejects bad amounts.
            order = OrderRecord.model_construct(order_id=order_id, amount=amount)
        elif self.receipts.order is not None and self.receipts.order.order_id == order_id:
            order = self.receipts.order
        else:
            self.presenter.show_status("orderId and numeric amount required.")
            raise InvalidInputError("orderId and numeric amount required.")
        return await self._pay(order, force_fail)

    async def retry_delivery(self, order_id: Optional[str] = None) -> DeliveryResult:
        """Run the delivery stage alone for the held (or supplied) order id."""
        if order_id is None:
            order = self._held_order("No order to confirm delivery for")
            return await self._deliver(order.order_id, order)
        held = self.receipts.order
        if held is not None and held.order_id == order_id:
            return await self._deliver(order_id, held)
        # Unknown order: on success the receipt restarts with the delivery alone.
        return await self._deliver(order_id, None, replace=True)

    # ── Chain ────────────────────────────────────────────────────

    async def run_chain(self, restaurant_name: str, item: str, force_fail: bool = False) -> ChainResult:
        """Run all four stages in order, stopping at the first failure."""
        self.receipts.clear()
        try:
            entry = await self.search(restaurant_name)
            order = await self._order(entry.name, item)
            await self._pay(order, force_fail)
            await self._deliver(order.order_id, order)
        except StageFailed as failed:
            return ChainResult(
                status=ChainStatus.FAILED,
                failed_stage=failed.stage,
                error=failed.error.message,
                error_kind=failed.error.kind.value,
                tracker=self.tracker.snapshot(),
                receipt=self.receipts.receipt,
            )
        return ChainResult(
            status=ChainStatus.COMPLETED,
            tracker=self.tracker.snapshot(),
            receipt=self.receipts.receipt,
        )

    # ── Internals ────────────────────────────────────────────────

    async def _order(self, restaurant_name: str, item: str) -> OrderRecord:
        order = await self._run_stage(
            Stage.ORDER,
            f"Placing order for {item} at {restaurant_name} ...",
            lambda: self.gateway.place_order(restaurant_name, item),
        )
        self.presenter.show_status(f"Order Placed: {order.order_id} - amount {format_money(order.amount)}")
        self.presenter.show_receipt(self.receipts.record_order(order))
        return order

    async def _pay(self, order: OrderRecord, force_fail: bool) -> PaymentResult:
        payment = await self._run_stage(
            Stage.PAYMENT,
            f"Processing payment of {format_money(order.amount)} ...",
            lambda: self.gateway.process_payment(order.order_id, order.amount, force_fail),
        )
        self.presenter.show_status(f"Payment successful: {payment.payment_id}")
        self.presenter.show_receipt(self.receipts.record_payment(payment, order))
        return payment

    async def _deliver(self, order_id: str, order: Optional[OrderRecord], replace: bool = False) -> DeliveryResult:
        delivery = await self._run_stage(
            Stage.DELIVERY,
            f"Confirming delivery for {order_id} ...",
            lambda: self.gateway.confirm_delivery(order_id),
        )
        self.presenter.show_status(f"Delivered: {delivery.delivered_at.isoformat()}")
        self.presenter.show_receipt(self.receipts.record_delivery(delivery, order, replace=replace))
        return delivery

    async def _run_stage(self, stage: Stage, started: str, call: Callable[[], Awaitable[T]]) -> T:
        self.tracker.start(stage)
        self.presenter.show_status(started)
        try:
            result = await call()
        except FulfillmentError as error:
            self.tracker.mark_failed(stage)
            self.presenter.show_status(f"{_FAILURE_LABELS[stage]} failed: {error.message}")
            self.presenter.show_tracker(self.tracker.snapshot())
            raise StageFailed(stage, error) from error
        self.tracker.mark_done(stage)
        self.presenter.show_tracker(self.tracker.snapshot())
        return result

    def _held_order(self, missing: str) -> OrderRecord:
        held = self.receipts.order
        if held is None:
            self.presenter.show_status(missing)
            raise InvalidInputError(missing)
        return held
