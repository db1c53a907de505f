"""
Temporal workflow: FulfillmentWorkflow.

The durable variant of the chained run. It drives the same
FulfillmentOrchestrator as the HTTP client, but each stage call is a Temporal
activity: the server persists progress at every ``await``, so a worker crash
resumes the chain from the last completed stage instead of starting over.

Key constraints inside a workflow:
  - Must be **deterministic**: no I/O, no randomness, no system clock. The
    orchestrator, tracker and receipt book do none of these.
  - Use `workflow.execute_activity(...)` to dispatch work to activities.
  - Use `workflow.logger` instead of the stdlib `logging` module.
"""

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy
from temporalio.exceptions import ActivityError, ApplicationError

# Pydantic and our own modules use constructs the sandbox would flag, so they
# are passed through its import interception. Nothing here has import-time
# side effects.
with workflow.unsafe.imports_passed_through():
    from food_order.activities import confirm_delivery, place_order, process_payment, search_catalog
    from food_order.domain.errors import FulfillmentError, TransportFailureError, error_for_kind
    from food_order.domain.models import (
        CatalogEntry,
        ChainResult,
        DeliveryInput,
        DeliveryResult,
        DurableChainRequest,
        OrderInput,
        OrderRecord,
        PaymentInput,
        PaymentResult,
        Receipt,
        SearchInput,
        TrackerSnapshot,
    )
    from food_order.domain.tracker import ReceiptBook, Tracker
    from food_order.orchestrator import FulfillmentOrchestrator
    from food_order.presenters import format_tracker


class ActivityStageGateway:
    """StageGateway over Temporal activities.

    Activity failures arrive as ActivityError; the ApplicationError cause
    carries the stage's error kind, which is turned back into the matching
    FulfillmentError. Timeouts and exhausted retries become
    TransportFailureError.
    """

    def __init__(self, stage_timeout: timedelta, retry_policy: RetryPolicy) -> None:
        self._options = {
            "start_to_close_timeout": stage_timeout,
            "retry_policy": retry_policy,
        }

    async def search(self, name: str) -> CatalogEntry:
        return await self._execute(search_catalog, SearchInput(name=name))

    async def place_order(self, restaurant_name: str, item: str) -> OrderRecord:
        return await self._execute(place_order, OrderInput(restaurant_name=restaurant_name, item=item))

    async def process_payment(self, order_id: str, amount: float, force_fail: bool = False) -> PaymentResult:
        return await self._execute(
            process_payment, PaymentInput(order_id=order_id, amount=amount, force_fail=force_fail)
        )

    async def confirm_delivery(self, order_id: str) -> DeliveryResult:
        return await self._execute(confirm_delivery, DeliveryInput(order_id=order_id))

    async def _execute(self, activity_fn, payload):
        try:
            return await workflow.execute_activity(activity_fn, payload, **self._options)
        except ActivityError as err:
            raise _as_fulfillment_error(err) from err


def _as_fulfillment_error(err: ActivityError) -> FulfillmentError:
    cause = err.cause
    if isinstance(cause, ApplicationError):
        return error_for_kind(cause.type, cause.message)
    return TransportFailureError(f"Stage did not complete: {cause or err}")


class WorkflowPresenter:
    """Presenter writing to the sandbox-safe workflow logger."""

    def show_status(self, text: str) -> None:
        workflow.logger.info(text)

    def show_tracker(self, tracker: TrackerSnapshot) -> None:
        workflow.logger.info("Tracker: %s", format_tracker(tracker))

    def show_receipt(self, receipt: Receipt) -> None:
        workflow.logger.info("Receipt stage: %s", receipt.stage)

    def show_catalog(self, entry: CatalogEntry) -> None:
        workflow.logger.info("Menu of %s has %d items", entry.name, len(entry.items))


@workflow.defn
class FulfillmentWorkflow:
    """Runs search → order → payment → delivery as one durable chain.

    Supports:
        - **Query** `get_status`: tracker flags and the receipt so far, without
          affecting execution.
    """

    def __init__(self) -> None:
        self.tracker = Tracker()
        self.receipts = ReceiptBook()

    @workflow.query
    def get_status(self) -> dict:
        receipt = self.receipts.receipt
        return {
            "tracker": self.tracker.snapshot().to_wire(),
            "receipt": receipt.to_wire() if receipt else None,
        }

    @workflow.run
    async def run(self, req: DurableChainRequest) -> ChainResult:
        # Stage failures are non-retryable ApplicationErrors; this policy only
        # covers infrastructure failures (worker loss, unexpected exceptions).
        retry_policy = RetryPolicy(
            maximum_attempts=req.maximum_attempts,
            initial_interval=timedelta(seconds=1),
            backoff_coefficient=2.0,
        )
        gateway = ActivityStageGateway(timedelta(seconds=req.stage_timeout_seconds), retry_policy)
        orchestrator = FulfillmentOrchestrator(
            gateway, presenter=WorkflowPresenter(), tracker=self.tracker, receipts=self.receipts
        )

        workflow.logger.info("Starting chain for %s at %s", req.item, req.restaurant_name)
        result = await orchestrator.run_chain(req.restaurant_name, req.item, req.force_fail)
        workflow.logger.info("Chain finished: %s", result.status.value)
        return result
