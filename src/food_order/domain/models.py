"""
Domain models for the food-order fulfillment workflow.

All models use Pydantic v2 BaseModel for validation, serialization and
deserialization. The same models travel over the HTTP API (as JSON bodies)
and through Temporal (via the pydantic_data_converter configured on both the
client and the worker).

Wire payloads use camelCase keys (``restaurantName``, ``orderId``...) while
Python code uses snake_case attributes. ``WireModel`` wires that up once.

Enums inherit from (str, Enum) so they serialize as plain strings in JSON
(e.g. "done" instead of {"value": "done"}).
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for payloads that cross the wire with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Stage(str, Enum):
    """The four workflow steps, in chain order."""

    SEARCH = "search"
    ORDER = "order"
    PAYMENT = "payment"
    DELIVERY = "delivery"


class StageStatus(str, Enum):
    """Tracker flag value for a single stage."""

    PENDING = "pending"
    DONE = "done"
    FAILED = "failed"


class ChainStatus(str, Enum):
    """Terminal status of a chained run."""

    COMPLETED = "COMPLETED"  # All stages succeeded
    FAILED = "FAILED"        # A stage failed; later stages were not invoked


# ── Catalog ──────────────────────────────────────────────────────────


class MenuItem(WireModel):
    item: str = Field(..., min_length=1)
    price: float = Field(..., gt=0)


class CatalogEntry(WireModel):
    """A restaurant and its priced menu, owned by the catalog store."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    items: tuple[MenuItem, ...] = ()

    def find_item(self, item: str) -> MenuItem | None:
        wanted = item.strip().lower()
        for entry in self.items:
            if entry.item.lower() == wanted:
                return entry
        return None


# ── Stage results ────────────────────────────────────────────────────


class OrderRecord(WireModel):
    """Produced by the order stage. The caller is the sole holder."""

    order_id: str
    amount: float = Field(..., ge=0)


class PaymentResult(WireModel):
    payment_id: str


class DeliveryResult(WireModel):
    delivered_at: datetime  # timezone-aware UTC, ISO-8601 on the wire


# ── Stage inputs ─────────────────────────────────────────────────────
# Fields are optional on purpose: missing values must reach the services so
# they are rejected as InvalidInput with the stage's own message.


class SearchInput(WireModel):
    name: str | None = None


class OrderInput(WireModel):
    restaurant_name: str | None = None
    item: str | None = None


class PaymentInput(WireModel):
    order_id: str | None = None
    amount: float | None = Field(default=None, strict=True)
    force_fail: bool | None = False  # null counts as not forced


class DeliveryInput(WireModel):
    order_id: str | None = None


# ── Tracker / receipt ────────────────────────────────────────────────


class TrackerSnapshot(WireModel):
    """Immutable view of the four tracker flags."""

    model_config = ConfigDict(frozen=True)

    search: StageStatus = StageStatus.PENDING
    order: StageStatus = StageStatus.PENDING
    payment: StageStatus = StageStatus.PENDING
    delivery: StageStatus = StageStatus.PENDING

    def status_of(self, stage: Stage) -> StageStatus:
        return getattr(self, stage.value)


class Receipt(WireModel):
    """Accumulating snapshot of results from each successful stage."""

    stage: str = "order_placed"  # "order_placed" | "paid" | "delivered"
    order: OrderRecord | None = None
    payment: PaymentResult | None = None
    delivery: DeliveryResult | None = None


# ── Chained run input / output ───────────────────────────────────────


class ChainRequest(WireModel):
    """Input to a chained run (search → order → payment → delivery)."""

    restaurant_name: str = Field(..., min_length=1)
    item: str = Field(..., min_length=1)
    force_fail: bool = False


class ChainResult(WireModel):
    """Outcome of a chained run: terminal status plus tracker and receipt."""

    status: ChainStatus
    failed_stage: Stage | None = None
    error: str | None = None
    error_kind: str | None = None
    tracker: TrackerSnapshot
    receipt: Receipt | None = None


class DurableChainRequest(ChainRequest):
    """Chained-run input for the Temporal workflow, with per-stage limits.

    The workflow cannot read configuration itself (no I/O inside workflows),
    so the starter passes the limits along with the request.
    """

    stage_timeout_seconds: float = Field(30.0, gt=0)
    maximum_attempts: int = Field(3, ge=1)
