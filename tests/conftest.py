"""Shared fixtures: services without latency and without random declines."""

from datetime import datetime, timezone

import httpx
import pytest
import pytest_asyncio

from food_order.api import create_app
from food_order.config import FoodOrderConfig, LatencyConfig, PaymentConfig
from food_order.domain.models import CatalogEntry, DeliveryResult, MenuItem, OrderRecord, PaymentResult, Receipt
from food_order.services.factory import ServiceFactory


@pytest.fixture
def config() -> FoodOrderConfig:
    return FoodOrderConfig(
        latency=LatencyConfig(enabled=False),
        payment=PaymentConfig(decline_probability=0.0),
    )


@pytest.fixture(autouse=True)
def services(config):
    ServiceFactory.configure(config)
    yield ServiceFactory
    ServiceFactory.reset()


@pytest.fixture
def app(config):
    return create_app(config)


@pytest_asyncio.fixture
async def http_client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class RecordingPresenter:
    """Collects everything the orchestrator reports."""

    def __init__(self):
        self.statuses: list[str] = []
        self.trackers = []
        self.receipts: list[Receipt] = []
        self.catalogs: list[CatalogEntry] = []

    def show_status(self, text):
        self.statuses.append(text)

    def show_tracker(self, tracker):
        self.trackers.append(tracker)

    def show_receipt(self, receipt):
        self.receipts.append(receipt)

    def show_catalog(self, entry):
        self.catalogs.append(entry)


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


PASTA_HUB = CatalogEntry(
    name="Pasta Hub",
    items=(MenuItem(item="Alfredo Pasta", price=7), MenuItem(item="Pesto Pasta", price=8)),
)


class FakeGateway:
    """Scriptable StageGateway that records every call.

    ``failures`` maps a stage method name to a list of exceptions raised by
    successive calls; once the list runs out, calls succeed.
    """

    def __init__(self, failures=None):
        self.calls: list[tuple] = []
        self.failures = {name: list(errors) for name, errors in (failures or {}).items()}
        self._counter = 0

    def _maybe_fail(self, name):
        pending = self.failures.get(name)
        if pending:
            raise pending.pop(0)

    async def search(self, name):
        self.calls.append(("search", name))
        self._maybe_fail("search")
        return PASTA_HUB

    async def place_order(self, restaurant_name, item):
        self.calls.append(("place_order", restaurant_name, item))
        self._maybe_fail("place_order")
        return OrderRecord(order_id="ORD-TEST01", amount=7)

    async def process_payment(self, order_id, amount, force_fail=False):
        self.calls.append(("process_payment", order_id, amount, force_fail))
        self._maybe_fail("process_payment")
        self._counter += 1
        return PaymentResult(payment_id=f"PAY-TEST{self._counter:04d}")

    async def confirm_delivery(self, order_id):
        self.calls.append(("confirm_delivery", order_id))
        self._maybe_fail("confirm_delivery")
        return DeliveryResult(delivered_at=datetime.now(timezone.utc))

    def called(self, name):
        return [call for call in self.calls if call[0] == name]
