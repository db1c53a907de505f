"""
Stage gateways: how the orchestrator reaches the four stages.

``StageGateway`` is the seam the orchestrator depends on. Each call either
returns the stage's result or raises a FulfillmentError of the stage's kind.

    HttpStageGateway   talks to the HTTP API with httpx
    LocalStageGateway  calls the services in-process

The durable workflow has its own gateway over Temporal activities (see
workflows.py).
"""

import logging
from typing import Any, Optional, Protocol

import httpx

from food_order.domain.errors import TransportFailureError, error_for_kind
from food_order.domain.models import (
    CatalogEntry,
    DeliveryInput,
    DeliveryResult,
    OrderInput,
    OrderRecord,
    PaymentInput,
    PaymentResult,
)
from food_order.services.factory import ServiceFactory

logger = logging.getLogger(__name__)


class StageGateway(Protocol):
    async def search(self, name: str) -> CatalogEntry: ...

    async def place_order(self, restaurant_name: str, item: str) -> OrderRecord: ...

    async def process_payment(self, order_id: str, amount: float, force_fail: bool = False) -> PaymentResult: ...

    async def confirm_delivery(self, order_id: str) -> DeliveryResult: ...


class HttpStageGateway:
    """Stage calls over the HTTP API.

    Network failures become TransportFailureError with a per-stage message;
    error responses are turned back into the stage's own error kind.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5000/api",
        timeout: Optional[float] = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        # Single client instance reused for every stage call
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpStageGateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def search(self, name: str) -> CatalogEntry:
        body = await self._request(
            "GET", "/search", params={"name": name},
            fallback="Search failed", network_error="Network error while searching",
        )
        return CatalogEntry.model_validate(body)

    async def place_order(self, restaurant_name: str, item: str) -> OrderRecord:
        body = await self._request(
            "POST", "/order", json=OrderInput(restaurant_name=restaurant_name, item=item).to_wire(),
            fallback="Order failed", network_error="Network error while placing order",
        )
        return OrderRecord.model_validate(body)

    async def process_payment(self, order_id: str, amount: float, force_fail: bool = False) -> PaymentResult:
        payload = PaymentInput(order_id=order_id, amount=amount, force_fail=force_fail)
        body = await self._request(
            "POST", "/payment", json=payload.to_wire(),
            fallback="Payment failed", network_error="Network error during payment",
        )
        return PaymentResult.model_validate(body)

    async def confirm_delivery(self, order_id: str) -> DeliveryResult:
        body = await self._request(
            "GET", "/delivery", params=DeliveryInput(order_id=order_id).to_wire(),
            fallback="Delivery confirmation failed", network_error="Network error while confirming delivery",
        )
        return DeliveryResult.model_validate(body)

    async def _request(
        self,
        method: str,
        path: str,
        fallback: str,
        network_error: str,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = await self._client.request(method, url, json=json, params=params)
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise TransportFailureError(network_error) from e

        try:
            body = response.json()
        except ValueError as e:
            raise TransportFailureError(f"{fallback}: unreadable response ({response.status_code})") from e

        if response.is_success:
            return body
        if not isinstance(body, dict):
            raise TransportFailureError(f"{fallback}: unexpected response ({response.status_code})")
        raise error_for_kind(body.get("kind"), body.get("error") or fallback)


class LocalStageGateway:
    """Stage calls straight into the services of this process."""

    async def search(self, name: str) -> CatalogEntry:
        return await ServiceFactory.get_catalog_service().find_catalog(name)

    async def place_order(self, restaurant_name: str, item: str) -> OrderRecord:
        return await ServiceFactory.get_order_service().place_order(restaurant_name, item)

    async def process_payment(self, order_id: str, amount: float, force_fail: bool = False) -> PaymentResult:
        return await ServiceFactory.get_payment_service().process_payment(order_id, amount, force_fail)

    async def confirm_delivery(self, order_id: str) -> DeliveryResult:
        return await ServiceFactory.get_delivery_service().confirm_delivery(order_id)
