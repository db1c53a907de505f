"""
HTTP API: one endpoint per stage.

    GET  /api/search?name=...        → {name, items: [{item, price}]}
    POST /api/order    {restaurantName, item}           → {orderId, amount}
    POST /api/payment  {orderId, amount, forceFail?}    → {paymentId}
    GET  /api/delivery?orderId=...   → {deliveredAt}

Endpoints are stateless: each one delegates to its service (built by
ServiceFactory) and nothing is kept between calls. Stage failures come back
as ``{"error": <message>, "kind": <ErrorKind>}`` with the status code of the
error kind.
"""

import logging
from typing import Optional

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from food_order.config import FoodOrderConfig
from food_order.domain.errors import ErrorKind, FulfillmentError
from food_order.domain.models import (
    CatalogEntry,
    DeliveryResult,
    OrderInput,
    OrderRecord,
    PaymentInput,
    PaymentResult,
)
from food_order.services.catalog import CatalogStore
from food_order.services.factory import ServiceFactory

logger = logging.getLogger(__name__)

router = APIRouter()

# Message used when a request body cannot even be parsed into the stage input.
_MALFORMED_MESSAGES = {
    "/api/order": "restaurantName and item required.",
    "/api/payment": "orderId and numeric amount required.",
}


class OrderResponse(OrderRecord):
    message: str = "Order placed"


class PaymentResponse(PaymentResult):
    message: str = "Payment success"


class DeliveryResponse(DeliveryResult):
    message: str = "Delivered"


@router.get("/search", response_model=CatalogEntry)
async def search(name: Optional[str] = None):
    return await ServiceFactory.get_catalog_service().find_catalog(name)


@router.post("/order", response_model=OrderResponse)
async def order(payload: OrderInput):
    record = await ServiceFactory.get_order_service().place_order(payload.restaurant_name, payload.item)
    return OrderResponse(**record.model_dump())


@router.post("/payment", response_model=PaymentResponse)
async def payment(payload: PaymentInput):
    result = await ServiceFactory.get_payment_service().process_payment(
        payload.order_id, payload.amount, payload.force_fail
    )
    return PaymentResponse(**result.model_dump())


@router.get("/delivery", response_model=DeliveryResponse)
async def delivery(order_id: Optional[str] = Query(default=None, alias="orderId")):
    result = await ServiceFactory.get_delivery_service().confirm_delivery(order_id)
    return DeliveryResponse(**result.model_dump())


async def _fulfillment_error_handler(request: Request, exc: FulfillmentError) -> JSONResponse:
    logger.info("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.kind.value)
    return JSONResponse(status_code=exc.http_status, content={"error": exc.message, "kind": exc.kind.value})


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _MALFORMED_MESSAGES.get(request.url.path, "Invalid request.")
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": message, "kind": ErrorKind.INVALID_INPUT.value})


def create_app(config: FoodOrderConfig | None = None, store: CatalogStore | None = None) -> FastAPI:
    """Build the API application, configuring the shared services first."""
    if config is not None or store is not None:
        ServiceFactory.configure(config or FoodOrderConfig(), store)

    app = FastAPI(
        title="Food Order API",
        description="Search, order, payment and delivery stages of the food-order workflow",
        version="1.0.0",
    )
    app.include_router(router, prefix="/api", tags=["stages"])
    app.add_exception_handler(FulfillmentError, _fulfillment_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "ok"}

    return app
