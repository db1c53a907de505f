"""
Order stage.

Validates the requested item against the restaurant's menu and hands back a
fresh order id with the item's price. Nothing is stored: the caller keeps
the OrderRecord and carries it into payment and delivery.
"""

import logging
import random

from food_order.domain.errors import InvalidInputError, ItemUnavailableError
from food_order.domain.models import OrderRecord, Stage
from food_order.services.catalog import CatalogService
from food_order.services.ids import new_token
from food_order.services.latency import LatencySimulator

logger = logging.getLogger(__name__)


class OrderService:
    def __init__(
        self,
        catalog: CatalogService,
        latency: LatencySimulator,
        rng: random.Random | None = None,
    ) -> None:
        self.catalog = catalog
        self.latency = latency
        self._rng = rng

    async def place_order(self, restaurant_name: str | None, item: str | None) -> OrderRecord:
        await self.latency.simulate(Stage.ORDER)
        restaurant_name = (restaurant_name or "").strip()
        item = (item or "").strip()
        if not restaurant_name or not item:
            raise InvalidInputError("restaurantName and item required.")

        entry = self.catalog.lookup(restaurant_name)
        menu_item = entry.find_item(item)
        if menu_item is None:
            logger.info("Item %r is not on the %s menu", item, entry.name)
            raise ItemUnavailableError("Item not available.")

        order = OrderRecord(order_id=new_token("ORD", 6, self._rng), amount=menu_item.price)
        logger.info("Placed order %s for %s at %s ($%s)", order.order_id, menu_item.item, entry.name, order.amount)
        return order
