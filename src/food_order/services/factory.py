"""
Factory for the stage services.

Activities and the HTTP API call ``ServiceFactory.get_*()`` instead of
building services themselves, so the whole process shares one catalog store
and one set of services built from a single FoodOrderConfig.

``configure()`` swaps the configuration (and drops cached instances); tests
use it to turn latency off.
"""

from food_order.config import FoodOrderConfig
from food_order.services.catalog import CatalogService, CatalogStore, InMemoryCatalogStore
from food_order.services.delivery import DeliveryService
from food_order.services.latency import LatencySimulator
from food_order.services.ordering import OrderService
from food_order.services.payment import PaymentService


class ServiceFactory:
    """Lazily creates and caches service instances (class-level singletons)."""

    _config: FoodOrderConfig | None = None
    _store: CatalogStore | None = None
    _latency: LatencySimulator | None = None
    _catalog: CatalogService | None = None
    _order: OrderService | None = None
    _payment: PaymentService | None = None
    _delivery: DeliveryService | None = None

    @classmethod
    def configure(cls, config: FoodOrderConfig, store: CatalogStore | None = None) -> None:
        cls.reset()
        cls._config = config
        cls._store = store

    @classmethod
    def reset(cls) -> None:
        cls._config = None
        cls._store = None
        cls._latency = None
        cls._catalog = None
        cls._order = None
        cls._payment = None
        cls._delivery = None

    @classmethod
    def get_config(cls) -> FoodOrderConfig:
        if cls._config is None:
            cls._config = FoodOrderConfig()
        return cls._config

    @classmethod
    def get_catalog_store(cls) -> CatalogStore:
        if cls._store is None:
            path = cls.get_config().catalog_path
            if path:
                cls._store = InMemoryCatalogStore.from_yaml(path)
            else:
                store = InMemoryCatalogStore()
                store.seed()
                cls._store = store
        return cls._store

    @classmethod
    def get_latency(cls) -> LatencySimulator:
        if cls._latency is None:
            cls._latency = LatencySimulator(cls.get_config().latency)
        return cls._latency

    @classmethod
    def get_catalog_service(cls) -> CatalogService:
        if cls._catalog is None:
            cls._catalog = CatalogService(cls.get_catalog_store(), cls.get_latency())
        return cls._catalog

    @classmethod
    def get_order_service(cls) -> OrderService:
        if cls._order is None:
            cls._order = OrderService(cls.get_catalog_service(), cls.get_latency())
        return cls._order

    @classmethod
    def get_payment_service(cls) -> PaymentService:
        if cls._payment is None:
            cls._payment = PaymentService(
                cls.get_latency(),
                decline_probability=cls.get_config().payment.decline_probability,
            )
        return cls._payment

    @classmethod
    def get_delivery_service(cls) -> DeliveryService:
        if cls._delivery is None:
            cls._delivery = DeliveryService(cls.get_latency())
        return cls._delivery
