from functools import lru_cache

from storefront.cart.cart_effects import register_cart_effects
from storefront.cart.cart_slice import SLICE_NAME as CART_SLICE, cart_reducer
from storefront.config.logger import get_logger
from storefront.config.settings import Settings
from storefront.orders.order_service import OrderService
from storefront.orders.order_slice import SLICE_NAME as ORDERS_SLICE, order_reducer
from storefront.shared.clients import ApiClient
from storefront.shared.event_bus import InProcessEventBus
from storefront.shared.metrics import MetricsCollector
from storefront.shared.store import Store

settings = Settings()


# ----------------------------
# Session store
# ----------------------------
@lru_cache
def get_store() -> Store:
    return Store(
        reducers={ORDERS_SLICE: order_reducer, CART_SLICE: cart_reducer},
        logger=get_logger("Store"),
    )


# ----------------------------
# Backend API client
# ----------------------------
@lru_cache
def get_api_client() -> ApiClient:
    logger = get_logger("ApiClient")
    return ApiClient(
        base_url=settings.api.base_url,
        timeout=settings.api.timeout,
        token_provider=lambda: settings.api.token,
        logger=logger,
        metrics=MetricsCollector(logger),
    )


# ----------------------------
# In-process EventBus
# ----------------------------
@lru_cache
def get_event_bus() -> InProcessEventBus:
    logger = get_logger("InProcessEventBus")
    return InProcessEventBus(
        max_retries=settings.event_bus.max_retries,
        retry_delay=settings.event_bus.retry_delay,
        logger=logger,
        metrics=MetricsCollector(logger),
    )


# ----------------------------
# Order service
# ----------------------------
@lru_cache
def get_order_service() -> OrderService:
    logger = get_logger("OrderService")
    return OrderService(
        store=get_store(),
        api_client=get_api_client(),
        event_bus=get_event_bus(),
        api_settings=settings.api,
        logger=logger,
        metrics=MetricsCollector(logger),
    )


_effects_registered = False


async def init_storefront() -> OrderService:
    """
    Build the session singletons and wire cross-slice effects.
    Safe to call more than once; effects are registered a single time.
    """
    global _effects_registered
    service = get_order_service()
    if not _effects_registered:
        await register_cart_effects(get_event_bus(), get_store())
        _effects_registered = True
        get_logger().info("Storefront session initialized", extra={"base_url": settings.api.base_url})
    return service


async def shutdown_storefront():
    await get_api_client().close()
