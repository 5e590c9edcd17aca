from typing import Optional

from storefront.cart.cart_slice import clear_cart
from storefront.config.logger import get_logger
from storefront.orders.order_service import ORDER_PLACED
from storefront.shared.event_bus.base import EventBus
from storefront.shared.logger import StoreLogger
from storefront.shared.store import Store


class CartEffects:
    """Cart reactions to events published by other parts of the session."""

    def __init__(self, store: Store, logger: Optional[StoreLogger] = None):
        self.store = store
        self.logger = logger or get_logger("CartEffects")

    def clear_cart_on_order_placed(self, event: dict):
        order = event.get("order") if isinstance(event, dict) else None
        self.logger.info(
            "Clearing cart for placed order",
            extra={"order_id": order.get("id") if isinstance(order, dict) else None},
        )
        self.store.dispatch(clear_cart())


async def register_cart_effects(event_bus: EventBus, store: Store) -> CartEffects:
    effects = CartEffects(store)
    await event_bus.subscribe(ORDER_PLACED, effects.clear_cart_on_order_placed)
    return effects
