from storefront.cart.cart_slice import (
    CartState,
    cart_reducer,
    clear_cart,
    add_to_cart,
    remove_from_cart,
    increment_quantity,
    decrement_quantity,
    update_quantity,
    select_cart_items,
    select_cart_total,
    select_cart_item_count,
    select_is_cart_empty,
)
from storefront.cart.cart_effects import CartEffects, register_cart_effects

__all__ = [
    "CartState",
    "cart_reducer",
    "clear_cart",
    "add_to_cart",
    "remove_from_cart",
    "increment_quantity",
    "decrement_quantity",
    "update_quantity",
    "select_cart_items",
    "select_cart_total",
    "select_cart_item_count",
    "select_is_cart_empty",
    "CartEffects",
    "register_cart_effects",
]
