"""
Cart state slice.

In-memory shopping cart for the session. Validation failures (bad product,
not enough stock, bad quantity) don't raise: they leave the items alone and
set `error`, the way the checkout pages expect to read them.
"""

from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Optional, Tuple

from storefront.cart.cart_utils import calculate_cart_totals, generate_cart_item_id
from storefront.config.logger import get_logger
from storefront.shared.store.actions import Action, action_creator

SLICE_NAME = "cart"

logger = get_logger("CartSlice")


@dataclass(frozen=True)
class CartState:
    items: Tuple[dict, ...] = ()
    total: float = 0
    subtotal: float = 0
    item_count: int = 0
    loading: bool = False
    error: Any = None


initial_state = CartState()


# ----------------------------
# Action creators
# ----------------------------
clear_cart = action_creator(f"{SLICE_NAME}/clearCart")
add_to_cart = action_creator(f"{SLICE_NAME}/addToCart")
remove_from_cart = action_creator(f"{SLICE_NAME}/removeFromCart")
increment_quantity = action_creator(f"{SLICE_NAME}/incrementQuantity")
decrement_quantity = action_creator(f"{SLICE_NAME}/decrementQuantity")
update_quantity = action_creator(f"{SLICE_NAME}/updateQuantity")
set_loading = action_creator(f"{SLICE_NAME}/setLoading")
set_error = action_creator(f"{SLICE_NAME}/setError")
clear_error = action_creator(f"{SLICE_NAME}/clearError")


def _with_items(state: CartState, items) -> CartState:
    totals = calculate_cart_totals(list(items))
    return replace(
        state,
        items=tuple(items),
        total=totals["total"],
        subtotal=totals["subtotal"],
        item_count=totals["item_count"],
    )


def _find(state: CartState, cart_item_id: str) -> Optional[int]:
    for index, item in enumerate(state.items):
        if item.get("cart_item_id") == cart_item_id:
            return index
    return None


def _replace_item(state: CartState, index: int, **changes) -> CartState:
    items = list(state.items)
    items[index] = {**items[index], **changes}
    return _with_items(state, items)


# ----------------------------
# Transitions
# ----------------------------
def _clear_cart(state: CartState, payload: Any) -> CartState:
    logger.info("Cart cleared", extra={"items": len(state.items)})
    return replace(initial_state, loading=state.loading)


def _add_to_cart(state: CartState, payload: Any) -> CartState:
    payload = payload or {}
    product = payload.get("product")
    size = payload.get("size")
    color = payload.get("color")
    quantity = payload.get("quantity", 1)

    if not product or not product.get("id"):
        logger.error("addToCart: invalid product data", extra={"product": product})
        return replace(state, error="Invalid product data")

    stock = product.get("stock") or 0
    if stock < quantity:
        logger.error("addToCart: insufficient stock", extra={"requested": quantity, "available": stock})
        return replace(state, error=f"Only {stock} items available in stock")

    cart_item_id = generate_cart_item_id(product["id"], size, color)
    index = _find(state, cart_item_id)

    if index is not None:
        new_quantity = state.items[index]["quantity"] + quantity
        if new_quantity > stock:
            logger.error(
                "addToCart: insufficient stock for quantity increase",
                extra={"current": state.items[index]["quantity"], "requested": quantity, "available": stock},
            )
            return replace(state, error=f"Cannot add more items. Only {stock} items available in stock")
        next_state = _replace_item(state, index, quantity=new_quantity)
    else:
        category = product.get("category")
        new_item = {
            "cart_item_id": cart_item_id,
            "id": product["id"],
            "title": product.get("title"),
            "price": product.get("price"),
            "images": product.get("images") or [],
            "stock": stock,
            "size": size or None,
            "color": color or None,
            "quantity": quantity,
            "category": category.get("name", "") if isinstance(category, dict) else "",
            "rating": product.get("rating") or 0,
        }
        next_state = _with_items(state, state.items + (new_item,))

    logger.debug("Cart item added", extra={"cart_item_id": cart_item_id, "item_count": next_state.item_count})
    return replace(next_state, error=None)


def _remove_from_cart(state: CartState, cart_item_id: Any) -> CartState:
    index = _find(state, cart_item_id)
    if index is None:
        logger.warning("removeFromCart: item not found", extra={"cart_item_id": cart_item_id})
        return state
    return _with_items(state, state.items[:index] + state.items[index + 1:])


def _increment_quantity(state: CartState, cart_item_id: Any) -> CartState:
    index = _find(state, cart_item_id)
    if index is None:
        logger.warning("incrementQuantity: item not found", extra={"cart_item_id": cart_item_id})
        return state

    item = state.items[index]
    if item["quantity"] >= item.get("stock", 0):
        return replace(state, error=f"Maximum {item.get('stock', 0)} items available in stock")
    return _replace_item(state, index, quantity=item["quantity"] + 1)


def _decrement_quantity(state: CartState, cart_item_id: Any) -> CartState:
    index = _find(state, cart_item_id)
    if index is None:
        logger.warning("decrementQuantity: item not found", extra={"cart_item_id": cart_item_id})
        return state

    item = state.items[index]
    if item["quantity"] > 1:
        return _replace_item(state, index, quantity=item["quantity"] - 1)
    return _with_items(state, state.items[:index] + state.items[index + 1:])


def _update_quantity(state: CartState, payload: Any) -> CartState:
    payload = payload or {}
    cart_item_id = payload.get("cart_item_id")
    quantity = payload.get("quantity")

    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
        return replace(state, error="Quantity must be at least 1")

    index = _find(state, cart_item_id)
    if index is None:
        logger.warning("updateQuantity: item not found", extra={"cart_item_id": cart_item_id})
        return state

    stock = state.items[index].get("stock", 0)
    if quantity > stock:
        return replace(state, error=f"Only {stock} items available in stock")
    return _replace_item(state, index, quantity=quantity)


_HANDLERS: Dict[str, Callable[[CartState, Any], CartState]] = {
    clear_cart.type: _clear_cart,
    add_to_cart.type: _add_to_cart,
    remove_from_cart.type: _remove_from_cart,
    increment_quantity.type: _increment_quantity,
    decrement_quantity.type: _decrement_quantity,
    update_quantity.type: _update_quantity,
    set_loading.type: lambda state, flag: replace(state, loading=bool(flag)),
    set_error.type: lambda state, message: replace(state, error=message),
    clear_error.type: lambda state, payload: replace(state, error=None),
}


def cart_reducer(state: Optional[CartState], action: Action) -> CartState:
    if state is None:
        state = initial_state
    handler = _HANDLERS.get(action.type)
    return handler(state, action.payload) if handler else state


# ----------------------------
# Selectors (take the root state)
# ----------------------------
def _slice(root: Dict[str, Any]) -> CartState:
    return root.get(SLICE_NAME) or initial_state


def select_cart_items(root):
    return list(_slice(root).items)


def select_cart_total(root):
    return _slice(root).total


def select_cart_subtotal(root):
    return _slice(root).subtotal


def select_cart_item_count(root):
    return _slice(root).item_count


def select_cart_loading(root):
    return _slice(root).loading


def select_cart_error(root):
    return _slice(root).error


def select_is_cart_empty(root):
    return len(_slice(root).items) == 0
