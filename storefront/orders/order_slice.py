"""
Order state slice.

Holds the orders of the current session, the order in focus, and one shared
loading/error pair for the three order operations. All transitions are pure:
they take the current `OrderState` and return a new one.

Note that `loading` and `error` are shared. If two operations overlap, the
one that settles last decides their final value.
"""

from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Optional, Tuple

from storefront.shared.store.actions import Action, AsyncActionTypes, action_creator

SLICE_NAME = "orders"


@dataclass(frozen=True)
class OrderState:
    orders: Tuple[dict, ...] = ()
    current_order: Optional[dict] = None
    loading: bool = False
    error: Any = None


initial_state = OrderState()


# ----------------------------
# Action types
# ----------------------------
CREATE_ORDER = AsyncActionTypes(f"{SLICE_NAME}/createOrder")
FETCH_ORDERS = AsyncActionTypes(f"{SLICE_NAME}/fetchOrders")
FETCH_ORDER_BY_ID = AsyncActionTypes(f"{SLICE_NAME}/fetchOrderById")

clear_current_order_action = action_creator(f"{SLICE_NAME}/clearCurrentOrder")
clear_error_action = action_creator(f"{SLICE_NAME}/clearError")


# ----------------------------
# Transitions
# ----------------------------
def clear_current_order(state: OrderState) -> OrderState:
    return replace(state, current_order=None)


def clear_error(state: OrderState) -> OrderState:
    return replace(state, error=None)


def on_operation_started(state: OrderState) -> OrderState:
    return replace(state, loading=True, error=None)


def on_operation_failed(state: OrderState, reason: Any) -> OrderState:
    return replace(state, loading=False, error=reason)


def on_create_succeeded(state: OrderState, payload: Any) -> OrderState:
    """Put the new order in focus and at the head of `orders`.

    A response without an `order` still settles the operation; only the
    order data is left alone.
    """
    settled = replace(state, loading=False, error=None)
    order = payload.get("order") if isinstance(payload, dict) else None
    if order is None:
        return settled
    return replace(settled, current_order=order, orders=(order,) + tuple(state.orders))


def on_list_succeeded(state: OrderState, payload: Any) -> OrderState:
    if isinstance(payload, dict) and isinstance(payload.get("orders"), (list, tuple)):
        orders = payload["orders"]
    elif isinstance(payload, (list, tuple)):
        orders = payload
    else:
        orders = ()
    return replace(state, loading=False, error=None, orders=tuple(orders))


def on_fetch_by_id_succeeded(state: OrderState, payload: Any) -> OrderState:
    order = payload
    if isinstance(payload, dict) and isinstance(payload.get("order"), dict):
        order = payload["order"]
    return replace(state, loading=False, error=None, current_order=order)


# ----------------------------
# Reducer
# ----------------------------
_HANDLERS: Dict[str, Callable[[OrderState, Action], OrderState]] = {
    clear_current_order_action.type: lambda state, action: clear_current_order(state),
    clear_error_action.type: lambda state, action: clear_error(state),
    CREATE_ORDER.fulfilled: lambda state, action: on_create_succeeded(state, action.payload),
    FETCH_ORDERS.fulfilled: lambda state, action: on_list_succeeded(state, action.payload),
    FETCH_ORDER_BY_ID.fulfilled: lambda state, action: on_fetch_by_id_succeeded(state, action.payload),
}
for _operation in (CREATE_ORDER, FETCH_ORDERS, FETCH_ORDER_BY_ID):
    _HANDLERS[_operation.pending] = lambda state, action: on_operation_started(state)
    _HANDLERS[_operation.rejected] = lambda state, action: on_operation_failed(state, action.payload)


def order_reducer(state: Optional[OrderState], action: Action) -> OrderState:
    if state is None:
        state = initial_state
    handler = _HANDLERS.get(action.type)
    return handler(state, action) if handler else state


# ----------------------------
# Selectors (take the root state)
# ----------------------------
def _slice(root: Dict[str, Any]) -> OrderState:
    return root.get(SLICE_NAME) or initial_state


def select_orders(root: Dict[str, Any]) -> list:
    return list(_slice(root).orders or ())


def select_order_by_id(order_id: Any) -> Callable[[Dict[str, Any]], Optional[dict]]:
    def selector(root: Dict[str, Any]) -> Optional[dict]:
        for order in _slice(root).orders:
            if isinstance(order, dict) and order.get("id") == order_id:
                return order
        return None

    return selector


def select_current_order(root: Dict[str, Any]) -> Optional[dict]:
    return _slice(root).current_order


def select_orders_loading(root: Dict[str, Any]) -> bool:
    return _slice(root).loading


def select_orders_error(root: Dict[str, Any]) -> Any:
    return _slice(root).error
