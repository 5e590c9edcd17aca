from storefront.orders.order_slice import (
    OrderState,
    order_reducer,
    select_orders,
    select_order_by_id,
    select_current_order,
    select_orders_loading,
    select_orders_error,
)
from storefront.orders.errors import OperationResult, OrderOperationError, extract_message
from storefront.orders.order_service import OrderService, ORDER_PLACED

__all__ = [
    "OrderState",
    "order_reducer",
    "select_orders",
    "select_order_by_id",
    "select_current_order",
    "select_orders_loading",
    "select_orders_error",
    "OperationResult",
    "OrderOperationError",
    "extract_message",
    "OrderService",
    "ORDER_PLACED",
]
