import asyncio
import uuid
from typing import Any, Awaitable, Callable, Optional

from storefront.config.logger import get_logger
from storefront.config.settings import ApiSettings
from storefront.orders import order_slice
from storefront.orders.errors import OperationResult, extract_message
from storefront.shared.clients.api_client import ApiClient, ApiResponse
from storefront.shared.event_bus.base import EventBus
from storefront.shared.logger import StoreLogger
from storefront.shared.metrics import MetricsCollector, OrderMetrics
from storefront.shared.store import AsyncActionTypes, Store

ORDER_PLACED = "order.placed"


class OrderService:
    """
    Runs the order operations against the backend and reduces their
    outcome into the store.

    Every operation dispatches `pending` before the request, then exactly one
    of `fulfilled` / `rejected` when it settles, and returns an
    `OperationResult`. Failures are never raised to the caller.
    A successful `create_order` publishes `order.placed` after the order state
    is updated; cart clearing and other effects subscribe to that event.
    """

    def __init__(
        self,
        store: Store,
        api_client: ApiClient,
        event_bus: EventBus,
        api_settings: Optional[ApiSettings] = None,
        logger: Optional[StoreLogger] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.store = store
        self.api_client = api_client
        self.event_bus = event_bus
        self.api_settings = api_settings or ApiSettings()
        self.logger = logger or get_logger("OrderService")
        self.metrics = metrics or MetricsCollector(self.logger)

    async def create_order(self, order_data: dict) -> OperationResult:
        """Place an order; on success the cart is emptied via `order.placed`."""

        async def _after_created(data: Any):
            order = data.get("order") if isinstance(data, dict) else None
            self.logger.info(
                "Order placed",
                extra={"order_id": order.get("id") if isinstance(order, dict) else None},
            )
            await self.event_bus.publish(ORDER_PLACED, {"order": order, "response": data})

        return await self._run(
            order_slice.CREATE_ORDER,
            lambda: self.api_client.post(self.api_settings.orders_path, order_data),
            default_error="Failed to place order",
            arg=order_data,
            success_metric=OrderMetrics.CREATED,
            failure_metric=OrderMetrics.CREATE_FAILED,
            after_success=_after_created,
        )

    async def fetch_orders(self) -> OperationResult:
        return await self._run(
            order_slice.FETCH_ORDERS,
            lambda: self.api_client.get(self.api_settings.orders_path),
            default_error="Failed to fetch orders",
            success_metric=OrderMetrics.LISTED,
            failure_metric=OrderMetrics.LIST_FAILED,
        )

    async def fetch_order_by_id(self, order_id: str) -> OperationResult:
        return await self._run(
            order_slice.FETCH_ORDER_BY_ID,
            lambda: self.api_client.get(self.api_settings.order_path(order_id)),
            default_error="Failed to fetch order",
            arg=order_id,
            success_metric=OrderMetrics.FETCHED,
            failure_metric=OrderMetrics.FETCH_FAILED,
        )

    def clear_current_order(self):
        self.store.dispatch(order_slice.clear_current_order_action())

    def clear_error(self):
        self.store.dispatch(order_slice.clear_error_action())

    async def _run(
        self,
        operation: AsyncActionTypes,
        request: Callable[[], Awaitable[ApiResponse]],
        default_error: str,
        success_metric: str,
        failure_metric: str,
        arg: Any = None,
        after_success: Optional[Callable[[Any], Awaitable[None]]] = None,
    ) -> OperationResult:
        request_id = uuid.uuid4().hex
        self.store.dispatch(operation.pending_action(arg, request_id))
        self.logger.info("Order operation started", extra={"operation": operation.prefix, "request_id": request_id})

        try:
            response = await request()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            reason = extract_message(exc, default_error)
            self.store.dispatch(operation.rejected_action(reason, arg, request_id))
            self.metrics.increment(failure_metric)
            self.logger.warning(
                "Order operation failed",
                extra={"operation": operation.prefix, "request_id": request_id, "reason": reason},
            )
            return OperationResult.rejected(reason)

        self.store.dispatch(operation.fulfilled_action(response.data, arg, request_id))
        self.metrics.increment(success_metric)
        self.logger.info("Order operation completed", extra={"operation": operation.prefix, "request_id": request_id})

        if after_success is not None:
            # The order is already fulfilled in the store; effects can't undo that.
            try:
                await after_success(response.data)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                self.logger.error(
                    "Post-success effects failed",
                    extra={"operation": operation.prefix, "request_id": request_id, "error": str(exc)},
                )
        return OperationResult.fulfilled(response.data)
