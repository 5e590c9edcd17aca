import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from storefront.cart.cart_effects import register_cart_effects
from storefront.cart.cart_slice import add_to_cart, cart_reducer, select_cart_items
from storefront.orders import (
    ORDER_PLACED,
    OrderOperationError,
    OrderService,
    order_reducer,
    select_current_order,
    select_orders,
    select_orders_error,
    select_orders_loading,
)
from storefront.orders.order_slice import OrderState
from storefront.shared.clients import ApiError, ApiResponse
from storefront.shared.event_bus import InProcessEventBus
from storefront.shared.logger import StoreLogger
from storefront.shared.store import Store

logger = StoreLogger(name="TestOrderService", log_file=None)

PRODUCT = {"id": 7, "title": "Mug", "price": 10.0, "stock": 5}


def make_store():
    return Store({"orders": order_reducer, "cart": cart_reducer}, logger=logger)


async def make_service(api_client=None, with_cart=True):
    store = make_store()
    bus = InProcessEventBus(max_retries=1, retry_delay=0, logger=logger)
    if with_cart:
        await register_cart_effects(bus, store)
    api_client = api_client or MagicMock()
    service = OrderService(store=store, api_client=api_client, event_bus=bus, logger=logger)
    return service, store, bus


@pytest.mark.asyncio
async def test_create_order_success_updates_orders_and_clears_cart():
    api = MagicMock()
    api.post = AsyncMock(return_value=ApiResponse({"order": {"id": "o1", "total": 20}}, 201))
    service, store, bus = await make_service(api)
    store.dispatch(add_to_cart({"product": PRODUCT, "quantity": 2}))

    cleared = []
    await bus.subscribe(ORDER_PLACED, lambda event: cleared.append(event["order"]["id"]))

    result = await service.create_order({"items": [{"id": 7, "quantity": 2}], "total": 20})

    state = store.get_state()
    assert result.ok
    assert result.unwrap() == {"order": {"id": "o1", "total": 20}}
    assert select_orders(state) == [{"id": "o1", "total": 20}]
    assert select_current_order(state) == {"id": "o1", "total": 20}
    assert select_orders_loading(state) is False
    assert select_orders_error(state) is None
    assert select_cart_items(state) == []
    assert cleared == ["o1"]
    api.post.assert_awaited_once_with("/api/orders", {"items": [{"id": 7, "quantity": 2}], "total": 20})


@pytest.mark.asyncio
async def test_cart_clear_runs_exactly_once_after_order_state_update():
    api = MagicMock()
    api.post = AsyncMock(return_value=ApiResponse({"order": {"id": "o1"}}, 201))
    service, store, bus = await make_service(api, with_cart=False)

    seen = []

    def clear_cart_effect(event):
        # order state must already be settled when the cart is cleared
        seen.append(select_current_order(store.get_state()))

    await bus.subscribe(ORDER_PLACED, clear_cart_effect)
    await service.create_order({"total": 1})

    assert seen == [{"id": "o1"}]


@pytest.mark.asyncio
async def test_create_order_failure_keeps_orders_and_cart():
    api = MagicMock()
    api.post = AsyncMock(side_effect=ApiError("Request failed with status code 409", 409, {"error": "Out of stock"}))
    service, store, bus = await make_service(api)
    store.dispatch(add_to_cart({"product": PRODUCT}))

    effect = MagicMock()
    await bus.subscribe(ORDER_PLACED, effect)

    result = await service.create_order({"total": 20})

    state = store.get_state()
    assert not result.ok
    assert result.payload == "Out of stock"
    assert select_orders_error(state) == "Out of stock"
    assert select_orders(state) == []
    assert len(select_cart_items(state)) == 1
    effect.assert_not_called()

    with pytest.raises(OrderOperationError):
        result.unwrap()


@pytest.mark.asyncio
async def test_create_order_degraded_success_still_clears_cart():
    api = MagicMock()
    api.post = AsyncMock(return_value=ApiResponse({"success": True}, 201))
    service, store, _ = await make_service(api)
    store.dispatch(add_to_cart({"product": PRODUCT}))

    result = await service.create_order({"total": 20})

    state = store.get_state()
    assert result.ok
    assert select_orders(state) == []
    assert select_current_order(state) is None
    assert select_cart_items(state) == []


@pytest.mark.asyncio
async def test_fetch_orders_replaces_existing_orders():
    api = MagicMock()
    api.get = AsyncMock(return_value=ApiResponse({"orders": [{"id": "a"}, {"id": "b"}]}, 200))
    service, store, _ = await make_service(api)
    store._state["orders"] = OrderState(orders=({"id": "stale"},), current_order={"id": "stale"})

    await service.fetch_orders()

    state = store.get_state()
    assert select_orders(state) == [{"id": "a"}, {"id": "b"}]
    assert select_current_order(state) == {"id": "stale"}
    api.get.assert_awaited_once_with("/api/orders")


@pytest.mark.asyncio
async def test_fetch_order_by_id_with_bare_order():
    api = MagicMock()
    api.get = AsyncMock(return_value=ApiResponse({"id": "x", "total": 3}, 200))
    service, store, _ = await make_service(api)

    result = await service.fetch_order_by_id("x")

    assert result.ok
    assert select_current_order(store.get_state()) == {"id": "x", "total": 3}
    assert select_orders(store.get_state()) == []
    api.get.assert_awaited_once_with("/api/orders/x")


@pytest.mark.asyncio
async def test_fetch_does_not_publish_order_placed():
    api = MagicMock()
    api.get = AsyncMock(return_value=ApiResponse({"order": {"id": "x"}}, 200))
    service, store, bus = await make_service(api)
    effect = MagicMock()
    await bus.subscribe(ORDER_PLACED, effect)

    await service.fetch_orders()
    await service.fetch_order_by_id("x")

    effect.assert_not_called()


@pytest.mark.asyncio
async def test_transport_error_without_body_uses_transport_message():
    api = MagicMock()
    api.get = AsyncMock(side_effect=ApiError("Network Error"))
    service, store, _ = await make_service(api)

    result = await service.fetch_orders()

    assert result.payload == "Network Error"
    assert select_orders_error(store.get_state()) == "Network Error"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "call, expected",
    [
        (lambda s: s.create_order({}), "Failed to place order"),
        (lambda s: s.fetch_orders(), "Failed to fetch orders"),
        (lambda s: s.fetch_order_by_id("x"), "Failed to fetch order"),
    ],
)
async def test_operation_default_error_text(call, expected):
    api = MagicMock()
    api.get = AsyncMock(side_effect=ApiError())
    api.post = AsyncMock(side_effect=ApiError())
    service, store, _ = await make_service(api)

    result = await call(service)

    assert result.payload == expected
    assert select_orders_error(store.get_state()) == expected


@pytest.mark.asyncio
async def test_any_exception_is_treated_as_failure():
    api = MagicMock()
    api.get = AsyncMock(side_effect=RuntimeError("socket closed"))
    service, store, _ = await make_service(api)

    result = await service.fetch_order_by_id("x")

    assert not result.ok
    assert select_orders_error(store.get_state()) == "socket closed"
    assert select_orders_loading(store.get_state()) is False


@pytest.mark.asyncio
async def test_pending_is_visible_while_request_in_flight():
    release = asyncio.Event()

    async def slow_get(path):
        await release.wait()
        return ApiResponse({"orders": []}, 200)

    api = MagicMock()
    api.get = slow_get
    service, store, _ = await make_service(api)
    store._state["orders"] = OrderState(error="old error")

    task = asyncio.create_task(service.fetch_orders())
    await asyncio.sleep(0)

    assert select_orders_loading(store.get_state()) is True
    assert select_orders_error(store.get_state()) is None

    release.set()
    await task
    assert select_orders_loading(store.get_state()) is False


@pytest.mark.asyncio
async def test_overlapping_operations_last_settlement_wins():
    first_release = asyncio.Event()
    second_release = asyncio.Event()

    async def get(path):
        if path == "/api/orders":
            await first_release.wait()
            raise ApiError("Request failed", 500, {"error": "list broke"})
        await second_release.wait()
        return ApiResponse({"order": {"id": "x"}}, 200)

    api = MagicMock()
    api.get = get
    service, store, _ = await make_service(api)

    list_task = asyncio.create_task(service.fetch_orders())
    fetch_task = asyncio.create_task(service.fetch_order_by_id("x"))
    await asyncio.sleep(0)

    # fetch-by-id settles first, the list failure arrives last
    second_release.set()
    await fetch_task
    assert select_orders_loading(store.get_state()) is False

    first_release.set()
    await list_task

    state = store.get_state()
    assert select_current_order(state) == {"id": "x"}
    assert select_orders_error(state) == "list broke"
    assert select_orders_loading(state) is False


@pytest.mark.asyncio
async def test_clear_commands():
    service, store, _ = await make_service()
    store._state["orders"] = OrderState(current_order={"id": "x"}, error="e")

    service.clear_error()
    assert select_orders_error(store.get_state()) is None
    assert select_current_order(store.get_state()) == {"id": "x"}

    service.clear_current_order()
    assert select_current_order(store.get_state()) is None


@pytest.mark.asyncio
async def test_cart_effect_failure_does_not_fail_create():
    api = MagicMock()
    api.post = AsyncMock(return_value=ApiResponse({"order": {"id": "o1"}}, 201))
    service, store, bus = await make_service(api, with_cart=False)

    def broken_effect(event):
        raise ValueError("cart unavailable")

    await bus.subscribe(ORDER_PLACED, broken_effect)
    result = await service.create_order({})

    assert result.ok
    assert select_orders(store.get_state()) == [{"id": "o1"}]


class FailingBus:
    async def publish(self, event_name, payload):
        raise ConnectionError("bus offline")

    async def subscribe(self, event_name, callback):
        pass


@pytest.mark.asyncio
async def test_publish_error_does_not_fail_create():
    api = MagicMock()
    api.post = AsyncMock(return_value=ApiResponse({"order": {"id": "o2"}}, 201))
    store = make_store()
    service = OrderService(store=store, api_client=api, event_bus=FailingBus(), logger=logger)

    result = await service.create_order({"total": 5})

    state = store.get_state()
    assert result.ok
    assert select_current_order(state) == {"id": "o2"}
    assert select_orders_error(state) is None
    assert select_orders_loading(state) is False
