"""
Checkout walkthrough against an in-memory backend.

Fills a cart, places the order, then reloads order history and the order
page the way the storefront pages do. No server needed: requests are
answered by an httpx.MockTransport.
"""

import asyncio
import json
import sys
import os
from datetime import datetime, timezone

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

import httpx

from storefront.cart import add_to_cart, cart_reducer, register_cart_effects, select_cart_item_count
from storefront.config.logger import get_logger
from storefront.orders import OrderService, order_reducer, select_current_order, select_orders
from storefront.shared.clients import ApiClient
from storefront.shared.event_bus import InProcessEventBus
from storefront.shared.store import Store

logger = get_logger("CheckoutExample")

_orders = []


def backend(request: httpx.Request) -> httpx.Response:
    if request.headers.get("Authorization") != "Bearer fake-jwt-u_1":
        return httpx.Response(401, json={"error": "Unauthorized. Please log in to place an order."})

    if request.method == "POST" and request.url.path == "/api/orders":
        data = json.loads(request.content)
        if not data.get("items"):
            return httpx.Response(400, json={"error": "Validation failed"})
        order = {
            "id": f"order_{len(_orders) + 1}",
            "items": data["items"],
            "total": data.get("total", 0),
            "status": "Pending",
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }
        _orders.append(order)
        return httpx.Response(201, json={"success": True, "orderId": order["id"], "order": order})

    if request.method == "GET" and request.url.path == "/api/orders":
        return httpx.Response(200, json={"orders": list(reversed(_orders)), "count": len(_orders)})

    order_id = request.url.path.rsplit("/", 1)[-1]
    order = next((o for o in _orders if o["id"] == order_id), None)
    if order is None:
        return httpx.Response(404, json={"error": "Order not found"})
    return httpx.Response(200, json={"order": order})


async def main():
    store = Store({"orders": order_reducer, "cart": cart_reducer})
    bus = InProcessEventBus()
    await register_cart_effects(bus, store)

    async with ApiClient(
        base_url="http://storefront.local",
        token_provider=lambda: "fake-jwt-u_1",
        transport=httpx.MockTransport(backend),
    ) as api:
        service = OrderService(store=store, api_client=api, event_bus=bus)

        product = {"id": 3, "title": "Canvas Tote", "price": 24.5, "stock": 10}
        store.dispatch(add_to_cart({"product": product, "quantity": 2}))
        logger.info(f"Cart holds {select_cart_item_count(store.get_state())} items")

        result = await service.create_order({"items": [{"id": 3, "quantity": 2}], "total": 49.0})
        order_id = result.unwrap()["order"]["id"]
        logger.info(f"Placed {order_id}, cart now holds {select_cart_item_count(store.get_state())} items")

        missing = await service.fetch_order_by_id("order_999")
        logger.info(f"Lookup of unknown order failed with: {missing.payload}")

        await service.fetch_orders()
        await service.fetch_order_by_id(order_id)
        state = store.get_state()
        logger.info(
            "Order history loaded",
            extra={"orders": [o["id"] for o in select_orders(state)], "current": select_current_order(state)["id"]},
        )


if __name__ == "__main__":
    asyncio.run(main())
