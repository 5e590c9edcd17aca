import argparse
import asyncio

from storefront.config.factory import get_store, init_storefront, shutdown_storefront
from storefront.config.logger import logger
from storefront.orders import select_current_order, select_orders, select_orders_error


async def run(order_id: str = None) -> int:
    service = await init_storefront()
    try:
        if order_id:
            result = await service.fetch_order_by_id(order_id)
        else:
            result = await service.fetch_orders()
    finally:
        await shutdown_storefront()

    state = get_store().get_state()
    if not result.ok:
        logger.error("Order request failed", extra={"error": select_orders_error(state)})
        return 1

    if order_id:
        logger.info("Order loaded", extra={"order": select_current_order(state)})
    else:
        orders = select_orders(state)
        logger.info(f"Loaded {len(orders)} orders", extra={"ids": [o.get("id") for o in orders]})
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Fetch storefront orders from the configured backend")
    parser.add_argument("order_id", nargs="?", help="fetch a single order instead of the full list")
    args = parser.parse_args(argv)
    return asyncio.run(run(args.order_id))


if __name__ == "__main__":
    raise SystemExit(main())
