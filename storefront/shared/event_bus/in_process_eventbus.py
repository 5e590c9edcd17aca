import asyncio
import inspect
from typing import Any, Callable, Dict, List, Optional

from storefront.config.logger import get_logger
from storefront.shared.event_bus.base import EventBus
from storefront.shared.logger import StoreLogger
from storefront.shared.metrics import BusMetrics, MetricsCollector


class InProcessEventBus(EventBus):
    """
    In-memory pub/sub used for effects that must follow a state change,
    e.g. emptying the cart once an order has been placed.

    `publish` awaits every subscriber in the order it subscribed, so by the
    time `publish` returns all effects for the event have run. A failing
    subscriber is retried, then logged; it never fails the publisher.
    """

    def __init__(
        self,
        max_retries: int = 3,
        retry_delay: float = 0.5,
        logger: Optional[StoreLogger] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.subscribers: Dict[str, List[Callable[[dict], Any]]] = {}
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.logger = logger or get_logger("InProcessEventBus")
        self.metrics = metrics or MetricsCollector(self.logger)

    async def publish(self, event_name: str, payload: dict):
        subscribers = list(self.subscribers.get(event_name, []))
        self.metrics.increment(BusMetrics.PUBLISHED)
        if not subscribers:
            self.logger.debug("No subscribers for event", extra={"event": event_name})
            return

        self.logger.info(
            "Publishing event",
            extra={"event": event_name, "subscribers": len(subscribers)},
        )
        for callback in subscribers:
            await self._safe_invoke(callback, event_name, payload)

    async def subscribe(self, event_name: str, callback: Callable[[dict], Any]):
        self.subscribers.setdefault(event_name, []).append(callback)
        self.logger.info(
            "Subscriber added",
            extra={"event": event_name, "callback": _callback_name(callback)},
        )

    async def unsubscribe(self, event_name: str, callback: Callable[[dict], Any]):
        callbacks = self.subscribers.get(event_name, [])
        if callback in callbacks:
            callbacks.remove(callback)
            self.logger.info(
                "Subscriber removed",
                extra={"event": event_name, "callback": _callback_name(callback)},
            )

    async def _safe_invoke(self, callback: Callable[[dict], Any], event_name: str, payload: dict):
        """
        Run one subscriber with retries. Supports both async and sync callbacks.
        """
        for attempt in range(1, self.max_retries + 1):
            try:
                result = callback(payload)
                if inspect.isawaitable(result):
                    await result

                self.metrics.increment(BusMetrics.SUBSCRIBER_SUCCESS)
                self.logger.debug(
                    "Subscriber executed successfully",
                    extra={"event": event_name, "callback": _callback_name(callback)},
                )
                return
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                self.metrics.increment(BusMetrics.SUBSCRIBER_FAILURE)
                self.logger.warning(
                    f"Subscriber failed on attempt {attempt}",
                    extra={
                        "event": event_name,
                        "callback": _callback_name(callback),
                        "error": str(exc),
                    },
                )
                if attempt < self.max_retries:
                    await asyncio.sleep(self.retry_delay * attempt)

        self.logger.error(
            "Subscriber permanently failed after retries",
            extra={
                "event": event_name,
                "callback": _callback_name(callback),
                "attempts": self.max_retries,
            },
        )
        self.metrics.increment(BusMetrics.SUBSCRIBER_GAVE_UP)
        self.metrics.report()


def _callback_name(callback: Callable) -> str:
    return getattr(callback, "__name__", str(callback))
