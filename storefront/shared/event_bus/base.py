from typing import Any, Callable


class EventBus:
    async def publish(self, event_name: str, payload: dict):
        raise NotImplementedError

    async def subscribe(self, event_name: str, callback: Callable[[dict], Any]):
        raise NotImplementedError

    async def unsubscribe(self, event_name: str, callback: Callable[[dict], Any]):
        raise NotImplementedError
