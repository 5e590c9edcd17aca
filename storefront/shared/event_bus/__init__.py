from storefront.shared.event_bus.base import EventBus
from storefront.shared.event_bus.in_process_eventbus import InProcessEventBus

__all__ = ["EventBus", "InProcessEventBus"]
