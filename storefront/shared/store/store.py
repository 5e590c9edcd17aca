from typing import Any, Callable, Dict, List, Optional

from storefront.config.logger import get_logger
from storefront.shared.logger import StoreLogger
from storefront.shared.store.actions import Action

Reducer = Callable[[Any, Action], Any]
Listener = Callable[[Action, Dict[str, Any]], None]


class Store:
    """
    Session state container.

    Holds one state object per slice, built from that slice's reducer on
    construction. `dispatch` runs every slice reducer synchronously and then
    calls listeners; it never awaits, so a reduction can't interleave with
    another task on the same event loop.
    """

    def __init__(self, reducers: Dict[str, Reducer], logger: Optional[StoreLogger] = None):
        if not reducers:
            raise ValueError("Store needs at least one slice reducer")
        self._reducers = dict(reducers)
        self._listeners: List[Listener] = []
        self._dispatching = False
        self.logger = logger or get_logger("Store")
        self._state: Dict[str, Any] = {
            name: reducer(None, Action("@@store/init")) for name, reducer in self._reducers.items()
        }

    def get_state(self) -> Dict[str, Any]:
        # Shallow copy: slice states are immutable, the mapping is not.
        return dict(self._state)

    @property
    def state(self) -> Dict[str, Any]:
        return self.get_state()

    def dispatch(self, action: Action) -> Action:
        if not isinstance(action, Action):
            raise TypeError(f"dispatch expects an Action, got {type(action).__name__}")
        if self._dispatching:
            raise RuntimeError(f"Reducers may not dispatch actions (while handling {action.type})")

        self._dispatching = True
        try:
            self._state = {
                name: reducer(self._state[name], action) for name, reducer in self._reducers.items()
            }
        finally:
            self._dispatching = False

        self.logger.debug("Action dispatched", extra={"action": action.type})

        for listener in list(self._listeners):
            listener(action, self.get_state())
        return action

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called after every dispatch. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
