from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional


@dataclass(frozen=True)
class Action:
    """A state change request: `type` selects the transition, `payload` feeds it."""
    type: str
    payload: Any = None
    meta: Dict[str, Any] = field(default_factory=dict)


def action_creator(action_type: str) -> Callable[..., Action]:
    """Build a factory for actions of one type. The factory carries `.type`."""

    def create(payload: Any = None, **meta) -> Action:
        return Action(type=action_type, payload=payload, meta=meta)

    create.type = action_type
    create.__name__ = action_type.replace("/", "_")
    return create


class AsyncActionTypes:
    """
    Lifecycle action types for one asynchronous operation.

    `AsyncActionTypes("orders/createOrder")` yields
    `orders/createOrder/pending`, `.../fulfilled` and `.../rejected`.
    """

    def __init__(self, prefix: str):
        self.prefix = prefix
        self.pending = f"{prefix}/pending"
        self.fulfilled = f"{prefix}/fulfilled"
        self.rejected = f"{prefix}/rejected"

    def pending_action(self, arg: Any = None, request_id: Optional[str] = None) -> Action:
        return Action(self.pending, None, {"arg": arg, "request_id": request_id})

    def fulfilled_action(self, payload: Any, arg: Any = None, request_id: Optional[str] = None) -> Action:
        return Action(self.fulfilled, payload, {"arg": arg, "request_id": request_id})

    def rejected_action(self, reason: Any, arg: Any = None, request_id: Optional[str] = None) -> Action:
        return Action(self.rejected, reason, {"arg": arg, "request_id": request_id})

    def __repr__(self) -> str:
        return f"AsyncActionTypes({self.prefix!r})"
