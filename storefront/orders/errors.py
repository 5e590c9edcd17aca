from dataclasses import dataclass
from typing import Any

FULFILLED = "fulfilled"
REJECTED = "rejected"


class OrderOperationError(Exception):
    """Raised by `OperationResult.unwrap()` for a rejected order operation."""

    def __init__(self, reason: Any):
        super().__init__(reason if isinstance(reason, str) else repr(reason))
        self.reason = reason


@dataclass(frozen=True)
class OperationResult:
    """Outcome of one order operation, as also reduced into the store."""
    status: str
    payload: Any = None

    @property
    def ok(self) -> bool:
        return self.status == FULFILLED

    def unwrap(self) -> Any:
        if not self.ok:
            raise OrderOperationError(self.payload)
        return self.payload

    @classmethod
    def fulfilled(cls, payload: Any) -> "OperationResult":
        return cls(FULFILLED, payload)

    @classmethod
    def rejected(cls, reason: Any) -> "OperationResult":
        return cls(REJECTED, reason)


def extract_message(failure: BaseException, default_text: str) -> Any:
    """
    Best-effort reason for a failed call.

    Prefers the backend's `error` field, then the exception's own message,
    then `default_text`. The backend field is returned as-is, so it may be
    structured rather than a string.
    """
    response_data = getattr(failure, "response_data", None)
    if isinstance(response_data, dict) and response_data.get("error"):
        return response_data["error"]

    message = getattr(failure, "message", None)
    if message is None and failure is not None:
        message = str(failure)
    if message:
        return message

    return default_text
