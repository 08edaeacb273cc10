"""Domain errors raised by the lifecycle core.

Every error carries the entity ids involved in ``context`` so the HTTP layer
can render a specific message without re-querying.
"""

from typing import Any, Dict, Optional


class LifecycleError(Exception):
    """Base class for errors surfaced to callers of the core"""

    kind = "error"
    status_code = 400

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = {k: v for k, v in context.items() if v is not None}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detail": self.message,
            "error": self.kind,
            "context": {k: str(v) for k, v in self.context.items()},
        }


class NotFound(LifecycleError):
    """Order, table, menu item or payment does not exist"""

    kind = "not_found"
    status_code = 404


class Conflict(LifecycleError):
    """Entity state forbids the operation (occupied, grouped, bad transition)"""

    kind = "conflict"
    status_code = 409


class ValidationFailed(LifecycleError):
    """Caller input is out of bounds"""

    kind = "validation_failed"
    status_code = 400


class AlreadySettled(LifecycleError):
    """The order has already been paid"""

    kind = "already_settled"
    status_code = 400

    def __init__(self, order_id: Any, message: Optional[str] = None):
        super().__init__(message or "Order is already paid", order_id=order_id)
