"""Lifecycle core: pricing, status rules, table state, ledger and coordination"""

from robs.services.errors import (
    LifecycleError,
    NotFound,
    Conflict,
    ValidationFailed,
    AlreadySettled,
)
from robs.services.lifecycle import LifecycleCoordinator

__all__ = [
    "LifecycleError",
    "NotFound",
    "Conflict",
    "ValidationFailed",
    "AlreadySettled",
    "LifecycleCoordinator",
]
