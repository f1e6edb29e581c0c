"""
Domain layer - Pure business logic with zero framework imports.

This package contains the account activation state machine. It defines
its own port interfaces for infrastructure abstraction, so the registry
never depends on storage, clocks or delivery directly.
"""

from .activation import ActivationRegistry
from .exceptions import (
    ActivationError,
    ActivationExpired,
    ActivationNotFound,
    CodeMismatch,
    InvalidCode,
    InvalidIdentity,
    RegistryInvariantError,
)
from .ports import (
    ActivationRecord,
    ActivationRepository,
    ActivationSender,
    ActivationStatus,
    Clock,
    RandomSource,
    RedeemResult,
    StatusReport,
)

__all__ = [
    "ActivationError",
    "ActivationExpired",
    "ActivationNotFound",
    "ActivationRecord",
    "ActivationRegistry",
    "ActivationRepository",
    "ActivationSender",
    "ActivationStatus",
    "Clock",
    "CodeMismatch",
    "InvalidCode",
    "InvalidIdentity",
    "RandomSource",
    "RedeemResult",
    "RegistryInvariantError",
    "StatusReport",
]
