"""Repository adapters - Activation record storage."""

from .memory import InMemoryActivationRepository

__all__ = ["InMemoryActivationRepository"]
