"""
Shared fixtures for adversarial tests.

Provides a registry wired to real adapters for race condition and
replay tests.
"""

from datetime import timedelta

import pytest

from src.adapters.clock import SystemClock
from src.adapters.random_source import SecretsRandomSource
from src.adapters.repository.memory import InMemoryActivationRepository
from src.domain.activation import ActivationRegistry

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial


@pytest.fixture
def live_registry() -> ActivationRegistry:
    """Registry with system clock and cryptographic random source."""
    return ActivationRegistry(
        repository=InMemoryActivationRepository(),
        clock=SystemClock(),
        random_source=SecretsRandomSource(),
        ttl=timedelta(minutes=15),
        sweep_grace=timedelta(seconds=60),
    )
