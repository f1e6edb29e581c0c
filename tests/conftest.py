"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A controllable clock
- A deterministic random source
- A fresh in-memory registry per test
"""

from datetime import UTC, datetime, timedelta

import pytest

from src.adapters.repository.memory import InMemoryActivationRepository
from src.domain.activation import ActivationRegistry

TTL = timedelta(minutes=15)
SWEEP_GRACE = timedelta(seconds=60)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


class SequenceRandomSource:
    """Random source yielding predictable, distinct tokens and codes."""

    def __init__(self) -> None:
        self.issued = 0

    def token(self) -> str:
        self.issued += 1
        return f"{self.issued:064x}"

    def code(self) -> str:
        return str(100000 + self.issued)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def random_source() -> SequenceRandomSource:
    return SequenceRandomSource()


@pytest.fixture
def repository() -> InMemoryActivationRepository:
    return InMemoryActivationRepository()


@pytest.fixture
def registry(
    repository: InMemoryActivationRepository,
    clock: FakeClock,
    random_source: SequenceRandomSource,
) -> ActivationRegistry:
    """Registry with a 15 minute TTL and a 60 second sweep grace."""
    return ActivationRegistry(
        repository=repository,
        clock=clock,
        random_source=random_source,
        ttl=TTL,
        sweep_grace=SWEEP_GRACE,
    )
