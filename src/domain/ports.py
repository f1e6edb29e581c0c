"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the records the domain hands out and the interfaces
(ports) it requires from infrastructure. Adapters implement these
protocols through structural subtyping.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol


class ActivationStatus(str, Enum):
    """
    Activation lifecycle states.

    State Transitions:
    - (no record) -> PENDING  (register, or resend for an unknown identity)
    - PENDING -> PENDING      (resend regenerates the credentials)
    - PENDING -> ACTIVE       (successful redemption by token or code)
    - ACTIVE -> PENDING       (register only; re-registration resets the record)
    - PENDING -> (no record)  (sweep, once the deadline is past)

    NONE is never stored; lookups synthesize it when no record exists.
    Redemption and resend never move a record out of ACTIVE.
    """

    NONE = "none"
    PENDING = "pending"
    ACTIVE = "active"


@dataclass
class ActivationRecord:
    """
    One activation record per normalized identity.

    token, code and expires_at are set only while PENDING and are
    cleared together on activation.
    """

    identity: str
    status: ActivationStatus
    token: str | None
    code: str | None
    created_at: datetime
    activated_at: datetime | None = None
    expires_at: datetime | None = None


@dataclass(frozen=True)
class RedeemResult:
    """Outcome of a successful redemption (fresh or idempotent)."""

    identity: str
    status: ActivationStatus
    activated_at: datetime | None
    newly_activated: bool


@dataclass(frozen=True)
class StatusReport:
    """Raw stored state of an identity, or a synthesized NONE."""

    identity: str
    status: ActivationStatus
    created_at: datetime | None = None
    activated_at: datetime | None = None
    expires_at: datetime | None = None


class ActivationRepository(Protocol):
    """Port interface for activation record storage."""

    def get(self, key: str) -> ActivationRecord | None:
        """Return the record stored under a normalized identity, if any."""
        ...

    def find_by_token(self, token: str) -> list[ActivationRecord]:
        """
        Return every stored record whose token equals ``token``.

        Matches the current token of a PENDING record, and also the token
        that activated an ACTIVE record, so repeated redemption of the same
        link resolves to the active record.
        """
        ...

    def put(self, key: str, record: ActivationRecord) -> None:
        """
        Store ``record`` under ``key``, replacing any previous record.

        Must be called again after a record's token changes so that
        token lookups stay consistent.
        """
        ...

    def delete(self, key: str) -> None:
        """Remove the record stored under ``key`` (no-op if absent)."""
        ...

    def items(self) -> Iterator[tuple[str, ActivationRecord]]:
        """Iterate over (key, record) pairs."""
        ...


class Clock(Protocol):
    """Port interface for the current time."""

    def now(self) -> datetime:
        """Return the current timezone-aware time."""
        ...


class RandomSource(Protocol):
    """Port interface for credential generation."""

    def token(self) -> str:
        """Return a high-entropy hex token."""
        ...

    def code(self) -> str:
        """Return a six-digit numeric code."""
        ...


class ActivationSender(Protocol):
    """Port interface for delivering activation credentials."""

    def send_activation(self, email: str, link: str, code: str) -> None:
        """
        Deliver an activation link and code to the registrant.

        Args:
            email: Recipient email address (original case)
            link: Activation link containing the token
            code: Six-digit activation code
        """
        ...
