"""
Activation registry domain service - Account activation state machine.

This module owns the activation workflow: an identity (email address)
registers, receives a high-entropy link token plus a six-digit code, and
must redeem exactly one of them before the deadline to become ACTIVE.

Activation State Machine
========================

States:
- NONE: Synthesized for identities with no stored record (never persisted)
- PENDING: Token and code issued, waiting for redemption
- ACTIVE: Redeemed; token, code and deadline cleared

Transitions:
    NONE    -> PENDING  (register / resend)
    PENDING -> PENDING  (resend regenerates token, code and deadline)
    PENDING -> ACTIVE   (redeem_by_token / redeem_by_code, exactly once)
    ACTIVE  -> PENDING  (register only; re-registration resets the record)
    PENDING -> NONE     (sweep, once the deadline is past)

Expiry is enforced at read time by both redemption paths. The sweep is a
hygiene pass that runs at the start of every operation and removes PENDING
records whose deadline passed more than ``sweep_grace`` ago. Status reports
raw stored state and does not enforce expiry itself.

All operations hold a single lock for their whole read-modify-write
sequence, so no operation observes another one half way through.
"""

import logging
import re
import secrets
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta

from .exceptions import (
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
    ActivationStatus,
    Clock,
    RandomSource,
    RedeemResult,
    StatusReport,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
CODE_PATTERN = re.compile(r"[0-9]{6}")

DEFAULT_TTL = timedelta(minutes=15)
DEFAULT_SWEEP_GRACE = timedelta(seconds=60)


@dataclass
class ActivationRegistry:
    """
    Domain service owning every activation record.

    Callers only ever receive copies of records; all mutation goes
    through the operations below.
    """

    repository: ActivationRepository
    clock: Clock
    random_source: RandomSource
    ttl: timedelta = DEFAULT_TTL
    sweep_grace: timedelta = DEFAULT_SWEEP_GRACE
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def register(self, identity: str) -> ActivationRecord:
        """
        Issue a fresh PENDING record for an identity.

        Any existing record for the identity, pending or active, is
        replaced by a new one with a new created_at.

        Args:
            identity: Email address (original case is kept for display)

        Returns:
            Copy of the newly issued record, including token and code

        Raises:
            InvalidIdentity: If identity is not email-shaped
        """
        display, key = self._normalize_identity(identity)

        with self._lock:
            now = self.clock.now()
            self._sweep(now)
            previous = self.repository.get(key)
            record = self._issue(display, now)
            self.repository.put(key, record)

        if previous is not None and previous.status is ActivationStatus.ACTIVE:
            logger.warning("Re-registration reset active identity %s to pending", key)
        logger.info("Issued activation for %s, expires at %s", key, record.expires_at)
        return replace(record)

    def redeem_by_token(self, token: str) -> RedeemResult:
        """
        Activate the record whose token matches.

        Redeeming a token that already activated its record succeeds
        without changing activated_at.

        Raises:
            ActivationNotFound: If no record carries this token
            ActivationExpired: If the record's deadline has passed
        """
        with self._lock:
            now = self.clock.now()
            self._sweep(now)

            matches = self.repository.find_by_token(token) if token else []
            if len(matches) > 1:
                raise RegistryInvariantError(f"{len(matches)} records share one activation token")
            if not matches:
                logger.warning("Token redemption rejected: unknown token")
                raise ActivationNotFound("token")

            record = matches[0]
            return self._redeem(record, now)

    def redeem_by_code(self, identity: str, code: str) -> RedeemResult:
        """
        Activate an identity's record with its six-digit code.

        Raises:
            InvalidIdentity: If identity is not email-shaped
            InvalidCode: If code is not exactly six digits
            ActivationNotFound: If the identity has no record
            ActivationExpired: If the record's deadline has passed
            CodeMismatch: If the code differs from the issued one
        """
        _, key = self._normalize_identity(identity)
        if not isinstance(code, str) or not CODE_PATTERN.fullmatch(code):
            raise InvalidCode(code)

        with self._lock:
            now = self.clock.now()
            self._sweep(now)

            record = self.repository.get(key)
            if record is None:
                logger.warning("Code redemption rejected for %s: no record", key)
                raise ActivationNotFound(key)
            return self._redeem(record, now, code=code)

    def status(self, identity: str) -> StatusReport:
        """
        Report the stored state of an identity.

        A PENDING record past its deadline that has not yet been swept is
        reported as stored, stale expires_at included. No record yields
        a synthesized NONE status rather than an error.

        Raises:
            InvalidIdentity: If identity is not email-shaped
        """
        display, key = self._normalize_identity(identity)

        with self._lock:
            now = self.clock.now()
            self._sweep(now)
            record = self.repository.get(key)

        if record is None:
            return StatusReport(identity=display, status=ActivationStatus.NONE)
        return StatusReport(
            identity=record.identity,
            status=record.status,
            created_at=record.created_at,
            activated_at=record.activated_at,
            expires_at=record.expires_at,
        )

    def resend(self, identity: str) -> ActivationRecord:
        """
        Re-issue credentials for a pending identity.

        - No record: behaves like register.
        - ACTIVE: no-op, returns the current record.
        - PENDING: new token, code and deadline; identity and created_at kept.
          The previous token and code stop working immediately.

        Raises:
            InvalidIdentity: If identity is not email-shaped
        """
        display, key = self._normalize_identity(identity)

        with self._lock:
            now = self.clock.now()
            self._sweep(now)

            record = self.repository.get(key)
            if record is None:
                record = self._issue(display, now)
                self.repository.put(key, record)
                logger.info("Issued activation for %s on resend", key)
            elif record.status is ActivationStatus.ACTIVE:
                logger.info("Resend skipped for %s: already active", key)
            else:
                token, code, expires_at = self._new_credentials(now)
                record = replace(record, token=token, code=code, expires_at=expires_at)
                self.repository.put(key, record)
                logger.info("Re-issued activation for %s, expires at %s", key, expires_at)

            return replace(record)

    def sweep_expired(self) -> int:
        """Remove PENDING records past their deadline. Returns the count removed."""
        with self._lock:
            return self._sweep(self.clock.now())

    def _sweep(self, now: datetime) -> int:
        cutoff = now - self.sweep_grace
        expired = [
            key
            for key, record in self.repository.items()
            if record.status is ActivationStatus.PENDING
            and record.expires_at is not None
            and record.expires_at < cutoff
        ]
        for key in expired:
            self.repository.delete(key)

        if expired:
            logger.info("Swept %d expired activation(s)", len(expired))
        return len(expired)

    def _redeem(self, record: ActivationRecord, now: datetime, code: str | None = None) -> RedeemResult:
        key = record.identity.lower()

        if record.status is ActivationStatus.ACTIVE:
            return RedeemResult(
                identity=record.identity,
                status=record.status,
                activated_at=record.activated_at,
                newly_activated=False,
            )

        if record.expires_at is not None and record.expires_at < now:
            logger.warning("Redemption rejected for %s: credentials expired", key)
            raise ActivationExpired(key)

        if code is not None and not secrets.compare_digest(
            (record.code or "").encode(), code.encode()
        ):
            logger.warning("Code redemption rejected for %s: mismatch", key)
            raise CodeMismatch(key)

        activated = replace(
            record,
            status=ActivationStatus.ACTIVE,
            activated_at=now,
            token=None,
            code=None,
            expires_at=None,
        )
        self.repository.put(key, activated)
        logger.info("Activated %s", key)

        return RedeemResult(
            identity=activated.identity,
            status=activated.status,
            activated_at=activated.activated_at,
            newly_activated=True,
        )

    def _issue(self, display: str, now: datetime) -> ActivationRecord:
        token, code, expires_at = self._new_credentials(now)
        return ActivationRecord(
            identity=display,
            status=ActivationStatus.PENDING,
            token=token,
            code=code,
            created_at=now,
            expires_at=expires_at,
        )

    def _new_credentials(self, now: datetime) -> tuple[str, str, datetime]:
        """
        Generate a token/code pair with its shared deadline.

        Raises RegistryInvariantError before anything is stored if the
        random source yields a live token or a malformed code.
        """
        token = self.random_source.token()
        code = self.random_source.code()

        if not token or self.repository.find_by_token(token):
            raise RegistryInvariantError("Generated token is empty or already in use")
        if not CODE_PATTERN.fullmatch(code):
            raise RegistryInvariantError(f"Generated code has invalid format: {code!r}")

        return token, code, now + self.ttl

    def _normalize_identity(self, identity: str) -> tuple[str, str]:
        """
        Validate and normalize an identity.

        Applies: strip whitespace, then email-shape check.
        Returns (display form, lowercase lookup key).
        """
        if not isinstance(identity, str):
            raise InvalidIdentity(repr(identity))

        display = identity.strip()
        if not EMAIL_PATTERN.fullmatch(display):
            raise InvalidIdentity(display)
        return display, display.lower()
