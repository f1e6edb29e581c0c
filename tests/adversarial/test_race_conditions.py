"""
Adversarial tests for race condition and replay attack prevention.

Verifies that concurrent operations on the same identity are handled
atomically, preventing attackers from exploiting races to:
- Activate a record more than once
- Redeem credentials that a concurrent resend has replaced
- Leave two live token/code pairs for one identity

Every registry operation holds a single lock for its whole
read-modify-write sequence, so these tests hammer the same identity
from many threads and check that exactly one transition wins.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from src.domain.activation import ActivationRegistry
from src.domain.exceptions import ActivationError, ActivationNotFound, CodeMismatch
from src.domain.ports import ActivationStatus, RedeemResult

# Apply adversarial marker to all tests in this module
pytestmark = pytest.mark.adversarial


class TestRaceConditionAttacks:
    """Concurrent redemption and re-issuance attacks."""

    def test_concurrent_token_redemption_activates_once(self, live_registry: ActivationRegistry) -> None:
        """
        Many clicks on the same link at once activate the record exactly once.

        All attempts succeed (redemption is idempotent) but only one reports
        a fresh activation, and all agree on activated_at.
        """
        record = live_registry.register("race@example.com")
        num_attackers = 20

        with ThreadPoolExecutor(max_workers=num_attackers) as executor:
            futures = [
                executor.submit(live_registry.redeem_by_token, record.token)
                for _ in range(num_attackers)
            ]
            results: list[RedeemResult] = [f.result() for f in futures]

        assert sum(r.newly_activated for r in results) == 1
        assert len({r.activated_at for r in results}) == 1
        assert all(r.status is ActivationStatus.ACTIVE for r in results)

    def test_concurrent_link_and_code_activate_once(self, live_registry: ActivationRegistry) -> None:
        """Racing the link against the code still yields a single activation."""
        record = live_registry.register("both@example.com")

        with ThreadPoolExecutor(max_workers=10) as executor:
            futures = []
            for i in range(10):
                if i % 2:
                    futures.append(executor.submit(live_registry.redeem_by_token, record.token))
                else:
                    futures.append(
                        executor.submit(live_registry.redeem_by_code, "BOTH@example.com", record.code)
                    )
            results = [f.result() for f in futures]

        assert sum(r.newly_activated for r in results) == 1
        assert len({r.activated_at for r in results}) == 1

    def test_concurrent_register_leaves_one_live_pair(self, live_registry: ActivationRegistry) -> None:
        """
        Concurrent registrations for one email leave exactly one record.

        Only the pair issued last is redeemable; every earlier token is dead.
        """
        email = "burst@example.com"
        issued: list[str] = []
        issued_lock = threading.Lock()

        def attack_register() -> None:
            token = live_registry.register(email).token
            with issued_lock:
                issued.append(token)

        with ThreadPoolExecutor(max_workers=10) as executor:
            for f in [executor.submit(attack_register) for _ in range(10)]:
                f.result()

        live = []
        for token in issued:
            try:
                live_registry.redeem_by_token(token)
                live.append(token)
            except ActivationNotFound:
                pass

        assert len(set(issued)) == 10
        assert len(live) == 1
        assert live_registry.status(email).status is ActivationStatus.ACTIVE

    def test_resend_races_with_redemption(self, live_registry: ActivationRegistry) -> None:
        """
        A redemption racing a resend either wins before it or fails after it.

        The old token can never succeed once the resend has taken effect,
        and the identity never ends up half-updated.
        """
        original = live_registry.register("resend@example.com")
        outcomes: list[str] = []
        outcomes_lock = threading.Lock()

        def redeem_old() -> None:
            try:
                live_registry.redeem_by_token(original.token)
                outcome = "activated"
            except ActivationNotFound:
                outcome = "rejected"
            with outcomes_lock:
                outcomes.append(outcome)

        def resend() -> None:
            live_registry.resend("resend@example.com")

        with ThreadPoolExecutor(max_workers=2) as executor:
            futures = [executor.submit(resend), executor.submit(redeem_old)]
            for f in futures:
                f.result()

        report = live_registry.status("resend@example.com")
        if outcomes == ["activated"]:
            assert report.status is ActivationStatus.ACTIVE
        else:
            assert outcomes == ["rejected"]
            assert report.status is ActivationStatus.PENDING

    def test_distinct_identities_get_distinct_tokens(self, live_registry: ActivationRegistry) -> None:
        """Parallel registrations for different identities never share a token."""
        with ThreadPoolExecutor(max_workers=16) as executor:
            records = list(
                executor.map(live_registry.register, [f"user{i}@example.com" for i in range(200)])
            )

        assert len({r.token for r in records}) == 200
        assert all(len(r.token) >= 32 for r in records)


class TestReplayAttacks:
    """Credential replay and cross-identity attempts."""

    def test_replayed_token_does_not_reactivate(self, live_registry: ActivationRegistry) -> None:
        record = live_registry.register("replay@example.com")
        first = live_registry.redeem_by_token(record.token)

        for _ in range(5):
            again = live_registry.redeem_by_token(record.token)
            assert again.newly_activated is False
            assert again.activated_at == first.activated_at

    def test_code_is_scoped_to_identity(self, live_registry: ActivationRegistry) -> None:
        """A valid code for one identity does not activate another."""
        victim = live_registry.register("victim@example.com")
        attacker = live_registry.register("attacker@example.com")
        if victim.code == attacker.code:
            pytest.skip("codes collided by chance")

        with pytest.raises(CodeMismatch):
            live_registry.redeem_by_code("victim@example.com", attacker.code)

        assert live_registry.status("victim@example.com").status is ActivationStatus.PENDING

    def test_stale_credentials_after_resend_never_succeed(self, live_registry: ActivationRegistry) -> None:
        original = live_registry.register("stale@example.com")
        reissued = live_registry.resend("stale@example.com")

        with pytest.raises(ActivationError):
            live_registry.redeem_by_token(original.token)
        if reissued.code != original.code:
            with pytest.raises(ActivationError):
                live_registry.redeem_by_code("stale@example.com", original.code)

        assert live_registry.status("stale@example.com").status is ActivationStatus.PENDING
