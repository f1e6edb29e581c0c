"""
In-memory repository adapter - Implements ActivationRepository protocol.

Records live in a dict keyed by normalized identity and are lost on
restart. A secondary token index is kept in step with the primary map
on every put and delete, so token lookups never scan the whole store.

When a record is stored as ACTIVE with its token cleared, the token it
held is kept in the index as a retired token. Following the same link
again then still resolves to the active record. Storing a new PENDING
record or deleting the key drops the retired token.

Not thread-safe on its own: ActivationRegistry serializes all access.
"""

from collections.abc import Iterator

from src.domain.ports import ActivationRecord, ActivationStatus


class InMemoryActivationRepository:
    """
    Implements ActivationRepository protocol via plain dicts.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self) -> None:
        self._records: dict[str, ActivationRecord] = {}
        self._keys_by_token: dict[str, str] = {}
        self._retired_tokens: dict[str, str] = {}

    def get(self, key: str) -> ActivationRecord | None:
        return self._records.get(key)

    def find_by_token(self, token: str) -> list[ActivationRecord]:
        key = self._keys_by_token.get(token)
        if key is None:
            return []
        return [self._records[key]]

    def put(self, key: str, record: ActivationRecord) -> None:
        retired = None
        if record.status is ActivationStatus.ACTIVE:
            previous = self._records.get(key)
            if previous is not None and previous.token:
                retired = previous.token
            else:
                retired = self._retired_tokens.get(key)

        self._unindex(key)
        self._records[key] = record
        if record.token:
            self._keys_by_token[record.token] = key
        if retired:
            self._keys_by_token[retired] = key
            self._retired_tokens[key] = retired

    def delete(self, key: str) -> None:
        self._unindex(key)
        self._records.pop(key, None)

    def items(self) -> Iterator[tuple[str, ActivationRecord]]:
        # Snapshot so callers may delete while iterating
        return iter(list(self._records.items()))

    def __len__(self) -> int:
        return len(self._records)

    def _unindex(self, key: str) -> None:
        previous = self._records.get(key)
        if previous is not None and previous.token:
            self._keys_by_token.pop(previous.token, None)
        retired = self._retired_tokens.pop(key, None)
        if retired:
            self._keys_by_token.pop(retired, None)
