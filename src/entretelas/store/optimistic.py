from __future__ import annotations

import itertools
from dataclasses import dataclass, replace
from typing import Any, Generic, Iterable, Mapping, Protocol, TypeVar


class HasId(Protocol):
    id: int


E = TypeVar("E", bound=HasId)


@dataclass(frozen=True)
class PendingChange(Generic[E]):
    token: int
    entry_id: int
    previous: E


class OptimisticCollection(Generic[E]):
    """A list of frozen records that can be patched ahead of the server.

    ``apply_optimistic`` patches one entry right away and returns a token;
    the caller then either ``commit``s the server's version of the entry or
    ``revert``s to what was there before. Tokens are single use.
    """

    def __init__(self, entries: Iterable[E] = ()):
        self._entries: list[E] = list(entries)
        self._pending: dict[int, PendingChange[E]] = {}
        self._tokens = itertools.count(1)

    @property
    def entries(self) -> tuple[E, ...]:
        return tuple(self._entries)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def replace_all(self, entries: Iterable[E]) -> None:
        self._entries = list(entries)
        self._pending.clear()

    def _index(self, entry_id: int) -> int:
        for i, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return i
        raise KeyError(entry_id)

    def add(self, entry: E) -> None:
        self._entries.insert(0, entry)

    def update(self, entry: E) -> None:
        self._entries[self._index(entry.id)] = entry

    def remove(self, entry_id: int) -> None:
        self._entries = [e for e in self._entries if e.id != entry_id]

    def apply_optimistic(self, entry_id: int, patch: Mapping[str, Any]) -> int:
        i = self._index(entry_id)
        previous = self._entries[i]
        self._entries[i] = replace(previous, **patch)
        token = next(self._tokens)
        self._pending[token] = PendingChange(token=token, entry_id=entry_id, previous=previous)
        return token

    def commit(self, token: int, server_entry: E) -> None:
        change = self._pending.pop(token)
        try:
            i = self._index(change.entry_id)
        except KeyError:
            # removed while the request was in flight
            return
        self._entries[i] = server_entry

    def revert(self, token: int) -> None:
        change = self._pending.pop(token)
        try:
            i = self._index(change.entry_id)
        except KeyError:
            return
        self._entries[i] = change.previous
