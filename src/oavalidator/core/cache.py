"""Append-only memo used by the property and class-graph resolvers."""

from __future__ import annotations

from typing import Generic, Hashable, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class AppendOnlyCache(Generic[K, V]):
    """
    Memo whose entries are written once and never replaced or evicted.

    Keys are built from immutable inputs only, so one instance can be shared
    by every validation in the process; tests build their own.
    """

    def __init__(self) -> None:
        self._entries: dict[K, V] = {}

    def get(self, key: K) -> Optional[V]:
        return self._entries.get(key)

    def add(self, key: K, value: V) -> V:
        """Store ``value`` unless ``key`` is already present; return the stored entry."""
        return self._entries.setdefault(key, value)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
