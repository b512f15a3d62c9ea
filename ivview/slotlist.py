"""Doubly linked list stored in a generational slot arena.

Entries are addressed by a :class:`StableKey` that stays valid while other
entries come and go. A removed entry's slot may be recycled, but with a new
generation, so an old key reports "not found" instead of pointing at a
different image.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, Iterable, Iterator, List, Optional, Tuple, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class StableKey:
    """Opaque handle of a list entry."""
    slot: int
    generation: int

    def __repr__(self) -> str:
        return f"StableKey({self.slot}v{self.generation})"


class _Slot(Generic[T]):
    __slots__ = ("value", "prev", "next", "generation", "occupied")

    def __init__(self) -> None:
        self.value: Optional[T] = None
        self.prev: Optional[int] = None
        self.next: Optional[int] = None
        self.generation: int = 0
        self.occupied: bool = False


class LinkedSlotList(Generic[T]):
    """Ordered collection with O(1) neighbour lookup and removal."""

    def __init__(self, values: Iterable[T] = ()):
        self._slots: List[_Slot[T]] = []
        self._free: List[int] = []
        self._head: Optional[int] = None
        self._tail: Optional[int] = None
        self._len: int = 0
        self.extend(values)

    def _key(self, slot: int) -> StableKey:
        return StableKey(slot, self._slots[slot].generation)

    def _resolve(self, key: Optional[StableKey]) -> Optional[_Slot[T]]:
        if key is None or not 0 <= key.slot < len(self._slots):
            return None
        s = self._slots[key.slot]
        if not s.occupied or s.generation != key.generation:
            return None
        return s

    def push_back(self, value: T) -> StableKey:
        """Append a value and return its new key."""
        if self._free:
            idx = self._free.pop()
        else:
            idx = len(self._slots)
            self._slots.append(_Slot())
        s = self._slots[idx]
        s.value = value
        s.occupied = True
        s.prev = self._tail
        s.next = None
        if self._tail is not None:
            self._slots[self._tail].next = idx
        else:
            self._head = idx
        self._tail = idx
        self._len += 1
        return self._key(idx)

    def extend(self, values: Iterable[T]) -> List[StableKey]:
        return [self.push_back(v) for v in values]

    def head(self) -> Optional[StableKey]:
        return None if self._head is None else self._key(self._head)

    def tail(self) -> Optional[StableKey]:
        return None if self._tail is None else self._key(self._tail)

    def next(self, key: StableKey) -> Optional[StableKey]:
        """Key after ``key``, or None at the tail or for a stale key."""
        s = self._resolve(key)
        if s is None or s.next is None:
            return None
        return self._key(s.next)

    def prev(self, key: StableKey) -> Optional[StableKey]:
        """Key before ``key``, or None at the head or for a stale key."""
        s = self._resolve(key)
        if s is None or s.prev is None:
            return None
        return self._key(s.prev)

    def get(self, key: Optional[StableKey]) -> Optional[T]:
        s = self._resolve(key)
        return None if s is None else s.value

    def remove(self, key: StableKey) -> Optional[T]:
        """Unlink ``key`` and return its value.

        Neighbour queries for ``key`` stop working afterwards, so callers
        that need a replacement must ask ``next``/``prev`` first.
        """
        s = self._resolve(key)
        if s is None:
            return None
        if s.prev is not None:
            self._slots[s.prev].next = s.next
        else:
            self._head = s.next
        if s.next is not None:
            self._slots[s.next].prev = s.prev
        else:
            self._tail = s.prev

        value = s.value
        s.value = None
        s.prev = s.next = None
        s.occupied = False
        s.generation += 1
        self._free.append(key.slot)
        self._len -= 1
        return value

    def position(self, key: StableKey) -> Optional[int]:
        """1-based position of ``key``, counted by walking from the head."""
        if self._resolve(key) is None:
            return None
        for i, k in enumerate(self, start=1):
            if k == key:
                return i
        return None

    def keys(self) -> Iterator[StableKey]:
        idx = self._head
        while idx is not None:
            yield self._key(idx)
            idx = self._slots[idx].next

    def items(self) -> Iterator[Tuple[StableKey, T]]:
        for key in self.keys():
            yield key, self._slots[key.slot].value

    def values(self) -> Iterator[T]:
        for _, value in self.items():
            yield value

    def __iter__(self) -> Iterator[StableKey]:
        return self.keys()

    def __len__(self) -> int:
        return self._len

    def __bool__(self) -> bool:
        return self._len > 0

    def __contains__(self, key: object) -> bool:
        return isinstance(key, StableKey) and self._resolve(key) is not None

    def __repr__(self) -> str:
        return f"LinkedSlotList({list(self.values())!r})"
