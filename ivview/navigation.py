"""Cursor movement over the image list."""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .slotlist import LinkedSlotList, StableKey


class Transition(Enum):
    NEXT = "next"
    PREVIOUS = "previous"
    JUMP_TO_START = "jump-to-start"
    JUMP_TO_END = "jump-to-end"


@dataclass(frozen=True)
class Cursor:
    """Current entry and its 1-based position. Both None iff the list is empty."""
    key: Optional[StableKey] = None
    index: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return self.key is None


EMPTY = Cursor()


def next_cursor(images: LinkedSlotList, cursor: Cursor, transition: Transition) -> Optional[Cursor]:
    """Where ``transition`` would take ``cursor``, or None if it goes nowhere.

    There is no wraparound: NEXT at the tail and PREVIOUS at the head fail.
    """
    if transition is Transition.JUMP_TO_START:
        head = images.head()
        return None if head is None else Cursor(head, 1)
    if transition is Transition.JUMP_TO_END:
        tail = images.tail()
        return None if tail is None else Cursor(tail, len(images))

    if cursor.key is None or cursor.index is None:
        return None
    if transition is Transition.NEXT:
        key = images.next(cursor.key)
        return None if key is None else Cursor(key, cursor.index + 1)
    key = images.prev(cursor.key)
    return None if key is None else Cursor(key, max(1, cursor.index - 1))


def retry_direction(transition: Transition) -> Transition:
    """Direction to keep moving in after the target of ``transition`` failed."""
    if transition in (Transition.NEXT, Transition.JUMP_TO_START):
        return Transition.NEXT
    return Transition.PREVIOUS


def replacement_key(images: LinkedSlotList, key: StableKey,
                    direction: Transition) -> Optional[StableKey]:
    """Neighbour to land on once ``key`` is removed.

    Prefers ``direction``; at that end of the list it falls back to the
    other side. Must be called before ``key`` is removed.
    """
    if direction is Transition.NEXT:
        return images.next(key) or images.prev(key)
    return images.prev(key) or images.next(key)


def cursor_at(images: LinkedSlotList, key: Optional[StableKey]) -> Cursor:
    """Cursor for ``key`` with its index counted from the head."""
    if key is None:
        return EMPTY
    index = images.position(key)
    if index is None:
        return EMPTY
    return Cursor(key, index)
