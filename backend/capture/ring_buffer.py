"""
Fixed-capacity event storage.

Slots are allocated once at construction. Once full, each push overwrites
the oldest entry, so reads are always oldest-first in insertion order.
"""

from typing import Generic, Optional, TypeVar

from capture.clock import now_ms

T = TypeVar("T")


class BoundedEventLog(Generic[T]):
    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._slots: list[Optional[T]] = [None] * capacity
        self._head = 0      # next slot to write
        self._count = 0

    @property
    def size(self) -> int:
        return self._count

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return self._count

    def push(self, item: T) -> None:
        self._slots[self._head] = item
        self._head = (self._head + 1) % self._capacity
        if self._count < self._capacity:
            self._count += 1

    def to_list(self) -> list[T]:
        """All items, oldest first."""
        start = 0 if self._count < self._capacity else self._head
        return [self._slots[(start + i) % self._capacity] for i in range(self._count)]

    def since(self, window_ms: int, now: Optional[int] = None) -> list[T]:
        """Items whose ``timestamp`` falls within the last ``window_ms`` milliseconds."""
        if now is None:
            now = now_ms()
        cutoff = now - window_ms
        return [item for item in self.to_list() if item.timestamp >= cutoff]

    def clear(self) -> None:
        for i in range(self._capacity):
            self._slots[i] = None
        self._head = 0
        self._count = 0
