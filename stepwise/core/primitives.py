"""
Minimal containers used by the graph algorithms.

- Queue: FIFO for breadth-first search
- Stack: LIFO for depth-first search
- MinPriorityQueue: binary min-heap of (key, vertex) entries for
  Dijkstra and Prim. Entries are never updated in place; callers push a
  fresh entry when a key improves and discard stale ones when popped.
"""

from collections import deque
import heapq
from typing import Optional


class Queue:
    """FIFO queue of vertex ids."""

    def __init__(self):
        self._items: deque[int] = deque()

    def enqueue(self, item: int) -> None:
        self._items.append(item)

    def dequeue(self) -> int:
        if not self._items:
            raise IndexError("dequeue from an empty queue")
        return self._items.popleft()

    def front(self) -> Optional[int]:
        return self._items[0] if self._items else None

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)


class Stack:
    """LIFO stack of vertex ids."""

    def __init__(self):
        self._items: list[int] = []

    def push(self, item: int) -> None:
        self._items.append(item)

    def pop(self) -> int:
        if not self._items:
            raise IndexError("pop from an empty stack")
        return self._items.pop()

    def top(self) -> Optional[int]:
        return self._items[-1] if self._items else None

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)


class MinPriorityQueue:
    """
    Binary min-priority-queue keyed by an integer priority.

    Ties are broken by the smaller vertex id, which keeps algorithm output
    deterministic. With a capacity set, `push` refuses new entries once
    full and returns False.
    """

    def __init__(self, capacity: Optional[int] = None):
        self.capacity = capacity
        self._heap: list[tuple[int, int]] = []

    def push(self, vertex: int, key: int) -> bool:
        if self.capacity is not None and len(self._heap) >= self.capacity:
            return False
        heapq.heappush(self._heap, (key, vertex))
        return True

    def pop(self) -> tuple[int, int]:
        """Remove and return the (vertex, key) entry with the smallest key."""
        if not self._heap:
            raise IndexError("pop from an empty priority queue")
        key, vertex = heapq.heappop(self._heap)
        return vertex, key

    def peek(self) -> Optional[tuple[int, int]]:
        if not self._heap:
            return None
        key, vertex = self._heap[0]
        return vertex, key

    def is_empty(self) -> bool:
        return not self._heap

    def __len__(self) -> int:
        return len(self._heap)
