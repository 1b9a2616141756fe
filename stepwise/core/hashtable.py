"""
Hash Table
==========

Fixed-bucket hash table with separate chaining.

index = |key| mod bucket_count. Each bucket is a singly-linked chain;
new keys are prepended, so chains read most-recent-first. Inserting an
existing key updates its value in place.
"""

from typing import Any, Optional

from stepwise.core.schema import DEFAULT_CONFIG, EngineConfig, OpResult, Status
from stepwise.platform.events import EventKind, StepObserver, emit


COMPONENT = "HashTable"


class _HashNode:
    """Chain entry owned by its predecessor (or the bucket head)."""

    __slots__ = ("key", "value", "next")

    def __init__(self, key: int, value: Any, next: Optional["_HashNode"] = None):
        self.key = key
        self.value = value
        self.next = next


class HashTable:
    """
    Integer-keyed map with a fixed number of chained buckets.

    Example
    -------
    >>> table = HashTable()
    >>> _ = table.insert(15, 15)
    >>> _ = table.insert(25, 25)
    >>> table.snapshot()[5]
    [(25, 25), (15, 15)]
    """

    def __init__(self, bucket_count: Optional[int] = None, config: Optional[EngineConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.bucket_count = bucket_count if bucket_count is not None else self.config.bucket_count
        if self.bucket_count < 1:
            raise ValueError("bucket_count must be at least 1")
        self._buckets: list[Optional[_HashNode]] = [None] * self.bucket_count
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: int) -> bool:
        return self._find(key) is not None

    def hash(self, key: int) -> int:
        return abs(key) % self.bucket_count

    def snapshot(self) -> list[list[tuple[int, Any]]]:
        """Per-bucket (key, value) lists in chain order."""
        buckets = []
        for head in self._buckets:
            chain = []
            walk = head
            while walk is not None:
                chain.append((walk.key, walk.value))
                walk = walk.next
            buckets.append(chain)
        return buckets

    def clear(self) -> None:
        self._buckets = [None] * self.bucket_count
        self._size = 0

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def insert(self, key: int, value: Any, observer: Optional[StepObserver] = None) -> OpResult:
        """Store `value` under `key`, updating in place when the key exists."""
        index = self._hash_step(key, observer)

        walk = self._buckets[index]
        position = 0
        while walk is not None:
            emit(observer, COMPONENT, EventKind.COMPARE,
                 f"Checking key {walk.key} at position {position}",
                 key=key, candidate=walk.key, index=index, position=position)
            if walk.key == key:
                walk.value = value
                emit(observer, COMPONENT, EventKind.UPDATE,
                     f"Key {key} exists, value updated", key=key, index=index)
                return OpResult(Status.OK, value=value, detail="updated")
            walk = walk.next
            position += 1

        if self._buckets[index] is not None:
            emit(observer, COMPONENT, EventKind.COLLISION,
                 f"Collision at index {index}, chaining", key=key, index=index)
        self._buckets[index] = _HashNode(key, value, self._buckets[index])
        self._size += 1
        emit(observer, COMPONENT, EventKind.CREATE,
             f"Key {key} inserted at index {index}", key=key, index=index)
        return OpResult(Status.OK, value=value, detail="inserted")

    def search(self, key: int, observer: Optional[StepObserver] = None) -> OpResult:
        """Return the stored value, or NOT_FOUND."""
        index = self._hash_step(key, observer)

        walk = self._buckets[index]
        position = 0
        while walk is not None:
            emit(observer, COMPONENT, EventKind.COMPARE,
                 f"Checking node at position {position} in chain",
                 key=key, candidate=walk.key, index=index, position=position)
            if walk.key == key:
                emit(observer, COMPONENT, EventKind.SELECT,
                     f"Key {key} found at index {index}", key=key, index=index)
                return OpResult(Status.OK, value=walk.value)
            walk = walk.next
            position += 1

        emit(observer, COMPONENT, EventKind.NOT_FOUND, f"Key {key} not found", key=key)
        return OpResult(Status.NOT_FOUND)

    def get(self, key: int, default: Any = None) -> Any:
        node = self._find(key)
        return node.value if node is not None else default

    def remove(self, key: int, observer: Optional[StepObserver] = None) -> OpResult:
        """Unlink `key` from its chain and return its value, or NOT_FOUND."""
        index = self._hash_step(key, observer)

        prev: Optional[_HashNode] = None
        walk = self._buckets[index]
        while walk is not None:
            if walk.key == key:
                if prev is None:
                    self._buckets[index] = walk.next
                else:
                    prev.next = walk.next
                self._size -= 1
                emit(observer, COMPONENT, EventKind.REMOVE,
                     f"Key {key} removed from index {index}", key=key, index=index)
                return OpResult(Status.OK, value=walk.value)
            prev, walk = walk, walk.next

        emit(observer, COMPONENT, EventKind.NOT_FOUND, f"Key {key} not found", key=key)
        return OpResult(Status.NOT_FOUND)

    def _find(self, key: int) -> Optional[_HashNode]:
        walk = self._buckets[self.hash(key)]
        while walk is not None:
            if walk.key == key:
                return walk
            walk = walk.next
        return None

    def _hash_step(self, key: int, observer: Optional[StepObserver]) -> int:
        index = self.hash(key)
        emit(observer, COMPONENT, EventKind.HASH,
             f"Hash function: |{key}| % {self.bucket_count} = {index}", key=key, index=index)
        return index

    def __repr__(self) -> str:
        return f"HashTable(buckets={self.bucket_count}, size={self._size})"
