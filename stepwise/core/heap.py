"""
Binary Heap
===========

Array-backed min/max heap with switchable dominance.

The array is conceptually 1-indexed (children of i are 2i and 2i+1);
`snapshot()` exposes it 0-indexed with the root first.
"""

from typing import Optional

from stepwise.core.schema import DEFAULT_CONFIG, EngineConfig, HeapMode, OpResult, Status
from stepwise.platform.events import EventKind, StepObserver, emit


COMPONENT = "BinaryHeap"


class BinaryHeap:
    """
    Min- or max-heap of integers.

    Example
    -------
    >>> heap = BinaryHeap(HeapMode.MIN)
    >>> for v in (5, 3, 8, 1):
    ...     heap.insert(v)
    >>> heap.snapshot()
    [1, 3, 8, 5]
    >>> heap.extract_top().value
    1
    """

    def __init__(
        self,
        mode: HeapMode | str = HeapMode.MIN,
        capacity: Optional[int] = None,
        config: Optional[EngineConfig] = None,
    ):
        """
        Parameters
        ----------
        mode : HeapMode or str
            "min" or "max"
        capacity : int, optional
            Maximum number of elements. Overrides config.heap_capacity;
            None on both means the heap grows without bound.
        config : EngineConfig, optional
            Shared engine configuration.
        """
        self.config = config or DEFAULT_CONFIG
        self._mode = HeapMode(mode)
        self.capacity = capacity if capacity is not None else self.config.heap_capacity
        if self.capacity is not None and self.capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._data: list[int] = []

    @property
    def mode(self) -> HeapMode:
        return self._mode

    @property
    def is_min(self) -> bool:
        return self._mode == HeapMode.MIN

    def __len__(self) -> int:
        return len(self._data)

    def snapshot(self) -> list[int]:
        """Array order, index 0 is the root."""
        return list(self._data)

    def peek(self) -> OpResult:
        if not self._data:
            return OpResult(Status.EMPTY)
        return OpResult(Status.OK, value=self._data[0])

    def clear(self) -> None:
        self._data = []

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def insert(self, value: int, observer: Optional[StepObserver] = None) -> OpResult:
        """Append `value` and bubble it up toward the root."""
        if self.capacity is not None and len(self._data) >= self.capacity:
            emit(observer, COMPONENT, EventKind.REJECT,
                 f"Heap is full ({self.capacity}), {value} rejected", value=value)
            self._log(f"Capacity {self.capacity} reached, rejected {value}")
            return OpResult(Status.CAPACITY_EXCEEDED, detail=f"capacity {self.capacity}")

        self._data.append(value)
        index = len(self._data) - 1
        emit(observer, COMPONENT, EventKind.CREATE,
             f"Added {value} at index {index}", value=value, index=index)
        self._sift_up(index, observer)
        return OpResult(Status.OK, value=value)

    def extract_top(self, observer: Optional[StepObserver] = None) -> OpResult:
        """Remove and return the root, then restore heap order."""
        if not self._data:
            emit(observer, COMPONENT, EventKind.NOT_FOUND, "Heap is empty, nothing to extract")
            return OpResult(Status.EMPTY)

        top = self._data[0]
        last = self._data.pop()
        emit(observer, COMPONENT, EventKind.REMOVE, f"Extracting root {top}", value=top)
        if self._data:
            self._data[0] = last
            emit(observer, COMPONENT, EventKind.MOVE,
                 f"Moving last element {last} to root", value=last, index=0)
            self._sift_down(0, observer)
        return OpResult(Status.OK, value=top)

    def set_mode(self, mode: HeapMode | str, observer: Optional[StepObserver] = None) -> OpResult:
        """Switch dominance and rebuild the whole array bottom-up."""
        self._mode = HeapMode(mode)
        emit(observer, COMPONENT, EventKind.REBUILD,
             f"Rebuilding as {self._mode.value}-heap", mode=self._mode.value)
        for index in range(len(self._data) // 2 - 1, -1, -1):
            self._sift_down(index, observer)
        self._log(f"Rebuilt {len(self._data)} elements as {self._mode.value}-heap")
        return OpResult(Status.OK, value=self._mode.value)

    def convert_to_min(self, observer: Optional[StepObserver] = None) -> OpResult:
        return self.set_mode(HeapMode.MIN, observer)

    def convert_to_max(self, observer: Optional[StepObserver] = None) -> OpResult:
        return self.set_mode(HeapMode.MAX, observer)

    # ------------------------------------------------------------------
    # Repair
    # ------------------------------------------------------------------

    def _dominates(self, a: int, b: int) -> bool:
        """True when `a` must sit above `b`."""
        return a < b if self._mode == HeapMode.MIN else a > b

    def _sift_up(self, index: int, observer: Optional[StepObserver]) -> None:
        data = self._data
        while index > 0:
            parent = (index - 1) // 2
            emit(observer, COMPONENT, EventKind.COMPARE,
                 f"Comparing {data[index]} with parent {data[parent]}",
                 a=data[index], b=data[parent], index=index, parent=parent)
            if not self._dominates(data[index], data[parent]):
                break
            emit(observer, COMPONENT, EventKind.SWAP,
                 f"Swapping {data[index]} <-> {data[parent]}",
                 a=data[index], b=data[parent], i=index, j=parent)
            data[index], data[parent] = data[parent], data[index]
            index = parent

    def _sift_down(self, index: int, observer: Optional[StepObserver]) -> None:
        data = self._data
        size = len(data)
        while True:
            target = index
            left = 2 * index + 1
            right = left + 1
            for child in (left, right):
                if child < size:
                    emit(observer, COMPONENT, EventKind.COMPARE,
                         f"Comparing {data[child]} with {data[target]}",
                         a=data[child], b=data[target], index=child, parent=target)
                    if self._dominates(data[child], data[target]):
                        target = child
            if target == index:
                return
            emit(observer, COMPONENT, EventKind.SWAP,
                 f"Swapping {data[index]} <-> {data[target]}",
                 a=data[index], b=data[target], i=index, j=target)
            data[index], data[target] = data[target], data[index]
            index = target

    def _log(self, message: str) -> None:
        if self.config.verbose:
            print(f"[{COMPONENT}] {message}")

    def __repr__(self) -> str:
        return f"BinaryHeap(mode={self._mode.value}, size={len(self._data)})"
