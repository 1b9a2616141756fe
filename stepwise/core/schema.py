"""
Engine Schema
=============

Shared result types, snapshot views and configuration for the engines.

Outcomes are reported through tagged results rather than sentinel values:
- Status: what happened (OK, DUPLICATE, NOT_FOUND, ...)
- OpResult: status plus an optional value
- MSTResult: Prim's output with its own status flag
- TreeNodeView: recursive structural view of an AVL tree
- EngineConfig: per-instance defaults shared by all engines
"""

from dataclasses import dataclass, field
from enum import Enum
import json
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Status(str, Enum):
    """Outcome of an engine operation."""

    OK = "ok"
    """The operation completed and changed or read state as requested."""

    INVALID_INDEX = "invalid_index"
    """A vertex or bucket index was out of range; nothing changed."""

    DUPLICATE = "duplicate"
    """The key already exists; the insert was ignored."""

    CAPACITY_EXCEEDED = "capacity_exceeded"
    """The bounded container is full; the insert was rejected."""

    NOT_FOUND = "not_found"
    """The key is absent."""

    UNSUPPORTED = "unsupported"
    """The operation does not apply to this configuration."""

    EMPTY = "empty"
    """There was nothing to extract."""


class HeapMode(str, Enum):
    """Dominance relation of a binary heap."""

    MIN = "min"
    MAX = "max"


class QueueCapacityError(RuntimeError):
    """
    Raised when a graph algorithm's bounded priority queue overflows.

    Only possible when `EngineConfig.queue_capacity` is set. The
    algorithm stops instead of returning distances computed from a
    queue that silently lost entries.
    """

    def __init__(self, capacity: int, vertex: int):
        super().__init__(f"priority queue capacity {capacity} exceeded at vertex {vertex}")
        self.capacity = capacity
        self.vertex = vertex


@dataclass
class OpResult:
    """
    Tagged result of a single operation.

    Attributes
    ----------
    status : Status
        Outcome of the operation
    value : Any
        Payload for successful lookups/extractions (None otherwise)
    detail : str
        Short human-readable note (e.g. "inserted" vs "updated")
    """

    status: Status
    value: Any = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status == Status.OK

    def to_dict(self) -> dict[str, Any]:
        """Convert the result to a JSON-serializable dictionary."""
        return {
            "status": self.status.value,
            "value": self.value,
            "detail": self.detail,
        }


@dataclass
class MSTResult:
    """
    Minimum spanning tree produced by Prim's algorithm.

    `spanning` is False when the graph is disconnected and only the
    component containing vertex 0 was covered.
    """

    status: Status = Status.OK
    edges: list[tuple[int, int, int]] = field(default_factory=list)
    spanning: bool = True

    @property
    def total_weight(self) -> int:
        return sum(w for _, _, w in self.edges)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "edges": [list(e) for e in self.edges],
            "total_weight": self.total_weight,
            "spanning": self.spanning,
        }


class TreeNodeView(BaseModel):
    """Immutable structural view of one AVL node and its subtrees."""

    key: int
    height: int = Field(ge=1)
    left: Optional["TreeNodeView"] = None
    right: Optional["TreeNodeView"] = None

    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> dict[str, Any]:
        """Nested dict with absent children omitted."""
        return self.model_dump(exclude_none=True)

    def inorder(self) -> list[int]:
        keys: list[int] = []
        if self.left is not None:
            keys.extend(self.left.inorder())
        keys.append(self.key)
        if self.right is not None:
            keys.extend(self.right.inorder())
        return keys


TreeNodeView.model_rebuild()


class EngineConfig(BaseModel):
    """
    Per-instance configuration shared by the engines.

    Defaults reproduce the classic fixed settings (10 hash buckets,
    999999 as the unreachable distance) while leaving containers
    growable unless a capacity is set explicitly.
    """

    bucket_count: int = 10
    """Number of hash table buckets."""

    heap_capacity: Optional[int] = None
    """Opt-in bound on heap size. None means growable."""

    queue_capacity: Optional[int] = None
    """Opt-in bound on the priority queue used by graph algorithms."""

    unreachable_distance: int = 999999
    """Distance reported by Dijkstra for vertices that cannot be reached."""

    verbose: bool = False
    """Print caller-relevant outcomes with a component prefix."""

    @model_validator(mode="after")
    def _validate_bounds(self) -> "EngineConfig":
        """Ensure counts and capacities are positive."""
        if self.bucket_count < 1:
            raise ValueError("bucket_count must be at least 1")
        if self.heap_capacity is not None and self.heap_capacity < 1:
            raise ValueError("heap_capacity must be at least 1 when set")
        if self.queue_capacity is not None and self.queue_capacity < 1:
            raise ValueError("queue_capacity must be at least 1 when set")
        return self

    @classmethod
    def from_json_file(cls, path: Path | str) -> "EngineConfig":
        """Load configuration from a JSON file."""
        with open(path) as f:
            config = json.load(f)
        return cls(**config)


DEFAULT_CONFIG = EngineConfig()
