"""
Step observer events.

Engines report each discrete state transition (compare, swap, rotate,
visit, ...) to an optional observer callable, in the order the algorithm
performs them. Observers receive plain values only and cannot reach back
into engine state.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


EVENT_SCHEMA_VERSION = "1.0"


class EventKind(str, Enum):
    """Kinds of state transitions an engine can report."""

    COMPARE = "compare"
    SWAP = "swap"
    MOVE = "move"
    CREATE = "create"
    DUPLICATE = "duplicate"
    ROTATE = "rotate"
    REBALANCE = "rebalance"
    REMOVE = "remove"
    NOT_FOUND = "not_found"
    VISIT = "visit"
    DISCOVER = "discover"
    ENQUEUE = "enqueue"
    DEQUEUE = "dequeue"
    PUSH = "push"
    POP = "pop"
    SKIP = "skip"
    RELAX = "relax"
    SELECT = "select"
    HASH = "hash"
    COLLISION = "collision"
    UPDATE = "update"
    REBUILD = "rebuild"
    REJECT = "reject"


class StepEvent(BaseModel):
    """One observable step of an engine operation."""

    component: str
    """Engine that produced the step (e.g. "AVLTree")."""

    kind: EventKind
    """What kind of transition happened."""

    message: str = ""
    """Human-readable description of the step."""

    payload: dict[str, Any] = Field(default_factory=dict)
    """Plain values describing the step (keys, indices, weights)."""

    sequence: int = 0
    """Position in the recorded stream (assigned by StepRecorder)."""


StepObserver = Callable[[StepEvent], None]


def emit(
    observer: Optional[StepObserver],
    component: str,
    kind: EventKind,
    message: str = "",
    **payload: Any,
) -> None:
    """
    Deliver a step event to the observer, if one is attached.

    Does nothing without an observer, so observation never changes the
    algorithm's behaviour.
    """
    if observer is None:
        return
    observer(StepEvent(component=component, kind=kind, message=message, payload=payload))


class StepRecorder:
    """Observer that keeps every event it receives, numbered in arrival order."""

    def __init__(self):
        self.events: list[StepEvent] = []

    def __call__(self, event: StepEvent) -> None:
        self.events.append(event.model_copy(update={"sequence": len(self.events)}))

    def __len__(self) -> int:
        return len(self.events)

    def kinds(self) -> list[EventKind]:
        """Event kinds in order, handy for assertions."""
        return [e.kind for e in self.events]

    def of_kind(self, kind: EventKind) -> list[StepEvent]:
        return [e for e in self.events if e.kind == kind]

    def clear(self) -> None:
        self.events = []


class ConsoleObserver:
    """Observer that prints each step as `[Component] message`."""

    def __init__(self, show_payload: bool = False):
        self.show_payload = show_payload

    def __call__(self, event: StepEvent) -> None:
        line = f"[{event.component}] {event.message or event.kind.value}"
        if self.show_payload and event.payload:
            line += f" {event.payload}"
        print(line)


def event_envelope(
    event: StepEvent,
    *,
    run_id: str | None = None,
) -> dict[str, Any]:
    """
    Wrap a step event in a normalized, JSON-safe envelope.
    """
    if not isinstance(event, StepEvent):
        raise TypeError("event must be a StepEvent")

    return {
        "schema_version": EVENT_SCHEMA_VERSION,
        "event_id": uuid4().hex,
        "run_id": run_id or "unbound",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "source": event.component,
        "event_type": event.kind.value,
        "sequence": event.sequence,
        "message": event.message,
        "payload": dict(event.payload),
    }
