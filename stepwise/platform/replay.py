"""
Deterministic run IDs and in-memory step replay storage.

A run groups the step events of one scripted scenario (e.g. "insert
10, 20, 30 into an AVL tree") so a presentation layer can play them back
after the operations have completed.
"""

from __future__ import annotations

from collections import Counter
import hashlib
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from stepwise.platform.events import StepEvent, StepObserver, event_envelope


VOLATILE_KEYS = {
    "event_id",
    "timestamp",
    "created_at",
}


def deterministic_run_id(
    payload: Any,
    *,
    namespace: str = "stepwise.scenario.v1",
    prefix: str = "run",
    drop_keys: set[str] | None = None,
) -> str:
    """
    Generate a deterministic run id from a canonical payload hash.
    """
    normalized = _normalize_for_hash(payload, drop_keys=drop_keys or VOLATILE_KEYS)
    blob = json.dumps(normalized, sort_keys=True, separators=(",", ":"), ensure_ascii=True)
    digest = hashlib.sha256(f"{namespace}|{blob}".encode("utf-8")).hexdigest()[:16]
    return f"{prefix}_{digest}"


def _normalize_for_hash(value: Any, *, drop_keys: set[str]) -> Any:
    """Normalize nested values into stable, JSON-safe form."""
    if isinstance(value, dict):
        return {
            str(k): _normalize_for_hash(v, drop_keys=drop_keys)
            for k, v in sorted(value.items(), key=lambda item: str(item[0]))
            if str(k) not in drop_keys
        }

    if isinstance(value, (list, tuple)):
        return [_normalize_for_hash(item, drop_keys=drop_keys) for item in value]

    if isinstance(value, Enum):
        return value.value

    if hasattr(value, "model_dump"):
        return _normalize_for_hash(value.model_dump(mode="json"), drop_keys=drop_keys)

    return value


@dataclass
class ReplayRecord:
    """Stored step events for one scenario run."""

    run_id: str
    scenario: dict[str, Any]
    metadata: dict[str, Any] = field(default_factory=dict)
    status: str = "running"
    started_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    completed_at: str | None = None
    events: list[dict[str, Any]] = field(default_factory=list)
    result: dict[str, Any] | None = None
    next_sequence: int = 0
    """Sequence number for the next appended step; never reused after trimming."""

    def summary(self) -> dict[str, Any]:
        """Compact listing representation."""
        return {
            "run_id": self.run_id,
            "status": self.status,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "event_count": len(self.events),
            "event_kinds": dict(Counter(e.get("event_type", "unknown") for e in self.events)),
            "metadata": self.metadata,
        }

    def playback(self, source: str | None = None) -> list[dict[str, Any]]:
        """Events in recorded order, optionally only those from one engine."""
        if source is None:
            return list(self.events)
        return [e for e in self.events if e.get("source") == source]

    def to_dict(self) -> dict[str, Any]:
        """Full serialization."""
        return {
            "run_id": self.run_id,
            "status": self.status,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "scenario": self.scenario,
            "metadata": self.metadata,
            "events": self.events,
            "result": self.result,
        }


class ReplayStore:
    """
    Simple in-memory replay store keyed by run id.

    Not synchronized: like the engines, a store belongs to one caller.
    """

    def __init__(self, max_runs: int = 50, max_events_per_run: int = 5000):
        self.max_runs = max_runs
        self.max_events_per_run = max_events_per_run
        self._runs: dict[str, ReplayRecord] = {}
        self._order: list[str] = []

    def start_run(
        self,
        scenario: dict[str, Any],
        *,
        run_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """
        Create or reopen a run record and return its run id.

        Reopening an existing run discards its previous events.
        """
        resolved_run_id = run_id or deterministic_run_id(scenario)

        record = self._runs.get(resolved_run_id)
        if record is None:
            record = ReplayRecord(
                run_id=resolved_run_id,
                scenario=scenario,
                metadata=metadata or {},
            )
            self._runs[resolved_run_id] = record
            self._order.append(resolved_run_id)
            self._trim_runs()
        else:
            record.status = "running"
            record.completed_at = None
            record.events = []
            record.next_sequence = 0
            record.result = None
            if metadata:
                record.metadata.update(metadata)
            if scenario:
                record.scenario = scenario

        return resolved_run_id

    def append_event(self, run_id: str, event: StepEvent | dict[str, Any]) -> None:
        """Append a step event (or a ready-made envelope) to an existing run."""
        record = self._runs.get(run_id)
        if record is None:
            return

        if isinstance(event, StepEvent):
            event = event_envelope(
                event.model_copy(update={"sequence": record.next_sequence}),
                run_id=run_id,
            )

        record.next_sequence += 1
        record.events.append(event)
        if len(record.events) > self.max_events_per_run:
            record.events = record.events[-self.max_events_per_run:]

    def observer(self, run_id: str) -> StepObserver:
        """Return an observer that streams engine steps into the run."""

        def _observe(event: StepEvent) -> None:
            self.append_event(run_id, event)

        return _observe

    def complete_run(
        self,
        run_id: str,
        *,
        result: dict[str, Any] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> bool:
        """Mark a run completed and attach the final snapshot/result."""
        record = self._runs.get(run_id)
        if record is None:
            return False

        record.status = "completed"
        record.completed_at = datetime.now(timezone.utc).isoformat()
        if result is not None:
            record.result = result
        if metadata:
            record.metadata.update(metadata)
        return True

    def get_run(self, run_id: str) -> dict[str, Any] | None:
        """Get a replay record by run id."""
        record = self._runs.get(run_id)
        if record is None:
            return None
        return record.to_dict()

    def playback(self, run_id: str, source: str | None = None) -> list[dict[str, Any]]:
        """Recorded events of a run for step-by-step replay ([] if unknown)."""
        record = self._runs.get(run_id)
        if record is None:
            return []
        return record.playback(source)

    def list_runs(self, limit: int = 20) -> list[dict[str, Any]]:
        """List replay summaries, newest first."""
        selected = list(reversed(self._order))[: max(limit, 0)]
        return [self._runs[run_id].summary() for run_id in selected if run_id in self._runs]

    def latest_run_id(self) -> str | None:
        """Return the most recently started run id."""
        if not self._order:
            return None
        return self._order[-1]

    def _trim_runs(self) -> None:
        """Drop oldest runs when exceeding retention."""
        while len(self._order) > self.max_runs:
            oldest = self._order.pop(0)
            self._runs.pop(oldest, None)
