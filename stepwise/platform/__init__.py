"""
Platform helpers around the engines: step events, replay, serialization.
"""

from stepwise.platform.events import (
    EVENT_SCHEMA_VERSION,
    ConsoleObserver,
    EventKind,
    StepEvent,
    StepRecorder,
    emit,
    event_envelope,
)
from stepwise.platform.replay import ReplayStore, deterministic_run_id
from stepwise.platform.serialize import (
    format_buckets,
    format_matrix,
    format_mst,
    format_sequence,
    format_tree,
    parse_buckets,
    parse_matrix,
    parse_sequence,
)

__all__ = [
    "EVENT_SCHEMA_VERSION",
    "ConsoleObserver",
    "EventKind",
    "StepEvent",
    "StepRecorder",
    "emit",
    "event_envelope",
    "ReplayStore",
    "deterministic_run_id",
    "format_buckets",
    "format_matrix",
    "format_mst",
    "format_sequence",
    "format_tree",
    "parse_buckets",
    "parse_matrix",
    "parse_sequence",
]
