"""
Platform module tests: step events, replay store, serialization and
configuration loading.
"""

import json

import pytest
from pydantic import ValidationError

from stepwise.core import AVLTree, BinaryHeap, EngineConfig, Graph, HashTable
from stepwise.platform import (
    EVENT_SCHEMA_VERSION,
    ConsoleObserver,
    EventKind,
    ReplayStore,
    StepEvent,
    StepRecorder,
    deterministic_run_id,
    emit,
    event_envelope,
    format_buckets,
    format_matrix,
    format_mst,
    format_sequence,
    format_tree,
    parse_buckets,
    parse_matrix,
    parse_sequence,
)


# =============================================================================
# Events
# =============================================================================

class TestEvents:
    """Observer plumbing."""

    def test_emit_without_observer_is_noop(self):
        emit(None, "Graph", EventKind.VISIT, "Visit 0", vertex=0)

    def test_recorder_numbers_events(self):
        recorder = StepRecorder()
        emit(recorder, "Graph", EventKind.VISIT, "Visit 0", vertex=0)
        emit(recorder, "Graph", EventKind.VISIT, "Visit 1", vertex=1)

        assert [e.sequence for e in recorder.events] == [0, 1]
        assert recorder.events[1].payload == {"vertex": 1}

    def test_console_observer(self, capsys):
        tree = AVLTree()
        tree.insert(1, observer=ConsoleObserver())
        assert "[AVLTree] Creating node 1" in capsys.readouterr().out

    def test_verbose_config_prints_rejections(self, capsys):
        heap = BinaryHeap(capacity=1, config=EngineConfig(verbose=True))
        heap.insert(1)
        heap.insert(2)
        assert "[BinaryHeap] Capacity 1 reached, rejected 2" in capsys.readouterr().out

    def test_quiet_by_default(self, capsys):
        Graph(2, directed=True).prim_mst()
        assert capsys.readouterr().out == ""

    def test_envelope(self):
        event = StepEvent(component="HashTable", kind=EventKind.HASH, message="h", payload={"key": 3})
        envelope = event_envelope(event, run_id="run_test")

        assert envelope["schema_version"] == EVENT_SCHEMA_VERSION
        assert envelope["run_id"] == "run_test"
        assert envelope["source"] == "HashTable"
        assert envelope["event_type"] == "hash"
        assert envelope["payload"] == {"key": 3}

    def test_envelope_rejects_plain_dict(self):
        with pytest.raises(TypeError):
            event_envelope({"kind": "hash"})


# =============================================================================
# Replay
# =============================================================================

class TestDeterministicRunId:
    """Tests for deterministic run-id generation."""

    def test_payload_order_and_volatile_fields_do_not_change_id(self):
        payload_a = {"engine": "avl", "inserts": [1, 2, 3], "created_at": "2026-01-01"}
        payload_b = {"inserts": [1, 2, 3], "created_at": "2026-02-02", "engine": "avl"}
        assert deterministic_run_id(payload_a) == deterministic_run_id(payload_b)

    def test_namespace_changes_run_id(self):
        payload = {"engine": "heap", "inserts": [5, 3]}
        assert deterministic_run_id(payload, namespace="v1") != deterministic_run_id(
            payload, namespace="v2"
        )


class TestReplayStore:
    """Tests for in-memory replay storage."""

    def test_run_lifecycle(self):
        store = ReplayStore(max_runs=3, max_events_per_run=2)
        run_id = store.start_run({"scenario": "alpha"}, run_id="run_alpha")

        store.append_event(run_id, {"event_type": "a"})
        store.append_event(run_id, {"event_type": "b"})
        store.append_event(run_id, {"event_type": "c"})
        store.complete_run(run_id, result={"ok": True})

        record = store.get_run(run_id)
        assert record is not None
        assert record["status"] == "completed"
        assert [e["event_type"] for e in record["events"]] == ["b", "c"]
        assert record["result"]["ok"] is True

    def test_observer_streams_engine_steps(self):
        store = ReplayStore()
        run_id = store.start_run({"engine": "avl", "inserts": [10, 20, 30]})
        tree = AVLTree()
        for key in (10, 20, 30):
            tree.insert(key, observer=store.observer(run_id))

        events = store.get_run(run_id)["events"]

        assert [e["sequence"] for e in events] == list(range(len(events)))
        assert "rotate" in [e["event_type"] for e in events]
        assert all(e["run_id"] == run_id for e in events)

    def test_sequence_keeps_increasing_after_trim(self):
        store = ReplayStore(max_events_per_run=3)
        run_id = store.start_run({"engine": "heap"}, run_id="run_trim")
        heap = BinaryHeap()
        for value in (10, 20, 30, 40, 50):
            heap.insert(value, observer=store.observer(run_id))

        events = store.get_run(run_id)["events"]

        # one CREATE for the root, then CREATE + COMPARE per later insert
        assert [e["sequence"] for e in events] == [6, 7, 8]

    def test_restart_resets_sequence(self):
        store = ReplayStore()
        run_id = store.start_run({"engine": "heap"}, run_id="run_again")
        BinaryHeap().insert(1, observer=store.observer(run_id))
        store.start_run({"engine": "heap"}, run_id="run_again")
        BinaryHeap().insert(1, observer=store.observer(run_id))

        assert [e["sequence"] for e in store.playback(run_id)] == [0]

    def test_restarting_same_run_resets_events(self):
        store = ReplayStore()
        run_id = store.start_run({"scenario": "alpha"}, run_id="run_alpha")
        store.append_event(run_id, {"event_type": "initial"})

        store.start_run({"scenario": "alpha"}, run_id="run_alpha")
        record = store.get_run(run_id)

        assert record["status"] == "running"
        assert record["events"] == []

    def test_oldest_runs_are_trimmed(self):
        store = ReplayStore(max_runs=2)
        for name in ("a", "b", "c"):
            store.start_run({"scenario": name}, run_id=f"run_{name}")

        assert store.get_run("run_a") is None
        assert [r["run_id"] for r in store.list_runs()] == ["run_c", "run_b"]
        assert store.latest_run_id() == "run_c"

    def test_playback_filters_by_engine(self):
        store = ReplayStore()
        run_id = store.start_run({"engines": ["heap", "hash"]})
        BinaryHeap().insert(1, observer=store.observer(run_id))
        HashTable().insert(3, 3, observer=store.observer(run_id))

        hash_steps = store.playback(run_id, source="HashTable")

        assert hash_steps
        assert all(e["source"] == "HashTable" for e in hash_steps)
        assert len(store.playback(run_id)) > len(hash_steps)

        summary = store.list_runs()[0]
        assert summary["event_count"] == len(store.playback(run_id))
        assert summary["event_kinds"]["hash"] == 1

    def test_unknown_run(self):
        store = ReplayStore()
        store.append_event("missing", {"event_type": "a"})
        assert store.complete_run("missing") is False
        assert store.get_run("missing") is None
        assert store.playback("missing") == []


# =============================================================================
# Serialization
# =============================================================================

class TestSerialize:
    """Compact snapshot strings."""

    def test_heap_sequence(self):
        heap = BinaryHeap()
        for value in (5, 3, 8, 1):
            heap.insert(value)
        assert format_sequence(heap.snapshot()) == "[1,3,8,5]"

    def test_matrix(self):
        g = Graph(3)
        g.add_edge(0, 1)
        g.add_edge(1, 2, 2)
        text = format_matrix(g.snapshot())
        assert text == "[[0,1,0],[1,0,2],[0,2,0]]"
        assert parse_matrix(text) == g.snapshot()

    def test_buckets(self):
        table = HashTable()
        table.insert(15, 15)
        table.insert(25, 25)
        text = format_buckets(table.snapshot())
        assert text == "[[],[],[],[],[],[25:25,15:15],[],[],[],[]]"
        assert parse_buckets(text) == table.snapshot()

    def test_negative_bucket_entries(self):
        assert parse_buckets("[[-3:-1],[]]") == [[(-3, -1)], []]

    def test_mst(self):
        assert format_mst([(0, 4, 2), (0, 1, 4)]) == "[0-4:2,0-1:4]"

    def test_tree(self):
        tree = AVLTree()
        for key in (10, 20, 30):
            tree.insert(key)
        assert format_tree(tree.snapshot()) == (
            '{"key":20,"height":2,"left":{"key":10,"height":1},"right":{"key":30,"height":1}}'
        )
        assert format_tree(AVLTree().snapshot()) == "null"

    def test_parse_rejects_non_integers(self):
        with pytest.raises(ValueError):
            parse_sequence("[1,2.5]")
        with pytest.raises(ValueError):
            parse_buckets("[[1]]")

    def test_empty_sequence(self):
        assert parse_sequence("[]") == []
        assert format_sequence([]) == "[]"


# =============================================================================
# Configuration
# =============================================================================

class TestEngineConfig:
    """Defaults and JSON loading."""

    def test_defaults(self):
        config = EngineConfig()
        assert config.bucket_count == 10
        assert config.heap_capacity is None
        assert config.unreachable_distance == 999999
        assert config.verbose is False

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "engine.json"
        path.write_text(json.dumps({"bucket_count": 4, "heap_capacity": 8}))

        config = EngineConfig.from_json_file(path)

        assert config.bucket_count == 4
        assert HashTable(config=config).bucket_count == 4
        assert BinaryHeap(config=config).capacity == 8

    def test_rejects_bad_capacity(self):
        with pytest.raises(ValidationError):
            EngineConfig(heap_capacity=0)
