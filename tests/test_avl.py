"""
Tests for the AVL Tree
======================

Rotation cases, deletion repair, tagged outcomes and randomized
invariant checks.
"""

import random

import pytest

from stepwise.core import AVLTree, Status, TreeNodeView
from stepwise.platform import EventKind, StepRecorder


# =============================================================================
# Helpers
# =============================================================================

def check_avl(view, low=None, high=None) -> int:
    """Assert BST order, stored heights and balance; return subtree height."""
    if view is None:
        return 0
    if low is not None:
        assert view.key > low
    if high is not None:
        assert view.key < high
    left = check_avl(view.left, low, view.key)
    right = check_avl(view.right, view.key, high)
    assert view.height == 1 + max(left, right)
    assert left - right in (-1, 0, 1)
    return view.height


def build(*keys) -> AVLTree:
    tree = AVLTree()
    for key in keys:
        tree.insert(key)
    return tree


@pytest.fixture
def recorder() -> StepRecorder:
    return StepRecorder()


# =============================================================================
# Insertion
# =============================================================================

class TestInsertRotations:
    """Each of the four rebalancing cases on insert."""

    def test_rr_case(self):
        tree = build(10, 20, 30)
        view = tree.snapshot()

        assert tree.last_rotation == "RR"
        assert view == TreeNodeView(
            key=20,
            height=2,
            left=TreeNodeView(key=10, height=1),
            right=TreeNodeView(key=30, height=1),
        )

    def test_ll_case(self):
        tree = build(30, 20, 10)
        assert tree.last_rotation == "LL"
        assert tree.snapshot().key == 20

    def test_lr_case(self):
        tree = build(30, 10, 20)
        assert tree.last_rotation == "LR"
        view = tree.snapshot()
        assert (view.key, view.left.key, view.right.key) == (20, 10, 30)

    def test_rl_case(self):
        tree = build(10, 30, 20)
        assert tree.last_rotation == "RL"
        view = tree.snapshot()
        assert (view.key, view.left.key, view.right.key) == (20, 10, 30)

    def test_no_rotation_resets_last_rotation(self):
        tree = build(10, 20, 30)
        tree.insert(5)
        assert tree.last_rotation is None

    def test_snapshot_dict_omits_absent_children(self):
        tree = build(10, 20)
        assert tree.snapshot().to_dict() == {
            "key": 10,
            "height": 2,
            "right": {"key": 20, "height": 1},
        }


class TestInsertOutcomes:
    """Tagged results for insert."""

    def test_insert_returns_ok(self):
        tree = AVLTree()
        result = tree.insert(7)
        assert result.ok
        assert len(tree) == 1

    def test_duplicate_is_ignored(self):
        tree = build(10, 20, 30)
        before = tree.snapshot()

        result = tree.insert(20)

        assert result.status == Status.DUPLICATE
        assert len(tree) == 3
        assert tree.snapshot() == before

    def test_empty_tree(self):
        tree = AVLTree()
        assert tree.snapshot() is None
        assert tree.height == 0
        assert tree.inorder() == []


# =============================================================================
# Removal
# =============================================================================

class TestRemove:
    """BST deletion followed by bottom-up repair."""

    def test_remove_leaf(self):
        tree = build(20, 10, 30)
        assert tree.remove(10).ok
        assert tree.inorder() == [20, 30]
        check_avl(tree.snapshot())

    def test_remove_node_with_two_children_uses_successor(self):
        tree = build(20, 10, 30)
        tree.remove(20)
        view = tree.snapshot()

        assert view.key == 30
        assert view.left.key == 10
        assert view.right is None
        assert view.height == 2

    def test_remove_triggers_rr(self):
        tree = build(20, 10, 30, 40)
        tree.remove(10)
        view = tree.snapshot()

        assert tree.last_rotation == "RR"
        assert (view.key, view.left.key, view.right.key) == (30, 20, 40)

    def test_remove_triggers_rl(self):
        tree = build(20, 10, 30, 25)
        tree.remove(10)
        view = tree.snapshot()

        assert tree.last_rotation == "RL"
        assert (view.key, view.left.key, view.right.key) == (25, 20, 30)

    def test_remove_triggers_ll(self):
        tree = build(20, 10, 30, 5)
        tree.remove(30)
        assert tree.last_rotation == "LL"
        assert tree.snapshot().key == 10

    def test_remove_absent_key(self):
        tree = build(1, 2, 3)
        before = tree.snapshot()

        result = tree.remove(99)

        assert result.status == Status.NOT_FOUND
        assert len(tree) == 3
        assert tree.snapshot() == before

    def test_remove_last_node(self):
        tree = build(4)
        tree.remove(4)
        assert tree.snapshot() is None
        assert len(tree) == 0


# =============================================================================
# Properties
# =============================================================================

class TestInvariants:
    """Randomized sequences keep the tree balanced and ordered."""

    @pytest.mark.parametrize("seed", [1, 7, 42])
    def test_random_operations(self, seed):
        rng = random.Random(seed)
        tree = AVLTree()
        model: set[int] = set()

        for _ in range(300):
            key = rng.randint(-50, 50)
            if rng.random() < 0.6:
                result = tree.insert(key)
                assert result.status == (Status.DUPLICATE if key in model else Status.OK)
                model.add(key)
            else:
                result = tree.remove(key)
                assert result.status == (Status.OK if key in model else Status.NOT_FOUND)
                model.discard(key)

            check_avl(tree.snapshot())
            assert tree.inorder() == sorted(model)
            assert len(tree) == len(model)

    def test_sorted_inserts_stay_logarithmic(self):
        tree = build(*range(1, 128))
        assert tree.height == 7


# =============================================================================
# Observer
# =============================================================================

class TestObserver:
    """Step events for AVL operations."""

    def test_rotation_events(self, recorder):
        tree = build(10, 20)
        tree.insert(30, observer=recorder)

        rebalance = recorder.of_kind(EventKind.REBALANCE)
        rotations = recorder.of_kind(EventKind.ROTATE)
        assert len(rebalance) == 1
        assert rebalance[0].payload["case"] == "RR"
        assert len(rotations) == 1
        assert rotations[0].payload["node"] == 10

    def test_double_rotation_emits_two_rotates(self, recorder):
        tree = build(30, 10)
        tree.insert(20, observer=recorder)
        assert len(recorder.of_kind(EventKind.ROTATE)) == 2

    def test_duplicate_event(self, recorder):
        tree = build(5)
        tree.insert(5, observer=recorder)
        assert recorder.kinds()[-1] == EventKind.DUPLICATE

    def test_observer_does_not_change_result(self, recorder):
        keys = [50, 20, 70, 10, 30, 25, 27, 80, 90]
        plain = build(*keys)
        observed = AVLTree()
        for key in keys:
            observed.insert(key, observer=recorder)

        assert observed.snapshot() == plain.snapshot()
        assert len(recorder) > 0
