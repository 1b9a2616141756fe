"""
AVL Tree
========

Self-balancing binary search tree of unique integer keys.

After every completed insert or remove, each node satisfies
    height = 1 + max(height(left), height(right))   (absent subtree = 0)
    balance = height(left) - height(right) in {-1, 0, 1}
Repairs happen on the way back up the recursion, one rotation case per
ancestor:
- LL: single right rotation
- RR: single left rotation
- LR: left rotation on the left child, then right rotation
- RL: right rotation on the right child, then left rotation
"""

from typing import Iterator, Optional

from stepwise.core.schema import OpResult, Status, TreeNodeView, DEFAULT_CONFIG, EngineConfig
from stepwise.platform.events import EventKind, StepObserver, emit


COMPONENT = "AVLTree"


class _Node:
    __slots__ = ("key", "height", "left", "right")

    def __init__(self, key: int):
        self.key = key
        self.height = 1
        self.left: Optional["_Node"] = None
        self.right: Optional["_Node"] = None


def _height(node: Optional[_Node]) -> int:
    return node.height if node is not None else 0


def _balance(node: Optional[_Node]) -> int:
    if node is None:
        return 0
    return _height(node.left) - _height(node.right)


def _update_height(node: _Node) -> None:
    node.height = 1 + max(_height(node.left), _height(node.right))


class AVLTree:
    """
    Ordered set of integers kept height-balanced.

    Example
    -------
    >>> tree = AVLTree()
    >>> for k in (10, 20, 30):
    ...     _ = tree.insert(k)
    >>> tree.last_rotation
    'RR'
    >>> tree.snapshot().key
    20
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self._root: Optional[_Node] = None
        self._size = 0
        self.last_rotation: Optional[str] = None
        """Case name (LL/RR/LR/RL) of the last rotation in the latest mutation."""

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: int) -> bool:
        return self.contains(key)

    def __iter__(self) -> Iterator[int]:
        return iter(self.inorder())

    @property
    def height(self) -> int:
        return _height(self._root)

    def contains(self, key: int) -> bool:
        walk = self._root
        while walk is not None:
            if key == walk.key:
                return True
            walk = walk.left if key < walk.key else walk.right
        return False

    def inorder(self) -> list[int]:
        """Keys in ascending order."""
        keys: list[int] = []
        stack: list[_Node] = []
        walk = self._root
        while stack or walk is not None:
            while walk is not None:
                stack.append(walk)
                walk = walk.left
            walk = stack.pop()
            keys.append(walk.key)
            walk = walk.right
        return keys

    def snapshot(self) -> Optional[TreeNodeView]:
        """Recursive structural view, or None for an empty tree."""
        return self._view(self._root)

    def clear(self) -> None:
        self._root = None
        self._size = 0
        self.last_rotation = None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def insert(self, key: int, observer: Optional[StepObserver] = None) -> OpResult:
        """Insert `key`; an existing key is ignored and reported as DUPLICATE."""
        self.last_rotation = None
        self._root, created = self._insert(self._root, key, observer)
        if not created:
            self._log(f"Key {key} already exists, ignored")
            return OpResult(Status.DUPLICATE, value=key, detail="duplicate, ignored")
        self._size += 1
        return OpResult(Status.OK, value=key)

    def remove(self, key: int, observer: Optional[StepObserver] = None) -> OpResult:
        """Delete `key`; an absent key is reported as NOT_FOUND."""
        self.last_rotation = None
        self._root, removed = self._remove(self._root, key, observer)
        if not removed:
            emit(observer, COMPONENT, EventKind.NOT_FOUND, f"Key {key} not found", key=key)
            return OpResult(Status.NOT_FOUND, value=key)
        self._size -= 1
        return OpResult(Status.OK, value=key)

    def _insert(
        self, node: Optional[_Node], key: int, observer: Optional[StepObserver]
    ) -> tuple[_Node, bool]:
        if node is None:
            emit(observer, COMPONENT, EventKind.CREATE, f"Creating node {key}", key=key)
            return _Node(key), True

        if key < node.key:
            emit(observer, COMPONENT, EventKind.COMPARE,
                 f"{key} < {node.key}, going left", key=key, node=node.key, direction="left")
            node.left, created = self._insert(node.left, key, observer)
        elif key > node.key:
            emit(observer, COMPONENT, EventKind.COMPARE,
                 f"{key} > {node.key}, going right", key=key, node=node.key, direction="right")
            node.right, created = self._insert(node.right, key, observer)
        else:
            emit(observer, COMPONENT, EventKind.DUPLICATE,
                 f"Key {key} already exists, skipping", key=key)
            return node, False

        if not created:
            return node, False

        _update_height(node)
        balance = _balance(node)

        if balance > 1 and key < node.left.key:
            return self._repair(node, "LL", observer), True
        if balance < -1 and key > node.right.key:
            return self._repair(node, "RR", observer), True
        if balance > 1 and key > node.left.key:
            return self._repair(node, "LR", observer), True
        if balance < -1 and key < node.right.key:
            return self._repair(node, "RL", observer), True
        return node, True

    def _remove(
        self, node: Optional[_Node], key: int, observer: Optional[StepObserver]
    ) -> tuple[Optional[_Node], bool]:
        if node is None:
            return None, False

        if key < node.key:
            emit(observer, COMPONENT, EventKind.COMPARE,
                 f"{key} < {node.key}, going left", key=key, node=node.key, direction="left")
            node.left, removed = self._remove(node.left, key, observer)
        elif key > node.key:
            emit(observer, COMPONENT, EventKind.COMPARE,
                 f"{key} > {node.key}, going right", key=key, node=node.key, direction="right")
            node.right, removed = self._remove(node.right, key, observer)
        else:
            removed = True
            if node.left is None or node.right is None:
                emit(observer, COMPONENT, EventKind.REMOVE, f"Removing node {key}", key=key)
                return (node.left if node.left is not None else node.right), True

            successor = node.right
            while successor.left is not None:
                successor = successor.left
            emit(observer, COMPONENT, EventKind.MOVE,
                 f"Replacing {node.key} with in-order successor {successor.key}",
                 key=node.key, successor=successor.key)
            node.key = successor.key
            node.right, _ = self._remove(node.right, successor.key, observer)

        if not removed:
            return node, False

        _update_height(node)
        balance = _balance(node)

        # No inserted key to compare against: the child's own balance picks the case.
        if balance > 1:
            case = "LL" if _balance(node.left) >= 0 else "LR"
            return self._repair(node, case, observer), True
        if balance < -1:
            case = "RR" if _balance(node.right) <= 0 else "RL"
            return self._repair(node, case, observer), True
        return node, True

    # ------------------------------------------------------------------
    # Rotations
    # ------------------------------------------------------------------

    def _repair(self, node: _Node, case: str, observer: Optional[StepObserver]) -> _Node:
        emit(observer, COMPONENT, EventKind.REBALANCE,
             f"{case} case detected at node {node.key}",
             case=case, node=node.key, balance=_balance(node))
        self.last_rotation = case
        self._log(f"{case} rotation at node {node.key}")

        if case == "LL":
            return self._rotate_right(node, observer)
        if case == "RR":
            return self._rotate_left(node, observer)
        if case == "LR":
            node.left = self._rotate_left(node.left, observer)
            return self._rotate_right(node, observer)
        node.right = self._rotate_right(node.right, observer)
        return self._rotate_left(node, observer)

    def _rotate_right(self, y: _Node, observer: Optional[StepObserver]) -> _Node:
        x = y.left
        emit(observer, COMPONENT, EventKind.ROTATE,
             f"Right rotation on node {y.key}", node=y.key, pivot=x.key, direction="right")
        y.left = x.right
        x.right = y
        _update_height(y)
        _update_height(x)
        return x

    def _rotate_left(self, x: _Node, observer: Optional[StepObserver]) -> _Node:
        y = x.right
        emit(observer, COMPONENT, EventKind.ROTATE,
             f"Left rotation on node {x.key}", node=x.key, pivot=y.key, direction="left")
        x.right = y.left
        y.left = x
        _update_height(x)
        _update_height(y)
        return y

    def _view(self, node: Optional[_Node]) -> Optional[TreeNodeView]:
        if node is None:
            return None
        return TreeNodeView(
            key=node.key,
            height=node.height,
            left=self._view(node.left),
            right=self._view(node.right),
        )

    def _log(self, message: str) -> None:
        if self.config.verbose:
            print(f"[{COMPONENT}] {message}")

    def __repr__(self) -> str:
        return f"AVLTree(size={self._size}, height={self.height})"
