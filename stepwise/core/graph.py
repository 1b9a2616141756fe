"""
Weighted Graph
==============

Fixed-size adjacency-matrix graph with traversal and weighted algorithms.

Conventions:
- Vertex ids are dense integers 0..n-1.
- matrix[u][v] == 0 means "no edge". A genuine zero-weight edge cannot be
  represented; add_edge(u, v, 0) is therefore the same as removing it.
- Undirected graphs keep the matrix symmetric on every write.
- Out-of-range endpoints never raise; the operation reports INVALID_INDEX
  and leaves the graph untouched.
"""

import math
from typing import Any, Optional

import networkx as nx

from stepwise.core.primitives import MinPriorityQueue, Queue, Stack
from stepwise.core.schema import (
    DEFAULT_CONFIG,
    EngineConfig,
    MSTResult,
    OpResult,
    QueueCapacityError,
    Status,
)
from stepwise.platform.events import EventKind, StepObserver, emit


COMPONENT = "Graph"


class Graph:
    """
    Weighted graph over a fixed number of vertices.

    Example
    -------
    >>> g = Graph(5)
    >>> for u in range(5):
    ...     _ = g.add_edge(u, (u + 1) % 5)
    >>> g.dijkstra(0)
    [0, 1, 2, 2, 1]
    """

    def __init__(self, n: int, directed: bool = False, config: Optional[EngineConfig] = None):
        """
        Parameters
        ----------
        n : int
            Number of vertices (fixed for the life of the instance)
        directed : bool
            Whether edges are one-way
        config : EngineConfig, optional
            Shared engine configuration
        """
        if n < 0:
            raise ValueError("vertex count must be non-negative")
        self.config = config or DEFAULT_CONFIG
        self._n = n
        self._directed = directed
        self._matrix: list[list[int]] = [[0] * n for _ in range(n)]

    @property
    def vertex_count(self) -> int:
        return self._n

    @property
    def directed(self) -> bool:
        return self._directed

    def __len__(self) -> int:
        return self._n

    def has_vertex(self, v: int) -> bool:
        return 0 <= v < self._n

    def weight(self, u: int, v: int) -> int:
        """Edge weight, 0 when absent or out of range."""
        if not (self.has_vertex(u) and self.has_vertex(v)):
            return 0
        return self._matrix[u][v]

    def neighbors(self, u: int) -> list[int]:
        """Adjacent vertices in ascending id order."""
        if not self.has_vertex(u):
            return []
        row = self._matrix[u]
        return [v for v in range(self._n) if row[v] != 0]

    def edges(self) -> list[tuple[int, int, int]]:
        """All edges as (u, v, weight); undirected edges are listed once with u <= v."""
        result = []
        for u in range(self._n):
            start = 0 if self._directed else u
            for v in range(start, self._n):
                if self._matrix[u][v] != 0:
                    result.append((u, v, self._matrix[u][v]))
        return result

    def snapshot(self) -> list[list[int]]:
        """Copy of the n x n weight matrix."""
        return [list(row) for row in self._matrix]

    def copy(self) -> "Graph":
        clone = Graph(self._n, self._directed, self.config)
        clone._matrix = self.snapshot()
        return clone

    def clear(self) -> None:
        """Remove every edge, keeping the vertex count."""
        self._matrix = [[0] * self._n for _ in range(self._n)]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_edge(
        self, u: int, v: int, w: int = 1, observer: Optional[StepObserver] = None
    ) -> OpResult:
        """Set the weight of edge u->v (and v->u when undirected)."""
        if not (self.has_vertex(u) and self.has_vertex(v)):
            return self._invalid(observer, f"Edge {u}-{v} out of range", u=u, v=v)

        self._matrix[u][v] = w
        if not self._directed and u != v:
            self._matrix[v][u] = w
        emit(observer, COMPONENT, EventKind.CREATE, f"Edge {u}-{v} weight {w}", u=u, v=v, weight=w)
        return OpResult(Status.OK, value=(u, v, w))

    def remove_edge(self, u: int, v: int, observer: Optional[StepObserver] = None) -> OpResult:
        if not (self.has_vertex(u) and self.has_vertex(v)):
            return self._invalid(observer, f"Edge {u}-{v} out of range", u=u, v=v)

        self._matrix[u][v] = 0
        if not self._directed:
            self._matrix[v][u] = 0
        emit(observer, COMPONENT, EventKind.REMOVE, f"Removed edge {u}-{v}", u=u, v=v)
        return OpResult(Status.OK, value=(u, v))

    def set_directed(self, directed: bool, observer: Optional[StepObserver] = None) -> OpResult:
        """
        Switch between directed and undirected mode.

        Going undirected mirrors every one-way edge so the matrix becomes
        symmetric; when both directions exist, matrix[i][j] with i < j wins.
        """
        self._directed = directed
        if not directed:
            m = self._matrix
            for i in range(self._n):
                for j in range(i + 1, self._n):
                    if m[i][j] != 0 or m[j][i] != 0:
                        w = m[i][j] if m[i][j] != 0 else m[j][i]
                        m[i][j] = w
                        m[j][i] = w
            emit(observer, COMPONENT, EventKind.REBUILD, "Symmetrized adjacency matrix")
        self._log(f"Switched to {'directed' if directed else 'undirected'} mode")
        return OpResult(Status.OK, value=directed)

    def remove_vertex(self, vertex: int, observer: Optional[StepObserver] = None) -> OpResult:
        """
        Return a new graph without `vertex`; ids above it shift down by one.

        The source graph is never modified. For an out-of-range vertex the
        result carries an unmodified copy and INVALID_INDEX.
        """
        if not self.has_vertex(vertex):
            result = self._invalid(observer, f"Vertex {vertex} out of range", vertex=vertex)
            result.value = self.copy()
            return result

        reduced = Graph(self._n - 1, self._directed, self.config)
        survivors = [i for i in range(self._n) if i != vertex]
        for new_i, old_i in enumerate(survivors):
            for new_j, old_j in enumerate(survivors):
                reduced._matrix[new_i][new_j] = self._matrix[old_i][old_j]
        emit(observer, COMPONENT, EventKind.REMOVE,
             f"Removed vertex {vertex}, {reduced.vertex_count} vertices remain", vertex=vertex)
        return OpResult(Status.OK, value=reduced)

    # ------------------------------------------------------------------
    # Traversals
    # ------------------------------------------------------------------

    def bfs(self, start: int, observer: Optional[StepObserver] = None) -> list[int]:
        """Breadth-first discovery order from `start`; [] if out of range."""
        if not self.has_vertex(start):
            return []

        visited = [False] * self._n
        queue = Queue()
        visited[start] = True
        queue.enqueue(start)
        emit(observer, COMPONENT, EventKind.ENQUEUE, f"Enqueue {start}", vertex=start)
        order: list[int] = []

        while not queue.is_empty():
            u = queue.dequeue()
            order.append(u)
            emit(observer, COMPONENT, EventKind.VISIT, f"Visit {u}", vertex=u)
            for v in self.neighbors(u):
                if not visited[v]:
                    visited[v] = True
                    queue.enqueue(v)
                    emit(observer, COMPONENT, EventKind.ENQUEUE,
                         f"Discovered {v} from {u}", vertex=v, parent=u)
        return order

    def dfs(self, start: int, observer: Optional[StepObserver] = None) -> list[int]:
        """
        Depth-first order from `start`, smallest unvisited neighbour first.

        Neighbours are pushed in descending id order; a vertex is recorded
        when popped, and already-visited duplicates are skipped.
        """
        if not self.has_vertex(start):
            return []

        visited = [False] * self._n
        stack = Stack()
        stack.push(start)
        emit(observer, COMPONENT, EventKind.PUSH, f"Push {start}", vertex=start)
        order: list[int] = []

        while not stack.is_empty():
            u = stack.pop()
            if visited[u]:
                emit(observer, COMPONENT, EventKind.SKIP, f"Skip {u}, already visited", vertex=u)
                continue
            visited[u] = True
            order.append(u)
            emit(observer, COMPONENT, EventKind.VISIT, f"Visit {u}", vertex=u)
            for v in reversed(self.neighbors(u)):
                if not visited[v]:
                    stack.push(v)
                    emit(observer, COMPONENT, EventKind.PUSH, f"Push {v}", vertex=v, parent=u)
        return order

    # ------------------------------------------------------------------
    # Weighted algorithms
    # ------------------------------------------------------------------

    def dijkstra(self, start: int, observer: Optional[StepObserver] = None) -> list[int]:
        """
        Shortest distances from `start` (non-negative weights only).

        Stale queue entries are discarded when popped instead of being
        decreased in place. Unreachable vertices get
        `config.unreachable_distance`.

        Raises
        ------
        QueueCapacityError
            If `config.queue_capacity` is set and the queue overflows.
            No distances are returned in that case.
        """
        if not self.has_vertex(start):
            return []

        dist: list[float] = [math.inf] * self._n
        dist[start] = 0
        pq = MinPriorityQueue(self.config.queue_capacity)
        self._push(pq, start, 0, observer)

        while not pq.is_empty():
            u, d = pq.pop()
            if d > dist[u]:
                emit(observer, COMPONENT, EventKind.SKIP,
                     f"Stale entry for {u} ({d} > {dist[u]})", vertex=u, distance=d)
                continue
            emit(observer, COMPONENT, EventKind.VISIT, f"Settle {u} at {d}", vertex=u, distance=d)
            for v in self.neighbors(u):
                candidate = d + self._matrix[u][v]
                if candidate < dist[v]:
                    dist[v] = candidate
                    emit(observer, COMPONENT, EventKind.RELAX,
                         f"Relax {u}->{v}: {candidate}", u=u, v=v, distance=candidate)
                    self._push(pq, v, candidate, observer)

        sentinel = self.config.unreachable_distance
        return [sentinel if d == math.inf else int(d) for d in dist]

    def prim_mst(self, observer: Optional[StepObserver] = None) -> MSTResult:
        """
        Minimum spanning tree grown from vertex 0.

        Directed graphs are UNSUPPORTED. A disconnected graph yields the
        tree of vertex 0's component with `spanning=False`. If a bounded
        priority queue overflows the result is CAPACITY_EXCEEDED with no
        edges.
        """
        if self._directed:
            emit(observer, COMPONENT, EventKind.REJECT, "Prim's algorithm needs an undirected graph")
            self._log("prim_mst called on a directed graph")
            return MSTResult(status=Status.UNSUPPORTED, spanning=False)
        if self._n == 0:
            return MSTResult()

        try:
            edges, in_tree = self._grow_tree(observer)
        except QueueCapacityError:
            return MSTResult(status=Status.CAPACITY_EXCEEDED, spanning=False)

        spanning = all(in_tree)
        if not spanning:
            self._log(f"Graph is disconnected, tree covers {sum(in_tree)} of {self._n} vertices")
        return MSTResult(status=Status.OK, edges=edges, spanning=spanning)

    def _grow_tree(
        self, observer: Optional[StepObserver]
    ) -> tuple[list[tuple[int, int, int]], list[bool]]:
        key: list[float] = [math.inf] * self._n
        parent = [-1] * self._n
        in_tree = [False] * self._n
        edges: list[tuple[int, int, int]] = []

        key[0] = 0
        pq = MinPriorityQueue(self.config.queue_capacity)
        self._push(pq, 0, 0, observer)

        while not pq.is_empty():
            u, k = pq.pop()
            if in_tree[u] or k > key[u]:
                emit(observer, COMPONENT, EventKind.SKIP, f"Stale entry for {u}", vertex=u, key=k)
                continue
            in_tree[u] = True
            if parent[u] != -1:
                w = self._matrix[parent[u]][u]
                edges.append((parent[u], u, w))
                emit(observer, COMPONENT, EventKind.SELECT,
                     f"Select edge {parent[u]}-{u} ({w})", u=parent[u], v=u, weight=w)
            for v in self.neighbors(u):
                w = self._matrix[u][v]
                if not in_tree[v] and w < key[v]:
                    key[v] = w
                    parent[v] = u
                    emit(observer, COMPONENT, EventKind.RELAX,
                         f"Best link to {v} is now {u} ({w})", u=u, v=v, weight=w)
                    self._push(pq, v, w, observer)

        return edges, in_tree

    # ------------------------------------------------------------------
    # networkx interop
    # ------------------------------------------------------------------

    def to_networkx(self) -> nx.Graph:
        """Export as nx.DiGraph / nx.Graph with a `weight` edge attribute."""
        g = nx.DiGraph() if self._directed else nx.Graph()
        g.add_nodes_from(range(self._n))
        for u, v, w in self.edges():
            g.add_edge(u, v, weight=w)
        return g

    @classmethod
    def from_networkx(
        cls,
        graph: nx.Graph,
        weight_attr: str = "weight",
        config: Optional[EngineConfig] = None,
    ) -> "Graph":
        """
        Build a Graph from a networkx graph.

        Nodes are renumbered 0..n-1 in the graph's node order. Missing
        weights default to 1; parallel edges keep the smallest weight.
        Weights must be positive integers (2.0 is accepted, 0.5 is not),
        since 0 is the "no edge" marker; anything else raises ValueError.
        """
        nodes = list(graph.nodes)
        index: dict[Any, int] = {node: i for i, node in enumerate(nodes)}
        result = cls(len(nodes), directed=graph.is_directed(), config=config)
        for u, v, data in graph.edges(data=True):
            raw = data.get(weight_attr, 1)
            if isinstance(raw, bool) or raw != int(raw) or raw < 1:
                raise ValueError(f"edge {u}-{v} has weight {raw!r}; expected a positive integer")
            w = int(raw)
            current = result.weight(index[u], index[v])
            if current == 0 or w < current:
                result.add_edge(index[u], index[v], w)
        return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _push(
        self, pq: MinPriorityQueue, vertex: int, key: float, observer: Optional[StepObserver]
    ) -> None:
        if not pq.push(vertex, key):
            emit(observer, COMPONENT, EventKind.REJECT,
                 f"Priority queue full at vertex {vertex}, stopping", vertex=vertex)
            self._log(f"Priority queue capacity {pq.capacity} reached")
            raise QueueCapacityError(pq.capacity, vertex)

    def _invalid(self, observer: Optional[StepObserver], message: str, **payload: Any) -> OpResult:
        emit(observer, COMPONENT, EventKind.REJECT, message, **payload)
        self._log(message)
        return OpResult(Status.INVALID_INDEX, detail=message)

    def _log(self, message: str) -> None:
        if self.config.verbose:
            print(f"[{COMPONENT}] {message}")

    def __repr__(self) -> str:
        kind = "directed" if self._directed else "undirected"
        return f"Graph(n={self._n}, {kind}, edges={len(self.edges())})"
