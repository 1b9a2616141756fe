"""
Stepwise Core: Data-Structure Engines
=====================================

Classic data-structure engines whose every mutation keeps its invariants
intact, with an optional step observer for visualization.

Public API:
- AVLTree: self-balancing ordered set
- BinaryHeap: array-backed min/max heap
- Graph: adjacency-matrix graph with BFS, DFS, Dijkstra and Prim
- HashTable: fixed-bucket chained hash table
- Queue, Stack, MinPriorityQueue: containers used by the graph algorithms
- OpResult, Status, MSTResult, TreeNodeView, HeapMode, EngineConfig,
  QueueCapacityError
"""

from stepwise.core.schema import (
    DEFAULT_CONFIG,
    EngineConfig,
    HeapMode,
    MSTResult,
    OpResult,
    QueueCapacityError,
    Status,
    TreeNodeView,
)
from stepwise.core.primitives import MinPriorityQueue, Queue, Stack
from stepwise.core.heap import BinaryHeap
from stepwise.core.avl import AVLTree
from stepwise.core.graph import Graph
from stepwise.core.hashtable import HashTable

__all__ = [
    "AVLTree",
    "BinaryHeap",
    "Graph",
    "HashTable",
    "Queue",
    "Stack",
    "MinPriorityQueue",
    "OpResult",
    "QueueCapacityError",
    "Status",
    "MSTResult",
    "TreeNodeView",
    "HeapMode",
    "EngineConfig",
    "DEFAULT_CONFIG",
]
