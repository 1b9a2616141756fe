"""
Stepwise: observable data-structure engines.
"""

from stepwise.core import (
    AVLTree,
    BinaryHeap,
    EngineConfig,
    Graph,
    HashTable,
    HeapMode,
    MSTResult,
    OpResult,
    QueueCapacityError,
    Status,
    TreeNodeView,
)
from stepwise.platform import ConsoleObserver, EventKind, StepEvent, StepRecorder

__version__ = "0.1.0"

__all__ = [
    "AVLTree",
    "BinaryHeap",
    "Graph",
    "HashTable",
    "HeapMode",
    "EngineConfig",
    "MSTResult",
    "OpResult",
    "QueueCapacityError",
    "Status",
    "TreeNodeView",
    "ConsoleObserver",
    "EventKind",
    "StepEvent",
    "StepRecorder",
]
