"""
Stepwise Walkthrough
====================
Runs the reference scenarios for each engine and prints every step the
engines report, then stores the steps in a replay store.
"""

from stepwise.core import AVLTree, BinaryHeap, EngineConfig, Graph, HashTable, HeapMode
from stepwise.platform import (
    ConsoleObserver,
    ReplayStore,
    format_buckets,
    format_matrix,
    format_mst,
    format_sequence,
    format_tree,
)

# Configuration
CONFIG = EngineConfig(verbose=True)
OBSERVER = ConsoleObserver()


def demo_avl():
    """Insert 10, 20, 30: one RR rotation."""
    print("\n=== AVL Tree ===")
    tree = AVLTree(config=CONFIG)
    for key in (10, 20, 30):
        tree.insert(key, observer=OBSERVER)
    print(f"Tree: {format_tree(tree.snapshot())}")
    print(f"Last rotation: {tree.last_rotation}")


def demo_heap():
    """Min-heap insert 5, 3, 8, 1 then extract the root."""
    print("\n=== Binary Heap ===")
    heap = BinaryHeap(HeapMode.MIN, config=CONFIG)
    for value in (5, 3, 8, 1):
        heap.insert(value, observer=OBSERVER)
    print(f"Heap: {format_sequence(heap.snapshot())}")
    result = heap.extract_top(observer=OBSERVER)
    print(f"Extracted {result.value}, heap: {format_sequence(heap.snapshot())}")
    heap.set_mode(HeapMode.MAX, observer=OBSERVER)
    print(f"As max-heap: {format_sequence(heap.snapshot())}")


def demo_graph():
    """Five-vertex weighted cycle: traversals, Dijkstra and Prim."""
    print("\n=== Graph ===")
    graph = Graph(5, directed=False, config=CONFIG)
    for u, v, w in [(0, 1, 4), (1, 2, 8), (2, 3, 7), (3, 4, 9), (4, 0, 2)]:
        graph.add_edge(u, v, w)
    print(f"Matrix: {format_matrix(graph.snapshot())}")
    print(f"BFS(0): {format_sequence(graph.bfs(0))}")
    print(f"DFS(0): {format_sequence(graph.dfs(0))}")
    print(f"Dijkstra(0): {format_sequence(graph.dijkstra(0, observer=OBSERVER))}")
    mst = graph.prim_mst(observer=OBSERVER)
    print(f"MST: {format_mst(mst.edges)} total={mst.total_weight}")


def demo_hashtable():
    """Colliding keys 15 and 25 in a 10-bucket table."""
    print("\n=== Hash Table ===")
    table = HashTable(config=CONFIG)
    table.insert(15, 15, observer=OBSERVER)
    table.insert(25, 25, observer=OBSERVER)
    print(f"Buckets: {format_buckets(table.snapshot())}")
    print(f"search(25): {table.search(25).value}")
    print(f"search(35): {table.search(35).status.value}")


def demo_replay():
    """Record an AVL run and list it back."""
    print("\n=== Replay ===")
    store = ReplayStore()
    scenario = {"engine": "avl", "inserts": [30, 20, 10, 25, 27]}
    run_id = store.start_run(scenario)
    tree = AVLTree()
    for key in scenario["inserts"]:
        tree.insert(key, observer=store.observer(run_id))
    store.complete_run(run_id, result={"tree": tree.snapshot().to_dict()})
    for summary in store.list_runs():
        print(f"  {summary['run_id']}: {summary['event_count']} events ({summary['status']})")


def main():
    demo_avl()
    demo_heap()
    demo_graph()
    demo_hashtable()
    demo_replay()


if __name__ == "__main__":
    main()
