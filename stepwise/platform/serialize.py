"""
Compact snapshot serialization.

Snapshots are written as nested integer sequences with no whitespace so
fixtures can be compared byte for byte:
    heap      [5,3,8,1]
    matrix    [[0,1,0],[1,0,2],[0,2,0]]
    buckets   [[25:25,15:15],[],...]
    mst       [0-1:4,0-4:2]
"""

from __future__ import annotations

import json
import re
from typing import Any, Iterable, Optional, Sequence

from stepwise.core.schema import TreeNodeView


_COMPACT = (",", ":")
_BUCKET_RE = re.compile(r"\[([^\[\]]*)\]")


def format_sequence(values: Iterable[int]) -> str:
    return json.dumps([int(v) for v in values], separators=_COMPACT)


def format_matrix(matrix: Sequence[Sequence[int]]) -> str:
    return json.dumps([[int(v) for v in row] for row in matrix], separators=_COMPACT)


def format_buckets(buckets: Sequence[Sequence[tuple[int, Any]]]) -> str:
    chains = (",".join(f"{k}:{v}" for k, v in chain) for chain in buckets)
    return "[" + ",".join(f"[{chain}]" for chain in chains) + "]"


def format_mst(edges: Iterable[tuple[int, int, int]]) -> str:
    return "[" + ",".join(f"{u}-{v}:{w}" for u, v, w in edges) + "]"


def format_tree(view: Optional[TreeNodeView]) -> str:
    """Compact JSON of the tree view; `null` for an empty tree."""
    if view is None:
        return "null"
    return json.dumps(view.to_dict(), separators=_COMPACT)


def parse_sequence(text: str) -> list[int]:
    values = json.loads(text)
    if not isinstance(values, list) or not all(_is_int(v) for v in values):
        raise ValueError(f"Not an integer sequence: {text!r}")
    return values


def parse_matrix(text: str) -> list[list[int]]:
    rows = json.loads(text)
    if not isinstance(rows, list) or not all(
        isinstance(row, list) and all(_is_int(v) for v in row) for row in rows
    ):
        raise ValueError(f"Not an integer matrix: {text!r}")
    return rows


def parse_buckets(text: str) -> list[list[tuple[int, int]]]:
    """Inverse of format_buckets for integer values."""
    text = text.strip()
    if not (text.startswith("[") and text.endswith("]")):
        raise ValueError(f"Not a bucket list: {text!r}")

    buckets: list[list[tuple[int, int]]] = []
    for match in _BUCKET_RE.finditer(text[1:-1]):
        chain: list[tuple[int, int]] = []
        body = match.group(1)
        if body:
            for entry in body.split(","):
                key, sep, value = entry.partition(":")
                if not sep:
                    raise ValueError(f"Malformed bucket entry: {entry!r}")
                chain.append((int(key), int(value)))
        buckets.append(chain)
    return buckets


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
