# core_engine/arena.py

import threading
from contextlib import contextmanager
from dataclasses import replace
from typing import Dict, Iterator, Sequence, Tuple

from utils.exceptions import CoreEngineError, NodeNotFound
from .node import GraphNode, Handle, Op


class _NodeView:
    """Unlocked access to the arena's records, only valid inside a transaction."""

    def __init__(self, nodes: Dict[Handle, GraphNode]):
        self._nodes = nodes

    def __getitem__(self, handle: Handle) -> GraphNode:
        try:
            return self._nodes[handle]
        except KeyError:
            raise NodeNotFound(
                f"Node {handle!r} does not exist in this arena",
                details={'handle': getattr(handle, 'index', handle)}
            ) from None

    def insert(self, value: float, operands: Sequence[Handle] = (), op: Op = Op.LEAF) -> Handle:
        if len(operands) != op.arity:
            raise CoreEngineError(
                f"{op.name} takes {op.arity} operands, got {len(operands)}",
                details={'op': op.name, 'expected': op.arity, 'actual': len(operands)}
            )
        # operands must already live here, so every edge points to an earlier node
        for operand in operands:
            self[operand]
        a = operands[0] if len(operands) > 0 else None
        b = operands[1] if len(operands) > 1 else None
        handle = Handle.new()
        self._nodes[handle] = GraphNode(float(value), op, a, b)
        return handle


class Arena:
    """
    Append-only store that owns every node it allocates.

    Each public call runs under a single lock, so no caller ever sees a
    partially updated node. Nodes are never removed; drop the whole arena
    to release them.
    """

    def __init__(self):
        self._nodes: Dict[Handle, GraphNode] = {}
        self._lock = threading.Lock()

    @contextmanager
    def transaction(self) -> Iterator[_NodeView]:
        """Hold the lock for a composite read-compute-write step."""
        with self._lock:
            yield _NodeView(self._nodes)

    def allocate(self, value: float, operands: Sequence[Handle] = (), op: Op = Op.LEAF) -> Handle:
        with self.transaction() as nodes:
            return nodes.insert(value, operands, op)

    def get_value(self, handle: Handle) -> float:
        with self.transaction() as nodes:
            return nodes[handle].value

    def set_value(self, handle: Handle, value: float):
        with self.transaction() as nodes:
            nodes[handle].value = float(value)

    def get_gradient(self, handle: Handle) -> float:
        with self.transaction() as nodes:
            return nodes[handle].gradient

    def set_gradient(self, handle: Handle, gradient: float):
        with self.transaction() as nodes:
            nodes[handle].gradient = float(gradient)

    def operands(self, handle: Handle) -> Tuple[Handle, ...]:
        with self.transaction() as nodes:
            return nodes[handle].operands

    def node(self, handle: Handle) -> GraphNode:
        """Detached copy of a node record."""
        with self.transaction() as nodes:
            return replace(nodes[handle])

    def __contains__(self, handle: object) -> bool:
        with self._lock:
            return handle in self._nodes

    def __len__(self) -> int:
        with self._lock:
            return len(self._nodes)

    def __repr__(self) -> str:
        return f"Arena(nodes={len(self)})"
