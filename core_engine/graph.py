# core_engine/graph.py

from typing import List, Optional

from . import operations
from .arena import Arena
from .backward import SUBTRACT_RULES, backward, build_topo
from .node import GraphNode, Handle
from utils.exceptions import ConfigurationError


class Graph:
    """
    A computation graph bound to its own Arena.

    This is the surface the network layer and the trainer work against:
    create leaves, combine them, run backward and read or write values and
    gradients through handles. Discarding the graph discards every node it
    allocated.
    """

    def __init__(self, arena: Optional[Arena] = None, subtract_rule: str = 'calculus'):
        if subtract_rule not in SUBTRACT_RULES:
            raise ConfigurationError(
                f"Unknown subtract rule: {subtract_rule}",
                details={'subtract_rule': subtract_rule}
            )
        self.arena = arena if arena is not None else Arena()
        self.subtract_rule = subtract_rule

    def create_leaf(self, value: float) -> Handle:
        return operations.create_leaf(self.arena, value)

    def get_value(self, handle: Handle) -> float:
        return self.arena.get_value(handle)

    def set_value(self, handle: Handle, value: float):
        self.arena.set_value(handle, value)

    def get_gradient(self, handle: Handle) -> float:
        return self.arena.get_gradient(handle)

    def set_gradient(self, handle: Handle, gradient: float):
        self.arena.set_gradient(handle, gradient)

    def multiply(self, a: Handle, b: Handle) -> Handle:
        return operations.multiply(self.arena, a, b)

    def subtract(self, a: Handle, b: Handle) -> Handle:
        return operations.subtract(self.arena, a, b)

    def add(self, a: Handle, b: Handle) -> Handle:
        return operations.add(self.arena, a, b)

    def tanh(self, a: Handle) -> Handle:
        return operations.tanh(self.arena, a)

    def backward(self, root: Handle) -> List[Handle]:
        """Accumulate d(root)/d(node) on every node feeding ``root``."""
        return backward(self.arena, root, self.subtract_rule)

    def topological_order(self, root: Handle) -> List[Handle]:
        return build_topo(self.arena, root)

    def node(self, handle: Handle) -> GraphNode:
        return self.arena.node(handle)

    def __len__(self) -> int:
        return len(self.arena)

    def __repr__(self) -> str:
        return f"Graph(nodes={len(self)}, subtract_rule='{self.subtract_rule}')"
