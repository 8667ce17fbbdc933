# core_engine/operations.py
"""
Forward operations. Each one reads its operands, computes the result and
allocates the output node inside a single arena transaction.
"""

import numpy as np

from .arena import Arena
from .node import Handle, Op


def create_leaf(arena: Arena, value: float) -> Handle:
    """Allocate an input or parameter node with no operands."""
    return arena.allocate(value)


def multiply(arena: Arena, a: Handle, b: Handle) -> Handle:
    with arena.transaction() as nodes:
        return nodes.insert(nodes[a].value * nodes[b].value, (a, b), Op.MULTIPLY)


def subtract(arena: Arena, a: Handle, b: Handle) -> Handle:
    with arena.transaction() as nodes:
        return nodes.insert(nodes[a].value - nodes[b].value, (a, b), Op.SUBTRACT)


def add(arena: Arena, a: Handle, b: Handle) -> Handle:
    with arena.transaction() as nodes:
        return nodes.insert(nodes[a].value + nodes[b].value, (a, b), Op.ADD)


def tanh(arena: Arena, a: Handle) -> Handle:
    with arena.transaction() as nodes:
        return nodes.insert(float(np.tanh(nodes[a].value)), (a,), Op.TANH)
