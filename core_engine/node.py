# core_engine/node.py

import itertools
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

# Shared by every arena so a handle never names a node in two stores.
_handle_counter = itertools.count(1)


@dataclass(frozen=True)
class Handle:
    """
    Opaque identifier of a node stored in an Arena.

    A handle owns nothing; the arena that issued it owns the node record.
    Only equality and hashing are meaningful.
    """
    index: int

    @classmethod
    def new(cls) -> 'Handle':
        return cls(next(_handle_counter))

    def __repr__(self) -> str:
        return f"Handle({self.index})"


class Op(Enum):
    """Operation that produced a node."""
    LEAF = 'leaf'
    MULTIPLY = '*'
    SUBTRACT = '-'
    ADD = '+'
    TANH = 'tanh'

    @property
    def arity(self) -> int:
        """Number of operands a node with this op carries."""
        if self is Op.LEAF:
            return 0
        if self is Op.TANH:
            return 1
        return 2


@dataclass
class GraphNode:
    """
    One scalar step of the computation graph.

    Leaves carry no operands, binary ops carry both and TANH carries only
    ``operand_a``. Operands are fixed once the node is allocated.
    """
    value: float
    op: Op = Op.LEAF
    operand_a: Optional[Handle] = None
    operand_b: Optional[Handle] = None
    gradient: float = 0.0

    @property
    def operands(self) -> Tuple[Handle, ...]:
        return tuple(h for h in (self.operand_a, self.operand_b) if h is not None)

    def __repr__(self) -> str:
        return f"GraphNode(value={self.value}, grad={self.gradient}, op='{self.op.value}')"
