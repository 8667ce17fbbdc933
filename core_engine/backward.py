# core_engine/backward.py

from typing import List

from utils.exceptions import ConfigurationError
from utils.logging_config import get_logger
from .arena import Arena
from .node import Handle, Op
from .topology import topological_order

logger = get_logger(__name__)

SUBTRACT_RULES = ('calculus', 'legacy')


def build_topo(arena: Arena, root: Handle) -> List[Handle]:
    """Child-before-parent order of every node reachable from ``root``."""
    return topological_order(root, arena.operands)


def _propagate(arena: Arena, handle: Handle, subtract_rule: str):
    """Push the gradient of one node onto its operands."""
    with arena.transaction() as nodes:
        node = nodes[handle]
        grad = node.gradient

        if node.op is Op.MULTIPLY:
            a, b = nodes[node.operand_a], nodes[node.operand_b]
            a_value, b_value = a.value, b.value
            a.gradient += b_value * grad
            b.gradient += a_value * grad
        elif node.op is Op.ADD:
            nodes[node.operand_a].gradient += grad
            nodes[node.operand_b].gradient += grad
        elif node.op is Op.SUBTRACT:
            nodes[node.operand_a].gradient += grad
            if subtract_rule == 'legacy':
                nodes[node.operand_b].gradient += grad
            else:
                nodes[node.operand_b].gradient -= grad
        elif node.op is Op.TANH:
            # value already holds tanh(operand)
            nodes[node.operand_a].gradient += (1.0 - node.value ** 2) * grad


def backward(arena: Arena, root: Handle, subtract_rule: str = 'calculus') -> List[Handle]:
    """
    Reverse-mode pass from ``root``.

    Seeds d(root)/d(root) = 1 and accumulates gradients on every node that
    contributed to ``root``. Existing gradients on other nodes are added
    to, not replaced.

    Args:
        arena: Arena holding the graph.
        root: Scalar output to differentiate.
        subtract_rule: ``'calculus'`` gives the right operand of a
            subtraction ``-grad``; ``'legacy'`` gives it ``+grad``, the
            same as addition.

    Returns:
        The topological order that was traversed (in forward order).
    """
    if subtract_rule not in SUBTRACT_RULES:
        raise ConfigurationError(
            f"Unknown subtract rule: {subtract_rule}",
            details={'subtract_rule': subtract_rule, 'allowed': list(SUBTRACT_RULES)}
        )

    arena.set_gradient(root, 1.0)
    topo = build_topo(arena, root)

    for handle in reversed(topo):
        _propagate(arena, handle, subtract_rule)

    logger.debug(f"Backward from {root!r} visited {len(topo)} nodes")
    return topo
