# core_engine/topology.py

from typing import Callable, Hashable, Iterable, List, Set, Tuple, TypeVar

T = TypeVar('T', bound=Hashable)


def topological_order(root: T, operands_of: Callable[[T], Iterable[T]]) -> List[T]:
    """
    Order every node reachable from ``root`` so that each one comes after
    all of its operands.

    Uses an explicit stack of ``(node, expanded)`` entries instead of
    recursion, so graph depth is not limited by the interpreter's recursion
    limit. A node reachable along several paths is expanded and emitted once.

    Args:
        root: Node to start from; it is the last element of the result.
        operands_of: Returns the direct operands of a node.

    Returns:
        Nodes in child-before-parent order.
    """
    order: List[T] = []
    visited: Set[T] = set()
    stack: List[Tuple[T, bool]] = [(root, False)]

    while stack:
        node, expanded = stack.pop()
        if expanded:
            order.append(node)
            continue
        if node in visited:
            continue
        visited.add(node)
        stack.append((node, True))
        for operand in operands_of(node):
            if operand not in visited:
                stack.append((operand, False))

    return order
