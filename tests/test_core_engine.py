"""Tests for core engine components."""
import math
import threading

import pytest
import numpy as np
from core_engine import Arena, Graph, Handle, Op
from core_engine import operations, backward
from utils.exceptions import CoreEngineError, NodeNotFound, ConfigurationError


@pytest.fixture
def graph():
    return Graph()


class TestArena:
    """Tests for the Arena store."""

    def test_allocate_leaf(self):
        """Test allocating a leaf node."""
        arena = Arena()
        h = arena.allocate(1.5)
        node = arena.node(h)
        assert node.value == 1.5
        assert node.gradient == 0.0
        assert node.op is Op.LEAF
        assert node.operands == ()
        assert len(arena) == 1
        assert h in arena

    def test_handles_are_unique(self):
        """Test that handles are never reused, even across arenas."""
        a, b = Arena(), Arena()
        handles = [a.allocate(0.0) for _ in range(10)] + [b.allocate(0.0) for _ in range(10)]
        assert len(set(handles)) == 20

    def test_setters(self):
        """Test value and gradient setters."""
        arena = Arena()
        h = arena.allocate(1.0)
        arena.set_value(h, 4.0)
        arena.set_gradient(h, 0.5)
        assert arena.get_value(h) == 4.0
        assert arena.get_gradient(h) == 0.5

    def test_read_idempotence(self):
        """Test repeated reads without writes return identical results."""
        arena = Arena()
        h = arena.allocate(2.5)
        assert arena.get_value(h) == arena.get_value(h) == 2.5
        assert arena.get_gradient(h) == arena.get_gradient(h) == 0.0

    def test_node_snapshot_is_detached(self):
        """Test that node() returns a copy."""
        arena = Arena()
        h = arena.allocate(1.0)
        snapshot = arena.node(h)
        snapshot.value = 99.0
        assert arena.get_value(h) == 1.0

    def test_missing_handle(self):
        """Test that a handle from another arena is not found."""
        foreign = Arena().allocate(1.0)
        arena = Arena()
        with pytest.raises(NodeNotFound) as exc_info:
            arena.get_value(foreign)
        assert exc_info.value.to_dict()['error_type'] == 'NodeNotFound'
        with pytest.raises(NodeNotFound):
            arena.set_gradient(foreign, 1.0)
        with pytest.raises(NodeNotFound):
            operations.multiply(arena, foreign, foreign)

    def test_allocate_rejects_foreign_operand(self):
        """Test that operands must already live in the arena."""
        foreign = Arena().allocate(1.0)
        arena = Arena()
        local = arena.allocate(2.0)
        with pytest.raises(NodeNotFound):
            arena.allocate(1.0, (local, foreign), Op.MULTIPLY)
        assert len(arena) == 1

    @pytest.mark.parametrize("op, count", [
        (Op.MULTIPLY, 1), (Op.ADD, 0), (Op.SUBTRACT, 3), (Op.TANH, 2), (Op.LEAF, 1)
    ])
    def test_allocate_checks_operand_count(self, op, count):
        """Test that the operand count must match the op."""
        arena = Arena()
        operands = tuple(arena.allocate(1.0) for _ in range(count))
        with pytest.raises(CoreEngineError):
            arena.allocate(1.0, operands, op)
        assert len(arena) == count

    def test_allocate_with_operands(self):
        """Test allocating a binary node directly."""
        arena = Arena()
        a, b = arena.allocate(2.0), arena.allocate(3.0)
        c = arena.allocate(6.0, (a, b), Op.MULTIPLY)
        assert arena.operands(c) == (a, b)
        backward(arena, c)
        assert arena.get_gradient(a) == 3.0

    def test_concurrent_allocation(self):
        """Test allocation from several threads."""
        arena = Arena()
        results = []

        def worker():
            results.extend(arena.allocate(float(i)) for i in range(500))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(arena) == 4000
        assert len(set(results)) == 4000

    def test_concurrent_accumulation(self):
        """Test gradient accumulation from several threads sharing a leaf."""
        arena = Arena()
        x = arena.allocate(1.0)
        roots = [operations.add(arena, x, arena.allocate(0.0)) for _ in range(8)]

        threads = [threading.Thread(target=backward, args=(arena, r)) for r in roots]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert arena.get_gradient(x) == 8.0


class TestForward:
    """Tests for forward operations."""

    def test_multiply(self, graph):
        a = graph.create_leaf(3.0)
        b = graph.create_leaf(2.0)
        assert graph.get_value(graph.multiply(a, b)) == 6.0

    def test_add(self, graph):
        a = graph.create_leaf(3.0)
        b = graph.create_leaf(2.0)
        assert graph.get_value(graph.add(a, b)) == 5.0

    def test_subtract(self, graph):
        a = graph.create_leaf(3.0)
        b = graph.create_leaf(2.0)
        assert graph.get_value(graph.subtract(a, b)) == 1.0

    def test_tanh(self, graph):
        a = graph.create_leaf(0.5)
        assert graph.get_value(graph.tanh(a)) == pytest.approx(math.tanh(0.5))
        assert graph.get_value(graph.tanh(graph.create_leaf(0.0))) == 0.0

    def test_operands_recorded(self, graph):
        a = graph.create_leaf(1.0)
        b = graph.create_leaf(2.0)
        c = graph.multiply(a, b)
        t = graph.tanh(c)
        node = graph.node(c)
        assert (node.op, node.operand_a, node.operand_b) == (Op.MULTIPLY, a, b)
        node = graph.node(t)
        assert (node.op, node.operand_a, node.operand_b) == (Op.TANH, c, None)

    def test_module_level_functions(self):
        arena = Arena()
        a = operations.create_leaf(arena, 3.0)
        b = operations.create_leaf(arena, 2.0)
        assert arena.get_value(operations.subtract(arena, a, b)) == 1.0
        assert isinstance(a, Handle)


class TestBackward:
    """Tests for the backward pass."""

    def test_multiply_gradient(self, graph):
        a = graph.create_leaf(3.0)
        b = graph.create_leaf(2.0)
        c = graph.multiply(b, a)
        graph.backward(c)
        assert graph.get_gradient(a) == 2.0
        assert graph.get_gradient(b) == 3.0
        assert graph.get_gradient(c) == 1.0

    def test_tanh_gradient(self, graph):
        a = graph.create_leaf(0.0)
        c = graph.tanh(a)
        graph.backward(c)
        assert graph.get_gradient(a) == 1.0

    def test_tanh_gradient_nonzero_input(self, graph):
        a = graph.create_leaf(0.7)
        graph.backward(graph.tanh(a))
        assert graph.get_gradient(a) == pytest.approx(1.0 - np.tanh(0.7) ** 2)

    def test_add_gradient(self, graph):
        a = graph.create_leaf(3.0)
        b = graph.create_leaf(2.0)
        graph.backward(graph.add(a, b))
        assert graph.get_gradient(a) == 1.0
        assert graph.get_gradient(b) == 1.0

    def test_subtract_gradient_calculus(self, graph):
        a = graph.create_leaf(3.0)
        b = graph.create_leaf(2.0)
        graph.backward(graph.subtract(a, b))
        assert graph.get_gradient(a) == 1.0
        assert graph.get_gradient(b) == -1.0

    def test_subtract_gradient_legacy(self):
        graph = Graph(subtract_rule='legacy')
        a = graph.create_leaf(3.0)
        b = graph.create_leaf(2.0)
        graph.backward(graph.subtract(a, b))
        assert graph.get_gradient(a) == 1.0
        assert graph.get_gradient(b) == 1.0

    def test_unknown_subtract_rule(self):
        with pytest.raises(ConfigurationError):
            Graph(subtract_rule='signed')
        arena = Arena()
        with pytest.raises(ConfigurationError):
            backward(arena, arena.allocate(1.0), subtract_rule='signed')

    def test_shared_operand(self, graph):
        """y = x * x + x has dy/dx = 2x + 1."""
        x = graph.create_leaf(3.0)
        y = graph.add(graph.multiply(x, x), x)
        graph.backward(y)
        assert graph.get_gradient(x) == 7.0

    def test_diamond(self, graph):
        """Both branches of a diamond contribute to the shared node."""
        x = graph.create_leaf(0.5)
        h = graph.tanh(x)
        left = graph.multiply(h, graph.create_leaf(2.0))
        right = graph.multiply(h, graph.create_leaf(3.0))
        y = graph.add(left, right)
        graph.backward(y)
        assert graph.get_gradient(h) == 5.0
        assert graph.get_gradient(x) == pytest.approx(5.0 * (1.0 - np.tanh(0.5) ** 2))

    def test_squared_difference(self, graph):
        """(p - t)^2 gives 2(p - t) on the prediction."""
        p = graph.create_leaf(0.25)
        t = graph.create_leaf(-1.0)
        diff = graph.subtract(p, t)
        loss = graph.multiply(diff, diff)
        graph.backward(loss)
        assert graph.get_value(loss) == pytest.approx(1.5625)
        assert graph.get_gradient(p) == pytest.approx(2.5)
        assert graph.get_gradient(t) == pytest.approx(-2.5)

    def test_gradients_accumulate_across_calls(self, graph):
        a = graph.create_leaf(3.0)
        b = graph.create_leaf(2.0)
        c = graph.multiply(a, b)
        graph.backward(c)
        graph.backward(c)
        assert graph.get_gradient(a) == 4.0

    def test_returns_forward_order(self, graph):
        a = graph.create_leaf(1.0)
        b = graph.tanh(a)
        assert graph.backward(b) == [a, b]

    def test_deep_chain(self, graph):
        """Backward must not recurse on long graphs."""
        x = graph.create_leaf(1.0)
        one = graph.create_leaf(1.0)
        out = x
        for _ in range(10000):
            out = graph.multiply(out, one)
        graph.backward(out)
        assert graph.get_gradient(x) == 1.0
