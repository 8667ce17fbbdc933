# core_engine/nn_modules.py

import numbers
import numpy as np
from typing import List, Optional, Sequence

from .graph import Graph
from .node import Handle
from utils.exceptions import ConfigurationError, DimensionMismatch


class Module:
    """Base class for all network modules built on a Graph."""

    graph: Graph

    def parameters(self) -> List[Handle]:
        """Returns all trainable parameters in the module."""
        raise NotImplementedError

    def zero_grad(self):
        """Sets gradients of all parameters to zero."""
        for p in self.parameters():
            self.graph.set_gradient(p, 0.0)

    def rebind(self, graph: Graph):
        """Re-create every parameter, with its current value, in ``graph``."""
        raise NotImplementedError

    def __call__(self, *args, **kwargs):
        return self.forward(*args, **kwargs)


class Neuron(Module):
    """A single tanh unit: tanh(w . x + b)."""

    def __init__(self, graph: Graph, n_inputs: int, rng: np.random.Generator):
        self.graph = graph
        self.weights = [graph.create_leaf(rng.uniform(-1.0, 1.0)) for _ in range(n_inputs)]
        self.bias = graph.create_leaf(rng.uniform(-1.0, 1.0))

    def forward(self, xs: Sequence[Handle]) -> Handle:
        if len(xs) != len(self.weights):
            raise DimensionMismatch(
                f"Neuron expects {len(self.weights)} inputs, got {len(xs)}",
                details={'expected': len(self.weights), 'actual': len(xs)}
            )
        out = self.bias
        for w, x in zip(self.weights, xs):
            out = self.graph.add(self.graph.multiply(w, x), out)
        return self.graph.tanh(out)

    def parameters(self) -> List[Handle]:
        return self.weights + [self.bias]

    def rebind(self, graph: Graph):
        old = self.graph
        self.weights = [graph.create_leaf(old.get_value(w)) for w in self.weights]
        self.bias = graph.create_leaf(old.get_value(self.bias))
        self.graph = graph


class Layer(Module):
    """A fully connected layer of independent neurons."""

    def __init__(self, graph: Graph, n_inputs: int, n_outputs: int, rng: np.random.Generator):
        self.graph = graph
        self.neurons = [Neuron(graph, n_inputs, rng) for _ in range(n_outputs)]

    def forward(self, xs: Sequence[Handle]) -> List[Handle]:
        return [neuron(xs) for neuron in self.neurons]

    def parameters(self) -> List[Handle]:
        return [p for neuron in self.neurons for p in neuron.parameters()]

    def rebind(self, graph: Graph):
        for neuron in self.neurons:
            neuron.rebind(graph)
        self.graph = graph


class MLP(Module):
    """
    Multi-layer perceptron.

    ``layer_sizes`` lists the input width followed by the width of every
    layer, e.g. ``[2, 4, 1]`` for two inputs, four hidden units and one
    output. Parameters are drawn uniformly from [-1, 1).
    """

    def __init__(
        self,
        graph: Graph,
        layer_sizes: Sequence[int],
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None
    ):
        if len(layer_sizes) < 2 or not all(
            isinstance(n, numbers.Integral) and not isinstance(n, bool) and n >= 1
            for n in layer_sizes
        ):
            raise ConfigurationError(
                f"Invalid layer sizes: {list(layer_sizes)}",
                details={'layer_sizes': list(layer_sizes)}
            )
        rng = rng if rng is not None else np.random.default_rng(seed)
        self.graph = graph
        self.layer_sizes = [int(n) for n in layer_sizes]
        self.layers = [
            Layer(graph, n_in, n_out, rng)
            for n_in, n_out in zip(self.layer_sizes[:-1], self.layer_sizes[1:])
        ]

    def forward(self, xs: Sequence[Handle]) -> List[Handle]:
        out = list(xs)
        for layer in self.layers:
            out = layer(out)
        return out

    def predict(self, xs: Sequence[float]) -> List[float]:
        """Run a forward pass on plain floats and return the output values."""
        inputs = [self.graph.create_leaf(x) for x in xs]
        return [self.graph.get_value(h) for h in self.forward(inputs)]

    def parameters(self) -> List[Handle]:
        return [p for layer in self.layers for p in layer.parameters()]

    def rebind(self, graph: Graph):
        for layer in self.layers:
            layer.rebind(graph)
        self.graph = graph
