# core_engine/optimizers.py

from typing import List

from .graph import Graph
from .node import Handle
from utils.exceptions import ConfigurationError


class SGD:
    """
    Plain gradient descent over leaf handles.
    """
    def __init__(self, graph: Graph, parameters: List[Handle], lr: float):
        """
        Initializes the SGD optimizer.

        Args:
            graph: Graph that owns the parameters.
            parameters: Leaf handles of the model parameters.
            lr: The learning rate.
        """
        if lr <= 0:
            raise ConfigurationError(f"Learning rate must be positive, got {lr}", details={'lr': lr})
        self.graph = graph
        self.parameters = list(parameters)
        self.lr = lr

    def step(self):
        """Moves every parameter against its accumulated gradient."""
        for p in self.parameters:
            value = self.graph.get_value(p)
            self.graph.set_value(p, value - self.lr * self.graph.get_gradient(p))

    def zero_grad(self):
        """Sets the gradients of all parameters to 0.0."""
        for p in self.parameters:
            self.graph.set_gradient(p, 0.0)
