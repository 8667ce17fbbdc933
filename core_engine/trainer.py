# core_engine/trainer.py

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from config.training_config import TrainerConfig
from utils.exceptions import ConfigurationError
from utils.logging_config import get_logger, LogContext
from .graph import Graph
from .loss_functions import SquaredErrorLoss
from .nn_modules import MLP
from .optimizers import SGD


@dataclass
class StepResult:
    """Outcome of one training step, measured before the update."""
    step: int
    loss: float
    prediction: List[float]


class Trainer:
    """
    Gradient-descent loop for a scalar MLP.

    Every step builds the graph for one example, backpropagates the
    squared error, moves the parameters and resets their gradients. With
    ``recycle_arena`` the model is moved into a fresh Graph before each
    step, so the nodes of earlier examples are dropped with the old arena.
    """

    def __init__(self, model: MLP, config: Optional[TrainerConfig] = None, loss_fn=None):
        self.model = model
        self.config = config or TrainerConfig(layer_sizes=model.layer_sizes)
        if model.graph.subtract_rule != self.config.subtract_rule:
            raise ConfigurationError(
                "Model graph and trainer disagree on the subtract rule",
                details={
                    'graph': model.graph.subtract_rule,
                    'trainer': self.config.subtract_rule
                }
            )
        self.loss_fn = loss_fn or SquaredErrorLoss()
        self.step_count = 0
        self.logger = get_logger(self.__class__.__name__)
        # per-trainer threshold; the shared logger keeps its own level
        self.log_level = logging.getLevelName(self.config.log_level.upper())

    @classmethod
    def from_config(cls, config: TrainerConfig) -> 'Trainer':
        """Build a freshly initialized model and its trainer."""
        graph = Graph(subtract_rule=config.subtract_rule)
        model = MLP(graph, config.layer_sizes, seed=config.seed)
        return cls(model, config)

    @property
    def graph(self) -> Graph:
        return self.model.graph

    def train_step(self, xs: Sequence[float], target: Union[float, Sequence[float]]) -> StepResult:
        """Run forward, backward, update and gradient reset for one example."""
        if self.config.recycle_arena:
            self.model.rebind(Graph(subtract_rule=self.config.subtract_rule))
        graph = self.model.graph

        targets = list(target) if isinstance(target, (list, tuple)) else [target]
        inputs = [graph.create_leaf(x) for x in xs]
        predictions = self.model(inputs)
        loss = self.loss_fn(graph, predictions, targets)

        graph.backward(loss)

        optimizer = SGD(graph, self.model.parameters(), self.config.learning_rate)
        optimizer.step()
        optimizer.zero_grad()

        self.step_count += 1
        result = StepResult(
            step=self.step_count,
            loss=graph.get_value(loss),
            prediction=[graph.get_value(p) for p in predictions]
        )

        if self.step_count % self.config.log_every == 0:
            self._log(
                logging.INFO,
                f"Step {result.step}: loss={result.loss:.6f}, prediction={result.prediction}"
            )
        self._log(logging.DEBUG, f"Graph holds {len(graph)} nodes after step {result.step}")
        return result

    def fit(
        self,
        xs: Sequence[float],
        target: Union[float, Sequence[float]],
        steps: Optional[int] = None
    ) -> List[StepResult]:
        """Repeat ``train_step`` on one example; defaults to ``config.steps``."""
        steps = self.config.steps if steps is None else steps
        with LogContext(self.logger, steps=steps, layer_sizes=self.model.layer_sizes):
            history = [self.train_step(xs, target) for _ in range(steps)]
        if history:
            self._log(
                logging.INFO,
                f"Finished {steps} steps: loss {history[0].loss:.6f} -> {history[-1].loss:.6f}"
            )
        return history

    def _log(self, level: int, message: str):
        if level >= self.log_level:
            self.logger.log(level, message)

    def predict(self, xs: Sequence[float]) -> List[float]:
        return self.model.predict(xs)
