# core_engine/loss_functions.py

from typing import Sequence, Union

from .graph import Graph
from .node import Handle
from utils.exceptions import DimensionMismatch


class SquaredErrorLoss:
    """
    Sum of squared errors over the outputs.

    Loss = sum((prediction - target) * (prediction - target))
    """

    def __call__(
        self,
        graph: Graph,
        predictions: Sequence[Handle],
        targets: Sequence[Union[float, Handle]]
    ) -> Handle:
        """
        Builds the loss node.

        Args:
            graph: Graph holding the predictions.
            predictions: Output handles of the model.
            targets: Target values; plain floats are wrapped as leaves.

        Returns:
            Handle of the scalar loss.
        """
        if len(predictions) != len(targets) or not predictions:
            raise DimensionMismatch(
                f"Got {len(predictions)} predictions for {len(targets)} targets",
                details={'predictions': len(predictions), 'targets': len(targets)}
            )

        loss = None
        for prediction, target in zip(predictions, targets):
            if not isinstance(target, Handle):
                target = graph.create_leaf(target)
            diff = graph.subtract(prediction, target)
            term = graph.multiply(diff, diff)
            loss = term if loss is None else graph.add(loss, term)
        return loss
