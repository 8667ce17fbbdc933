from .node import Handle, Op, GraphNode
from .arena import Arena
from .operations import create_leaf, multiply, subtract, add, tanh
from .topology import topological_order
from .backward import backward, build_topo
from .graph import Graph
from .nn_modules import Module, Neuron, Layer, MLP
from .optimizers import SGD
from .loss_functions import SquaredErrorLoss
from .trainer import Trainer, StepResult

__all__ = [
    'Handle', 'Op', 'GraphNode', 'Arena',
    'create_leaf', 'multiply', 'subtract', 'add', 'tanh',
    'topological_order', 'backward', 'build_topo', 'Graph',
    'Module', 'Neuron', 'Layer', 'MLP',
    'SGD', 'SquaredErrorLoss',
    'Trainer', 'StepResult'
]
