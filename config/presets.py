"""
Predefined configuration presets.
"""
from typing import Dict, Any


class ConfigPresets:
    """Collection of predefined configuration presets."""

    @staticmethod
    def toy_regression() -> Dict[str, Any]:
        """Single-example regression on a [2, 4, 1] network."""
        return {
            'training': {
                'layer_sizes': [2, 4, 1],
                'learning_rate': 0.01,
                'steps': 20,
                'subtract_rule': 'calculus',
                'recycle_arena': True,
                'log_every': 5
            }
        }

    @staticmethod
    def legacy_engine() -> Dict[str, Any]:
        """One shared arena for the whole run and the legacy subtract gradient."""
        return {
            'training': {
                'layer_sizes': [2, 4, 1],
                'learning_rate': 0.01,
                'steps': 20,
                'subtract_rule': 'legacy',
                'recycle_arena': False,
                'log_every': 1
            }
        }

    @staticmethod
    def debug() -> Dict[str, Any]:
        """Small, verbose run for debugging."""
        return {
            'training': {
                'layer_sizes': [2, 2, 1],
                'learning_rate': 0.05,
                'steps': 5,
                'seed': 0,
                'log_every': 1,
                'log_level': 'DEBUG'
            }
        }
