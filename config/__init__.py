"""
Configuration management for scalargrad.
"""
from .config_manager import Config, ConfigManager
from .training_config import TrainerConfig
from .presets import ConfigPresets

__all__ = [
    'Config',
    'ConfigManager',
    'TrainerConfig',
    'ConfigPresets',
]
