"""Trainer configuration."""
from dataclasses import dataclass, field, asdict
import numbers
from typing import Dict, Any, List, Optional
import yaml
import json

from utils.exceptions import ConfigurationError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _is_positive_int(n) -> bool:
    return isinstance(n, numbers.Integral) and not isinstance(n, bool) and n >= 1


@dataclass
class TrainerConfig:
    """Configuration for training a scalar MLP."""
    # Model configuration
    layer_sizes: List[int] = field(default_factory=lambda: [2, 4, 1])
    seed: Optional[int] = None

    # Training configuration
    learning_rate: float = 0.01
    steps: int = 20

    # Engine configuration
    subtract_rule: str = "calculus"  # calculus, legacy
    recycle_arena: bool = True

    # Logging
    log_every: int = 1
    log_level: str = "INFO"

    def __post_init__(self):
        if len(self.layer_sizes) < 2 or not all(_is_positive_int(n) for n in self.layer_sizes):
            raise ConfigurationError(
                f"layer_sizes needs an input width and at least one positive layer width, got {self.layer_sizes}",
                details={'layer_sizes': self.layer_sizes}
            )
        if self.learning_rate <= 0:
            raise ConfigurationError(
                f"learning_rate must be positive, got {self.learning_rate}",
                details={'learning_rate': self.learning_rate}
            )
        if self.steps < 0:
            raise ConfigurationError(f"steps must be non-negative, got {self.steps}")
        if self.subtract_rule not in ("calculus", "legacy"):
            raise ConfigurationError(
                f"subtract_rule must be 'calculus' or 'legacy', got {self.subtract_rule!r}",
                details={'subtract_rule': self.subtract_rule}
            )
        if self.log_every < 1:
            raise ConfigurationError(f"log_every must be at least 1, got {self.log_every}")
        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            raise ConfigurationError(
                f"log_level must be one of {list(LOG_LEVELS)}, got {self.log_level!r}",
                details={'log_level': self.log_level}
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    def to_yaml(self, filepath: str):
        """Save config to YAML file."""
        with open(filepath, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)

    def to_json(self, filepath: str):
        """Save config to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'TrainerConfig':
        """Create config from dictionary."""
        unknown = set(config_dict) - set(cls.__dataclass_fields__)
        if unknown:
            raise ConfigurationError(
                f"Unknown trainer options: {sorted(unknown)}",
                details={'unknown': sorted(unknown)}
            )
        return cls(**config_dict)

    @classmethod
    def from_yaml(cls, filepath: str) -> 'TrainerConfig':
        """Load config from YAML file."""
        with open(filepath, 'r') as f:
            config_dict = yaml.safe_load(f) or {}
        return cls.from_dict(config_dict)

    @classmethod
    def from_json(cls, filepath: str) -> 'TrainerConfig':
        """Load config from JSON file."""
        with open(filepath, 'r') as f:
            config_dict = json.load(f)
        return cls.from_dict(config_dict)
