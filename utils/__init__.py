"""
Utility modules for scalargrad.
"""
from .logging_config import get_logger, LoggerFactory, LogContext, StructuredFormatter
from .exceptions import (
    ScalarGradError,
    CoreEngineError,
    NodeNotFound,
    DimensionMismatch,
    ConfigurationError,
)

__all__ = [
    'get_logger',
    'LoggerFactory',
    'LogContext',
    'StructuredFormatter',
    'ScalarGradError',
    'CoreEngineError',
    'NodeNotFound',
    'DimensionMismatch',
    'ConfigurationError',
]
