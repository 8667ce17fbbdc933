"""
Custom exception hierarchy for scalargrad.
"""
from typing import Any, Dict, Optional


class ScalarGradError(Exception):
    """Base exception for all scalargrad errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            'error_type': self.__class__.__name__,
            'error_code': self.error_code,
            'message': self.message,
            'details': self.details
        }


# Core Engine Exceptions
class CoreEngineError(ScalarGradError):
    """Base exception for core engine errors."""
    pass


class NodeNotFound(CoreEngineError, LookupError):
    """
    Raised when a handle is not present in the arena.

    The arena is the only issuer of handles, so this always indicates a
    programming error and is never recovered from.
    """
    pass


class DimensionMismatch(CoreEngineError, ValueError):
    """Raised when operand collections of unequal length are combined."""
    pass


# Configuration Exceptions
class ConfigurationError(ScalarGradError):
    """Raised when configuration is invalid."""
    pass
