"""
System failure error classifications.

These exceptions represent broken internal state or configuration rather
than bad market data, and typically require intervention to resolve.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class InvalidSignalError(SystemFailureError):
    """A signal of unknown or non-tradable kind reached the order step."""

    def __init__(self, message: str, signal_kind: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.signal_kind = signal_kind


class MetricsCalculationError(SystemFailureError):
    """Critical error in indicator calculation that prevents evaluation."""

    def __init__(self, message: str, metric_name: Optional[str] = None,
                 calculation_input: Optional[Dict[str, Any]] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.metric_name = metric_name
        self.calculation_input = calculation_input


class ConfigurationError(SystemFailureError):
    """Configuration could not be loaded or failed validation."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []
