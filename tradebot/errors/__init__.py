"""
Error classification for the trading engine.

This module provides a structured exception hierarchy for the kinds of
failures an evaluation cycle can meet: bad price data, failed exchange
interactions and broken internal state.
"""

from .data_quality import (
    DataQualityError,
    InsufficientDataError,
    InvalidPriceError,
    MalformedDataError,
)
from .exchange import (
    ExchangeError,
    ExternalFetchError,
    OrderSubmissionError,
)
from .system_failures import (
    SystemFailureError,
    InvalidSignalError,
    MetricsCalculationError,
    ConfigurationError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "InsufficientDataError",
    "InvalidPriceError",
    "MalformedDataError",
    # Exchange Errors
    "ExchangeError",
    "ExternalFetchError",
    "OrderSubmissionError",
    # System Failures
    "SystemFailureError",
    "InvalidSignalError",
    "MetricsCalculationError",
    "ConfigurationError",
]
