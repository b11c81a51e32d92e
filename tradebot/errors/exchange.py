"""
Exchange collaborator failures.

Raised by exchange adapters when a price, balance or order request cannot
be completed. The controller treats every one of them as fatal to the
current cycle only.
"""

from typing import Optional, Dict, Any


class ExchangeError(Exception):
    """Base class for failed exchange interactions."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class ExternalFetchError(ExchangeError):
    """Price or balance data could not be fetched."""

    def __init__(self, message: str, resource: Optional[str] = None,
                 status_code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.resource = resource
        self.status_code = status_code


class OrderSubmissionError(ExchangeError):
    """The exchange rejected an order or the transport failed."""

    def __init__(self, message: str, market: Optional[str] = None,
                 side: Optional[str] = None, status_code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.market = market
        self.side = side
        self.status_code = status_code
