"""
Exceptions raised by the price predictor
"""

from typing import Optional


class PredictorError(Exception):
    """Base class for price predictor errors"""


class FeedUnavailable(PredictorError):
    """The price request failed (network, HTTP status or payload)"""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause
