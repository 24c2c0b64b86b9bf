"""Exceptions raised by the melee solver."""

from typing import Any, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .solver import SearchResult


class MeleeError(Exception):
    """Base class for all solver errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InvalidLayoutError(MeleeError, ValueError):
    """Raised when a starting layout cannot be turned into a board"""


class CaptureApplicationError(MeleeError):
    """Raised in strict mode when a generated capture fails to apply"""


class SearchBudgetExceeded(MeleeError):
    """Raised when the solver visits more nodes than its budget allows.

    The partial result gathered so far is kept on ``result``.
    """

    def __init__(self, message: str, result: "SearchResult", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.result = result
