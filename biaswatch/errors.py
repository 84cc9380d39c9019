"""
Error types raised by the BiasWatch core.

Nothing in the core retries. Callers resubmit corrected input.
"""

from __future__ import annotations


class BiasWatchError(Exception):
    """Base class for all BiasWatch errors."""


class FeedbackValidationError(BiasWatchError, ValueError):
    """Feedback event is missing required fields or has invalid values."""


class NoCorrectionStrategyError(BiasWatchError, LookupError):
    """No correction strategy is registered for the requested bias type."""

    def __init__(self, bias_type):
        self.bias_type = bias_type
        label = getattr(bias_type, "value", bias_type)
        super().__init__(f"No correction strategy found for bias type: {label}")
