"""
errors.py — domain exceptions raised by the tax calculator.

Each maps to one HTTP error code in main.py:
  ConfigurationError      → 400 CONFIGURATION_ERROR
  InvalidInputError       → 422 VALIDATION_ERROR
  SkewToleranceExceeded   → 500 SKEW_TOLERANCE_EXCEEDED
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional


class ConfigurationError(LookupError):
    """No tax table exists for the requested financial year / regime, or the tables are malformed."""


class InvalidInputError(ValueError):
    """
    A TaxInput was rejected before computation.

    `details` holds every violation as {"field": str | None, "issue": str},
    so the caller can fix all of them in one round trip.
    """

    def __init__(self, message: str, details: Optional[list[dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.details: list[dict[str, Any]] = details or []


class SkewToleranceExceeded(ArithmeticError):
    """Rounding drift between components and their total is larger than the allowed tolerance."""

    def __init__(self, drift: Decimal, tolerance: Decimal) -> None:
        super().__init__(
            f"Component drift {drift} exceeds tolerance {tolerance}; "
            "the component calculation is inconsistent with its total"
        )
        self.drift = drift
        self.tolerance = tolerance


__all__ = ["ConfigurationError", "InvalidInputError", "SkewToleranceExceeded"]
