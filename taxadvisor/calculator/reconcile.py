"""
Skew reconciliation for independently rounded tax components.

Income tax, cess and surcharge are each rounded to paise, so their sum can
drift from the rounded total by a paisa or so. reconcile() moves that drift
onto the largest component so the parts add up to the total exactly. Drift
above the tolerance means the components were computed inconsistently; that
is raised as SkewToleranceExceeded, never patched over.

Arithmetic is Decimal throughout; floats are converted through str() so
100.004 stays 100.004 and not its binary approximation.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Sequence, Union

from taxadvisor.config import settings
from taxadvisor.errors import SkewToleranceExceeded

Number = Union[Decimal, float, int, str]


@dataclass(frozen=True)
class SkewReport:
    actual_total: Decimal
    expected_total: Decimal
    drift: Decimal              # expected_total − actual_total
    tolerance: Decimal

    @property
    def has_skew(self) -> bool:
        return self.drift != 0

    @property
    def within_tolerance(self) -> bool:
        return abs(self.drift) <= self.tolerance


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def detect_skew(
    parts: Sequence[Number],
    expected_total: Number,
    tolerance: Optional[Number] = None,
) -> SkewReport:
    """Measure drift between sum(parts) and expected_total without correcting anything."""
    actual = sum((to_decimal(p) for p in parts), Decimal(0))
    expected = to_decimal(expected_total)
    tol = to_decimal(settings.skew_tolerance if tolerance is None else tolerance)
    return SkewReport(actual_total=actual, expected_total=expected, drift=expected - actual, tolerance=tol)


def reconcile(
    parts: Sequence[Number],
    expected_total: Number,
    tolerance: Optional[Number] = None,
) -> List[Decimal]:
    """
    Return parts adjusted so that sum(result) == expected_total exactly.

    The whole drift lands on the largest-magnitude part (the first one on ties).
    Raises SkewToleranceExceeded when |drift| > tolerance, and ValueError for an
    empty parts list with a non-zero total.
    """
    values = [to_decimal(p) for p in parts]
    report = detect_skew(values, expected_total, tolerance)
    if not report.has_skew:
        return values
    if not report.within_tolerance:
        raise SkewToleranceExceeded(report.drift, report.tolerance)
    if not values:
        raise ValueError("Cannot reconcile an empty list of parts against a non-zero total")

    largest = max(range(len(values)), key=lambda i: abs(values[i]))
    values[largest] += report.drift
    return values


def reconcile_components(
    components: Mapping[str, Number],
    expected_total: Number,
    tolerance: Optional[Number] = None,
) -> Dict[str, Decimal]:
    """Named-component form of reconcile(); key order is preserved."""
    keys = list(components)
    corrected = reconcile([components[k] for k in keys], expected_total, tolerance)
    return dict(zip(keys, corrected))


__all__ = ["SkewReport", "to_decimal", "detect_skew", "reconcile", "reconcile_components"]
