"""Skew detection and reconciliation of rounded tax components."""
from __future__ import annotations

from decimal import Decimal

import pytest

from taxadvisor.calculator.reconcile import (
    detect_skew,
    reconcile,
    reconcile_components,
    to_decimal,
)
from taxadvisor.errors import SkewToleranceExceeded


def test_drift_lands_on_largest_part() -> None:
    result = reconcile([100.004, 4.001, 0], 104.00)
    assert result == [Decimal("99.999"), Decimal("4.001"), Decimal("0")]
    assert sum(result) == Decimal("104.00")


def test_no_drift_returns_parts_unchanged() -> None:
    assert reconcile([100, 4, 0.5], 104.5) == [Decimal("100"), Decimal("4"), Decimal("0.5")]


def test_drift_equal_to_tolerance_is_corrected() -> None:
    result = reconcile([50.00, 10.00], 60.01, tolerance=0.01)
    assert result == [Decimal("50.01"), Decimal("10.00")]


def test_drift_above_tolerance_raises() -> None:
    with pytest.raises(SkewToleranceExceeded) as excinfo:
        reconcile([50.00, 10.00], 60.05, tolerance=0.01)
    assert excinfo.value.drift == Decimal("0.05")
    assert excinfo.value.tolerance == Decimal("0.01")


def test_largest_by_magnitude_includes_negative_parts() -> None:
    result = reconcile([10, -200, 50], -140.01)
    assert result == [Decimal("10"), Decimal("-200.01"), Decimal("50")]


def test_tie_on_magnitude_adjusts_first() -> None:
    result = reconcile([25, -25, 1], 1.01)
    assert result == [Decimal("25.01"), Decimal("-25"), Decimal("1")]


def test_empty_parts_with_zero_total() -> None:
    assert reconcile([], 0) == []


def test_empty_parts_with_non_zero_total_raises() -> None:
    with pytest.raises(ValueError):
        reconcile([], 0.01)


def test_reconcile_components_preserves_keys_and_order() -> None:
    result = reconcile_components(
        {"income_tax": 12500.2, "cess": 500.01, "surcharge": 0.0}, 13000.20
    )
    assert list(result) == ["income_tax", "cess", "surcharge"]
    assert result["income_tax"] == Decimal("12500.19")
    assert sum(result.values()) == Decimal("13000.20")


def test_detect_skew_reports_without_correcting() -> None:
    report = detect_skew([1.005, 2.005], 3.00, tolerance=0.01)
    assert report.actual_total == Decimal("3.010")
    assert report.drift == Decimal("-0.010")
    assert report.has_skew
    assert report.within_tolerance


def test_detect_skew_clean_sum() -> None:
    report = detect_skew([0.1, 0.2], 0.3)
    assert not report.has_skew


def test_to_decimal_uses_decimal_text_not_binary_value() -> None:
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal(Decimal("1.23")) == Decimal("1.23")
    assert to_decimal("7") == Decimal("7")
