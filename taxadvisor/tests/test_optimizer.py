"""
Optimizer tests — suggestion selection, savings amounts and ranking.
FY 2024-25 tables; savings hand-computed as headroom × slab rate × 1.04.
"""
from __future__ import annotations

import pytest

from taxadvisor.calculator.optimizer import suggest
from taxadvisor.calculator.schemas import TaxInput
from taxadvisor.calculator.tax_engine import calculate_tax, compare_regimes


def _ids(suggestions) -> list[str]:
    return [s.id for s in suggestions]


def test_old_regime_salaried_10l_full_ranking(tables) -> None:
    # old total 106600 vs new 44200 → switch saves 62400
    # old marginal 20% → ×1.04 = 0.208: 24(b) 200000 → 41600, 80C 150000 → 31200, 80D 25000 → 5200
    # new marginal 10% → 0.104 × (75000 − 50000) → 2600
    result = suggest(TaxInput(gross_income=1_000_000, regime="old"), tables)

    assert _ids(result) == [
        "switch-to-new",
        "home-loan-interest",
        "maximize-80c",
        "health-insurance",
        "standard-deduction-benefit",
        "simplified-compliance",
    ]
    savings = {s.id: s.potential_saving for s in result}
    assert savings["switch-to-new"] == pytest.approx(62_400)
    assert savings["home-loan-interest"] == pytest.approx(41_600)
    assert savings["maximize-80c"] == pytest.approx(31_200)
    assert savings["health-insurance"] == pytest.approx(5_200)
    assert savings["standard-deduction-benefit"] == pytest.approx(2_600)
    assert savings["simplified-compliance"] == 0


def test_switch_saving_equals_comparison_delta(tables) -> None:
    tax_input = TaxInput(gross_income=1_000_000, regime="old")
    comparison = compare_regimes(tax_input, tables)
    switch = next(s for s in suggest(tax_input, tables) if s.id == "switch-to-new")
    assert switch.potential_saving == pytest.approx(comparison.savings_amount)
    assert switch.applicability == 100


def test_new_regime_already_cheapest_no_suggestions(tables) -> None:
    assert suggest(TaxInput(gross_income=1_000_000, regime="new"), tables) == []


def test_new_regime_with_large_deductions_suggests_switch_to_old(tables) -> None:
    # old: taxable 550000 → 22500 + 900 cess = 23400; new: 44200 → 20800
    result = suggest(
        TaxInput(gross_income=1_000_000, other_deductions=400_000, regime="new"), tables
    )
    assert _ids(result) == ["switch-to-old"]
    assert result[0].potential_saving == pytest.approx(20_800)
    assert "₹20,800" in result[0].description


def test_equal_savings_keep_generation_order(tables) -> None:
    # age 65, deductions 100000 → old taxable 850000, marginal 20% → 0.208
    # 80C headroom 50000 → 10400; senior 80D cap 50000 → 10400
    result = suggest(
        TaxInput(gross_income=1_000_000, other_deductions=100_000, regime="old", age=65),
        tables,
    )
    savings = {s.id: s.potential_saving for s in result}
    assert savings["maximize-80c"] == pytest.approx(savings["health-insurance"])
    ids = _ids(result)
    assert ids.index("maximize-80c") < ids.index("health-insurance")


def test_ranking_is_non_increasing(tables) -> None:
    for income in (400_000, 900_000, 1_600_000, 3_000_000, 8_000_000):
        for regime in ("old", "new"):
            result = suggest(
                TaxInput(gross_income=income, other_deductions=75_000, regime=regime), tables
            )
            savings = [s.potential_saving for s in result]
            assert savings == sorted(savings, reverse=True)


def test_zero_rate_filer_gets_only_non_monetary_tip(tables) -> None:
    result = suggest(
        TaxInput(gross_income=200_000, regime="old", is_salaried=False), tables
    )
    assert _ids(result) == ["simplified-compliance"]


def test_headroom_below_minimum_saving_suppressed(tables) -> None:
    # taxable 1351000 → 30% × 1.04 = 0.312; 80C headroom 1000 → ₹312 < ₹1,000
    result = suggest(
        TaxInput(gross_income=1_500_000, other_deductions=149_000, regime="old", is_salaried=False),
        tables,
    )
    assert "maximize-80c" not in _ids(result)
    assert "health-insurance" in _ids(result)


def test_80c_headroom_exhausted_when_deductions_exceed_cap(tables) -> None:
    result = suggest(
        TaxInput(gross_income=2_000_000, other_deductions=250_000, regime="old"), tables
    )
    ids = _ids(result)
    assert "maximize-80c" not in ids
    assert "simplified-compliance" not in ids


def test_non_salaried_gets_no_standard_deduction_tip(tables) -> None:
    result = suggest(
        TaxInput(gross_income=1_000_000, regime="old", is_salaried=False), tables
    )
    assert "standard-deduction-benefit" not in _ids(result)


def test_suggestion_fields_are_within_bounds(tables) -> None:
    for s in suggest(TaxInput(gross_income=1_200_000, regime="old"), tables):
        assert s.potential_saving >= 0
        assert 0 <= s.applicability <= 100
        assert 0 <= s.complexity <= 100
        assert s.title and s.description


def test_rebate_covered_filer_gets_no_monetary_suggestions(tables) -> None:
    # old: taxable 400000 → 7500 fully rebated → total 0; new: taxable 525000 → rebated → 0
    tax_input = TaxInput(gross_income=600_000, other_deductions=150_000, regime="old")
    assert calculate_tax(tax_input, tables).total_tax == 0
    assert suggest(tax_input, tables) == []


def test_headroom_saving_capped_at_tax_payable(tables) -> None:
    # old: taxable 510000 → 12500 + 2000 = 14500, cess 580 → 15080
    # 24(b) 200000 × 0.208 = 41600 and 80C 150000 × 0.208 = 31200 both cap at 15080; 80D 5200 stays
    # new: taxable 485000 → fully rebated, so the larger standard deduction is worth nothing
    result = suggest(TaxInput(gross_income=560_000, regime="old"), tables)
    savings = {s.id: s.potential_saving for s in result}

    assert savings["switch-to-new"] == pytest.approx(15_080)
    assert savings["home-loan-interest"] == pytest.approx(15_080)
    assert savings["maximize-80c"] == pytest.approx(15_080)
    assert savings["health-insurance"] == pytest.approx(5_200)
    assert "standard-deduction-benefit" not in savings


def test_standard_deduction_tip_requires_real_saving(tables) -> None:
    # salaried ₹3L: zero tax in both regimes
    result = suggest(TaxInput(gross_income=300_000, regime="old"), tables)
    assert _ids(result) == ["simplified-compliance"]


@pytest.mark.parametrize("regime", ["old", "new"])
def test_savings_never_exceed_tax_payable(regime: str, tables) -> None:
    for income in (300_000, 560_000, 600_000, 750_000, 1_000_000, 2_500_000, 7_000_000):
        for deductions in (0, 50_000, 150_000, 400_000):
            for age in (30, 65, 85):
                for is_salaried in (True, False):
                    tax_input = TaxInput(
                        gross_income=income,
                        other_deductions=deductions,
                        regime=regime,
                        age=age,
                        is_salaried=is_salaried,
                    )
                    total = calculate_tax(tax_input, tables).total_tax
                    for s in suggest(tax_input, tables):
                        assert s.potential_saving <= total, (
                            f"{s.id} saves ₹{s.potential_saving:,.2f} but tax payable is ₹{total:,.2f} "
                            f"({tax_input!r})"
                        )
