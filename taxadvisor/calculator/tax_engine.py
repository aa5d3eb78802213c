"""
taxadvisor tax engine — progressive slab tax for one regime, plus regime comparison.
Pure Python, no I/O, deterministic. Same input → same output.

Rates, slabs, rebate and surcharge thresholds come from RegimeRules
(see tax_tables.py); nothing jurisdiction- or year-specific is hardcoded here
apart from the senior-citizen age cut-offs.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from taxadvisor.calculator.reconcile import reconcile_components
from taxadvisor.calculator.schemas import (
    BracketTax,
    Regime,
    RegimeComparison,
    RegimeRules,
    RebateRule,
    SurchargeTier,
    TaxBracket,
    TaxInput,
    TaxResult,
)
from taxadvisor.calculator.tax_tables import TaxTables, get_tax_tables
from taxadvisor.config import settings

# ===========================================================================
# AGE CUT-OFFS (senior exemption limits themselves are table data)
# ===========================================================================

SENIOR_CITIZEN_AGE       = 60
SUPER_SENIOR_CITIZEN_AGE = 80


# ===========================================================================
# INTERNAL HELPERS (pure functions, no I/O)
# ===========================================================================

def _money(amount: float) -> float:
    """Round to paise."""
    return round(amount, 2)


def effective_brackets(rules: RegimeRules, age: int) -> List[TaxBracket]:
    """
    Slabs that apply to a filer of the given age.

    Senior (60+) and super-senior (80+) filers get a higher zero-rate slab when
    the rules define one. Slabs wholly below the new limit disappear and the next
    slab starts at the limit, e.g. super-senior old regime: 0–5L 0%, 5–10L 20%, >10L 30%.
    """
    limit: Optional[float] = None
    if age >= SUPER_SENIOR_CITIZEN_AGE and rules.super_senior_exemption_limit is not None:
        limit = rules.super_senior_exemption_limit
    elif age >= SENIOR_CITIZEN_AGE and rules.senior_exemption_limit is not None:
        limit = rules.senior_exemption_limit

    if limit is None:
        return list(rules.brackets)

    shifted = [rules.brackets[0].model_copy(update={"upper_bound": limit})]
    for bracket in rules.brackets[1:]:
        if bracket.upper_bound is not None and bracket.upper_bound <= limit:
            continue
        shifted.append(bracket.model_copy(update={"lower_bound": max(bracket.lower_bound, limit)}))
    return shifted


def _calculate_slab_tax(
    taxable_income: float, brackets: List[TaxBracket]
) -> Tuple[float, List[BracketTax]]:
    """
    Apply progressive slab tax. Walks slabs in ascending order, taxing
    min(remaining, slab width) in each, and stops once nothing remains.
    Returns (base_tax, breakdown); base_tax is the running sum of the breakdown rows.
    """
    tax = 0.0
    remaining = taxable_income
    breakdown: List[BracketTax] = []
    for bracket in brackets:
        if remaining <= 0:
            break
        taxed = min(remaining, bracket.width)
        bracket_tax = taxed * bracket.rate
        breakdown.append(BracketTax(
            lower_bound=bracket.lower_bound,
            upper_bound=bracket.upper_bound,
            rate=bracket.rate,
            taxed_amount=taxed,
            tax=bracket_tax,
        ))
        tax += bracket_tax
        remaining -= taxed
    return tax, breakdown


def _calculate_rebate(taxable_income: float, tax: float, rule: RebateRule) -> float:
    """
    87A rebate amount.
    If taxable_income <= ceiling: rebate = min(tax, max_rebate), so tax never goes negative.
    Above the ceiling: no rebate at all (no marginal relief).
    """
    if taxable_income <= rule.taxable_ceiling:
        return min(tax, rule.max_rebate)
    return 0.0


def _surcharge_rate(taxable_income: float, tiers: List[SurchargeTier]) -> float:
    """Rate of the highest tier whose threshold taxable income strictly exceeds; 0 below all tiers."""
    rate = 0.0
    for tier in tiers:
        if taxable_income > tier.threshold:
            rate = tier.rate
    return rate


def marginal_rate(taxable_income: float, brackets: List[TaxBracket]) -> float:
    """Slab rate of the bracket containing taxable_income (cess not included)."""
    for bracket in brackets:
        if bracket.contains(taxable_income):
            return bracket.rate
    return brackets[-1].rate


# ===========================================================================
# SINGLE-REGIME CALCULATOR
# ===========================================================================

def compute_tax(tax_input: TaxInput, rules: RegimeRules) -> TaxResult:
    """
    Tax for one regime under the supplied rules.

    Standard deduction: salaried filers only.
    Itemised deductions: only where rules.allows_itemized_deductions (old regime).
    Rebate, then cess and surcharge, both on the post-rebate tax.
    """
    # Step 1: Deductions and taxable income (never negative)
    standard_deduction = rules.standard_deduction if tax_input.is_salaried else 0.0
    itemized = tax_input.other_deductions if rules.allows_itemized_deductions else 0.0
    taxable_income = max(0.0, tax_input.gross_income - standard_deduction - itemized)

    # Step 2: Slab tax (age-adjusted slabs)
    brackets = effective_brackets(rules, tax_input.age)
    base_tax, breakdown = _calculate_slab_tax(taxable_income, brackets)

    # Step 3: 87A rebate
    rebate = _calculate_rebate(taxable_income, base_tax, rules.rebate)
    tax_after_rebate = max(0.0, base_tax - rebate)

    # Step 4: Cess and surcharge, both on post-rebate tax
    cess = _money(tax_after_rebate * rules.cess_rate)
    surcharge_rate = _surcharge_rate(taxable_income, rules.surcharge_tiers)
    surcharge = _money(tax_after_rebate * surcharge_rate)

    # Step 5: Total, with the rounded components made to add up to it exactly
    total_tax = _money(tax_after_rebate + cess + surcharge)
    parts = reconcile_components(
        {"income_tax": _money(tax_after_rebate), "cess": cess, "surcharge": surcharge},
        total_tax,
        settings.skew_tolerance,
    )

    gross = tax_input.gross_income
    effective_rate = _money(total_tax / gross * 100) if gross > 0 else 0.0

    return TaxResult(
        financial_year=tax_input.financial_year,
        regime=tax_input.regime,
        gross_income=gross,
        standard_deduction=standard_deduction,
        deductions_applied=itemized,
        taxable_income=taxable_income,
        bracket_breakdown=breakdown,
        base_tax=base_tax,
        rebate=rebate,
        income_tax=float(parts["income_tax"]),
        cess=float(parts["cess"]),
        surcharge_rate=surcharge_rate,
        surcharge=float(parts["surcharge"]),
        total_tax=total_tax,
        effective_rate=effective_rate,
    )


def calculate_tax(tax_input: TaxInput, tables: Optional[TaxTables] = None) -> TaxResult:
    """
    Look up the rules for tax_input's financial year and regime, then compute_tax().
    Raises ConfigurationError if no table exists for that year/regime.
    """
    tables = tables or get_tax_tables()
    rules = tables.get_rules(tax_input.financial_year, tax_input.regime)
    return compute_tax(tax_input, rules)


def calculate_for_regime(
    tax_input: TaxInput, regime: Regime, tables: Optional[TaxTables] = None
) -> TaxResult:
    """calculate_tax() with the regime swapped, every other input held fixed."""
    return calculate_tax(tax_input.model_copy(update={"regime": regime}), tables)


# ===========================================================================
# COMPARE REGIMES — public API
# ===========================================================================

def compare_regimes(tax_input: TaxInput, tables: Optional[TaxTables] = None) -> RegimeComparison:
    """
    Compute both regimes for the same input and recommend the cheaper one.
    Ties go to the new regime (no investment proofs to maintain).
    """
    old = calculate_for_regime(tax_input, Regime.old, tables)
    new = calculate_for_regime(tax_input, Regime.new, tables)

    if old.total_tax < new.total_tax:
        recommended = Regime.old
        savings = new.total_tax - old.total_tax
    elif new.total_tax < old.total_tax:
        recommended = Regime.new
        savings = old.total_tax - new.total_tax
    else:
        recommended = Regime.new
        savings = 0.0

    if savings == 0.0:
        rationale = (
            f"Both regimes result in the same tax (₹{old.total_tax:,.0f}). "
            "New Regime recommended as the simpler option with no investment proofs to maintain."
        )
    elif recommended is Regime.old:
        rationale = (
            f"Old Regime saves ₹{savings:,.0f} over the New Regime. "
            f"Old Regime tax: ₹{old.total_tax:,.0f} vs New Regime tax: ₹{new.total_tax:,.0f}. "
            f"Your deductions of ₹{old.deductions_applied:,.0f} outweigh the lower New Regime slab rates."
        )
    else:
        rationale = (
            f"New Regime saves ₹{savings:,.0f} over the Old Regime. "
            f"New Regime tax: ₹{new.total_tax:,.0f} vs Old Regime tax: ₹{old.total_tax:,.0f}. "
            f"Your Old Regime deductions (₹{old.deductions_applied:,.0f}) "
            f"are insufficient to overcome the lower New Regime slab rates."
        )

    return RegimeComparison(
        old_regime=old,
        new_regime=new,
        recommended_regime=recommended,
        savings_amount=_money(savings),
        rationale=rationale,
    )
