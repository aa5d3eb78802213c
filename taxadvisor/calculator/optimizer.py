"""
taxadvisor optimizer — ranked tax-saving suggestions for one TaxInput.
Pure functions. No I/O. Recomputed on every request, never persisted.

Suggestions:
  switch-to-new / switch-to-old   other regime is strictly cheaper; saving = exact delta
  standard-deduction-benefit      salaried, on old regime, new regime has the larger standard deduction
  maximize-80c                    old regime, 80C headroom left (cap − claimed deductions)
  health-insurance                old regime, 80D headroom (₹25K, ₹50K for seniors)
  home-loan-interest              old regime, Section 24(b) headroom (₹2L)
  simplified-compliance           old regime with under ₹50K of deductions; non-monetary

Headroom savings = headroom × marginal slab rate × (1 + cess), capped at the tax
actually payable. Headroom and standard-deduction suggestions saving less than
settings.suggestion_min_saving are dropped; a cheaper regime is always suggested.
"""
from __future__ import annotations

from typing import List, Optional

from taxadvisor.calculator.deductions import get_deduction
from taxadvisor.calculator.schemas import OptimizationSuggestion, Regime, TaxInput, TaxResult
from taxadvisor.calculator.tax_engine import (
    SENIOR_CITIZEN_AGE,
    calculate_for_regime,
    compute_tax,
    effective_brackets,
    marginal_rate,
)
from taxadvisor.calculator.tax_tables import TaxTables, get_tax_tables
from taxadvisor.config import settings

_SIMPLIFIED_COMPLIANCE_DEDUCTIONS = 50_000   # Below this, old-regime paperwork buys little


def _format_inr(amount: float) -> str:
    """₹ amounts rounded to the rupee with thousands separators."""
    return f"{round(amount):,.0f}"


def _effective_marginal_rate(
    tax_input: TaxInput, result: TaxResult, tables: TaxTables
) -> float:
    """
    Marginal slab rate for the filer's current taxable income, cess inclusive
    (e.g. 0.312 for the 30% slab with 4% cess).
    """
    rules = tables.get_rules(result.financial_year, result.regime)
    brackets = effective_brackets(rules, tax_input.age)
    return marginal_rate(result.taxable_income, brackets) * (1 + rules.cess_rate)


def _worth_suggesting(saving: float) -> bool:
    return saving > 0 and saving >= settings.suggestion_min_saving


def _standard_deduction_saving(
    tax_input: TaxInput, old: TaxResult, new: TaxResult, tables: TaxTables
) -> float:
    """
    What the new regime's larger standard deduction is worth to this filer.

    Estimated as the extra deduction at the new-regime marginal rate (cess
    inclusive), then capped at the difference it actually makes to new-regime
    tax (87A rebate included) and at the tax currently paid under the old regime.
    """
    estimate = round(
        (new.standard_deduction - old.standard_deduction)
        * _effective_marginal_rate(tax_input, new, tables),
        2,
    )
    rules = tables.get_rules(new.financial_year, new.regime)
    without_extra = compute_tax(
        tax_input.model_copy(update={"regime": new.regime}),
        rules.model_copy(update={"standard_deduction": old.standard_deduction}),
    )
    achievable = round(without_extra.total_tax - new.total_tax, 2)
    return max(0.0, min(estimate, achievable, old.total_tax))


def _headroom_suggestion(
    suggestion_id: str,
    title: str,
    description: str,
    headroom: float,
    rate: float,
    tax_payable: float,
    applicability: int,
    complexity: int,
) -> Optional[OptimizationSuggestion]:
    """
    Build a deduction-headroom suggestion, or None if the saving is below the configured minimum.
    The saving is capped at tax_payable: nobody saves more tax than they owe.
    """
    if headroom <= 0:
        return None
    saving = min(round(headroom * rate, 2), tax_payable)
    if not _worth_suggesting(saving):
        return None
    return OptimizationSuggestion(
        id=suggestion_id,
        title=title,
        description=description.format(headroom=_format_inr(headroom), saving=_format_inr(saving)),
        potential_saving=saving,
        applicability=applicability,
        complexity=complexity,
    )


def suggest(
    tax_input: TaxInput, tables: Optional[TaxTables] = None
) -> List[OptimizationSuggestion]:
    """
    Compare both regimes for tax_input and return suggestions sorted by
    potential_saving descending. Ties keep generation order (stable sort).
    """
    tables = tables or get_tax_tables()
    old = calculate_for_regime(tax_input, Regime.old, tables)
    new = calculate_for_regime(tax_input, Regime.new, tables)
    selected = tax_input.regime

    suggestions: List[OptimizationSuggestion] = []

    # --- 1. Regime switch (only when strictly cheaper) ---
    if selected is Regime.old and new.total_tax < old.total_tax:
        delta = round(old.total_tax - new.total_tax, 2)
        suggestions.append(OptimizationSuggestion(
            id="switch-to-new",
            title="Switch to New Tax Regime",
            description=(
                f"Based on your income and deductions, you could save ₹{_format_inr(delta)} "
                "by switching to the new tax regime."
            ),
            potential_saving=delta,
            applicability=100,
            complexity=20,
        ))
    elif selected is Regime.new and old.total_tax < new.total_tax:
        delta = round(new.total_tax - old.total_tax, 2)
        suggestions.append(OptimizationSuggestion(
            id="switch-to-old",
            title="Switch to Old Tax Regime",
            description=(
                f"Based on your income and deductions, you could save ₹{_format_inr(delta)} "
                "by switching to the old tax regime and utilising deductions."
            ),
            potential_saving=delta,
            applicability=100,
            complexity=40,
        ))

    if selected is Regime.old:
        # --- 2. Larger standard deduction under the new regime ---
        if tax_input.is_salaried:
            saving = 0.0
            if new.standard_deduction > old.standard_deduction:
                saving = _standard_deduction_saving(tax_input, old, new, tables)
            if _worth_suggesting(saving):
                suggestions.append(OptimizationSuggestion(
                    id="standard-deduction-benefit",
                    title="Higher Standard Deduction in New Regime",
                    description=(
                        f"The new tax regime offers a standard deduction of ₹{_format_inr(new.standard_deduction)} "
                        f"compared to ₹{_format_inr(old.standard_deduction)} in the old regime. "
                        f"This could save you approximately ₹{_format_inr(saving)}."
                    ),
                    potential_saving=saving,
                    applicability=90,
                    complexity=10,
                ))

        # --- 3. Deduction headroom (old regime only) ---
        rate = _effective_marginal_rate(tax_input, old, tables)
        cap_80c = get_deduction("80C").cap_for_age(tax_input.age, SENIOR_CITIZEN_AGE) or 0.0
        cap_80d = get_deduction("80D").cap_for_age(tax_input.age, SENIOR_CITIZEN_AGE) or 0.0
        cap_24b = get_deduction("24(b)").cap_for_age(tax_input.age, SENIOR_CITIZEN_AGE) or 0.0
        candidates = [
            _headroom_suggestion(
                "maximize-80c",
                "Maximize Section 80C Deductions",
                "You can invest up to ₹{headroom} more in tax-saving instruments under Section 80C "
                "to save approximately ₹{saving} in taxes.",
                headroom=cap_80c - tax_input.other_deductions,
                rate=rate,
                tax_payable=old.total_tax,
                applicability=85,
                complexity=50,
            ),
            _headroom_suggestion(
                "health-insurance",
                "Health Insurance Premium Deduction",
                "Health insurance premiums for yourself and family of up to ₹{headroom} "
                "can be claimed under Section 80D, saving approximately ₹{saving}.",
                headroom=cap_80d,
                rate=rate,
                tax_payable=old.total_tax,
                applicability=75,
                complexity=30,
            ),
            _headroom_suggestion(
                "home-loan-interest",
                "Home Loan Interest Deduction",
                "If you have a home loan, interest paid up to ₹{headroom} can be claimed "
                "under Section 24(b), saving approximately ₹{saving}.",
                headroom=cap_24b,
                rate=rate,
                tax_payable=old.total_tax,
                applicability=60,
                complexity=40,
            ),
        ]
        suggestions.extend(s for s in candidates if s is not None)

        # --- 4. Non-monetary: simpler compliance ---
        if tax_input.other_deductions < _SIMPLIFIED_COMPLIANCE_DEDUCTIONS:
            suggestions.append(OptimizationSuggestion(
                id="simplified-compliance",
                title="Simplified Tax Compliance",
                description=(
                    "The new tax regime offers simplified compliance without the need to maintain "
                    "investment proofs and documentation for various deductions."
                ),
                potential_saving=0,
                applicability=70,
                complexity=10,
            ))

    return sorted(suggestions, key=lambda s: s.potential_saving, reverse=True)
