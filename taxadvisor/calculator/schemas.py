"""
schemas.py — calculator Pydantic v2 data contracts.

Defines:
  - Regime              (old | new)
  - TaxInput            (one calculation request — immutable)
  - TaxBracket, RebateRule, SurchargeTier, RegimeRules
                        (one regime's rules for one financial year — loaded from tax_tables.json)
  - BracketTax          (one row of the slab-by-slab breakdown)
  - TaxResult           (full computation for one regime)
  - RegimeComparison    (both regimes side by side with a recommendation)
  - OptimizationSuggestion

All monetary fields are INR. Rates are fractions (0.05 == 5%), except
effective_rate which is a percentage for display.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from taxadvisor.config import settings

# Largest accepted income / deduction (₹1 lakh crore). Below it, float rounding
# drift in compute_tax stays inside the skew tolerance.
MAX_AMOUNT = 1_000_000_000_000


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Regime(str, Enum):
    old = "old"
    new = "new"


# ---------------------------------------------------------------------------
# TaxInput — what the form / API caller supplies
# ---------------------------------------------------------------------------

class TaxInput(BaseModel):
    """
    Inputs for a single tax calculation.

    other_deductions is the itemised Chapter VI-A total (80C, 80D, 24(b) ...).
    It is ignored under regimes that do not allow itemised deductions.

    frozen=True: a TaxInput is never mutated; use model_copy(update=...) to vary it.
    extra='forbid': unknown fields from client requests are rejected.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    gross_income: float = Field(
        ..., ge=0, le=MAX_AMOUNT, allow_inf_nan=False,
        description="Annual gross income in INR.",
    )
    other_deductions: float = Field(
        default=0, ge=0, le=MAX_AMOUNT, allow_inf_nan=False,
        description="Itemised deductions claimed (old regime only).",
    )
    regime: Regime = Field(default=Regime.new)
    is_salaried: bool = Field(
        default=True,
        description="Salaried filers receive the regime's standard deduction.",
    )
    age: int = Field(default=30, ge=0, le=150)
    financial_year: str = Field(
        default_factory=lambda: settings.default_financial_year,
        description="Financial year string, e.g. '2024-25'.",
    )


# ---------------------------------------------------------------------------
# Regime rules — one (financial year, regime) entry of the tax tables
# ---------------------------------------------------------------------------

class TaxBracket(BaseModel):
    """One progressive slab. upper_bound=None means unbounded."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    lower_bound: float = Field(..., ge=0)
    upper_bound: Optional[float] = None
    rate: float = Field(..., ge=0, le=1)

    @model_validator(mode="after")
    def _check_bounds(self) -> "TaxBracket":
        if self.upper_bound is not None and self.upper_bound <= self.lower_bound:
            raise ValueError(
                f"Bracket upper bound {self.upper_bound} must exceed lower bound {self.lower_bound}"
            )
        return self

    @property
    def width(self) -> float:
        if self.upper_bound is None:
            return float("inf")
        return self.upper_bound - self.lower_bound

    def contains(self, amount: float) -> bool:
        """True if amount falls in (lower_bound, upper_bound]; the first slab also owns 0."""
        if amount <= self.lower_bound:
            return self.lower_bound == 0 and amount <= 0
        return self.upper_bound is None or amount <= self.upper_bound


class RebateRule(BaseModel):
    """Section 87A: up to max_rebate off the slab tax when taxable income <= taxable_ceiling."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    taxable_ceiling: float = Field(..., ge=0)
    max_rebate: float = Field(..., ge=0)


class SurchargeTier(BaseModel):
    """Surcharge rate applied when taxable income strictly exceeds threshold."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    threshold: float = Field(..., ge=0)
    rate: float = Field(..., ge=0, le=1)


class RegimeRules(BaseModel):
    """
    Everything the engine needs to compute one regime for one financial year.

    brackets must be contiguous, start at 0 and end with an unbounded slab.
    senior_exemption_limit / super_senior_exemption_limit replace the zero-rate
    slab's upper bound for filers aged 60+ / 80+ (old regime only), so each must
    lie above that bound.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    brackets: List[TaxBracket] = Field(..., min_length=1)
    standard_deduction: float = Field(..., ge=0)
    allows_itemized_deductions: bool
    rebate: RebateRule
    cess_rate: float = Field(default=0.04, ge=0, le=1)
    surcharge_tiers: List[SurchargeTier] = Field(default_factory=list)
    senior_exemption_limit: Optional[float] = Field(default=None, gt=0)
    super_senior_exemption_limit: Optional[float] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _check_tables(self) -> "RegimeRules":
        if self.brackets[0].lower_bound != 0:
            raise ValueError("First bracket must start at 0")
        for prev, nxt in zip(self.brackets, self.brackets[1:]):
            if prev.upper_bound is None or prev.upper_bound != nxt.lower_bound:
                raise ValueError(
                    f"Brackets must be contiguous: {prev.upper_bound} → {nxt.lower_bound}"
                )
        if self.brackets[-1].upper_bound is not None:
            raise ValueError("Last bracket must be unbounded (upper_bound=null)")
        thresholds = [tier.threshold for tier in self.surcharge_tiers]
        if thresholds != sorted(thresholds):
            raise ValueError("Surcharge tiers must be sorted by ascending threshold")
        zero_rate_ceiling = self.brackets[0].upper_bound
        for name in ("senior_exemption_limit", "super_senior_exemption_limit"):
            limit = getattr(self, name)
            if limit is not None and (zero_rate_ceiling is None or limit <= zero_rate_ceiling):
                raise ValueError(
                    f"{name} {limit} must exceed the upper bound of a bounded first bracket "
                    f"(got {zero_rate_ceiling})"
                )
        if (
            self.senior_exemption_limit is not None
            and self.super_senior_exemption_limit is not None
            and self.super_senior_exemption_limit < self.senior_exemption_limit
        ):
            raise ValueError("super_senior_exemption_limit must not be below senior_exemption_limit")
        return self


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class BracketTax(BaseModel):
    """Tax contributed by one slab. Only slabs that taxed a non-zero amount appear."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    lower_bound: float
    upper_bound: Optional[float]
    rate: float
    taxed_amount: float
    tax: float


class TaxResult(BaseModel):
    """
    Complete tax computation for a single regime.

    Computation sequence:
      1. taxable_income = max(0, gross − standard_deduction − deductions_applied)
      2. base_tax       = Σ bracket_breakdown[i].tax
      3. income_tax     = base_tax − rebate             (87A)
      4. cess           = cess_rate × income_tax        ← NOT on pre-rebate tax
      5. surcharge      = surcharge_rate × income_tax
      6. total_tax      = income_tax + cess + surcharge
    income_tax, cess, surcharge and total_tax are rounded to paise and
    reconciled so the three components sum exactly to total_tax.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    financial_year: str
    regime: Regime
    gross_income: float
    standard_deduction: float
    deductions_applied: float
    taxable_income: float
    bracket_breakdown: List[BracketTax]
    base_tax: float
    rebate: float
    income_tax: float
    cess: float
    surcharge_rate: float
    surcharge: float
    total_tax: float
    effective_rate: float        # total_tax / gross_income × 100


class RegimeComparison(BaseModel):
    """Both regimes computed for the same input, with the cheaper one recommended."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    old_regime: TaxResult
    new_regime: TaxResult
    recommended_regime: Regime          # tie → new
    savings_amount: float               # |old.total_tax − new.total_tax|
    rationale: str


class OptimizationSuggestion(BaseModel):
    """A ranked, recomputed-per-request tip for lowering tax. Never persisted."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    title: str
    description: str
    potential_saving: float = Field(..., ge=0)
    applicability: int = Field(..., ge=0, le=100)
    complexity: int = Field(..., ge=0, le=100)


__all__ = [
    "MAX_AMOUNT",
    "Regime",
    "TaxInput",
    "TaxBracket",
    "RebateRule",
    "SurchargeTier",
    "RegimeRules",
    "BracketTax",
    "TaxResult",
    "RegimeComparison",
    "OptimizationSuggestion",
]
