"""
deductions.py — catalogue of common Chapter VI-A / Section 24 deductions.

Served as-is by GET /api/deductions and used by the optimizer for per-section
caps. max_amount=None means the section has no fixed upper limit.
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from taxadvisor.calculator.schemas import Regime


class DeductionInfo(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    section: str
    title: str
    description: str
    max_amount: Optional[float]
    senior_max_amount: Optional[float] = None   # Cap for a filer aged 60+, where it differs
    applicable_regimes: List[Regime]
    conditions: List[str] = []

    def cap_for_age(self, age: int, senior_age: int = 60) -> Optional[float]:
        if age >= senior_age and self.senior_max_amount is not None:
            return self.senior_max_amount
        return self.max_amount


DEDUCTIONS: List[DeductionInfo] = [
    DeductionInfo(
        section="80C",
        title="Investments and Expenses",
        description=(
            "Deduction for investments in PPF, ELSS, life insurance premiums, EPF, NSC, "
            "tax-saving FDs (5-year lock-in), and expenses like tuition fees for children, "
            "principal repayment of home loan, and stamp duty/registration charges."
        ),
        max_amount=150_000,
        applicable_regimes=[Regime.old],
    ),
    DeductionInfo(
        section="80D",
        title="Health Insurance Premium",
        description=(
            "Deduction for health insurance premiums paid for self, family, and parents. "
            "Higher limit for senior citizens."
        ),
        max_amount=25_000,
        senior_max_amount=50_000,
        applicable_regimes=[Regime.old],
        conditions=[
            "Up to ₹25,000 for self and family",
            "Additional ₹25,000 for parents",
            "If parents are senior citizens, limit increases to ₹50,000",
            "If self/spouse is a senior citizen, limit increases to ₹50,000",
        ],
    ),
    DeductionInfo(
        section="80TTA",
        title="Interest on Savings Account",
        description=(
            "Deduction for interest earned on savings accounts with banks, post offices, "
            "and co-operative societies."
        ),
        max_amount=10_000,
        applicable_regimes=[Regime.old],
    ),
    DeductionInfo(
        section="80TTB",
        title="Interest Income for Senior Citizens",
        description=(
            "Deduction for interest income from deposits (including fixed and recurring "
            "deposits) for senior citizens."
        ),
        max_amount=50_000,
        applicable_regimes=[Regime.old],
        conditions=["Only applicable for senior citizens (60 years and above)"],
    ),
    DeductionInfo(
        section="24(b)",
        title="Interest on Home Loan",
        description="Deduction for interest paid on home loan for self-occupied property.",
        max_amount=200_000,
        applicable_regimes=[Regime.old],
        conditions=["For self-occupied property"],
    ),
    DeductionInfo(
        section="80EEA",
        title="Interest on Home Loan for Affordable Housing",
        description=(
            "Additional deduction for interest on home loan for affordable housing "
            "(stamp duty value up to ₹45 lakhs)."
        ),
        max_amount=150_000,
        applicable_regimes=[Regime.old],
        conditions=[
            "Loan sanctioned between April 1, 2019 and March 31, 2022",
            "Stamp duty value of house ≤ ₹45 lakhs",
            "Individual does not own any other house on the date of loan sanction",
        ],
    ),
    DeductionInfo(
        section="80E",
        title="Interest on Education Loan",
        description="Deduction for interest paid on loan taken for higher education of self, spouse, or children.",
        max_amount=None,
        applicable_regimes=[Regime.old],
    ),
    DeductionInfo(
        section="80G",
        title="Donations",
        description="Deduction for donations to specified funds and charitable institutions.",
        max_amount=None,
        applicable_regimes=[Regime.old],
        conditions=["Deduction percentage varies from 50% to 100% depending on the institution"],
    ),
]

_BY_SECTION = {d.section: d for d in DEDUCTIONS}


def get_deduction(section: str) -> DeductionInfo:
    """Look up one section; KeyError for an unknown section."""
    return _BY_SECTION[section]


def list_deductions(regime: Optional[Regime] = None) -> List[DeductionInfo]:
    """All catalogue entries, optionally only those claimable under regime."""
    if regime is None:
        return list(DEDUCTIONS)
    return [d for d in DEDUCTIONS if regime in d.applicable_regimes]


__all__ = ["DeductionInfo", "DEDUCTIONS", "get_deduction", "list_deductions"]
