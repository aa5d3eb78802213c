"""
Demo tax inputs for engine and API tests — FY 2024-25 unless stated.

Expected values hand-computed from the slab tables; working shown beside each.
"""
from __future__ import annotations

from typing import Any

# ---------------------------------------------------------------------------
# 1: Old regime, salaried, ₹6L with ₹1.5L deductions — rebate wipes the tax
# ---------------------------------------------------------------------------
_OLD_REBATE_INPUT: dict[str, Any] = dict(
    gross_income=600_000,
    other_deductions=150_000,
    regime="old",
    is_salaried=True,
    age=30,
    financial_year="2024-25",
)
# taxable = 600000 − 50000 − 150000 = 400000
# slab: 5% × (400000 − 250000) = 7500; 87A (≤5L): rebate 7500 → 0; cess 0; total 0
_OLD_REBATE_EXPECTED: dict[str, Any] = dict(
    taxable_income=400_000,
    base_tax=7_500,
    rebate=7_500,
    cess=0,
    surcharge=0,
    total_tax=0,
)

# ---------------------------------------------------------------------------
# 2: New regime, salaried, ₹10L — above the 87A ceiling
# ---------------------------------------------------------------------------
_NEW_10L_INPUT: dict[str, Any] = dict(
    gross_income=1_000_000,
    other_deductions=0,
    regime="new",
    is_salaried=True,
    age=30,
    financial_year="2024-25",
)
# taxable = 1000000 − 75000 = 925000
# slab: 0 + 5% × 400000 (20000) + 10% × 225000 (22500) = 42500
# no 87A (> 7L); cess 1700; total 44200; effective 4.42%
_NEW_10L_EXPECTED: dict[str, Any] = dict(
    taxable_income=925_000,
    base_tax=42_500,
    rebate=0,
    cess=1_700,
    surcharge=0,
    total_tax=44_200,
)

# ---------------------------------------------------------------------------
# 3: Old regime, non-salaried, ₹60L — 10% surcharge tier
# ---------------------------------------------------------------------------
_OLD_60L_INPUT: dict[str, Any] = dict(
    gross_income=6_000_000,
    other_deductions=0,
    regime="old",
    is_salaried=False,
    age=45,
    financial_year="2024-25",
)
# taxable = 6000000
# slab: 12500 + 100000 + 30% × 5000000 (1500000) = 1612500
# surcharge 10% = 161250; cess 4% of 1612500 = 64500; total 1838250
_OLD_60L_EXPECTED: dict[str, Any] = dict(
    taxable_income=6_000_000,
    base_tax=1_612_500,
    rebate=0,
    cess=64_500,
    surcharge=161_250,
    total_tax=1_838_250,
)

DEMO_INPUTS: dict[str, dict[str, Any]] = {
    "old_rebate": {"input": _OLD_REBATE_INPUT, "expected": _OLD_REBATE_EXPECTED},
    "new_10l": {"input": _NEW_10L_INPUT, "expected": _NEW_10L_EXPECTED},
    "old_60l": {"input": _OLD_60L_INPUT, "expected": _OLD_60L_EXPECTED},
}
