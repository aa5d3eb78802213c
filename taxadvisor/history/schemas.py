"""
schemas.py — saved-calculation data contracts.

A SavedCalculation is the latest TaxInput/TaxResult pair a user stored for one
financial year. Suggestions are never stored; they are recomputed on demand.
"""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from taxadvisor.calculator.schemas import Regime, TaxInput, TaxResult


class SavedCalculation(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_id: str
    financial_year: str
    tax_input: TaxInput
    result: TaxResult
    created_at: datetime
    updated_at: datetime


class SavedCalculationSummary(BaseModel):
    """One line of GET /api/calculations/{user_id}."""
    model_config = ConfigDict(extra="forbid")

    financial_year: str
    regime: Regime
    total_tax: float
    updated_at: datetime


__all__ = ["SavedCalculation", "SavedCalculationSummary"]
