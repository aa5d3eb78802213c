"""
Calculator HTTP routes — POST /api/calculate,
                         POST /api/compare,
                         POST /api/suggestions,
                         GET  /api/tax-tables,
                         GET  /api/tax-tables/{financial_year}/{regime},
                         GET  /api/deductions

Request bodies are raw TaxInput dicts validated by parse_tax_input(); domain
errors (InvalidInputError, ConfigurationError, SkewToleranceExceeded) propagate
to the global handlers in main.py, which build the standard error envelope.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from taxadvisor.calculator.deductions import list_deductions
from taxadvisor.calculator.optimizer import suggest
from taxadvisor.calculator.schemas import Regime
from taxadvisor.calculator.tax_engine import calculate_tax, compare_regimes
from taxadvisor.calculator.tax_tables import get_tax_tables
from taxadvisor.calculator.validator import parse_tax_input

router = APIRouter(prefix="/api", tags=["calculator"])
logger = logging.getLogger(__name__)


@router.post("/calculate")
async def calculate(request_body: dict) -> JSONResponse:
    """Compute tax for the submitted regime."""
    tax_input = parse_tax_input(request_body)
    result = calculate_tax(tax_input)
    logger.info(
        "Tax calculated financial_year=%s regime=%s brackets=%d",
        tax_input.financial_year,
        tax_input.regime.value,
        len(result.bracket_breakdown),
    )
    return JSONResponse(status_code=200, content=result.model_dump(mode="json"))


@router.post("/compare")
async def compare(request_body: dict) -> JSONResponse:
    """Compute both regimes and recommend the cheaper one (tie → new)."""
    tax_input = parse_tax_input(request_body)
    comparison = compare_regimes(tax_input)
    logger.info(
        "Regimes compared financial_year=%s recommended=%s",
        tax_input.financial_year,
        comparison.recommended_regime.value,
    )
    return JSONResponse(status_code=200, content=comparison.model_dump(mode="json"))


@router.post("/suggestions")
async def suggestions(request_body: dict) -> JSONResponse:
    """Ranked optimisation suggestions, highest potential saving first."""
    tax_input = parse_tax_input(request_body)
    ranked = suggest(tax_input)
    logger.info(
        "Suggestions generated financial_year=%s regime=%s count=%d",
        tax_input.financial_year,
        tax_input.regime.value,
        len(ranked),
    )
    return JSONResponse(status_code=200, content=[s.model_dump(mode="json") for s in ranked])


@router.get("/tax-tables")
async def tax_table_years() -> dict:
    """Financial years with configured tax tables."""
    return {"financial_years": get_tax_tables().financial_years}


@router.get("/tax-tables/{financial_year}/{regime}")
async def tax_table(financial_year: str, regime: Regime) -> JSONResponse:
    """Slabs, rebate, cess and surcharge rules for one year and regime."""
    rules = get_tax_tables().get_rules(financial_year, regime)
    return JSONResponse(status_code=200, content=rules.model_dump(mode="json"))


@router.get("/deductions")
async def deductions(regime: Optional[Regime] = None) -> JSONResponse:
    """Deduction catalogue, optionally filtered to one regime."""
    return JSONResponse(
        status_code=200,
        content=[d.model_dump(mode="json") for d in list_deductions(regime)],
    )
