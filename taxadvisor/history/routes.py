"""
Saved-calculation HTTP routes — PUT /api/calculations/{user_id}/{financial_year},
                                 GET /api/calculations/{user_id}/{financial_year},
                                 GET /api/calculations/{user_id}

PUT computes the tax for the body and stores input + result, replacing any
earlier save for the same user and year.
"""
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from taxadvisor.calculator.tax_engine import calculate_tax
from taxadvisor.calculator.validator import parse_tax_input, validate_financial_year
from taxadvisor.database import get_db
from taxadvisor.errors import InvalidInputError
from taxadvisor.models.calculation import USER_ID_MAX_LENGTH
from taxadvisor.store import get_calculation, list_calculations, save_calculation

router = APIRouter(prefix="/api/calculations", tags=["history"])
logger = logging.getLogger(__name__)

# Same width as the saved_calculations.user_id column
UserId = Annotated[str, Path(min_length=1, max_length=USER_ID_MAX_LENGTH)]


@router.put("/{user_id}/{financial_year}")
async def save(
    user_id: UserId,
    financial_year: str,
    request_body: dict,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """
    Calculate and save. The path's financial_year is authoritative; a
    conflicting financial_year in the body is a validation error.
    """
    validate_financial_year(financial_year)
    body_year = request_body.get("financial_year")
    if body_year is not None and body_year != financial_year:
        raise InvalidInputError(
            "Financial year mismatch",
            details=[{
                "field": "financial_year",
                "issue": f"Body financial_year '{body_year}' does not match path '{financial_year}'.",
            }],
        )

    tax_input = parse_tax_input({**request_body, "financial_year": financial_year})
    result = calculate_tax(tax_input)
    saved = await save_calculation(db, user_id, tax_input, result)
    return JSONResponse(status_code=200, content=saved.model_dump(mode="json"))


@router.get("/{user_id}/{financial_year}")
async def load(
    user_id: UserId,
    financial_year: str,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Return the saved calculation, or 404 if the user has none for that year."""
    saved = await get_calculation(db, user_id, financial_year)
    if saved is None:
        raise HTTPException(
            status_code=404,
            detail=f"No saved calculation for user '{user_id}' in financial year '{financial_year}'",
        )
    logger.info("Loaded calculation user_id=%s financial_year=%s", user_id, financial_year)
    return JSONResponse(status_code=200, content=saved.model_dump(mode="json"))


@router.get("/{user_id}")
async def list_saved(
    user_id: UserId,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Summaries of every financial year the user has saved (possibly empty)."""
    summaries = await list_calculations(db, user_id)
    return JSONResponse(status_code=200, content=[s.model_dump(mode="json") for s in summaries])
