"""
TaxInput validation — runs before any computation.

parse_tax_input() turns a raw request dict into a TaxInput. All structural
violations from Pydantic are collected in one pass and raised as
InvalidInputError with a [{field, issue}] list; the financial-year format
rule runs once the structure is valid.

Negative income or deductions, an unrecognised regime, and unknown fields are
all rejected here. Zero income, zero deductions and non-salaried filers are
valid inputs.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Mapping

from pydantic import ValidationError

from taxadvisor.calculator.schemas import TaxInput
from taxadvisor.errors import InvalidInputError

logger = logging.getLogger(__name__)

_FINANCIAL_YEAR_RE = re.compile(r"^(\d{4})-(\d{2})$")


def validate_financial_year(financial_year: str) -> None:
    """
    'YYYY-YY' where YY is the year after YYYY, e.g. '2024-25' or '2099-00'.
    Raises InvalidInputError otherwise. Whether tables exist for the year is
    a separate question (ConfigurationError at lookup time).
    """
    match = _FINANCIAL_YEAR_RE.match(financial_year)
    if match is None or (int(match.group(1)) + 1) % 100 != int(match.group(2)):
        raise InvalidInputError(
            "Invalid financial year",
            details=[{
                "field": "financial_year",
                "issue": f"'{financial_year}' is not a financial year of the form 'YYYY-YY' (e.g. '2024-25').",
            }],
        )


def parse_tax_input(data: Mapping[str, Any]) -> TaxInput:
    """
    Validate a raw mapping into a TaxInput.

    Raises:
        InvalidInputError: with every structural and business-rule violation in .details.
    """
    try:
        tax_input = TaxInput.model_validate(dict(data))
    except ValidationError as exc:
        details = [
            {
                "field": ".".join(str(loc) for loc in error["loc"]) or None,
                "issue": error["msg"],
            }
            for error in exc.errors()
        ]
        logger.info("Rejected tax input: %d violation(s)", len(details))
        raise InvalidInputError("Tax input validation failed", details=details) from exc

    validate_financial_year(tax_input.financial_year)
    return tax_input


__all__ = ["parse_tax_input", "validate_financial_year"]
