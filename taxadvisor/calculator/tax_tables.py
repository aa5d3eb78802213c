"""
Tax tables — financial year → regime → RegimeRules.

The slab tables, standard deductions, 87A rebate, cess and surcharge tiers are
configuration data, not engine constants. The bundled tables live in
data/tax_tables.json; set TAX_TABLES_PATH to load a different file (for
example, a newly announced financial year) without a code change.
"""
from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from taxadvisor.calculator.schemas import Regime, RegimeRules
from taxadvisor.config import settings
from taxadvisor.errors import ConfigurationError

logger = logging.getLogger(__name__)

BUNDLED_TABLES_PATH = Path(__file__).parent / "data" / "tax_tables.json"


class TaxTables(BaseModel):
    """Validated, immutable view over every configured financial year."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    years: Dict[str, Dict[Regime, RegimeRules]]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TaxTables":
        """Validate a {financial_year: {regime: rules}} mapping, raising ConfigurationError on bad data."""
        try:
            return cls.model_validate({"years": data})
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid tax tables: {exc}") from exc

    @property
    def financial_years(self) -> List[str]:
        return sorted(self.years)

    def get_rules(self, financial_year: str, regime: Union[Regime, str]) -> RegimeRules:
        """
        Return the rules for one financial year and regime.
        Raises ConfigurationError if either is missing — never falls back to another year.
        """
        year_tables = self.years.get(financial_year)
        if year_tables is None:
            raise ConfigurationError(
                f"No tax tables configured for financial year '{financial_year}'. "
                f"Available: {', '.join(self.financial_years) or 'none'}"
            )
        try:
            key = Regime(regime)
        except ValueError:
            key = None
        rules = year_tables.get(key) if key is not None else None
        if rules is None:
            raise ConfigurationError(
                f"No tax table for regime '{getattr(regime, 'value', regime)}' "
                f"in financial year '{financial_year}'"
            )
        return rules


def load_tax_tables(path: Optional[Union[str, Path]] = None) -> TaxTables:
    """
    Load and validate tax tables from a JSON file (default: the bundled tables).
    Unreadable or malformed files raise ConfigurationError.
    """
    source = Path(path) if path is not None else BUNDLED_TABLES_PATH
    try:
        data = json.loads(source.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Cannot read tax tables from {source}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Tax tables in {source} must be a JSON object keyed by financial year")
    tables = TaxTables.from_mapping(data)
    logger.info("Loaded tax tables from %s years=%s", source, ",".join(tables.financial_years))
    return tables


@lru_cache(maxsize=1)
def get_tax_tables() -> TaxTables:
    """Process-wide tables, loaded once from settings.tax_tables_path or the bundled file."""
    return load_tax_tables(settings.tax_tables_path)


__all__ = ["BUNDLED_TABLES_PATH", "TaxTables", "load_tax_tables", "get_tax_tables"]
