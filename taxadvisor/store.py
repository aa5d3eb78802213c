"""
store.py — repository for saved tax calculations.

Load/save keyed by (user_id, financial_year). Routes use these functions;
nothing else touches SQLAlchemy directly.

Design principles:
  - All functions are async and accept an AsyncSession parameter
  - No raw SQL: ORM queries, plus a dialect INSERT ... ON CONFLICT for the upsert
  - Logs only user_id / financial_year / regime — never income figures
  - Returns Pydantic objects (not ORM instances) so callers are persistence-agnostic
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from taxadvisor.calculator.schemas import TaxInput, TaxResult
from taxadvisor.history.schemas import SavedCalculation, SavedCalculationSummary
from taxadvisor.models.calculation import SavedCalculationORM

logger = logging.getLogger(__name__)

# Dialects whose INSERT supports ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

def _to_domain(orm: SavedCalculationORM) -> SavedCalculation:
    return SavedCalculation(
        user_id=orm.user_id,
        financial_year=orm.financial_year,
        tax_input=TaxInput.model_validate(orm.input_data),
        result=TaxResult.model_validate(orm.result_data),
        created_at=orm.created_at,
        updated_at=orm.updated_at,
    )


async def _get_orm(
    db: AsyncSession, user_id: str, financial_year: str
) -> Optional[SavedCalculationORM]:
    result = await db.execute(
        select(SavedCalculationORM)
        .where(
            SavedCalculationORM.user_id == user_id,
            SavedCalculationORM.financial_year == financial_year,
        )
        # Reload rows already in the session: the upsert bypasses the identity map
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def save_calculation(
    db: AsyncSession,
    user_id: str,
    tax_input: TaxInput,
    result: TaxResult,
) -> SavedCalculation:
    """
    Persist a calculation under (user_id, tax_input.financial_year).
    If one already exists for that pair, it is replaced.

    A single INSERT ... ON CONFLICT DO UPDATE on the (user_id, financial_year)
    unique constraint, so concurrent saves for the same pair never collide.
    The get_db() dependency handles commit.
    """
    dialect = db.get_bind().dialect.name
    insert = _UPSERT_INSERTS.get(dialect)
    if insert is None:
        raise NotImplementedError(f"Saving calculations is not supported on the '{dialect}' database")

    now = datetime.now(timezone.utc)
    stmt = insert(SavedCalculationORM).values(
        id=str(uuid.uuid4()),
        user_id=user_id,
        financial_year=tax_input.financial_year,
        regime=tax_input.regime.value,
        input_data=tax_input.model_dump(mode="json"),
        result_data=result.model_dump(mode="json"),
        created_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["user_id", "financial_year"],
        set_={
            "regime": stmt.excluded.regime,
            "input_data": stmt.excluded.input_data,
            "result_data": stmt.excluded.result_data,
            "updated_at": stmt.excluded.updated_at,
        },
    )
    await db.execute(stmt)

    orm = await _get_orm(db, user_id, tax_input.financial_year)
    logger.info(
        "Saved calculation user_id=%s financial_year=%s regime=%s",
        user_id,
        tax_input.financial_year,
        tax_input.regime.value,
    )
    return _to_domain(orm)


async def get_calculation(
    db: AsyncSession,
    user_id: str,
    financial_year: str,
) -> Optional[SavedCalculation]:
    """
    Retrieve the saved calculation for one user and financial year.
    Returns None if nothing was saved (caller raises 404).
    """
    orm = await _get_orm(db, user_id, financial_year)
    if orm is None:
        return None
    return _to_domain(orm)


async def list_calculations(
    db: AsyncSession,
    user_id: str,
) -> List[SavedCalculationSummary]:
    """All saved financial years for a user, most recent financial year first."""
    result = await db.execute(
        select(SavedCalculationORM)
        .where(SavedCalculationORM.user_id == user_id)
        .order_by(SavedCalculationORM.financial_year.desc())
    )
    return [
        SavedCalculationSummary(
            financial_year=orm.financial_year,
            regime=orm.regime,
            total_tax=orm.result_data["total_tax"],
            updated_at=orm.updated_at,
        )
        for orm in result.scalars().all()
    ]
