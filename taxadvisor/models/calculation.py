"""
models/calculation.py — SQLAlchemy ORM model for saved tax calculations.

Table: saved_calculations
One row per (user_id, financial_year); saving again for the same pair replaces it.
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from taxadvisor.database import Base

USER_ID_MAX_LENGTH = 64

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONPayload = JSON().with_variant(JSONB(), "postgresql")


class SavedCalculationORM(Base):
    """
    ORM model for a user's saved calculation for one financial year.

    input_data:  the TaxInput as submitted.
    result_data: the TaxResult computed from it.
    Income figures live only inside the JSON blobs, never in indexed columns.
    """
    __tablename__ = "saved_calculations"
    __table_args__ = (
        UniqueConstraint("user_id", "financial_year", name="uq_saved_calculations_user_year"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    user_id: Mapped[str] = mapped_column(
        String(USER_ID_MAX_LENGTH),
        nullable=False,
        index=True,
        comment="Caller-supplied user identifier",
    )
    financial_year: Mapped[str] = mapped_column(
        String(7),
        nullable=False,
        comment="e.g. '2024-25'",
    )
    regime: Mapped[str] = mapped_column(
        String(3),
        nullable=False,
        comment="'old' or 'new' — denormalized for analytics queries",
    )
    input_data: Mapped[dict] = mapped_column(JSONPayload, nullable=False)
    result_data: Mapped[dict] = mapped_column(JSONPayload, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
