"""
models/__init__.py — imports all ORM models so Base.metadata sees them
before init_models() creates tables.
"""
from taxadvisor.models.calculation import SavedCalculationORM

__all__ = ["SavedCalculationORM"]
