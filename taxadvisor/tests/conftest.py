"""
Test configuration for taxadvisor.

DATABASE_URL is pointed at a throwaway SQLite file BEFORE any taxadvisor
module is imported, so the settings singleton and the async engine pick it up.
"""
import os
import tempfile
from pathlib import Path

_db_dir = tempfile.mkdtemp(prefix="taxadvisor-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{Path(_db_dir) / 'test.db'}"

import pytest  # noqa: E402

from taxadvisor.calculator.tax_tables import TaxTables, load_tax_tables  # noqa: E402


@pytest.fixture(scope="session")
def tables() -> TaxTables:
    """The bundled tax tables, validated once per session."""
    return load_tax_tables()
