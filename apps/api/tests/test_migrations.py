"""
Migration chain checks: upgrading an empty database must produce the schema
the ORM models expect, and downgrading must remove it again.
"""
from sqlalchemy import create_engine, inspect

from core.database import Base
from run_migrations import downgrade_to_base, upgrade_to_head


def _columns(inspector, table):
    return {c["name"] for c in inspector.get_columns(table)}


def test_upgrade_matches_models(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrations.db'}"

    upgrade_to_head(url)

    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        tables = set(inspector.get_table_names())
        for table in Base.metadata.sorted_tables:
            assert table.name in tables
            assert _columns(inspector, table.name) == {c.name for c in table.columns}

        unique_indexes = {
            tuple(ix["column_names"])
            for ix in inspector.get_indexes("user_physical_profile")
            if ix["unique"]
        }
        assert ("user_id",) in unique_indexes
    finally:
        engine.dispose()


def test_downgrade_removes_tables(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrations.db'}"

    upgrade_to_head(url)
    downgrade_to_base(url)

    engine = create_engine(url)
    try:
        remaining = set(inspect(engine).get_table_names()) - {"alembic_version"}
        assert remaining == set()
    finally:
        engine.dispose()
