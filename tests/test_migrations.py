# tests/test_migrations.py
"""Tests that the Alembic history builds the same schema as the models."""

from sqlalchemy import create_engine, inspect

from forum_moderation.db.session import Base
from forum_moderation.scripts.migrate import run_downgrade_base, run_upgrade_head


def test_upgrade_matches_models_and_downgrade_drops(tmp_path) -> None:
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    run_upgrade_head(url)

    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        tables = set(inspector.get_table_names())
        assert set(Base.metadata.tables) <= tables
        for name, table in Base.metadata.tables.items():
            migrated = {column["name"] for column in inspector.get_columns(name)}
            assert migrated == {column.name for column in table.columns}, name

        run_downgrade_base(url)
        inspector = inspect(engine)
        assert not set(Base.metadata.tables) & set(inspector.get_table_names())
    finally:
        engine.dispose()
