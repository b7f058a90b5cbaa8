"""The initial revision builds the same tables the models declare."""

from __future__ import annotations

from sqlalchemy import create_engine, inspect

from heartline.core.settings import settings
from heartline.db.session import Base
from heartline.scripts.migrate import run_upgrade_head


def test_upgrade_head_creates_model_tables(tmp_path, monkeypatch) -> None:
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    monkeypatch.setattr(settings, "database_url", url)
    monkeypatch.delenv("ALEMBIC_URL", raising=False)

    run_upgrade_head()

    engine = create_engine(url)
    try:
        tables = set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
    assert set(Base.metadata.tables) <= tables
    assert "alembic_version" in tables
