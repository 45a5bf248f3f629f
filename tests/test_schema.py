"""测试建表与启动初始化"""

from __future__ import annotations

from sqlalchemy import inspect

from app.models.entry import TABLE_NAME
from main import create_app


def _describe(conn):
    inspector = inspect(conn)
    indexed = {col for index in inspector.get_indexes(TABLE_NAME) for col in index["column_names"]}
    return inspector.get_table_names(), indexed


async def test_auto_init_creates_table_and_indexes(test_settings):
    app = create_app(test_settings.model_copy(update={"AUTO_INIT_DB": True}))

    async with app.router.lifespan_context(app):
        async with app.state.engine.connect() as conn:
            tables, indexed = await conn.run_sync(_describe)

    assert TABLE_NAME in tables
    assert {"name", "parent_id", "is_folder", "created_at", "modified_at"} <= indexed


async def test_schema_is_absent_without_auto_init(test_settings):
    app = create_app(test_settings)

    async with app.router.lifespan_context(app):
        async with app.state.engine.connect() as conn:
            tables, _ = await conn.run_sync(lambda c: (inspect(c).get_table_names(), None))

    assert TABLE_NAME not in tables
