"""测试配置和公共fixture"""

import httpx
import pytest

from app.core.config import Settings
from app.db.database import create_engine_from_settings, create_session_factory
from app.services.entry_service import create_schema
from main import create_app

TEST_TOKEN = "test-write-token"
AUTH_HEADERS = {"Authorization": f"Bearer {TEST_TOKEN}"}


@pytest.fixture
def test_settings() -> Settings:
    """使用内存SQLite的测试配置"""
    return Settings(
        DB_URL="sqlite+aiosqlite:///:memory:",
        DA_WRITE_TOKEN=TEST_TOKEN,
        DA_INSTANCEID="test",
    )


@pytest.fixture
async def db_session(test_settings: Settings):
    """已建表的数据库会话"""
    engine = create_engine_from_settings(test_settings)

    async with engine.begin() as conn:
        await conn.run_sync(create_schema)

    async with create_session_factory(engine)() as session:
        yield session

    await engine.dispose()


@pytest.fixture
async def app(test_settings: Settings):
    application = create_app(test_settings)
    async with application.state.engine.begin() as conn:
        await conn.run_sync(create_schema)
    yield application
    await application.state.engine.dispose()


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c


@pytest.fixture
def call(client: httpx.AsyncClient):
    """带有效令牌向 /api 发送请求信封"""

    async def _call(action: str, payload=None, request_id: str = "req-1", headers=None):
        body = {"request_id": request_id, "action": action, "payload": payload if payload is not None else {}}
        return await client.post("/api", json=body, headers=headers if headers is not None else AUTH_HEADERS)

    return _call
