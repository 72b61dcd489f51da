"""web 层测试配置 -- 本地存储上的 TaskService / Controller + 测试用 app"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from taskflow.core.store import LocalRecordStore, SqliteSlotStore, create_store_group
from taskflow.web.services.task_list import TaskListController
from taskflow.web.services.task_service import TaskService


@pytest_asyncio.fixture
async def service(db_conn) -> TaskService:
    """基于临时 SQLite 的 TaskService"""
    return TaskService(LocalRecordStore(SqliteSlotStore(db_conn)))


@pytest_asyncio.fixture
async def controller(service: TaskService) -> TaskListController:
    """已登录的 TaskListController"""
    task_list = TaskListController(service)
    await task_list.set_authenticated(True)
    return task_list


@pytest_asyncio.fixture
async def test_app(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("TASKFLOW_DB_PATH", str(tmp_path / "test.db"))
    monkeypatch.setenv("TASKFLOW_STORE_MODE", "local")

    from taskflow.web.main import create_app

    app = create_app()

    # 手动初始化（绕过 lifespan）
    store_group = await create_store_group(str(tmp_path / "test.db"))
    service = TaskService(store_group.record_store)
    task_list = TaskListController(service)
    await task_list.set_authenticated(True)

    app.state.store_mode = "local"
    app.state.store_group = store_group
    app.state.table_client = None
    app.state.task_service = service
    app.state.task_list = task_list

    yield app

    await store_group.close()


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac
