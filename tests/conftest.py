"""全局 pytest 配置 -- 临时 SQLite 数据库 fixture + 任务构造工具"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from pathlib import Path

import aiosqlite
import pytest
import pytest_asyncio
from taskflow.core.models import Task, TaskPriority, TaskStatus


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> Path:
    """提供临时 SQLite 数据库路径"""
    return tmp_path / "sqlite" / "test.db"


@pytest_asyncio.fixture
async def db_conn(tmp_path: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """提供已初始化的临时 SQLite 数据库连接"""
    from taskflow.core.store.sqlite_init import init_db

    conn = await aiosqlite.connect(str(tmp_path / "conn_test.db"))
    await init_db(conn)
    yield conn
    await conn.close()


def make_task(
    task_id: str = "t-1",
    title: str = "Write report",
    status: TaskStatus = TaskStatus.PENDING,
    priority: TaskPriority = TaskPriority.MEDIUM,
    **kwargs,
) -> Task:
    """构造测试用 Task（completed 状态自动补齐 completed_at）"""
    now = datetime(2024, 3, 6, 12, 0, tzinfo=UTC)
    completed_at = kwargs.pop("completed_at", now if status == TaskStatus.COMPLETED else None)
    return Task(
        id=task_id,
        title=title,
        status=status,
        priority=priority,
        created_at=kwargs.pop("created_at", now),
        updated_at=kwargs.pop("updated_at", now),
        completed_at=completed_at,
        **kwargs,
    )


@pytest.fixture
def task_factory():
    """Task 构造函数"""
    return make_task
