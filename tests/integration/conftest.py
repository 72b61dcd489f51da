"""集成测试共享 fixture -- 经由 lifespan 启动的完整应用"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient


@pytest.fixture
def local_env(tmp_path: Path, monkeypatch):
    """本地存储模式环境变量"""
    monkeypatch.setenv("TASKFLOW_STORE_MODE", "local")
    monkeypatch.setenv("TASKFLOW_DB_PATH", str(tmp_path / "sqlite" / "taskflow.db"))
    monkeypatch.setenv("TASKFLOW_TABLE_NAME", "tasks")
    return monkeypatch


@asynccontextmanager
async def running_app() -> AsyncGenerator[tuple[FastAPI, AsyncClient], None]:
    """创建 app 并执行 lifespan（启动 -> 请求 -> 关闭）"""
    from taskflow.web.main import create_app, lifespan

    app = create_app()
    async with lifespan(app):
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as client:
            yield app, client


@pytest.fixture
def app_runner():
    return running_app
