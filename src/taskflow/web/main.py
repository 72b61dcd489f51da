"""FastAPI 应用主文件

app 创建 + lifespan 管理：Store/后端客户端初始化与关闭 + Service/Controller 组装 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from taskflow.backend import TableClient, load_backend_config
from taskflow.core.config import get_db_path, get_store_mode, get_table_name
from taskflow.core.exceptions import TaskFlowError
from taskflow.core.store import create_store_group

from .middleware.logging_config import setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .routes import health, tasks, view
from .routes.errors import NOT_FOUND_MESSAGE, error_response
from .services.task_list import TaskListController
from .services.task_service import TaskService

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时组装存储与服务，关闭时清理连接"""
    store_mode = get_store_mode()
    app.state.store_mode = store_mode
    app.state.store_group = None
    app.state.table_client = None

    if store_mode == "remote":
        # 远程模式：表格服务客户端，凭据齐全视为已登录
        backend_config = load_backend_config()
        table_client = TableClient(backend_config)
        app.state.table_client = table_client
        service = TaskService(table_client, table_name=backend_config.table_name)
        authenticated = backend_config.has_credentials
        log.info(
            "task_service_initialized",
            mode="remote",
            endpoint=backend_config.endpoint,
            table=backend_config.table_name,
            authenticated=authenticated,
        )
    else:
        # 本地模式：SQLite KV 槽位，单用户始终已登录
        store_group = await create_store_group(get_db_path())
        app.state.store_group = store_group
        service = TaskService(store_group.record_store, table_name=get_table_name())
        authenticated = True
        log.info("task_service_initialized", mode="local", table=service.table_name)

    task_list = TaskListController(service)
    app.state.task_service = service
    app.state.task_list = task_list

    try:
        await task_list.set_authenticated(authenticated)
    except TaskFlowError as e:
        # 首次加载失败不阻塞启动，错误已进入通知队列
        log.warning("initial_load_failed", error=str(e))

    yield

    # 关闭：清理连接
    if app.state.table_client is not None:
        await app.state.table_client.aclose()
    if app.state.store_group is not None:
        await app.state.store_group.close()


async def not_found_handler(request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return error_response(404, "NOT_FOUND", NOT_FOUND_MESSAGE)
    return error_response(exc.status_code, "HTTP_ERROR", str(exc.detail))


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="TaskFlow",
        version="0.1.0",
        description="TaskFlow 个人任务管理 API",
        lifespan=lifespan,
    )

    # 注册中间件
    app.add_middleware(LoggingMiddleware)

    # 初始化日志
    setup_logging()

    # 注册路由
    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(view.router, tags=["view"])
    app.include_router(health.router, tags=["health"])

    app.add_exception_handler(StarletteHTTPException, not_found_handler)

    # 挂载前端静态文件（frontend/dist/ -> /）
    # 在所有 API 路由之后挂载，确保 API 优先匹配
    package_root = Path(__file__).resolve().parent
    frontend_dist = package_root.parents[2] / "frontend" / "dist"
    if frontend_dist.exists():
        app.mount("/", StaticFiles(directory=str(frontend_dist), html=True), name="frontend")

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
