"""LoggingMiddleware

为每个 HTTP 请求绑定 TaskFlow 日志上下文（structlog contextvars）：
- request_id: 每请求一个 ULID，同时写入 X-Request-ID 响应头
- store_mode: 当前存储模式（local / remote）
- task_id: 单个任务的操作，从 /api/tasks/{task_id}[/toggle] 提取
- filter / search: 任务列表查询参数
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID

# 绑定到日志上下文的任务列表查询参数
_VIEW_PARAMS = ("filter", "search")


def extract_task_id(path: str) -> str | None:
    """从请求路径中提取 task_id，非任务详情路径返回 None"""
    parts = [p for p in path.split("/") if p]
    # ["api", "tasks", "<task_id>", ...]
    if len(parts) >= 3 and parts[0] == "api" and parts[1] == "tasks":
        return parts[2]
    return None


def request_context(request: Request, request_id: str) -> dict:
    """组装单个请求的日志上下文"""
    context = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
    }
    store_mode = getattr(request.app.state, "store_mode", None)
    if store_mode:
        context["store_mode"] = store_mode

    task_id = extract_task_id(request.url.path)
    if task_id:
        context["task_id"] = task_id
    elif request.url.path in ("/api/tasks", "/api/stats"):
        for name in _VIEW_PARAMS:
            value = request.query_params.get(name)
            if value:
                context[name] = value
    return context


class LoggingMiddleware(BaseHTTPMiddleware):
    """请求级日志中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = str(ULID())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(**request_context(request, request_id))

        log = structlog.get_logger()
        await log.adebug("request_started")
        started = time.perf_counter()

        response = await call_next(request)

        await log.ainfo(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )

        response.headers["X-Request-ID"] = request_id
        return response
