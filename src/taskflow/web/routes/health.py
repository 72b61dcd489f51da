"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，本地模式检查 SQLite 连通性，远程模式探测记录后端。
"""

import structlog
from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    """Readiness 检查 -- 验证当前存储模式的依赖可用性

    检查项：
    1. sqlite: 本地 KV 数据库连通性（仅本地模式）
    2. backend: 远程记录后端 /health（仅远程模式）
    """
    checks = {}
    all_ok = True

    store_group = getattr(request.app.state, "store_group", None)
    if store_group is not None:
        try:
            cursor = await store_group.conn.execute("SELECT 1")
            await cursor.fetchone()
            checks["sqlite"] = "ok"
        except Exception as e:
            log.warning("sqlite_check_failed", error=str(e))
            checks["sqlite"] = "unavailable"
            all_ok = False
    else:
        checks["sqlite"] = "skipped"

    table_client = getattr(request.app.state, "table_client", None)
    if table_client is not None:
        if await table_client.health_check():
            checks["backend"] = "ok"
        else:
            checks["backend"] = "unreachable"
            all_ok = False
    else:
        checks["backend"] = "skipped"

    status_code = 200 if all_ok else 503
    status_text = "ready" if all_ok else "not_ready"

    return JSONResponse(
        status_code=status_code,
        content={
            "status": status_text,
            "checks": checks,
        },
    )
