"""任务路由

GET    /api/tasks: 按筛选器/搜索词重新加载并返回可见任务 + 统计
GET    /api/tasks/{task_id}: 任务详情
POST   /api/tasks: 由草稿创建任务
PATCH  /api/tasks/{task_id}: 部分更新
POST   /api/tasks/{task_id}/toggle: pending <-> completed
DELETE /api/tasks/{task_id}?confirm=true: 确认后删除
GET    /api/stats: 统计数据
"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from starlette.responses import JSONResponse
from taskflow.core.exceptions import TaskFlowError
from taskflow.core.models import Task, TaskDraft, TaskFilter, TaskStats, TaskUpdate

from ..deps import get_task_list, get_task_service
from .errors import error_response, task_error_response

router = APIRouter()


def task_payload(task: Task) -> dict:
    """Task -> UI 形状（camelCase）JSON"""
    return task.model_dump(mode="json", by_alias=True)


class TaskListResponse(BaseModel):
    """任务列表响应"""

    tasks: list[dict]
    stats: TaskStats
    filter: str
    search: str


@router.get("/api/tasks", response_model=TaskListResponse)
async def list_tasks(
    filter: TaskFilter | None = Query(default=None, description="筛选器"),
    search: str | None = Query(default=None, description="搜索词"),
    refresh: bool = Query(default=False, description="强制重新加载"),
    task_list=Depends(get_task_list),
):
    """更新筛选条件并返回可见任务（筛选器 AND 搜索）"""
    try:
        await task_list.apply_view(filter, search, refresh=refresh)
    except TaskFlowError as e:
        return task_error_response(e)

    return TaskListResponse(
        tasks=[task_payload(t) for t in task_list.visible_tasks],
        stats=task_list.stats,
        filter=task_list.filter.value,
        search=task_list.search,
    )


@router.get("/api/stats", response_model=TaskStats)
async def get_stats(task_list=Depends(get_task_list)):
    """统计数据（基于当前快照）"""
    return task_list.stats


@router.get("/api/tasks/{task_id}")
async def get_task(
    task_id: str,
    service=Depends(get_task_service),
):
    """查询任务详情"""
    try:
        task = await service.get_task_by_id(task_id)
    except TaskFlowError as e:
        return task_error_response(e)

    if task is None:
        return error_response(
            404, "TASK_NOT_FOUND", f"Task with id {task_id} does not exist"
        )
    return task_payload(task)


@router.post("/api/tasks")
async def create_task(
    body: TaskDraft,
    task_list=Depends(get_task_list),
):
    """由草稿创建任务

    - 201: 创建成功
    - 422: 标题为空
    - 502: 后端拒绝
    """
    task_list.open_new_form()
    task_list.update_form(**body.model_dump())
    try:
        task = await task_list.submit()
    except TaskFlowError as e:
        return task_error_response(e)

    return JSONResponse(status_code=201, content=task_payload(task))


@router.patch("/api/tasks/{task_id}")
async def update_task(
    task_id: str,
    body: TaskUpdate,
    task_list=Depends(get_task_list),
):
    """部分更新：以现有任务填充表单，合并请求中出现的字段后提交"""
    try:
        task_list.start_edit(task_id)
        task_list.update_form(**body.changes())
        task = await task_list.submit()
    except TaskFlowError as e:
        return task_error_response(e)

    return task_payload(task)


@router.post("/api/tasks/{task_id}/toggle")
async def toggle_task(
    task_id: str,
    task_list=Depends(get_task_list),
):
    """切换完成状态"""
    try:
        task = await task_list.toggle_status(task_id)
    except TaskFlowError as e:
        return task_error_response(e)

    return task_payload(task)


@router.delete("/api/tasks/{task_id}")
async def delete_task(
    task_id: str,
    confirm: bool = Query(default=False, description="用户已确认删除"),
    task_list=Depends(get_task_list),
):
    """删除任务

    - 200: 删除成功
    - 409: 未确认（任务被标记为待确认）
    - 502: 后端报告失败（如任务不存在）
    """
    task_list.request_delete(task_id)
    if not confirm:
        return error_response(
            409,
            "CONFIRMATION_REQUIRED",
            "Are you sure you want to delete this task?",
        )

    try:
        await task_list.confirm_delete()
    except TaskFlowError as e:
        return task_error_response(e)

    return {"task_id": task_id, "deleted": True}
