"""界面视图路由

GET  /api/view: 当前界面的完整渲染数据（头部、统计、筛选器、表单、任务卡片、空状态、通知）
POST /api/view/theme: 切换深色模式
"""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from taskflow.core.config import APP_NAME, APP_TAGLINE
from taskflow.core.filters import describe_due_date
from taskflow.core.models import FILTER_LABELS, Task, TaskFilter

from ..deps import get_task_list
from .tasks import task_payload

router = APIRouter()


def task_card(task: Task, now: datetime) -> dict:
    """任务卡片：任务字段 + 截止日期文案 + 逾期标记"""
    return {
        **task_payload(task),
        "dueLabel": describe_due_date(task.due_date, now.date()),
        "overdue": task.is_overdue(now),
        "statusLabel": task.status.value.replace("-", " "),
    }


def empty_state(filtered: bool) -> dict:
    if filtered:
        return {
            "title": "No tasks match your criteria",
            "message": "Try adjusting your search or filter settings",
        }
    return {
        "title": "No tasks yet",
        "message": "Create your first task to get started with TaskFlow",
    }


@router.get("/api/view")
async def get_view(task_list=Depends(get_task_list)):
    """渲染当前界面状态；读取后清空待展示的通知"""
    now = datetime.now(UTC)
    visible = task_list.visible_tasks
    filtered = bool(task_list.search) or task_list.filter != TaskFilter.ALL

    return {
        "header": {
            "name": APP_NAME,
            "tagline": APP_TAGLINE,
            "darkMode": task_list.dark_mode,
        },
        "authenticated": task_list.authenticated,
        "loading": task_list.loading,
        "stats": task_list.stats.model_dump(),
        "filters": [
            {"value": f.value, "label": label} for f, label in FILTER_LABELS.items()
        ],
        "activeFilter": task_list.filter.value,
        "search": task_list.search,
        "form": {
            "open": task_list.form_open,
            "editing": task_list.is_editing,
            "submitting": task_list.submitting,
            "draft": task_list.form.model_dump(mode="json", by_alias=True),
        },
        "pendingDeleteId": task_list.pending_delete_id,
        "tasks": [task_card(t, now) for t in visible],
        "emptyState": None if visible else empty_state(filtered),
        "notifications": [
            n.model_dump(mode="json") for n in task_list.drain_notifications()
        ],
    }


@router.post("/api/view/theme")
async def toggle_theme(task_list=Depends(get_task_list)):
    """切换深色模式（仅内存，不持久化）"""
    return {"darkMode": task_list.toggle_dark_mode()}
