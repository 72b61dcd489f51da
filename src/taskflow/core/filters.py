"""列表筛选、搜索与统计 -- 基于内存快照的纯函数

筛选器与搜索以逻辑 AND 组合。统计数据每次从当前快照重新计算，
不单独向后端查询。
"""

from collections.abc import Iterable
from datetime import UTC, date, datetime, timedelta

from .models import HIGH_PRIORITIES, Task, TaskFilter, TaskStats, TaskStatus


def matches_search(task: Task, search: str) -> bool:
    """搜索词为空，或为标题/描述的子串（大小写不敏感）"""
    if not search:
        return True
    needle = search.lower()
    return needle in task.title.lower() or needle in task.description.lower()


def matches_filter(task: Task, task_filter: TaskFilter, now: datetime | None = None) -> bool:
    """判断任务是否命中筛选器"""
    match task_filter:
        case TaskFilter.ALL:
            return True
        case TaskFilter.HIGH_PRIORITY:
            return task.priority in HIGH_PRIORITIES
        case TaskFilter.OVERDUE:
            return task.is_overdue(now)
        case _:
            return task.status == task_filter.as_status()


def filter_tasks(
    tasks: Iterable[Task],
    task_filter: TaskFilter = TaskFilter.ALL,
    search: str = "",
    now: datetime | None = None,
) -> list[Task]:
    """筛选器 AND 搜索，保持原有顺序"""
    now = now or datetime.now(UTC)
    return [
        t
        for t in tasks
        if matches_search(t, search) and matches_filter(t, task_filter, now)
    ]


def compute_stats(tasks: Iterable[Task], now: datetime | None = None) -> TaskStats:
    """计算统计面板：总数、已完成、待处理、逾期"""
    now = now or datetime.now(UTC)
    stats = TaskStats()
    for task in tasks:
        stats.total += 1
        if task.status == TaskStatus.COMPLETED:
            stats.completed += 1
        elif task.status == TaskStatus.PENDING:
            stats.pending += 1
        if task.is_overdue(now):
            stats.overdue += 1
    return stats


def describe_due_date(due: date | None, today: date | None = None) -> str | None:
    """任务卡片上的截止日期文案

    Today / Tomorrow / 本周（周日起算）内显示星期名 / 其余显示 "Mar 05" 格式。
    """
    if due is None:
        return None
    today = today or datetime.now(UTC).date()
    if due == today:
        return "Today"
    if due == today + timedelta(days=1):
        return "Tomorrow"
    week_start = today - timedelta(days=(today.weekday() + 1) % 7)
    if week_start <= due < week_start + timedelta(days=7):
        return due.strftime("%A")
    return due.strftime("%b %d")
