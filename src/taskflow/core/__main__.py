"""CLI 入口模块 -- python -m taskflow.core <command>

支持的命令：
  list   列出本地存储中的任务
  stats  输出任务统计
"""

import asyncio
import sys

from .config import get_db_path, get_table_name


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print("用法: python -m taskflow.core <command>")
        print("命令:")
        print("  list   列出本地存储中的任务")
        print("  stats  输出任务统计")
        sys.exit(1)

    command = sys.argv[1]

    if command == "list":
        asyncio.run(list_tasks())
    elif command == "stats":
        asyncio.run(show_stats())
    else:
        print(f"未知命令: {command}")
        print("可用命令: list, stats")
        sys.exit(1)


async def _load_tasks():
    """直接读取本地记录存储（按创建时间倒序）"""
    from .mapping import build_record_query, task_from_record
    from .models import TaskQuery
    from .store import create_store_group

    db_path = get_db_path()
    print(f"数据库路径: {db_path}")

    store_group = await create_store_group(db_path)
    try:
        response = await store_group.record_store.fetch_records(
            get_table_name(), build_record_query(TaskQuery())
        )
        return [task_from_record(r) for r in response.data]
    finally:
        await store_group.close()


async def list_tasks() -> None:
    """打印任务列表（按创建时间倒序）"""
    from .filters import describe_due_date

    tasks = await _load_tasks()
    if not tasks:
        print("No tasks yet")
        return

    for task in tasks:
        due = describe_due_date(task.due_date) or "-"
        overdue = " (overdue)" if task.is_overdue() else ""
        print(
            f"{task.id}  [{task.status.value}] [{task.priority.value}] "
            f"{task.title}  due: {due}{overdue}"
        )


async def show_stats() -> None:
    """打印统计面板数据"""
    from .filters import compute_stats

    stats = compute_stats(await _load_tasks())
    print(f"Total Tasks: {stats.total}")
    print(f"Completed: {stats.completed}")
    print(f"Pending: {stats.pending}")
    print(f"Overdue: {stats.overdue}")


if __name__ == "__main__":
    main()
