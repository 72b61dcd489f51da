"""TaskService -- 任务 CRUD 业务逻辑

字段映射（Task <-> Record、TaskQuery -> RecordQuery）见 taskflow.core.mapping。
所有后端失败在此边界被捕获，记录日志后归一化为 TaskServiceError（单条可读消息）。
"""

from collections.abc import Awaitable
from datetime import UTC, datetime

import structlog
from taskflow.core.exceptions import (
    TaskNotFoundError,
    TaskServiceError,
    TaskValidationError,
)
from taskflow.core.mapping import build_record_query, record_from_fields, task_from_record
from taskflow.core.models import (
    ALL_FIELDS,
    MutationResponse,
    RecordResult,
    Task,
    TaskDraft,
    TaskQuery,
    TaskStatus,
    TaskUpdate,
)
from taskflow.core.store import RecordStore

log = structlog.get_logger()

VALIDATION_MESSAGE = "Please enter a task title"


def _now() -> datetime:
    return datetime.now(UTC)


class TaskService:
    """任务业务服务

    Args:
        store: RecordStore 实现（LocalRecordStore 或 TableClient），由调用方注入
        table_name: 任务表名
    """

    def __init__(self, store: RecordStore, table_name: str = "tasks") -> None:
        self._store = store
        self._table = table_name

    @property
    def table_name(self) -> str:
        return self._table

    async def fetch_tasks(self, criteria: TaskQuery | None = None) -> list[Task]:
        """查询任务列表；后端无数据或返回空 payload 时返回空列表"""
        query = build_record_query(criteria or TaskQuery())
        try:
            response = await self._store.fetch_records(self._table, query)
            if response is None or not response.data:
                return []
            return [task_from_record(r) for r in response.data]
        except Exception as e:
            log.error(
                "fetch_tasks_failed",
                table=self._table,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise TaskServiceError("Failed to fetch tasks. Please try again.") from e

    async def get_task_by_id(self, task_id: str) -> Task | None:
        """根据 id 查询任务；不存在时返回 None"""
        try:
            response = await self._store.get_record_by_id(
                self._table, task_id, list(ALL_FIELDS)
            )
            if response is None or not response.data:
                return None
            return task_from_record(response.data)
        except Exception as e:
            log.error(
                "get_task_failed",
                task_id=task_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise TaskServiceError("Failed to fetch task. Please try again.") from e

    async def create_task(self, draft: TaskDraft) -> Task:
        """创建任务

        created_at/updated_at 取调用时刻；completed_at 仅在草稿状态为 completed 时设置。
        Name 缺省为标题。

        Raises:
            TaskValidationError: 标题为空（不发起后端调用）
            TaskServiceError: 后端拒绝写入（消息优先拼接字段级错误）
        """
        title = draft.title.strip()
        if not title:
            raise TaskValidationError(VALIDATION_MESSAGE)

        now = _now()
        fields = draft.model_dump(exclude={"owner"} if not draft.owner else None)
        fields["title"] = title
        record = record_from_fields(fields)
        record["Name"] = draft.name or title
        record["created_at"] = now.isoformat()
        record["updated_at"] = now.isoformat()
        record["completed_at"] = (
            now.isoformat() if draft.status == TaskStatus.COMPLETED else None
        )

        result = await self._mutate(
            "create",
            self._store.create_records(self._table, [record]),
        )
        if not result.success or not result.data:
            raise TaskServiceError(
                result.error_message("Failed to create task", include_field_errors=True)
            )

        task = task_from_record(result.data)
        log.info("task_created", task_id=task.id, status=task.status.value)
        return task

    async def update_task(self, task_id: str, update: TaskUpdate) -> Task:
        """合并更新任务

        只合并调用方显式设置的字段；始终刷新 updated_at；不发送 created_at；
        按合并后的状态重新计算 completed_at（保持已完成任务原有的完成时间）。

        Raises:
            TaskValidationError: 标题被更新为空
            TaskNotFoundError: 任务不存在
            TaskServiceError: 后端拒绝写入
        """
        changes = update.changes()
        if "title" in changes:
            changes["title"] = changes["title"].strip()
            if not changes["title"]:
                raise TaskValidationError(VALIDATION_MESSAGE)

        existing = await self.get_task_by_id(task_id)
        if existing is None:
            raise TaskNotFoundError(task_id)

        now = _now()
        record = record_from_fields(changes)
        record["Id"] = existing.id
        record["updated_at"] = now.isoformat()

        new_status = changes.get("status", existing.status)
        if new_status == TaskStatus.COMPLETED:
            record["completed_at"] = (existing.completed_at or now).isoformat()
        else:
            record["completed_at"] = None

        result = await self._mutate(
            "update",
            self._store.update_records(self._table, [record]),
        )
        if not result.success or not result.data:
            raise TaskServiceError(
                result.error_message("Failed to update task", include_field_errors=True)
            )

        task = task_from_record(result.data)
        log.info(
            "task_updated",
            task_id=task.id,
            fields=sorted(changes),
            status=task.status.value,
        )
        return task

    async def delete_task(self, task_id: str) -> bool:
        """删除任务

        Raises:
            TaskServiceError: 后端报告失败（如记录不存在）
        """
        result = await self._mutate(
            "delete",
            self._store.delete_records(self._table, [task_id]),
        )
        if not result.success:
            raise TaskServiceError(result.error_message("Failed to delete task"))

        log.info("task_deleted", task_id=task_id)
        return True

    async def _mutate(
        self, action: str, call: Awaitable[MutationResponse | None]
    ) -> RecordResult:
        """执行写操作并取第一条结果

        后端异常与缺失结果均归一化为 TaskServiceError。
        """
        try:
            response: MutationResponse | None = await call
        except Exception as e:
            log.error(
                f"{action}_task_failed",
                table=self._table,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise TaskServiceError(f"Failed to {action} task. Please try again.") from e

        result = response.first_result() if response is not None else None
        if result is None:
            message = (response.message if response is not None else None) or (
                f"Failed to {action} task"
            )
            log.warning(f"{action}_task_rejected", table=self._table, message=message)
            raise TaskServiceError(message)
        if not result.success:
            log.warning(
                f"{action}_task_rejected",
                table=self._table,
                message=result.message,
                field_errors=len(result.errors or []),
            )
        return result
