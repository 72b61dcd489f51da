"""TaskListController -- 任务列表界面状态机

持有当前会话的权威内存快照与界面状态：
- 任务集合快照（每次 Service 调用后整体替换，不做增量修补）
- 筛选器、搜索词、表单草稿、编辑标志、loading/submitting 标志
- 待确认删除的任务、主题开关、通知队列（toast）

失败处理：Service 抛出的 TaskFlowError 先记录为错误通知，快照保持不变，
再向调用方抛出。
"""

from collections import deque
from typing import Any

import structlog
from taskflow.core.config import NOTIFICATION_LIMIT
from taskflow.core.exceptions import (
    TaskFlowError,
    TaskNotFoundError,
    TaskValidationError,
)
from taskflow.core.filters import compute_stats, filter_tasks
from taskflow.core.models import (
    Notification,
    NotificationLevel,
    Task,
    TaskDraft,
    TaskFilter,
    TaskQuery,
    TaskStats,
    TaskStatus,
    TaskUpdate,
)

from .task_service import VALIDATION_MESSAGE, TaskService

log = structlog.get_logger()


class TaskListController:
    """任务列表控制器（单会话、单事件循环内唯一的快照修改者）"""

    def __init__(
        self,
        service: TaskService,
        notification_limit: int = NOTIFICATION_LIMIT,
    ) -> None:
        self._service = service

        self.tasks: list[Task] = []
        self.filter: TaskFilter = TaskFilter.ALL
        self.search: str = ""

        self.form: TaskDraft = TaskDraft()
        self.form_open: bool = False
        self.editing_task_id: str | None = None

        self.loading: bool = False
        self.submitting: bool = False
        self.pending_delete_id: str | None = None

        self.authenticated: bool = False
        self.dark_mode: bool = False

        self._notifications: deque[Notification] = deque(maxlen=notification_limit)
        # 每次 reload 递增；晚于更新请求返回的旧结果将被丢弃
        self._load_seq = 0

    # ---- 派生数据 ----

    @property
    def is_editing(self) -> bool:
        return self.editing_task_id is not None

    @property
    def visible_tasks(self) -> list[Task]:
        """筛选器 AND 搜索后的任务列表"""
        return filter_tasks(self.tasks, self.filter, self.search)

    @property
    def stats(self) -> TaskStats:
        """基于完整快照的统计数据（不受筛选器与搜索词影响）"""
        return compute_stats(self.tasks)

    @property
    def notifications(self) -> list[Notification]:
        return list(self._notifications)

    def drain_notifications(self) -> list[Notification]:
        """返回并清空待展示的通知"""
        drained = list(self._notifications)
        self._notifications.clear()
        return drained

    def find_task(self, task_id: str) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    # ---- 加载 ----

    async def set_authenticated(self, authenticated: bool) -> None:
        """认证状态变化：登录后加载，登出后清空快照"""
        changed = authenticated != self.authenticated
        self.authenticated = authenticated
        if not authenticated:
            self._load_seq += 1
            self.tasks = []
            self.loading = False
            return
        if changed:
            await self.reload()

    async def set_filter(self, task_filter: TaskFilter | str) -> None:
        value = TaskFilter(task_filter)
        if value == self.filter:
            return
        self.filter = value
        await self.reload()

    async def set_search(self, search: str) -> None:
        if search == self.search:
            return
        self.search = search
        await self.reload()

    async def apply_view(
        self,
        task_filter: TaskFilter | str | None = None,
        search: str | None = None,
        refresh: bool = False,
    ) -> None:
        """一次性更新筛选器与搜索词，仅在有变化（或 refresh）时重新加载一次"""
        changed = False
        if task_filter is not None and TaskFilter(task_filter) != self.filter:
            self.filter = TaskFilter(task_filter)
            changed = True
        if search is not None and search != self.search:
            self.search = search
            changed = True
        if changed or refresh:
            await self.reload()

    async def reload(self) -> list[Task]:
        """重新加载完整任务集合

        快照始终是完整集合，筛选器与搜索词只在 visible_tasks 中本地生效，
        统计与按 Id 查找因此覆盖全部任务。未认证时不调用 Service，快照为空。
        """
        if not self.authenticated:
            self.tasks = []
            return self.tasks

        self._load_seq += 1
        seq = self._load_seq
        self.loading = True
        try:
            tasks = await self._service.fetch_tasks(TaskQuery())
        except TaskFlowError as e:
            if seq != self._load_seq:
                # 已被更新的 reload 取代，失败不再提示
                log.debug(
                    "stale_reload_failed",
                    seq=seq,
                    latest_seq=self._load_seq,
                    error=str(e),
                )
                return self.tasks
            self.loading = False
            self._notify_error(e)
            raise

        if seq != self._load_seq:
            log.debug("stale_reload_discarded", seq=seq, latest_seq=self._load_seq)
            return self.tasks

        self.tasks = tasks
        self.loading = False
        log.debug(
            "tasks_reloaded",
            count=len(tasks),
            filter=self.filter.value,
            search=self.search,
        )
        return tasks

    # ---- 表单 ----

    def open_new_form(self) -> None:
        self.form = TaskDraft()
        self.editing_task_id = None
        self.form_open = True

    def start_edit(self, task_id: str) -> None:
        """以已有任务填充表单并进入编辑模式"""
        task = self.find_task(task_id)
        if task is None:
            error = TaskNotFoundError(task_id)
            self._notify_error(error)
            raise error
        self.form = TaskDraft.from_task(task)
        self.editing_task_id = task_id
        self.form_open = True

    def update_form(self, **fields: Any) -> None:
        self.form = TaskDraft.model_validate({**self.form.model_dump(), **fields})

    def close_form(self) -> None:
        self.form = TaskDraft()
        self.editing_task_id = None
        self.form_open = False

    async def submit(self) -> Task:
        """提交表单：新建或更新

        Raises:
            TaskValidationError: 标题为空（不发起 Service 调用，状态不变）
            TaskFlowError: Service 失败（快照不变）
        """
        if not self.form.title.strip():
            error = TaskValidationError(VALIDATION_MESSAGE)
            self._notify_error(error)
            raise error

        self.submitting = True
        try:
            if self.editing_task_id is not None:
                task = await self._service.update_task(
                    self.editing_task_id, TaskUpdate.from_draft(self.form)
                )
                message = "Task updated successfully!"
            else:
                task = await self._service.create_task(self.form)
                message = "Task created successfully!"
        except TaskFlowError as e:
            self._notify_error(e)
            raise
        finally:
            self.submitting = False

        self._notify(NotificationLevel.SUCCESS, message)
        self.close_form()
        await self._reload_after_mutation()
        return task

    # ---- 状态切换 / 删除 ----

    async def toggle_status(self, task_id: str) -> Task:
        """在 pending 与 completed 之间切换（in-progress 切换为 completed）"""
        task = self.find_task(task_id)
        if task is None:
            error = TaskNotFoundError(task_id)
            self._notify_error(error)
            raise error

        new_status = (
            TaskStatus.PENDING if task.status == TaskStatus.COMPLETED else TaskStatus.COMPLETED
        )
        try:
            updated = await self._service.update_task(task_id, TaskUpdate(status=new_status))
        except TaskFlowError as e:
            self._notify_error(e)
            raise

        await self._reload_after_mutation()
        return updated

    def request_delete(self, task_id: str) -> None:
        """标记待删除任务，等待用户确认"""
        self.pending_delete_id = task_id

    def cancel_delete(self) -> None:
        self.pending_delete_id = None

    async def confirm_delete(self) -> bool:
        """用户确认后才发起删除调用"""
        task_id = self.pending_delete_id
        if task_id is None:
            raise TaskValidationError("No task is awaiting delete confirmation")

        try:
            await self._service.delete_task(task_id)
        except TaskFlowError as e:
            self._notify_error(e)
            raise
        finally:
            self.pending_delete_id = None

        self._notify(NotificationLevel.SUCCESS, "Task deleted successfully!")
        await self._reload_after_mutation()
        return True

    # ---- 外观 ----

    def toggle_dark_mode(self) -> bool:
        self.dark_mode = not self.dark_mode
        return self.dark_mode

    # ---- 内部 ----

    async def _reload_after_mutation(self) -> None:
        # 写入已成功；刷新失败已记录为通知，不影响本次操作结果
        try:
            await self.reload()
        except TaskFlowError:
            log.warning("reload_after_mutation_failed")

    def _notify(self, level: NotificationLevel, message: str) -> None:
        self._notifications.append(Notification(level=level, message=message))

    def _notify_error(self, error: TaskFlowError) -> None:
        log.info("task_action_failed", error_type=type(error).__name__, message=str(error))
        self._notify(NotificationLevel.ERROR, str(error))
