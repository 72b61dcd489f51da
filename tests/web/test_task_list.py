"""TaskListController 测试

测试内容：
1. 认证状态与加载
2. 筛选器/搜索/统计
3. 表单提交（新建、编辑、空标题校验）
4. 状态切换、确认删除
5. 失败时快照不变、错误通知、过期加载结果被丢弃
"""

import asyncio
from datetime import date, timedelta
from unittest.mock import AsyncMock

import pytest
from taskflow.core.exceptions import (
    TaskNotFoundError,
    TaskServiceError,
    TaskValidationError,
)
from taskflow.core.models import (
    NotificationLevel,
    TaskFilter,
    TaskPriority,
    TaskStatus,
)
from taskflow.web.services.task_list import TaskListController

YESTERDAY = date.today() - timedelta(days=1)


async def _create(controller: TaskListController, **fields):
    controller.open_new_form()
    controller.update_form(**fields)
    return await controller.submit()


class TestAuthentication:
    """认证状态"""

    async def test_unauthenticated_does_not_call_service(self):
        service = AsyncMock()
        controller = TaskListController(service)

        await controller.reload()

        assert controller.tasks == []
        service.fetch_tasks.assert_not_called()

    async def test_login_loads_and_logout_clears(self, service):
        controller = TaskListController(service)
        await controller.set_authenticated(True)
        await _create(controller, title="A")
        assert len(controller.tasks) == 1

        await controller.set_authenticated(False)
        assert controller.tasks == []

        await controller.set_authenticated(True)
        assert len(controller.tasks) == 1


class TestFiltering:
    """筛选器 + 搜索 + 统计"""

    async def test_filter_and_search(self, controller):
        await _create(controller, title="Write report", priority=TaskPriority.HIGH)
        await _create(controller, title="Buy milk", description="report card")
        await _create(controller, title="Ship", status=TaskStatus.COMPLETED)

        await controller.set_search("REPORT")
        assert sorted(t.title for t in controller.visible_tasks) == ["Buy milk", "Write report"]

        await controller.set_filter(TaskFilter.HIGH_PRIORITY)
        assert [t.title for t in controller.visible_tasks] == ["Write report"]

        await controller.apply_view(TaskFilter.COMPLETED, "")
        assert [t.title for t in controller.visible_tasks] == ["Ship"]

    async def test_overdue_filter(self, controller):
        await _create(controller, title="Late", due_date=YESTERDAY)
        await _create(controller, title="Late but done", due_date=YESTERDAY, status=TaskStatus.COMPLETED)
        await _create(controller, title="Future", due_date=date.today() + timedelta(days=3))

        await controller.set_filter("overdue")
        assert [t.title for t in controller.visible_tasks] == ["Late"]

    async def test_unchanged_filter_does_not_reload(self):
        service = AsyncMock()
        service.fetch_tasks.return_value = []
        controller = TaskListController(service)
        await controller.set_authenticated(True)

        await controller.set_filter(TaskFilter.ALL)
        await controller.set_search("")

        assert service.fetch_tasks.await_count == 1

    async def test_reload_fetches_whole_collection(self):
        service = AsyncMock()
        service.fetch_tasks.return_value = []
        controller = TaskListController(service)
        await controller.set_authenticated(True)

        await controller.apply_view(TaskFilter.PENDING, "milk")

        assert service.fetch_tasks.await_count == 2
        criteria = service.fetch_tasks.call_args.args[0]
        assert criteria.status is None
        assert criteria.search == ""

    async def test_stats_ignore_filter_and_search(self, controller):
        await _create(controller, title="Write report", due_date=YESTERDAY)
        await _create(controller, title="Buy milk", status=TaskStatus.IN_PROGRESS)
        await _create(controller, title="Ship", status=TaskStatus.COMPLETED)
        expected = controller.stats

        await controller.apply_view(TaskFilter.COMPLETED, "ship")

        assert [t.title for t in controller.visible_tasks] == ["Ship"]
        assert controller.stats == expected
        assert expected.total == 3
        assert expected.completed == 1
        assert expected.pending == 1
        assert expected.overdue == 1

    async def test_hidden_task_still_editable(self, controller):
        """筛选器隐藏的任务仍可切换状态与编辑"""
        task = await _create(controller, title="A")
        await controller.set_filter(TaskFilter.COMPLETED)
        assert controller.visible_tasks == []

        toggled = await controller.toggle_status(task.id)
        assert toggled.status == TaskStatus.COMPLETED
        assert [t.id for t in controller.visible_tasks] == [task.id]

        await controller.set_filter(TaskFilter.PENDING)
        controller.start_edit(task.id)
        assert controller.form.title == "A"


class TestSubmit:
    """表单提交"""

    async def test_create_notifies_and_closes_form(self, controller):
        task = await _create(controller, title="Write report")

        assert controller.form_open is False
        assert controller.find_task(task.id) is not None
        notes = controller.drain_notifications()
        assert [(n.level, n.message) for n in notes] == [
            (NotificationLevel.SUCCESS, "Task created successfully!")
        ]
        assert controller.notifications == []

    async def test_blank_title_no_call_no_state_change(self):
        service = AsyncMock()
        service.fetch_tasks.return_value = []
        controller = TaskListController(service)
        await controller.set_authenticated(True)
        controller.open_new_form()
        controller.update_form(title="   ")

        with pytest.raises(TaskValidationError):
            await controller.submit()

        service.create_task.assert_not_called()
        assert controller.form_open is True
        assert controller.submitting is False
        assert controller.notifications[-1].message == "Please enter a task title"

    async def test_edit(self, controller):
        task = await _create(controller, title="A", description="d")

        controller.start_edit(task.id)
        assert controller.is_editing
        assert controller.form.title == "A"
        controller.update_form(title="B")
        updated = await controller.submit()

        assert updated.title == "B"
        assert updated.description == "d"
        assert controller.is_editing is False
        assert controller.find_task(task.id).title == "B"
        assert controller.notifications[-1].message == "Task updated successfully!"

    async def test_edit_unknown_task(self, controller):
        with pytest.raises(TaskNotFoundError):
            controller.start_edit("missing")


class TestToggleAndDelete:
    """状态切换与删除"""

    async def test_scenario_overdue_then_toggle(self, controller):
        """新建逾期高优先级任务 -> 逾期 +1 -> 切换完成 -> 逾期 -1"""
        before = controller.stats.overdue
        task = await _create(
            controller,
            title="Write report",
            priority=TaskPriority.HIGH,
            due_date=YESTERDAY,
            status=TaskStatus.PENDING,
        )
        assert controller.stats.overdue == before + 1

        toggled = await controller.toggle_status(task.id)
        assert toggled.status == TaskStatus.COMPLETED
        assert toggled.completed_at is not None
        assert controller.stats.overdue == before
        assert controller.stats.completed == 1

    async def test_toggle_twice_restores(self, controller):
        task = await _create(controller, title="A")

        await controller.toggle_status(task.id)
        restored = await controller.toggle_status(task.id)

        assert restored.status == TaskStatus.PENDING
        assert restored.completed_at is None

    async def test_in_progress_toggles_to_completed(self, controller):
        task = await _create(controller, title="A", status=TaskStatus.IN_PROGRESS)
        toggled = await controller.toggle_status(task.id)
        assert toggled.status == TaskStatus.COMPLETED

    async def test_delete_requires_confirmation(self, controller):
        task = await _create(controller, title="A")

        controller.request_delete(task.id)
        assert controller.pending_delete_id == task.id
        controller.cancel_delete()
        assert controller.pending_delete_id is None
        assert len(controller.tasks) == 1

        controller.request_delete(task.id)
        assert await controller.confirm_delete() is True
        assert controller.tasks == []
        assert controller.notifications[-1].message == "Task deleted successfully!"

    async def test_confirm_without_request(self, controller):
        with pytest.raises(TaskValidationError):
            await controller.confirm_delete()

    async def test_delete_missing_keeps_collection(self, controller):
        await _create(controller, title="A")
        snapshot = list(controller.tasks)

        controller.request_delete("missing")
        with pytest.raises(TaskServiceError, match="missing"):
            await controller.confirm_delete()

        assert controller.tasks == snapshot
        assert controller.pending_delete_id is None
        assert controller.notifications[-1].level == NotificationLevel.ERROR


class TestFailures:
    """失败处理"""

    async def test_reload_failure_keeps_snapshot(self, controller):
        await _create(controller, title="A")
        snapshot = list(controller.tasks)
        controller._service.fetch_tasks = AsyncMock(
            side_effect=TaskServiceError("Failed to fetch tasks. Please try again.")
        )

        with pytest.raises(TaskServiceError):
            await controller.reload()

        assert controller.tasks == snapshot
        assert controller.loading is False
        assert controller.notifications[-1].message == (
            "Failed to fetch tasks. Please try again."
        )

    async def test_stale_reload_discarded(self, task_factory):
        """较早发起的加载晚于较新的加载返回时，结果被丢弃"""
        slow_started = asyncio.Event()
        release_slow = asyncio.Event()
        old = [task_factory("old", "Old")]
        new = [task_factory("new", "New")]
        calls = 0

        async def fetch(criteria):
            nonlocal calls
            calls += 1
            if calls == 1:
                slow_started.set()
                await release_slow.wait()
                return old
            return new

        service = AsyncMock()
        service.fetch_tasks.side_effect = fetch
        controller = TaskListController(service)
        controller.authenticated = True

        slow = asyncio.create_task(controller.reload())
        await slow_started.wait()

        await controller.reload()
        release_slow.set()
        await slow

        assert [t.id for t in controller.tasks] == ["new"]
        assert controller.loading is False

    async def test_stale_reload_failure_silent(self, task_factory):
        """被取代的加载失败时不提示也不抛出"""
        slow_started = asyncio.Event()
        release_slow = asyncio.Event()
        new = [task_factory("new", "New")]
        calls = 0

        async def fetch(criteria):
            nonlocal calls
            calls += 1
            if calls == 1:
                slow_started.set()
                await release_slow.wait()
                raise TaskServiceError("Failed to fetch tasks. Please try again.")
            return new

        service = AsyncMock()
        service.fetch_tasks.side_effect = fetch
        controller = TaskListController(service)
        controller.authenticated = True

        slow = asyncio.create_task(controller.reload())
        await slow_started.wait()

        await controller.reload()
        release_slow.set()
        result = await slow

        assert [t.id for t in result] == ["new"]
        assert [t.id for t in controller.tasks] == ["new"]
        assert controller.notifications == []
        assert controller.loading is False

    async def test_notification_queue_bounded(self):
        controller = TaskListController(AsyncMock(), notification_limit=2)
        for _ in range(3):
            with pytest.raises(TaskValidationError):
                await controller.submit()
        assert len(controller.notifications) == 2


class TestAppearance:
    """主题"""

    def test_toggle_dark_mode(self):
        controller = TaskListController(AsyncMock())
        assert controller.toggle_dark_mode() is True
        assert controller.toggle_dark_mode() is False
