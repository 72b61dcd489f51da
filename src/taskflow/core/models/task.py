"""Task Domain Model

Task 是唯一实体。Python 侧使用 snake_case 属性，
对外（HTTP）通过 camelCase 别名输出 UI 形状（dueDate、createdAt ...）。

不变量：completed_at 非空当且仅当 status == completed。
"""

from datetime import UTC, date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from ..config import DEFAULT_PAGE_SIZE
from .enums import NotificationLevel, TaskPriority, TaskStatus


class _CamelModel(BaseModel):
    """camelCase 别名基类，同时允许按字段名构造"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Task(_CamelModel):
    """Task 数据模型

    id 由存储层签发，任务生命周期内稳定。
    name/tags/owner 为后端元数据，原样透传，不做解释。
    """

    id: str = Field(description="唯一标识，由存储层签发")
    title: str = Field(description="任务标题")
    description: str = Field(default="", description="任务描述")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="优先级")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="当前状态")
    due_date: date | None = Field(default=None, description="截止日期，None 表示无截止")
    created_at: datetime = Field(description="创建时间，创建后不可变")
    updated_at: datetime = Field(description="更新时间，每次变更刷新")
    completed_at: datetime | None = Field(default=None, description="完成时间")
    name: str = Field(default="", description="后端元数据 Name")
    tags: str = Field(default="", description="后端元数据 Tags")
    owner: str = Field(default="", description="后端元数据 Owner")

    @model_validator(mode="after")
    def _check_completed_at(self) -> "Task":
        completed = self.status == TaskStatus.COMPLETED
        if completed != (self.completed_at is not None):
            raise ValueError("completed_at must be set if and only if status is completed")
        return self

    def is_overdue(self, now: datetime | None = None) -> bool:
        """截止日期严格早于当前时间且未完成

        截止日期按当天 00:00 (UTC) 计，即截止当天开始后即视为逾期。
        """
        if self.due_date is None or self.status == TaskStatus.COMPLETED:
            return False
        now = now or datetime.now(UTC)
        due_at = datetime(
            self.due_date.year, self.due_date.month, self.due_date.day, tzinfo=UTC
        )
        return due_at < now


class TaskDraft(_CamelModel):
    """表单草稿 -- 新建/编辑表单中尚未提交的字段值"""

    title: str = ""
    description: str = ""
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    due_date: date | None = None
    name: str = ""
    tags: str = ""
    owner: str = ""

    @classmethod
    def from_task(cls, task: Task) -> "TaskDraft":
        """以已有任务的字段填充编辑表单"""
        return cls(
            title=task.title,
            description=task.description,
            priority=task.priority,
            status=task.status,
            due_date=task.due_date,
            name=task.name,
            tags=task.tags,
            owner=task.owner,
        )


class TaskUpdate(_CamelModel):
    """部分更新结构

    所有字段默认缺省；只有调用方显式设置的字段参与合并
    （model_dump(exclude_unset=True)）。显式传 due_date=None 表示清除截止日期。
    """

    title: str | None = None
    description: str | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    due_date: date | None = None
    name: str | None = None
    tags: str | None = None
    owner: str | None = None

    @model_validator(mode="after")
    def _reject_null_fields(self) -> "TaskUpdate":
        # 仅 due_date 允许显式置空
        for field in self.model_fields_set:
            if field != "due_date" and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

    @classmethod
    def from_draft(cls, draft: TaskDraft) -> "TaskUpdate":
        """整表单提交：草稿中的全部字段均视为已设置"""
        return cls(**draft.model_dump())

    def changes(self) -> dict:
        """返回调用方显式设置的字段"""
        return self.model_dump(exclude_unset=True)


class TaskQuery(BaseModel):
    """fetch_tasks 的筛选条件

    search: 标题或描述子串（大小写不敏感）
    status: 精确匹配，"all" 或 None 表示不过滤
    priority: 精确匹配
    """

    search: str = ""
    status: TaskStatus | Literal["all"] | None = None
    priority: TaskPriority | None = None
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    offset: int = Field(default=0, ge=0)


class TaskStats(BaseModel):
    """统计面板数据（基于内存快照计算）"""

    total: int = 0
    completed: int = 0
    pending: int = 0
    overdue: int = 0


class Notification(BaseModel):
    """一次性用户通知（toast）"""

    level: NotificationLevel
    message: str
    ts: datetime = Field(default_factory=lambda: datetime.now(UTC))
