"""TaskFlow Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import (
    FILTER_LABELS,
    HIGH_PRIORITIES,
    ConditionOperator,
    GroupOperator,
    NotificationLevel,
    SortType,
    TaskFilter,
    TaskPriority,
    TaskStatus,
)
from .record import (
    ALL_FIELDS,
    UPDATEABLE_FIELDS,
    Condition,
    ConditionGroup,
    FieldError,
    MutationResponse,
    OrderBy,
    PagingInfo,
    Record,
    RecordQuery,
    RecordResponse,
    RecordResult,
    RecordsResponse,
)
from .task import (
    Notification,
    Task,
    TaskDraft,
    TaskQuery,
    TaskStats,
    TaskUpdate,
)

__all__ = [
    # 枚举
    "TaskStatus",
    "TaskPriority",
    "TaskFilter",
    "NotificationLevel",
    "ConditionOperator",
    "GroupOperator",
    "SortType",
    "FILTER_LABELS",
    "HIGH_PRIORITIES",
    # Task
    "Task",
    "TaskDraft",
    "TaskUpdate",
    "TaskQuery",
    "TaskStats",
    "Notification",
    # Record
    "Record",
    "ALL_FIELDS",
    "UPDATEABLE_FIELDS",
    "Condition",
    "ConditionGroup",
    "OrderBy",
    "PagingInfo",
    "RecordQuery",
    "FieldError",
    "RecordResult",
    "RecordsResponse",
    "RecordResponse",
    "MutationResponse",
]
