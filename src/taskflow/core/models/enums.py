"""枚举定义

包含 TaskStatus、TaskPriority、TaskFilter 筛选器、通知级别，
以及记录查询使用的条件操作符与排序方向。
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """任务状态"""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(StrEnum):
    """任务优先级"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


# high-priority 筛选器命中的优先级集合
HIGH_PRIORITIES: set[TaskPriority] = {TaskPriority.HIGH, TaskPriority.URGENT}


class TaskFilter(StrEnum):
    """列表筛选器（六个取值）"""

    ALL = "all"
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    HIGH_PRIORITY = "high-priority"
    OVERDUE = "overdue"

    def as_status(self) -> TaskStatus | None:
        """筛选器对应的状态值；非状态类筛选器返回 None"""
        try:
            return TaskStatus(self.value)
        except ValueError:
            return None


# 筛选器展示标签
FILTER_LABELS: dict[TaskFilter, str] = {
    TaskFilter.ALL: "All Tasks",
    TaskFilter.PENDING: "Pending",
    TaskFilter.IN_PROGRESS: "In Progress",
    TaskFilter.COMPLETED: "Completed",
    TaskFilter.HIGH_PRIORITY: "High Priority",
    TaskFilter.OVERDUE: "Overdue",
}


class NotificationLevel(StrEnum):
    """通知级别（toast）"""

    SUCCESS = "success"
    ERROR = "error"


class ConditionOperator(StrEnum):
    """记录查询条件操作符"""

    EXACT_MATCH = "ExactMatch"
    CONTAINS = "Contains"


class GroupOperator(StrEnum):
    """条件组合方式"""

    AND = "AND"
    OR = "OR"


class SortType(StrEnum):
    """排序方向"""

    ASC = "ASC"
    DESC = "DESC"
