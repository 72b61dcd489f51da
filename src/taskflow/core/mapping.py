"""任务形状与记录形状之间的字段映射

- 读取：Id/title/.../due_date/created_at/Name/Tags/Owner -> Task
- 写入：Task 字段 -> 可更新的后端字段（UPDATEABLE_FIELDS）
- 查询：TaskQuery -> RecordQuery

TaskService 与 CLI 共用，仅依赖 core 层模型。
"""

from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any

import structlog

from .models import (
    ALL_FIELDS,
    Condition,
    ConditionGroup,
    ConditionOperator,
    GroupOperator,
    OrderBy,
    PagingInfo,
    Record,
    RecordQuery,
    SortType,
    Task,
    TaskPriority,
    TaskQuery,
    TaskStatus,
)

log = structlog.get_logger()

# Task 字段 -> 后端记录字段（可写部分）
_WRITE_FIELD_MAP: dict[str, str] = {
    "title": "title",
    "description": "description",
    "priority": "priority",
    "status": "status",
    "due_date": "due_date",
    "name": "Name",
    "tags": "Tags",
    "owner": "Owner",
}


def _now() -> datetime:
    return datetime.now(UTC)


def _encode(value: Any) -> Any:
    """将 Task 字段值编码为记录值"""
    if isinstance(value, StrEnum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


def _parse_ts(value: Any) -> datetime | None:
    """解析 ISO 时间戳；无时区信息时按 UTC 处理"""
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _parse_date(value: Any) -> date | None:
    """解析截止日期，兼容纯日期与带时间的 ISO 字符串"""
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _as_text(value: Any) -> str:
    """后端元数据透传为文本"""
    if value is None:
        return ""
    if isinstance(value, list):
        return ",".join(str(v) for v in value)
    return str(value)


def _coerce(enum_cls: type[StrEnum], value: Any, default: StrEnum) -> Any:
    if value in (None, ""):
        return default
    try:
        return enum_cls(value)
    except ValueError:
        log.warning("unknown_record_value", enum=enum_cls.__name__, value=value)
        return default


def task_from_record(record: Record) -> Task:
    """后端记录 -> Task

    缺失字段使用默认值；读取时重新应用 completed_at 派生不变量。
    """
    now = _now()
    status = _coerce(TaskStatus, record.get("status"), TaskStatus.PENDING)
    created_at = _parse_ts(record.get("created_at") or record.get("CreatedOn")) or now
    updated_at = _parse_ts(record.get("updated_at") or record.get("ModifiedOn")) or now

    completed_at = None
    if status == TaskStatus.COMPLETED:
        completed_at = _parse_ts(record.get("completed_at")) or updated_at

    record_id = record.get("Id")
    if record_id is None:
        record_id = record.get("id")

    return Task(
        id=str(record_id),
        title=record.get("title") or "",
        description=record.get("description") or "",
        priority=_coerce(TaskPriority, record.get("priority"), TaskPriority.MEDIUM),
        status=status,
        due_date=_parse_date(record.get("due_date")),
        created_at=created_at,
        updated_at=updated_at,
        completed_at=completed_at,
        name=_as_text(record.get("Name")),
        tags=_as_text(record.get("Tags")),
        owner=_as_text(record.get("Owner")),
    )


def record_from_fields(fields: dict[str, Any]) -> Record:
    """Task 字段（部分或全部）-> 后端可写记录字段"""
    record: Record = {}
    for key, value in fields.items():
        target = _WRITE_FIELD_MAP.get(key)
        if target is not None:
            record[target] = _encode(value)
    return record


def build_record_query(criteria: TaskQuery) -> RecordQuery:
    """TaskQuery -> RecordQuery

    search 生成 title/description 的 OR 条件组；status（非 all）与 priority 为精确匹配；
    按 created_at 倒序。
    """
    where: list[Condition] = []
    where_groups: list[ConditionGroup] = []

    if criteria.search:
        where_groups.append(
            ConditionGroup(
                operator=GroupOperator.OR,
                sub_groups=[
                    ConditionGroup(
                        conditions=[
                            Condition(
                                field_name=field,
                                operator=ConditionOperator.CONTAINS,
                                values=[criteria.search],
                            )
                        ]
                    )
                    for field in ("title", "description")
                ],
            )
        )

    if criteria.status and criteria.status != "all":
        where.append(
            Condition(
                field_name="status",
                operator=ConditionOperator.EXACT_MATCH,
                values=[_encode(criteria.status)],
            )
        )

    if criteria.priority:
        where.append(
            Condition(
                field_name="priority",
                operator=ConditionOperator.EXACT_MATCH,
                values=[criteria.priority.value],
            )
        )

    return RecordQuery(
        fields=list(ALL_FIELDS),
        where=where,
        where_groups=where_groups,
        order_by=[OrderBy(field_name="created_at", sort_type=SortType.DESC)],
        paging=PagingInfo(limit=criteria.limit, offset=criteria.offset),
    )
