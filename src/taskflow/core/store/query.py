"""RecordQuery 内存求值

本地存储没有服务端查询能力，条件、条件组、排序、分页均在内存中完成，
语义与远端表格服务保持一致：
- ExactMatch: 值精确相等（按字符串比较）
- Contains: 子串匹配，大小写不敏感
"""

from typing import Any

from ..models.enums import ConditionOperator, GroupOperator, SortType
from ..models.record import Condition, ConditionGroup, Record, RecordQuery


def match_condition(record: Record, condition: Condition) -> bool:
    """判断单条记录是否满足条件；values 为空视为无约束"""
    if not condition.values:
        return True
    value = record.get(condition.field_name)
    if condition.operator == ConditionOperator.CONTAINS:
        haystack = "" if value is None else str(value).lower()
        return any(str(v).lower() in haystack for v in condition.values)
    if value is None:
        return False
    return any(str(value) == str(v) for v in condition.values)


def match_group(record: Record, group: ConditionGroup) -> bool:
    """条件组求值：conditions 与 sub_groups 的结果按 operator 组合"""
    results = [match_condition(record, c) for c in group.conditions]
    results.extend(match_group(record, g) for g in group.sub_groups)
    if not results:
        return True
    if group.operator == GroupOperator.OR:
        return any(results)
    return all(results)


def _sort_key(value: Any) -> tuple[int, Any]:
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, (int, float)):
        return (0, value)
    return (1, str(value))


def _project(record: Record, fields: list[str]) -> Record:
    projected = {"Id": record.get("Id")}
    projected.update({f: record[f] for f in fields if f in record})
    return projected


def apply_query(records: list[Record], query: RecordQuery) -> tuple[list[Record], int]:
    """对记录列表执行查询

    Returns:
        (当前页记录, 过滤后总数) 元组
    """
    rows = [
        r
        for r in records
        if all(match_condition(r, c) for c in query.where)
        and all(match_group(r, g) for g in query.where_groups)
    ]

    # 多键排序：从最后一个键开始依次做稳定排序；缺失值始终排在末尾
    for order in reversed(query.order_by):
        field = order.field_name
        present = [r for r in rows if r.get(field) not in (None, "")]
        missing = [r for r in rows if r.get(field) in (None, "")]
        present.sort(
            key=lambda r: _sort_key(r[field]),
            reverse=order.sort_type == SortType.DESC,
        )
        rows = present + missing

    total = len(rows)
    start = query.paging.offset
    page = rows[start : start + query.paging.limit]
    return [_project(r, query.fields) for r in page], total
