"""Record Domain Model -- 后端表格服务的行形状及查询/响应结构

本地存储（KV 槽位）与远端表格服务共用同一套请求/响应模型，
使 TaskService 可以在两种存储之间无差别切换。
记录本身保持为 dict（后端字段名：Id、Name、due_date、created_at ...）。
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import ConditionOperator, GroupOperator, SortType

Record = dict[str, Any]

# 任务表全部字段（含只读元数据）
ALL_FIELDS: list[str] = [
    "Name",
    "Tags",
    "Owner",
    "CreatedOn",
    "CreatedBy",
    "ModifiedOn",
    "ModifiedBy",
    "title",
    "description",
    "priority",
    "due_date",
    "status",
    "created_at",
    "updated_at",
    "completed_at",
]

# 创建/更新时允许写入的字段
UPDATEABLE_FIELDS: list[str] = [
    "Name",
    "Tags",
    "Owner",
    "title",
    "description",
    "priority",
    "due_date",
    "status",
    "created_at",
    "updated_at",
    "completed_at",
]


class _WireModel(BaseModel):
    """序列化时使用后端字段名（fieldName、SortType ...）"""

    model_config = ConfigDict(populate_by_name=True)


class Condition(_WireModel):
    """单个查询条件"""

    field_name: str = Field(alias="fieldName")
    operator: ConditionOperator
    values: list[Any] = Field(default_factory=list)


class ConditionGroup(_WireModel):
    """条件组：conditions 与 sub_groups 的判定结果以 operator 组合（默认 AND）"""

    operator: GroupOperator = GroupOperator.AND
    conditions: list[Condition] = Field(default_factory=list)
    sub_groups: list["ConditionGroup"] = Field(default_factory=list, alias="subGroups")


class OrderBy(_WireModel):
    """排序规则"""

    field_name: str = Field(alias="fieldName")
    sort_type: SortType = Field(default=SortType.ASC, alias="SortType")


class PagingInfo(_WireModel):
    """分页信息"""

    limit: int = Field(default=100, ge=1)
    offset: int = Field(default=0, ge=0)


class RecordQuery(_WireModel):
    """记录查询参数

    where 中的条件全部以 AND 组合；where_groups 中的每个组也以 AND 与 where 组合。
    """

    fields: list[str] = Field(default_factory=lambda: list(ALL_FIELDS))
    where: list[Condition] = Field(default_factory=list)
    where_groups: list[ConditionGroup] = Field(default_factory=list, alias="whereGroups")
    order_by: list[OrderBy] = Field(default_factory=list, alias="orderBy")
    paging: PagingInfo = Field(default_factory=PagingInfo, alias="pagingInfo")

    def to_wire(self) -> dict[str, Any]:
        """转换为后端请求 JSON"""
        return self.model_dump(mode="json", by_alias=True)


class FieldError(_WireModel):
    """字段级校验错误"""

    field_label: str = Field(default="", alias="fieldLabel")
    message: str = ""


class RecordResult(BaseModel):
    """单条记录的写入结果"""

    success: bool = False
    data: Record | None = None
    message: str | None = None
    errors: list[FieldError] | None = None

    def error_message(self, default: str, include_field_errors: bool = False) -> str:
        """归一化错误消息

        include_field_errors=True 时优先拼接字段级错误（"<label>: <message>"，以 ", " 连接）。
        """
        if include_field_errors and self.errors:
            return ", ".join(f"{err.field_label}: {err.message}" for err in self.errors)
        return self.message or default


class RecordsResponse(BaseModel):
    """查询多条记录的响应"""

    success: bool = True
    data: list[Record] | None = None
    total: int | None = None
    message: str | None = None


class RecordResponse(BaseModel):
    """查询单条记录的响应"""

    success: bool = True
    data: Record | None = None
    message: str | None = None


class MutationResponse(BaseModel):
    """创建/更新/删除的响应，results 与请求记录一一对应"""

    success: bool = False
    results: list[RecordResult] = Field(default_factory=list)
    message: str | None = None

    def first_result(self) -> RecordResult | None:
        """整体成功且至少一条结果时返回第一条，否则 None"""
        if self.success and self.results:
            return self.results[0]
        return None
