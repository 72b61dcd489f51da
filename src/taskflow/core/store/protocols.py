"""Store Protocol 接口定义

定义 RecordStore（记录存储）与 SlotStore（KV 槽位）的抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing）。
本地存储 LocalRecordStore 与远端 TableClient 均满足 RecordStore。
"""

from typing import Protocol

from ..models.record import (
    MutationResponse,
    Record,
    RecordQuery,
    RecordResponse,
    RecordsResponse,
)


class RecordStore(Protocol):
    """记录存储接口 -- 按表名读写行形状的记录"""

    async def fetch_records(self, table: str, query: RecordQuery) -> RecordsResponse:
        """按查询条件获取记录列表"""
        ...

    async def get_record_by_id(
        self,
        table: str,
        record_id: str,
        fields: list[str] | None = None,
    ) -> RecordResponse:
        """根据 Id 获取单条记录，不存在时 data 为 None"""
        ...

    async def create_records(self, table: str, records: list[Record]) -> MutationResponse:
        """批量创建记录，Id 由存储签发"""
        ...

    async def update_records(self, table: str, records: list[Record]) -> MutationResponse:
        """批量更新记录，每条记录须携带 Id"""
        ...

    async def delete_records(self, table: str, record_ids: list[str]) -> MutationResponse:
        """批量删除记录"""
        ...


class SlotStore(Protocol):
    """KV 槽位接口 -- 一个键保存一整份序列化值"""

    async def get_slot(self, key: str) -> str | None:
        """读取槽位值，不存在返回 None"""
        ...

    async def put_slot(self, key: str, value: str) -> None:
        """写入槽位值（覆盖）"""
        ...
