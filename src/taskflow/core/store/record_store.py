"""LocalRecordStore -- 基于 KV 槽位的本地记录存储

每张表对应一个槽位（taskflow-<table>），槽位中保存整份记录列表的 JSON。
首次访问时读取一次并缓存在内存；每次变更后整份写回槽位。
记录 Id 由本存储签发（ULID）。
"""

import json
from datetime import UTC, datetime

import structlog
from ulid import ULID

from ..config import SLOT_KEY_PREFIX
from ..models.record import (
    UPDATEABLE_FIELDS,
    FieldError,
    MutationResponse,
    Record,
    RecordQuery,
    RecordResponse,
    RecordResult,
    RecordsResponse,
)
from .protocols import SlotStore
from .query import apply_query

log = structlog.get_logger()

# 本地存储写入的元数据操作者
LOCAL_ACTOR = "local"


class LocalRecordStore:
    """RecordStore 的本地实现"""

    def __init__(self, slot_store: SlotStore, key_prefix: str = SLOT_KEY_PREFIX) -> None:
        self._slots = slot_store
        self._key_prefix = key_prefix
        self._tables: dict[str, list[Record]] = {}

    def slot_key(self, table: str) -> str:
        """表名对应的槽位键"""
        return f"{self._key_prefix}{table}"

    async def fetch_records(self, table: str, query: RecordQuery) -> RecordsResponse:
        records = await self._load(table)
        rows, total = apply_query(records, query)
        return RecordsResponse(data=[dict(r) for r in rows], total=total)

    async def get_record_by_id(
        self,
        table: str,
        record_id: str,
        fields: list[str] | None = None,
    ) -> RecordResponse:
        record = self._find(await self._load(table), record_id)
        if record is None:
            return RecordResponse(data=None)
        if fields is None:
            return RecordResponse(data=dict(record))
        data = {"Id": record["Id"]}
        data.update({f: record[f] for f in fields if f in record})
        return RecordResponse(data=data)

    async def create_records(self, table: str, records: list[Record]) -> MutationResponse:
        rows = [dict(r) for r in await self._load(table)]
        now = datetime.now(UTC).isoformat()
        results: list[RecordResult] = []

        for incoming in records:
            values = self._writable(incoming)
            errors = self._validate(values, require_title=True)
            if errors:
                results.append(
                    RecordResult(success=False, message="Validation failed", errors=errors)
                )
                continue
            record = {
                "Id": str(ULID()),
                **values,
                "CreatedOn": now,
                "CreatedBy": LOCAL_ACTOR,
                "ModifiedOn": now,
                "ModifiedBy": LOCAL_ACTOR,
            }
            rows.append(record)
            results.append(RecordResult(success=True, data=dict(record)))

        if any(r.success for r in results):
            await self._save(table, rows)
        log.debug(
            "local_records_created",
            table=table,
            requested=len(records),
            created=sum(1 for r in results if r.success),
        )
        return MutationResponse(success=True, results=results)

    async def update_records(self, table: str, records: list[Record]) -> MutationResponse:
        rows = [dict(r) for r in await self._load(table)]
        now = datetime.now(UTC).isoformat()
        results: list[RecordResult] = []

        for incoming in records:
            record_id = incoming.get("Id")
            record = self._find(rows, record_id)
            if record is None:
                results.append(
                    RecordResult(success=False, message=f"Record with Id {record_id} not found")
                )
                continue
            values = self._writable(incoming)
            errors = self._validate(values, require_title=False)
            if errors:
                results.append(
                    RecordResult(success=False, message="Validation failed", errors=errors)
                )
                continue
            record.update(values)
            record["ModifiedOn"] = now
            record["ModifiedBy"] = LOCAL_ACTOR
            results.append(RecordResult(success=True, data=dict(record)))

        if any(r.success for r in results):
            await self._save(table, rows)
        return MutationResponse(success=True, results=results)

    async def delete_records(self, table: str, record_ids: list[str]) -> MutationResponse:
        rows = [dict(r) for r in await self._load(table)]
        results: list[RecordResult] = []

        for record_id in record_ids:
            record = self._find(rows, record_id)
            if record is None:
                results.append(
                    RecordResult(success=False, message=f"Record with Id {record_id} not found")
                )
                continue
            rows.remove(record)
            results.append(RecordResult(success=True))

        if any(r.success for r in results):
            await self._save(table, rows)
        return MutationResponse(success=True, results=results)

    async def _load(self, table: str) -> list[Record]:
        """读取槽位（每张表仅在首次访问时读取一次）"""
        if table not in self._tables:
            raw = await self._slots.get_slot(self.slot_key(table))
            records = json.loads(raw) if raw else []
            self._tables[table] = records
            log.debug("local_slot_loaded", table=table, count=len(records))
        return self._tables[table]

    async def _save(self, table: str, rows: list[Record]) -> None:
        """整份写回槽位；写入成功后才替换内存缓存"""
        payload = json.dumps(rows, ensure_ascii=False)
        await self._slots.put_slot(self.slot_key(table), payload)
        self._tables[table] = rows

    @staticmethod
    def _find(rows: list[Record], record_id: object) -> Record | None:
        if record_id is None:
            return None
        for row in rows:
            if str(row.get("Id")) == str(record_id):
                return row
        return None

    @staticmethod
    def _writable(record: Record) -> Record:
        return {k: v for k, v in record.items() if k in UPDATEABLE_FIELDS}

    @staticmethod
    def _validate(values: Record, require_title: bool) -> list[FieldError]:
        if require_title or "title" in values:
            title = values.get("title")
            if not isinstance(title, str) or not title.strip():
                return [FieldError(field_label="Title", message="Title is required")]
        return []
