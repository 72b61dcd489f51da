"""SlotStore SQLite 实现

等价于浏览器 localStorage：一个键对应一整份字符串值。
"""

from datetime import UTC, datetime

import aiosqlite


class SqliteSlotStore:
    """SlotStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def get_slot(self, key: str) -> str | None:
        """读取槽位值"""
        cursor = await self._conn.execute(
            "SELECT value FROM kv_slots WHERE key = ?",
            (key,),
        )
        row = await cursor.fetchone()
        return row[0] if row else None

    async def put_slot(self, key: str, value: str) -> None:
        """写入槽位值并提交"""
        try:
            await self._conn.execute(
                """
                INSERT INTO kv_slots (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value, datetime.now(UTC).isoformat()),
            )
            await self._conn.commit()
        except Exception:
            await self._conn.rollback()
            raise
