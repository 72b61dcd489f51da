"""TableClient -- 远端表格服务调用封装

对表格服务发起 fetch/get/create/update/delete 记录请求。
客户端句柄由调用方显式构造并注入 TaskService，不使用全局单例。
"""

import time
from typing import Any
from urllib.parse import quote

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from taskflow.core.models.record import (
    MutationResponse,
    Record,
    RecordQuery,
    RecordResponse,
    RecordsResponse,
)

from .config import BackendConfig
from .exceptions import BackendError, BackendUnreachableError

log = structlog.get_logger()

# 健康检查超时（硬编码，应快速响应）
HEALTH_CHECK_TIMEOUT_S = 5


def _error_detail(resp: httpx.Response) -> str:
    """尽量从错误响应体中提取 message"""
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200]
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return resp.reason_phrase


class TableClient:
    """表格服务客户端（RecordStore 的远程实现）"""

    def __init__(
        self,
        config: BackendConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """初始化表格服务客户端

        Args:
            config: 服务配置（地址、凭据、超时）
            http_client: 可选的外部 httpx 客户端；缺省时自行创建并负责关闭
        """
        self._config = config
        self._endpoint = config.endpoint.rstrip("/")
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=config.timeout_s)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._config.project_id:
            headers["X-Project-Id"] = self._config.project_id
        key = self._config.public_key.get_secret_value()
        if key:
            headers["Authorization"] = f"Bearer {key}"
        return headers

    def _records_url(self, table: str, suffix: str = "") -> str:
        return f"{self._endpoint}/tables/{quote(table, safe='')}/records{suffix}"

    async def _request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        params: dict[str, str] | None = None,
        allow_not_found: bool = False,
    ) -> Any:
        """发送请求并返回解析后的 JSON

        Raises:
            BackendUnreachableError: 连接失败或超时
            BackendError: 非 2xx 响应或响应体无法解析
        """
        start_time = time.monotonic()
        try:
            resp = await self._http.request(
                method,
                url,
                json=json,
                params=params,
                headers=self._headers(),
            )
        except httpx.TransportError as e:
            log.error(
                "backend_request_failed",
                method=method,
                url=url,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise BackendUnreachableError(self._endpoint, e) from e

        duration_ms = int((time.monotonic() - start_time) * 1000)

        if allow_not_found and resp.status_code == 404:
            return None
        if resp.is_error:
            detail = _error_detail(resp)
            log.warning(
                "backend_request_rejected",
                method=method,
                url=url,
                status_code=resp.status_code,
                detail=detail,
                duration_ms=duration_ms,
            )
            raise BackendError(
                f"Backend returned {resp.status_code}: {detail}",
                status_code=resp.status_code,
            )

        try:
            payload = resp.json()
        except ValueError as e:
            raise BackendError(
                "Backend returned an invalid JSON payload",
                status_code=resp.status_code,
            ) from e

        log.debug(
            "backend_request_completed",
            method=method,
            url=url,
            status_code=resp.status_code,
            duration_ms=duration_ms,
        )
        return payload

    @staticmethod
    def _parse(model: type[BaseModel], payload: Any) -> Any:
        if payload is None:
            return model()
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise BackendError(f"Unexpected backend response: {e.error_count()} errors") from e

    async def fetch_records(self, table: str, query: RecordQuery) -> RecordsResponse:
        payload = await self._request(
            "POST",
            self._records_url(table, "/query"),
            json=query.to_wire(),
        )
        return self._parse(RecordsResponse, payload)

    async def get_record_by_id(
        self,
        table: str,
        record_id: str,
        fields: list[str] | None = None,
    ) -> RecordResponse:
        params = {"fields": ",".join(fields)} if fields else None
        payload = await self._request(
            "GET",
            self._records_url(table, f"/{quote(str(record_id), safe='')}"),
            params=params,
            allow_not_found=True,
        )
        return self._parse(RecordResponse, payload)

    async def create_records(self, table: str, records: list[Record]) -> MutationResponse:
        payload = await self._request(
            "POST",
            self._records_url(table),
            json={"records": records},
        )
        return self._parse(MutationResponse, payload)

    async def update_records(self, table: str, records: list[Record]) -> MutationResponse:
        payload = await self._request(
            "PATCH",
            self._records_url(table),
            json={"records": records},
        )
        return self._parse(MutationResponse, payload)

    async def delete_records(self, table: str, record_ids: list[str]) -> MutationResponse:
        payload = await self._request(
            "DELETE",
            self._records_url(table),
            json={"RecordIds": record_ids},
        )
        return self._parse(MutationResponse, payload)

    async def health_check(self) -> bool:
        """检查表格服务可达性

        发送 GET {endpoint}/health 请求。

        注意: 此方法不抛出异常，所有异常内部捕获并返回 False。
        """
        url = f"{self._endpoint}/health"
        try:
            resp = await self._http.get(url, timeout=HEALTH_CHECK_TIMEOUT_S)
            return resp.status_code == 200
        except Exception as e:
            log.debug("health_check_failed", url=url, error=str(e))
            return False

    async def aclose(self) -> None:
        """关闭自行创建的 httpx 客户端"""
        if self._owns_http:
            await self._http.aclose()
