"""可观测日志测试

测试内容：
1. 任务路径提取 task_id
2. 请求日志上下文（store_mode / task_id / filter / search）
3. 凭据字段脱敏
4. setup_logging 参数与第三方库降噪
5. X-Request-ID 响应头
"""

import logging
from types import SimpleNamespace

import pytest
from httpx import AsyncClient
from starlette.requests import Request
from taskflow.web.middleware.logging_config import REDACTED, redact_secrets, setup_logging
from taskflow.web.middleware.logging_mw import extract_task_id, request_context


def _request(path: str, query: bytes = b"", store_mode: str | None = "local") -> Request:
    app = SimpleNamespace(state=SimpleNamespace(store_mode=store_mode))
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": path,
            "query_string": query,
            "headers": [],
            "app": app,
        }
    )


class TestExtractTaskId:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/api/tasks/01HX", "01HX"),
            ("/api/tasks/42/toggle", "42"),
            ("/api/tasks", None),
            ("/api/stats", None),
            ("/health", None),
        ],
    )
    def test_extract(self, path, expected):
        assert extract_task_id(path) == expected


class TestRequestContext:
    def test_task_operation(self):
        ctx = request_context(_request("/api/tasks/7/toggle"), "rid")
        assert ctx == {
            "request_id": "rid",
            "method": "GET",
            "path": "/api/tasks/7/toggle",
            "store_mode": "local",
            "task_id": "7",
        }

    def test_list_query_params(self):
        ctx = request_context(_request("/api/tasks", b"filter=completed&search=milk"), "rid")
        assert ctx["filter"] == "completed"
        assert ctx["search"] == "milk"
        assert "task_id" not in ctx

    def test_empty_params_not_bound(self):
        ctx = request_context(_request("/api/tasks", b"search="), "rid")
        assert "search" not in ctx
        assert "filter" not in ctx

    def test_without_store_mode(self):
        ctx = request_context(_request("/health", store_mode=None), "rid")
        assert "store_mode" not in ctx


class TestRedactSecrets:
    def test_masks_credentials(self):
        event = {"event": "x", "public_key": "pk-live", "Authorization": "Bearer pk-live"}
        out = redact_secrets(None, "info", event)
        assert out["public_key"] == REDACTED
        assert out["Authorization"] == REDACTED
        assert out["event"] == "x"

    def test_keeps_empty_and_other_fields(self):
        out = redact_secrets(None, "info", {"public_key": "", "project_id": "proj-1"})
        assert out == {"public_key": "", "project_id": "proj-1"}


class TestSetupLogging:
    def test_explicit_level_and_quiet_libraries(self):
        setup_logging(log_format="json", log_level="DEBUG")
        try:
            assert logging.getLogger().level == logging.DEBUG
            assert logging.getLogger("httpx").level == logging.WARNING
            assert logging.getLogger("aiosqlite").level == logging.WARNING
        finally:
            setup_logging(log_format="dev", log_level="INFO")


class TestRequestIdHeader:
    async def test_request_ids_are_unique(self, client: AsyncClient):
        ids = set()
        for _ in range(3):
            resp = await client.get("/api/tasks", params={"filter": "completed"})
            ids.add(resp.headers["x-request-id"])
        assert len(ids) == 3
        # ULID 格式：26 字符
        assert all(len(i) == 26 for i in ids)
