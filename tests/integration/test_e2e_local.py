"""本地模式端到端集成测试

HTTP -> Controller -> TaskService -> LocalRecordStore -> SQLite 完整链路，
以及重启后数据仍在。
"""

from datetime import date, timedelta


class TestLocalEndToEnd:
    """本地存储全链路"""

    async def test_lifespan_wires_local_store(self, local_env, app_runner):
        async with app_runner() as (app, client):
            assert app.state.store_group is not None
            assert app.state.table_client is None
            assert app.state.task_list.authenticated is True
            assert app.state.task_service.table_name == "tasks"

            resp = await client.get("/ready")
            assert resp.status_code == 200

    async def test_report_scenario(self, local_env, app_runner):
        """新建逾期任务 -> 逾期 +1 -> 切换完成 -> 逾期 -1"""
        yesterday = (date.today() - timedelta(days=1)).isoformat()

        async with app_runner() as (_, client):
            resp = await client.post(
                "/api/tasks",
                json={
                    "title": "Write report",
                    "priority": "high",
                    "dueDate": yesterday,
                    "status": "pending",
                },
            )
            assert resp.status_code == 201
            task_id = resp.json()["id"]

            stats = (await client.get("/api/stats")).json()
            assert stats == {"total": 1, "completed": 0, "pending": 1, "overdue": 1}

            resp = await client.post(f"/api/tasks/{task_id}/toggle")
            assert resp.json()["completedAt"] is not None

            stats = (await client.get("/api/stats")).json()
            assert stats == {"total": 1, "completed": 1, "pending": 0, "overdue": 0}

    async def test_data_survives_restart(self, local_env, app_runner):
        async with app_runner() as (_, client):
            resp = await client.post("/api/tasks", json={"title": "Persist me"})
            task_id = resp.json()["id"]

        async with app_runner() as (_, client):
            resp = await client.get("/api/tasks")
            assert [t["id"] for t in resp.json()["tasks"]] == [task_id]
            resp = await client.get(f"/api/tasks/{task_id}")
            assert resp.json()["title"] == "Persist me"
