from datetime import datetime

from src.planner.settings import Settings, get_settings
from src.planner.main import app


def create_todo_payload(
    title="Test Task",
    content="Do something",
    start_date="2024-01-30",
    end_date="2024-02-02",
    completed=False,
    user_id=None,
):
    payload = {
        "title": title,
        "content": content,
        "start_date": start_date,
        "end_date": end_date,
        "completed": completed,
    }
    if user_id is not None:
        payload["user_id"] = user_id
    return payload


def assert_todo_shape(todo: dict):
    for key in ["id", "owner_id", "title", "start_date", "end_date", "completed", "created_at", "updated_at"]:
        assert key in todo
    assert "content" in todo
    assert "completed_at" in todo
    assert isinstance(todo["id"], int)
    assert isinstance(todo["completed"], bool)
    datetime.fromisoformat(todo["created_at"])
    datetime.fromisoformat(todo["updated_at"])


class TestHealth:
    def test_health_check(self, client):
        res = client.get("/")
        assert res.status_code == 200
        data = res.json()
        assert data["message"] == "Healthy"
        assert data["backend"] in ("memory", "sqlite")


class TestTodosCRUD:
    def test_create_todo_defaults_owner(self, client):
        res = client.post("/api/v1/todos/", json=create_todo_payload(title="  Buy milk ", content=None))
        assert res.status_code == 201
        todo = res.json()
        assert_todo_shape(todo)
        assert todo["title"] == "Buy milk"
        assert todo["content"] is None
        assert todo["owner_id"] == 1
        assert todo["completed_at"] is None

    def test_create_normalizes_dates(self, client):
        payload = create_todo_payload(start_date="2024-03-01T10:30:00", end_date="2024-03-02")
        res = client.post("/api/v1/todos/", json=payload)
        assert res.status_code == 201
        assert res.json()["start_date"] == "2024-03-01"

    def test_get_todo_and_not_found(self, client):
        tid = client.post("/api/v1/todos/", json=create_todo_payload(title="Read book")).json()["id"]

        res_get = client.get(f"/api/v1/todos/{tid}")
        assert res_get.status_code == 200
        assert res_get.json()["title"] == "Read book"

        res_404 = client.get("/api/v1/todos/999999")
        assert res_404.status_code == 404
        assert res_404.json()["detail"] == "Todo not found"

    def test_toggle_completion_sets_and_clears_completed_at(self, client):
        tid = client.post("/api/v1/todos/", json=create_todo_payload(title="Toggle")).json()["id"]

        done = client.patch(f"/api/v1/todos/{tid}", json={"completed": True}).json()
        assert done["completed"] is True
        assert done["completed_at"] is not None
        assert done["content"] == "Do something"

        reopened = client.patch(f"/api/v1/todos/{tid}", json={"completed": False}).json()
        assert reopened["completed"] is False
        assert reopened["completed_at"] is None

    def test_patch_partial_update_and_not_found(self, client):
        tid = client.post("/api/v1/todos/", json=create_todo_payload(title="Partial")).json()["id"]
        res = client.patch(f"/api/v1/todos/{tid}", json={"title": "Partial Updated", "end_date": "2024-02-05"})
        assert res.status_code == 200
        patched = res.json()
        assert patched["title"] == "Partial Updated"
        assert patched["end_date"] == "2024-02-05"
        assert patched["start_date"] == "2024-01-30"

        res_nf = client.patch("/api/v1/todos/123456", json={"title": "Nope"})
        assert res_nf.status_code == 404
        assert res_nf.json()["detail"] == "Todo not found"

    def test_delete_todo(self, client):
        tid = client.post("/api/v1/todos/", json=create_todo_payload(title="ToDelete")).json()["id"]

        res_del = client.delete(f"/api/v1/todos/{tid}")
        assert res_del.status_code == 204
        assert res_del.text == ""

        assert client.get(f"/api/v1/todos/{tid}").status_code == 404
        res_again = client.delete(f"/api/v1/todos/{tid}")
        assert res_again.status_code == 404
        assert res_again.json()["detail"] == "Todo not found"


class TestListPaginationFilteringSorting:
    def seed_todos(self, client, count=6):
        ids = []
        for i in range(count):
            payload = create_todo_payload(
                title=f"Task {i}",
                content=f"Desc {i}",
                start_date=f"2024-05-{10 - i:02d}",
                end_date=f"2024-05-{20 - i:02d}",
                completed=(i % 2 == 0),
                user_id=1 if i < 4 else 2,
            )
            res = client.post("/api/v1/todos/", json=payload)
            assert res.status_code == 201
            ids.append(res.json()["id"])
        return ids

    def test_list_basic_pagination(self, client):
        self.seed_todos(client, 6)
        page1 = client.get("/api/v1/todos/?limit=4&offset=0").json()
        assert page1["total"] == 6
        assert page1["limit"] == 4 and page1["offset"] == 0
        assert len(page1["items"]) == 4

        page2 = client.get("/api/v1/todos/?limit=4&offset=4").json()
        assert len(page2["items"]) == 2

    def test_filter_completed_and_owner(self, client):
        self.seed_todos(client, 6)
        done = client.get("/api/v1/todos/?completed=true&limit=100").json()
        assert done["total"] == 3
        assert all(item["completed"] is True for item in done["items"])

        owner2 = client.get("/api/v1/todos/?owner_id=2&limit=100").json()
        assert owner2["total"] == 2
        assert {item["title"] for item in owner2["items"]} == {"Task 4", "Task 5"}

    def test_search_matches_title_and_content(self, client):
        self.seed_todos(client, 5)
        by_title = client.get("/api/v1/todos/?q=Task 1&limit=100").json()
        assert [item["title"] for item in by_title["items"]] == ["Task 1"]
        by_content = client.get("/api/v1/todos/?q=desc 2&limit=100").json()
        assert [item["content"] for item in by_content["items"]] == ["Desc 2"]

    def test_sort_and_order(self, client):
        ids = self.seed_todos(client, 5)
        default_items = client.get("/api/v1/todos/?limit=5").json()["items"]
        assert [t["id"] for t in default_items] == list(reversed(ids))

        by_start = client.get("/api/v1/todos/?sort=start_date&limit=5").json()["items"]
        assert [t["start_date"] for t in by_start] == sorted(t["start_date"] for t in by_start)

        desc = client.get("/api/v1/todos/?sort=start_date&order=desc&limit=5").json()["items"]
        assert [t["start_date"] for t in desc] == sorted((t["start_date"] for t in desc), reverse=True)

    def test_list_invalid_order_param(self, client):
        res = client.get("/api/v1/todos/?order=invalid")
        assert res.status_code == 400
        assert res.json()["detail"] == "order must be 'asc' or 'desc'"


class TestValidationErrors:
    def test_create_validation_error_title_empty(self, client):
        res = client.post("/api/v1/todos/", json=create_todo_payload(title="  "))
        assert res.status_code == 422
        body = res.json()
        assert body.get("error") == "ValidationError"
        assert body.get("message") == "Request validation failed"
        assert isinstance(body.get("detail"), list)

    def test_create_rejects_bad_date(self, client):
        res = client.post("/api/v1/todos/", json=create_todo_payload(end_date="next friday"))
        assert res.status_code == 422
        assert res.json()["error"] == "ValidationError"

    def test_patch_validation_error_bad_date(self, client):
        tid = client.post("/api/v1/todos/", json=create_todo_payload(title="Date bad")).json()["id"]
        res = client.patch(f"/api/v1/todos/{tid}", json={"start_date": "not-a-date"})
        assert res.status_code == 422
        assert res.json()["error"] == "ValidationError"


class TestSpanGuard:
    def test_range_longer_than_limit_is_rejected(self, client):
        limited = Settings(**{**get_settings().__dict__, "max_span_days": 7})
        app.dependency_overrides[get_settings] = lambda: limited

        ok = client.post("/api/v1/todos/", json=create_todo_payload(start_date="2024-01-01", end_date="2024-01-07"))
        assert ok.status_code == 201

        res = client.post("/api/v1/todos/", json=create_todo_payload(start_date="2024-01-01", end_date="2024-01-08"))
        assert res.status_code == 422
        body = res.json()
        assert body["error"] == "SpanTooLarge"
        assert body["detail"] == {"todo_id": None, "span_days": 8, "max_span_days": 7}

        tid = ok.json()["id"]
        res_patch = client.patch(f"/api/v1/todos/{tid}", json={"end_date": "2024-03-01"})
        assert res_patch.status_code == 422
        assert res_patch.json()["detail"]["todo_id"] == tid
