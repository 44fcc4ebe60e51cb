import json
from datetime import datetime

import pytest


def create_todo_payload(title="Test Task", description="Do something"):
    payload = {"title": title}
    if description is not None:
        payload["description"] = description
    return payload


def seed(data_file, todos):
    data_file.write_text(json.dumps(todos, indent=2), encoding="utf-8")


def make_record(todo_id, title="Seeded", completed=False):
    return {
        "id": todo_id,
        "title": title,
        "description": "",
        "completed": completed,
        "createdAt": "2024-05-01T08:00:00.000Z",
    }


def assert_todo_shape(todo: dict):
    assert set(todo) == {"id", "title", "description", "completed", "createdAt"}
    assert isinstance(todo["id"], int)
    assert isinstance(todo["description"], str)
    assert isinstance(todo["completed"], bool)
    # createdAt is ISO8601 with a trailing Z
    assert todo["createdAt"].endswith("Z")
    datetime.fromisoformat(todo["createdAt"].replace("Z", "+00:00"))


class TestHealthAndStartup:
    def test_health_check(self, client):
        res = client.get("/")
        assert res.status_code == 200
        assert res.json() == {"message": "Healthy", "backend": "file"}

    def test_startup_creates_empty_data_file(self, client, data_file):
        assert data_file.exists()
        assert json.loads(data_file.read_text()) == []

    def test_list_on_fresh_store_is_empty(self, client):
        res = client.get("/todos")
        assert res.status_code == 200
        assert res.json() == []

    def test_docs_page_served(self, client):
        res = client.get("/api-docs")
        assert res.status_code == 200
        assert "text/html" in res.headers["content-type"]

    def test_openapi_describes_todo_routes(self, client):
        schema = client.get("/openapi.json").json()
        assert "/todos" in schema["paths"]
        assert set(schema["paths"]["/todos/{todo_id}"]) == {"get", "put", "delete"}

    def test_cors_allows_any_origin(self, client):
        res = client.get("/todos", headers={"Origin": "http://example.com"})
        assert res.status_code == 200
        assert res.headers["access-control-allow-origin"] == "*"


class TestTodosCRUD:
    def test_create_first_todo(self, client, data_file):
        res = client.post("/todos", json={"title": "A"})
        assert res.status_code == 201
        todo = res.json()
        assert_todo_shape(todo)
        assert todo["id"] == 1
        assert todo["title"] == "A"
        assert todo["description"] == ""
        assert todo["completed"] is False

        stored = json.loads(data_file.read_text())
        assert stored == [todo]

    def test_create_ignores_client_id_and_completed(self, client):
        res = client.post("/todos", json={"id": 42, "title": "B", "completed": True})
        assert res.status_code == 201
        todo = res.json()
        assert todo["id"] == 1
        assert todo["completed"] is False

    def test_create_without_title_is_accepted(self, client, data_file):
        res = client.post("/todos", json={})
        assert res.status_code == 201
        assert res.json()["title"] is None
        stored = json.loads(data_file.read_text())
        assert "title" not in stored[0]

    def test_create_uses_max_id_plus_one(self, client, data_file):
        seed(data_file, [make_record(1), make_record(3)])
        res = client.post("/todos", json=create_todo_payload(title="B"))
        assert res.status_code == 201
        assert res.json()["id"] == 4

    def test_data_file_is_pretty_printed(self, client, data_file):
        client.post("/todos", json=create_todo_payload())
        text = data_file.read_text()
        assert text.startswith("[\n  {\n    \"id\": 1,")

    def test_list_preserves_insertion_order(self, client):
        for title in ("first", "second", "third"):
            client.post("/todos", json=create_todo_payload(title=title))
        res = client.get("/todos")
        assert [t["title"] for t in res.json()] == ["first", "second", "third"]
        assert [t["id"] for t in res.json()] == [1, 2, 3]

    def test_get_todo_and_not_found(self, client):
        tid = client.post("/todos", json=create_todo_payload(title="Read book")).json()["id"]

        res_get = client.get(f"/todos/{tid}")
        assert res_get.status_code == 200
        assert res_get.json()["title"] == "Read book"

        res_404 = client.get("/todos/999999")
        assert res_404.status_code == 404
        assert res_404.json() == {"error": "Todo not found"}

    @pytest.mark.parametrize("raw_id", ["abc", "1.5", "0x1"])
    def test_non_numeric_id_is_not_found(self, client, raw_id):
        client.post("/todos", json=create_todo_payload())
        assert client.get(f"/todos/{raw_id}").status_code == 404
        assert client.put(f"/todos/{raw_id}", json={"title": "x"}).status_code == 404
        assert client.delete(f"/todos/{raw_id}").status_code == 404

    def test_update_completed_only(self, client):
        original = client.post("/todos", json=create_todo_payload(title="Partial", description="X")).json()

        res = client.put(f"/todos/{original['id']}", json={"completed": True})
        assert res.status_code == 200
        updated = res.json()
        assert updated == {**original, "completed": True}

    def test_update_preserves_id_and_created_at(self, client, data_file):
        original = client.post("/todos", json=create_todo_payload(title="Keep")).json()

        res = client.put(
            f"/todos/{original['id']}",
            json={"id": 77, "title": "x", "createdAt": "1999-01-01T00:00:00.000Z"},
        )
        assert res.status_code == 200
        updated = res.json()
        assert updated["id"] == original["id"]
        assert updated["title"] == "x"
        assert updated["createdAt"] == original["createdAt"]
        assert json.loads(data_file.read_text()) == [updated]

    def test_update_not_found(self, client):
        res = client.put("/todos/123456", json={"title": "Nope"})
        assert res.status_code == 404
        assert res.json() == {"error": "Todo not found"}

    def test_delete_todo(self, client):
        tid = client.post("/todos", json=create_todo_payload(title="ToDelete")).json()["id"]

        res_del = client.delete(f"/todos/{tid}")
        assert res_del.status_code == 204
        assert res_del.text == ""

        assert client.get(f"/todos/{tid}").status_code == 404
        # Deleting again is NotFound, not a repeat success
        res_del_again = client.delete(f"/todos/{tid}")
        assert res_del_again.status_code == 404
        assert res_del_again.json() == {"error": "Todo not found"}

    def test_delete_removes_only_that_entry(self, client, data_file):
        seed(data_file, [make_record(1, "a"), make_record(2, "b"), make_record(3, "c")])
        assert client.delete("/todos/2").status_code == 204
        assert [t["id"] for t in client.get("/todos").json()] == [1, 3]

    def test_ids_restart_after_collection_emptied(self, client):
        tid = client.post("/todos", json=create_todo_payload()).json()["id"]
        client.delete(f"/todos/{tid}")
        assert client.post("/todos", json=create_todo_payload()).json()["id"] == 1

    def test_not_found_on_empty_collection(self, client):
        assert client.get("/todos/1").status_code == 404
        assert client.put("/todos/1", json={"title": "x"}).status_code == 404
        assert client.delete("/todos/1").status_code == 404


class TestStorageErrors:
    @pytest.fixture
    def broken_client(self, client, data_file):
        data_file.write_text("{not json", encoding="utf-8")
        return client

    def test_list_reports_read_failure(self, broken_client):
        res = broken_client.get("/todos")
        assert res.status_code == 500
        assert res.json() == {"error": "Failed to read todos"}

    def test_get_reports_read_failure(self, broken_client):
        res = broken_client.get("/todos/1")
        assert res.status_code == 500
        assert res.json() == {"error": "Failed to read todo"}

    def test_create_reports_failure(self, broken_client):
        res = broken_client.post("/todos", json={"title": "x"})
        assert res.status_code == 500
        assert res.json() == {"error": "Failed to create todo"}

    def test_update_reports_failure(self, broken_client):
        res = broken_client.put("/todos/1", json={"title": "x"})
        assert res.status_code == 500
        assert res.json() == {"error": "Failed to update todo"}

    def test_delete_reports_failure(self, broken_client):
        res = broken_client.delete("/todos/1")
        assert res.status_code == 500
        assert res.json() == {"error": "Failed to delete todo"}

    def test_missing_file_after_startup(self, client, data_file):
        data_file.unlink()
        res = client.get("/todos")
        assert res.status_code == 500
        assert res.json() == {"error": "Failed to read todos"}

    def test_failed_write_leaves_file_untouched(self, client, data_file, monkeypatch):
        from todo_api.errors import StorageError
        from todo_api.storage import JsonFileStorage

        client.post("/todos", json={"title": "kept"})
        before = data_file.read_text()

        def fail(self, todos):
            raise StorageError("disk full")

        monkeypatch.setattr(JsonFileStorage, "save_all", fail)
        res = client.post("/todos", json={"title": "lost"})
        assert res.status_code == 500
        assert data_file.read_text() == before


class TestValidationErrors:
    def test_create_body_must_be_object(self, client):
        res = client.post("/todos", json=["not", "an", "object"])
        assert res.status_code == 422
        body = res.json()
        assert body.get("error") == "ValidationError"
        assert body.get("message") == "Request validation failed"
        assert isinstance(body.get("detail"), list)

    def test_update_rejects_bad_completed_value(self, client):
        tid = client.post("/todos", json=create_todo_payload()).json()["id"]
        res = client.put(f"/todos/{tid}", json={"completed": "maybe"})
        assert res.status_code == 422
        assert res.json().get("error") == "ValidationError"


class TestMalformedStore:
    def test_non_object_records(self, client, data_file):
        seed(data_file, [1, 2])
        res = client.get("/todos/1")
        assert res.status_code == 500
        assert res.json() == {"error": "Failed to read todo"}

    def test_record_without_id(self, client, data_file):
        seed(data_file, [{"title": "no id"}])
        res = client.post("/todos", json={"title": "x"})
        assert res.status_code == 500
        assert res.json() == {"error": "Failed to create todo"}

    def test_record_with_boolean_id(self, client, data_file):
        seed(data_file, [{**make_record(1), "id": True}])
        res = client.get("/todos")
        assert res.status_code == 500
        assert res.json() == {"error": "Failed to read todos"}

    def test_null_description_is_returned(self, client, data_file):
        seed(data_file, [{**make_record(1), "description": None}])
        res = client.get("/todos")
        assert res.status_code == 200
        assert res.json()[0]["description"] is None
        assert client.get("/todos/1").json()["description"] is None

    def test_record_outside_response_schema_gives_json_500(self, data_file):
        from fastapi.testclient import TestClient

        from todo_api.main import app

        with TestClient(app, raise_server_exceptions=False) as c:
            seed(data_file, [{"id": 1, "title": "no createdAt"}])
            res = c.get("/todos")
        assert res.status_code == 500
        assert res.headers["content-type"].startswith("application/json")
        assert res.json() == {"error": "Internal server error"}
