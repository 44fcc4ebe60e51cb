import os

import pytest
from fastapi.testclient import TestClient

# Default to the file backend; each test points it at its own temporary file.
os.environ.setdefault("STORAGE_BACKEND", "file")

from todo_api.main import app  # noqa: E402


@pytest.fixture
def data_file(tmp_path, monkeypatch):
    path = tmp_path / "todos.json"
    monkeypatch.setenv("STORAGE_BACKEND", "file")
    monkeypatch.setenv("TODOS_DATA_FILE", str(path))
    return path


@pytest.fixture
def client(data_file):
    # Entering the context runs the lifespan, which creates the data file.
    with TestClient(app) as c:
        yield c
