import os

import pytest

# Ensure we default to memory backend for tests to avoid filesystem dependencies
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from fastapi.testclient import TestClient  # noqa: E402

from src.planner.main import app  # noqa: E402
from src.planner.repositories import (  # noqa: E402
    InMemoryScheduleRepository,
    InMemoryTodoRepository,
    get_schedule_repository,
    get_todo_repository,
)


@pytest.fixture
def client():
    """A TestClient whose repositories start empty for every test."""
    todos = InMemoryTodoRepository()
    schedules = InMemoryScheduleRepository()
    app.dependency_overrides[get_todo_repository] = lambda: todos
    app.dependency_overrides[get_schedule_repository] = lambda: schedules
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
