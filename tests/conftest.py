from __future__ import annotations

import pytest

from src.class_attendance.class_attendance.container import build_container
from src.class_attendance.class_attendance.lists.json_store import LocalJsonStore


@pytest.fixture
def store(tmp_path) -> LocalJsonStore:
    return LocalJsonStore(tmp_path / "lists.json")


@pytest.fixture
def container(store):
    return build_container(lists_repo=store, entries_repo=store)


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.class_attendance.class_attendance.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()
