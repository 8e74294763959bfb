# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from record_manager_api.app.core.db import Database
from record_manager_api.app.main import create_app
from record_manager_api.app.services.contact_service import ContactService
from record_manager_api.app.services.project_service import ProjectService
from record_manager_api.app.services.task_service import TaskService


@pytest.fixture()
def database(tmp_path: Path) -> Database:
    """A migrated SQLite database private to the test."""
    db = Database(str(tmp_path / "records.sqlite3"))
    db.init_db()
    return db


@pytest.fixture()
def contact_service(database: Database) -> ContactService:
    return ContactService(database)


@pytest.fixture()
def task_service(database: Database) -> TaskService:
    return TaskService(database)


@pytest.fixture()
def project_service(database: Database) -> ProjectService:
    return ProjectService(database)


@pytest.fixture()
def app(database: Database):
    app = create_app(database)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture()
def client(app) -> TestClient:
    # Entering the context runs the startup hook (migrations).
    with TestClient(app) as test_client:
        yield test_client
