# tests/helpers.py

from __future__ import annotations

import itertools
import re

from record_manager_api.app.schemas.contact import ContactCreate, ContactRead
from record_manager_api.app.schemas.project import ProjectCreate, ProjectRead
from record_manager_api.app.schemas.task import TaskCreate, TaskRead
from record_manager_api.app.services.contact_service import ContactService
from record_manager_api.app.services.project_service import ProjectService
from record_manager_api.app.services.task_service import TaskService

ISO_TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")

_emails = itertools.count(1)


async def make_contact(service: ContactService, **overrides) -> ContactRead:
    data = {
        "first_name": "John",
        "last_name": "Doe",
        "email": f"john.doe{next(_emails)}@example.com",
    }
    data.update(overrides)
    return await service.create(ContactCreate(**data))


async def make_project(service: ProjectService, **overrides) -> ProjectRead:
    data = {"name": "Website relaunch", "status": "active"}
    data.update(overrides)
    return await service.create(ProjectCreate(**data))


async def make_task(service: TaskService, project_id: int, **overrides) -> TaskRead:
    data = {"title": "Write release notes", "project_id": project_id}
    data.update(overrides)
    return await service.create(TaskCreate(**data))
