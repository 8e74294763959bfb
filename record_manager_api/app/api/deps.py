"""
FastAPI dependencies providing services to route handlers.

The :class:`Database` handle is created once by ``create_app`` and kept
on ``app.state``; services are cheap, stateless wrappers around it and
are built per request.  Tests replace these dependencies through
``app.dependency_overrides``.
"""

from fastapi import Depends, Request

from record_manager_api.app.core.db import Database
from record_manager_api.app.services.contact_service import ContactService
from record_manager_api.app.services.project_service import ProjectService
from record_manager_api.app.services.task_service import TaskService


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_contact_service(db: Database = Depends(get_database)) -> ContactService:
    return ContactService(db)


def get_task_service(db: Database = Depends(get_database)) -> TaskService:
    return TaskService(db)


def get_project_service(db: Database = Depends(get_database)) -> ProjectService:
    return ProjectService(db)
