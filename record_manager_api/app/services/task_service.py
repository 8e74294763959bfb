"""
Service layer for tasks.

Listings are always returned enriched with a reduced projection of the
assignee (id, names, email) and of the project (id, name, status), and
always in the same order so that urgent work comes first:

1. priority, highest first (``HIGH`` > ``MEDIUM`` > ``LOW``);
2. due date, earliest first, undated tasks last;
3. creation time, newest first (id breaks remaining ties).

The service does not check that ``assignee_id``/``project_id`` point
at existing rows; the database's foreign keys reject dangling
references and the resulting error propagates unchanged.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict, List, Optional, Union

from record_manager_api.app.core.db import Database, delete_row, insert_row, update_row
from record_manager_api.app.core.errors import ErrorKind, classify_error
from record_manager_api.app.schemas.contact import ContactSummary
from record_manager_api.app.schemas.task import (
    ProjectSummary,
    TaskCreate,
    TaskFilters,
    TaskRead,
    TaskStatus,
    TaskUpdate,
)
from record_manager_api.app.utils.ids import normalize_id

logger = logging.getLogger(__name__)

_NON_NULLABLE = {"title", "status", "priority", "project_id"}

_SELECT_TASKS = """
    SELECT t.*,
           c.id AS assignee__id,
           c.first_name AS assignee__first_name,
           c.last_name AS assignee__last_name,
           c.email AS assignee__email,
           p.id AS project__id,
           p.name AS project__name,
           p.status AS project__status
    FROM tasks t
    LEFT JOIN contacts c ON c.id = t.assignee_id
    LEFT JOIN projects p ON p.id = t.project_id
"""

_ORDER_TASKS = """
    ORDER BY CASE t.priority
                 WHEN 'HIGH' THEN 3
                 WHEN 'MEDIUM' THEN 2
                 WHEN 'LOW' THEN 1
                 ELSE 0
             END DESC,
             t.due_date IS NULL,
             t.due_date ASC,
             t.created_at DESC,
             t.id DESC
"""


def _prefixed(row: sqlite3.Row, prefix: str) -> Optional[Dict[str, Any]]:
    values = {key[len(prefix):]: row[key] for key in row.keys() if key.startswith(prefix)}
    return values if values.get("id") is not None else None


def _task_from_row(row: sqlite3.Row, with_assignee: bool, with_project: bool) -> TaskRead:
    task = TaskRead.model_validate(
        {key: row[key] for key in row.keys() if "__" not in key}
    )
    if with_assignee:
        assignee = _prefixed(row, "assignee__")
        task.assignee = ContactSummary.model_validate(assignee) if assignee else None
    if with_project:
        project = _prefixed(row, "project__")
        task.project = ProjectSummary.model_validate(project) if project else None
    return task


def select_tasks(
    conn: sqlite3.Connection,
    where: Optional[Dict[str, Any]] = None,
    with_assignee: bool = True,
    with_project: bool = True,
) -> List[TaskRead]:
    """Run the enriched task query with equality predicates from ``where``."""
    where = where or {}
    sql = _SELECT_TASKS
    if where:
        sql += " WHERE " + " AND ".join(f"t.{col} = ?" for col in where)
    sql += _ORDER_TASKS
    rows = conn.execute(sql, list(where.values())).fetchall()
    return [_task_from_row(row, with_assignee, with_project) for row in rows]


def _select_task(conn: sqlite3.Connection, task_id: int) -> Optional[TaskRead]:
    tasks = select_tasks(conn, {"id": task_id})
    return tasks[0] if tasks else None


class TaskService:
    """CRUD, filtering and status transitions for tasks."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def find_all(self, filters: Optional[TaskFilters] = None) -> List[TaskRead]:
        """Return tasks matching every predicate set in ``filters``."""
        where = (filters or TaskFilters()).model_dump(mode="json", exclude_none=True)
        return await self.db.run(select_tasks, where)

    async def find_by_id(self, task_id: Union[int, str]) -> Optional[TaskRead]:
        return await self.db.run(_select_task, normalize_id(task_id))

    async def find_by_project(self, project_id: Union[int, str]) -> List[TaskRead]:
        """Tasks of one project; the project itself is not embedded."""
        where = {"project_id": normalize_id(project_id)}
        return await self.db.run(select_tasks, where, True, False)

    async def find_by_assignee(self, assignee_id: Union[int, str]) -> List[TaskRead]:
        """Tasks of one assignee; the assignee itself is not embedded."""
        where = {"assignee_id": normalize_id(assignee_id)}
        return await self.db.run(select_tasks, where, False, True)

    async def create(self, data: TaskCreate) -> TaskRead:
        def insert(conn: sqlite3.Connection) -> TaskRead:
            task_id = insert_row(conn, "tasks", data.model_dump(mode="json"))
            return _select_task(conn, task_id)

        task = await self.db.run(insert)
        logger.info("Created task %s in project %s", task.id, task.project_id)
        return task

    async def update(self, task_id: Union[int, str], data: TaskUpdate) -> Optional[TaskRead]:
        """Apply the provided fields; ``None`` if the task does not exist."""
        task_id = normalize_id(task_id)
        values = {
            key: value
            for key, value in data.model_dump(mode="json", exclude_unset=True).items()
            if not (key in _NON_NULLABLE and value is None)
        }

        def apply(conn: sqlite3.Connection) -> TaskRead:
            update_row(conn, "tasks", {"id": task_id}, values)
            return _select_task(conn, task_id)

        try:
            task = await self.db.run(apply)
        except Exception as exc:
            if classify_error(exc) is ErrorKind.NOT_FOUND:
                return None
            raise
        logger.info("Updated task %s", task_id)
        return task

    async def update_status(self, task_id: Union[int, str], status: TaskStatus) -> Optional[TaskRead]:
        return await self.update(task_id, TaskUpdate(status=status))

    async def remove(self, task_id: Union[int, str]) -> bool:
        """Delete a task.  Returns ``False`` if it did not exist."""
        task_id = normalize_id(task_id)
        try:
            await self.db.run(delete_row, "tasks", {"id": task_id})
        except Exception as exc:
            if classify_error(exc) is ErrorKind.NOT_FOUND:
                return False
            raise
        logger.info("Deleted task %s", task_id)
        return True
