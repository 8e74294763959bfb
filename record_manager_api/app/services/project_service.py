"""
Service layer for projects and project membership.

Projects are returned enriched with their members (each carrying the
full contact), their tasks (with the assignee embedded) and the derived
``task_count``/``member_count`` figures.

Removing a project is the only multi-table write in the system: its
tasks, its membership rows and the project row itself are deleted in a
single ``BEGIN IMMEDIATE`` transaction, so either all of them disappear
or none do.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict, List, Optional, Union

from record_manager_api.app.core.db import (
    Database,
    delete_row,
    delete_rows,
    insert_row,
    update_row,
)
from record_manager_api.app.core.errors import ConflictError, ErrorKind, classify_error
from record_manager_api.app.schemas.contact import ContactRead
from record_manager_api.app.schemas.project import (
    ProjectCreate,
    ProjectFilters,
    ProjectMemberCreate,
    ProjectMemberRead,
    ProjectRead,
    ProjectStats,
    ProjectUpdate,
)
from record_manager_api.app.services.task_service import select_tasks
from record_manager_api.app.utils.ids import normalize_id

logger = logging.getLogger(__name__)

DUPLICATE_MEMBER_MESSAGE = "Contact is already a member of this project"

_NON_NULLABLE = {"name", "status"}

_SELECT_MEMBERS = """
    SELECT m.*,
           c.id AS contact__id,
           c.first_name AS contact__first_name,
           c.last_name AS contact__last_name,
           c.email AS contact__email,
           c.created_at AS contact__created_at,
           c.updated_at AS contact__updated_at
    FROM project_members m
    JOIN contacts c ON c.id = m.contact_id
"""


def _member_from_row(row: sqlite3.Row) -> ProjectMemberRead:
    member = ProjectMemberRead.model_validate(
        {key: row[key] for key in row.keys() if "__" not in key}
    )
    member.contact = ContactRead.model_validate(
        {key[len("contact__"):]: row[key] for key in row.keys() if key.startswith("contact__")}
    )
    return member


def _select_members(conn: sqlite3.Connection, project_id: int) -> List[ProjectMemberRead]:
    rows = conn.execute(
        _SELECT_MEMBERS + " WHERE m.project_id = ? ORDER BY m.joined_at ASC, m.id ASC",
        (project_id,),
    ).fetchall()
    return [_member_from_row(row) for row in rows]


def _select_member(conn: sqlite3.Connection, member_id: int) -> ProjectMemberRead:
    row = conn.execute(_SELECT_MEMBERS + " WHERE m.id = ?", (member_id,)).fetchone()
    return _member_from_row(row)


def _enrich(conn: sqlite3.Connection, row: sqlite3.Row) -> ProjectRead:
    project = ProjectRead.model_validate(dict(row))
    project.members = _select_members(conn, project.id)
    project.tasks = select_tasks(conn, {"project_id": project.id}, with_project=False)
    project.member_count = len(project.members)
    project.task_count = len(project.tasks)
    return project


def _select_projects(conn: sqlite3.Connection, where: Dict[str, Any]) -> List[ProjectRead]:
    sql = "SELECT * FROM projects"
    if where:
        sql += " WHERE " + " AND ".join(f"{col} = ?" for col in where)
    sql += " ORDER BY created_at DESC, id DESC"
    rows = conn.execute(sql, list(where.values())).fetchall()
    return [_enrich(conn, row) for row in rows]


def _select_project(conn: sqlite3.Connection, project_id: int) -> Optional[ProjectRead]:
    row = conn.execute("SELECT * FROM projects WHERE id = ?", (project_id,)).fetchone()
    return _enrich(conn, row) if row else None


class ProjectService:
    """CRUD, membership management and statistics for projects."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def find_all(self, filters: Optional[ProjectFilters] = None) -> List[ProjectRead]:
        """Return projects matching ``filters``, newest first."""
        where = (filters or ProjectFilters()).model_dump(mode="json", exclude_none=True)
        return await self.db.run(_select_projects, where)

    async def find_by_id(self, project_id: Union[int, str]) -> Optional[ProjectRead]:
        return await self.db.run(_select_project, normalize_id(project_id))

    async def create(self, data: ProjectCreate) -> ProjectRead:
        def insert(conn: sqlite3.Connection) -> ProjectRead:
            project_id = insert_row(conn, "projects", data.model_dump(mode="json"))
            return _select_project(conn, project_id)

        project = await self.db.run(insert)
        logger.info("Created project %s", project.id)
        return project

    async def update(self, project_id: Union[int, str], data: ProjectUpdate) -> Optional[ProjectRead]:
        """Apply the provided fields; ``None`` if the project does not exist."""
        project_id = normalize_id(project_id)
        values = {
            key: value
            for key, value in data.model_dump(mode="json", exclude_unset=True).items()
            if not (key in _NON_NULLABLE and value is None)
        }

        def apply(conn: sqlite3.Connection) -> ProjectRead:
            update_row(conn, "projects", {"id": project_id}, values)
            return _select_project(conn, project_id)

        try:
            project = await self.db.run(apply)
        except Exception as exc:
            if classify_error(exc) is ErrorKind.NOT_FOUND:
                return None
            raise
        logger.info("Updated project %s", project_id)
        return project

    async def remove(self, project_id: Union[int, str]) -> bool:
        """Delete a project together with its tasks and memberships.

        Returns ``False`` if the project does not exist.  Any other
        failure rolls the transaction back, leaving every table
        untouched, and is re-raised.
        """
        project_id = normalize_id(project_id)

        def cascade(conn: sqlite3.Connection) -> tuple[int, int]:
            tasks = delete_rows(conn, "tasks", {"project_id": project_id})
            members = delete_rows(conn, "project_members", {"project_id": project_id})
            delete_row(conn, "projects", {"id": project_id})
            return tasks, members

        try:
            tasks, members = await self.db.run_in_transaction(cascade)
        except Exception as exc:
            if classify_error(exc) is ErrorKind.NOT_FOUND:
                return False
            logger.error("Failed to delete project %s: %s", project_id, exc)
            raise
        logger.info(
            "Deleted project %s with %s task(s) and %s member(s)", project_id, tasks, members
        )
        return True

    async def add_member(
        self, project_id: Union[int, str], data: ProjectMemberCreate
    ) -> ProjectMemberRead:
        """Link a contact to a project.

        Raises
        ------
        ConflictError
            If the contact is already a member of the project.
        """
        project_id = normalize_id(project_id)
        values = {"project_id": project_id, **data.model_dump(mode="json")}

        def insert(conn: sqlite3.Connection) -> ProjectMemberRead:
            return _select_member(conn, insert_row(conn, "project_members", values))

        try:
            member = await self.db.run(insert)
        except Exception as exc:
            if classify_error(exc) is ErrorKind.CONFLICT:
                logger.warning(
                    "Contact %s is already a member of project %s", data.contact_id, project_id
                )
                raise ConflictError(DUPLICATE_MEMBER_MESSAGE) from exc
            raise
        logger.info("Added contact %s to project %s as %s", data.contact_id, project_id, data.role)
        return member

    async def get_members(self, project_id: Union[int, str]) -> List[ProjectMemberRead]:
        """Members of a project, earliest joiner first."""
        return await self.db.run(_select_members, normalize_id(project_id))

    async def remove_member(self, project_id: Union[int, str], contact_id: Union[int, str]) -> bool:
        """Unlink a contact from a project.  ``False`` if it was not a member."""
        key = {"contact_id": normalize_id(contact_id), "project_id": normalize_id(project_id)}
        try:
            await self.db.run(delete_row, "project_members", key)
        except Exception as exc:
            if classify_error(exc) is ErrorKind.NOT_FOUND:
                return False
            raise
        logger.info("Removed contact %s from project %s", key["contact_id"], key["project_id"])
        return True

    async def get_project_stats(self, project_id: Union[int, str]) -> Optional[ProjectStats]:
        """Task and member totals plus a histogram of task statuses.

        Returns ``None`` when the project does not exist, so callers can
        tell a missing project apart from one without tasks.
        """
        project_id = normalize_id(project_id)

        def query(conn: sqlite3.Connection) -> Optional[ProjectStats]:
            exists = conn.execute("SELECT 1 FROM projects WHERE id = ?", (project_id,)).fetchone()
            if not exists:
                return None
            by_status = {
                row["status"]: row["total"]
                for row in conn.execute(
                    "SELECT status, COUNT(*) AS total FROM tasks WHERE project_id = ? GROUP BY status",
                    (project_id,),
                )
            }
            members = conn.execute(
                "SELECT COUNT(*) AS total FROM project_members WHERE project_id = ?",
                (project_id,),
            ).fetchone()["total"]
            return ProjectStats(
                total_tasks=sum(by_status.values()),
                total_members=members,
                tasks_by_status=by_status,
            )

        return await self.db.run(query)
