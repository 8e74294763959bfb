# tests/test_project_service.py

from __future__ import annotations

import sqlite3
from datetime import date

import pytest

from record_manager_api.app.core.errors import ConflictError
from record_manager_api.app.schemas.project import (
    ProjectCreate,
    ProjectFilters,
    ProjectMemberCreate,
    ProjectStatus,
    ProjectUpdate,
)

from .helpers import make_contact, make_project, make_task


def _count(database, table: str, project_id: int) -> int:
    with database.cursor() as cursor:
        column = "id" if table == "projects" else "project_id"
        return cursor.execute(
            f"SELECT COUNT(*) FROM {table} WHERE {column} = ?", (project_id,)
        ).fetchone()[0]


@pytest.mark.asyncio
async def test_create_then_find_by_id_round_trips(project_service):
    created = await project_service.create(
        ProjectCreate(
            name="New Project",
            description="Project description",
            status=ProjectStatus.PLANNING,
            start_date=date(2024, 1, 1),
            end_date=date(2024, 12, 31),
        )
    )

    found = await project_service.find_by_id(str(created.id))

    assert found == created
    assert found.name == "New Project"
    assert found.description == "Project description"
    assert found.status == "planning"
    assert (found.start_date, found.end_date) == (date(2024, 1, 1), date(2024, 12, 31))
    assert found.members == [] and found.tasks == []
    assert (found.task_count, found.member_count) == (0, 0)


@pytest.mark.asyncio
async def test_find_by_id_missing_returns_none(project_service):
    assert await project_service.find_by_id(999) is None


@pytest.mark.asyncio
async def test_projects_are_enriched_with_members_and_tasks(
    project_service, contact_service, task_service
):
    project = await make_project(project_service)
    contact = await make_contact(contact_service)
    await project_service.add_member(project.id, ProjectMemberCreate(contact_id=contact.id, role="developer"))
    task = await make_task(task_service, project.id, assignee_id=contact.id)

    found = await project_service.find_by_id(project.id)

    assert found.member_count == 1
    assert found.task_count == 1
    assert found.members[0].contact.email == contact.email
    assert found.members[0].role == "developer"
    assert found.tasks[0].id == task.id
    assert found.tasks[0].assignee.id == contact.id


@pytest.mark.asyncio
async def test_find_all_newest_first_and_filtered(project_service):
    first = await make_project(project_service, name="First", status="active")
    second = await make_project(project_service, name="Second", status="completed")
    third = await make_project(project_service, name="Third", status="active")

    everything = await project_service.find_all()
    active = await project_service.find_all(ProjectFilters(status=ProjectStatus.ACTIVE))

    assert [p.id for p in everything] == [third.id, second.id, first.id]
    assert [p.id for p in active] == [third.id, first.id]


@pytest.mark.asyncio
async def test_update_changes_given_fields(project_service):
    project = await make_project(project_service, name="Old name")

    updated = await project_service.update(
        project.id, ProjectUpdate(status=ProjectStatus.COMPLETED, end_date=date(2024, 12, 31))
    )

    assert updated.name == "Old name"
    assert updated.status == "completed"
    assert updated.end_date == date(2024, 12, 31)


@pytest.mark.asyncio
async def test_update_missing_project_returns_none(project_service):
    assert await project_service.update(999, ProjectUpdate(status=ProjectStatus.COMPLETED)) is None


@pytest.mark.asyncio
async def test_remove_cascades_to_tasks_and_members(
    database, project_service, contact_service, task_service
):
    project = await make_project(project_service)
    keep = await make_project(project_service, name="Untouched")
    alice = await make_contact(contact_service)
    bob = await make_contact(contact_service)
    for contact in (alice, bob):
        await project_service.add_member(project.id, ProjectMemberCreate(contact_id=contact.id))
    for _ in range(3):
        await make_task(task_service, project.id)
    kept_task = await make_task(task_service, keep.id)

    assert await project_service.remove(project.id) is True

    assert _count(database, "tasks", project.id) == 0
    assert _count(database, "project_members", project.id) == 0
    assert _count(database, "projects", project.id) == 0
    assert await task_service.find_by_id(kept_task.id) is not None
    assert await contact_service.find_by_id(alice.id) is not None


@pytest.mark.asyncio
async def test_remove_missing_project_returns_false(project_service):
    assert await project_service.remove(999) is False


@pytest.mark.asyncio
async def test_failed_remove_leaves_everything_in_place(
    database, project_service, contact_service, task_service
):
    project = await make_project(project_service)
    contact = await make_contact(contact_service)
    await project_service.add_member(project.id, ProjectMemberCreate(contact_id=contact.id))
    await make_task(task_service, project.id)
    await make_task(task_service, project.id)
    with database.cursor() as cursor:
        # Fails the last of the three deletes, after tasks and members are gone.
        cursor.execute(
            """
            CREATE TRIGGER block_project_delete BEFORE DELETE ON projects
            BEGIN
                SELECT RAISE(ABORT, 'project delete blocked');
            END
            """
        )

    with pytest.raises(sqlite3.IntegrityError):
        await project_service.remove(project.id)

    assert _count(database, "tasks", project.id) == 2
    assert _count(database, "project_members", project.id) == 1
    assert _count(database, "projects", project.id) == 1


@pytest.mark.asyncio
async def test_add_member_returns_member_with_contact(project_service, contact_service):
    project = await make_project(project_service)
    contact = await make_contact(contact_service)

    member = await project_service.add_member(
        str(project.id), ProjectMemberCreate(contact_id=contact.id, role="developer")
    )

    assert member.project_id == project.id
    assert member.contact_id == contact.id
    assert member.role == "developer"
    assert member.contact.id == contact.id
    assert member.joined_at


@pytest.mark.asyncio
async def test_add_member_defaults_role(project_service, contact_service):
    project = await make_project(project_service)
    contact = await make_contact(contact_service)

    member = await project_service.add_member(project.id, ProjectMemberCreate(contact_id=contact.id))

    assert member.role == "member"


@pytest.mark.asyncio
async def test_add_member_to_unknown_project_propagates(project_service, contact_service):
    contact = await make_contact(contact_service)

    with pytest.raises(sqlite3.IntegrityError):
        await project_service.add_member(999, ProjectMemberCreate(contact_id=contact.id))


@pytest.mark.asyncio
async def test_membership_lifecycle(project_service, contact_service):
    project = await make_project(project_service, name="P1")
    contact = await make_contact(contact_service)
    payload = ProjectMemberCreate(contact_id=contact.id, role="developer")

    await project_service.add_member(project.id, payload)
    with pytest.raises(ConflictError) as excinfo:
        await project_service.add_member(project.id, payload)

    assert str(excinfo.value) == "Contact is already a member of this project"
    assert await project_service.remove_member(project.id, contact.id) is True
    assert await project_service.remove_member(project.id, contact.id) is False


@pytest.mark.asyncio
async def test_same_contact_may_join_several_projects(project_service, contact_service):
    first = await make_project(project_service)
    second = await make_project(project_service)
    contact = await make_contact(contact_service)

    await project_service.add_member(first.id, ProjectMemberCreate(contact_id=contact.id))
    await project_service.add_member(second.id, ProjectMemberCreate(contact_id=contact.id))

    assert len(await project_service.get_members(first.id)) == 1
    assert len(await project_service.get_members(second.id)) == 1


@pytest.mark.asyncio
async def test_get_members_earliest_first(project_service, contact_service):
    project = await make_project(project_service)
    contacts = [await make_contact(contact_service) for _ in range(3)]
    for contact in contacts:
        await project_service.add_member(project.id, ProjectMemberCreate(contact_id=contact.id))

    members = await project_service.get_members(project.id)

    assert [m.contact_id for m in members] == [c.id for c in contacts]
    assert all(m.contact is not None for m in members)


@pytest.mark.asyncio
async def test_get_project_stats(project_service, contact_service, task_service):
    project = await make_project(project_service)
    for contact in [await make_contact(contact_service) for _ in range(2)]:
        await project_service.add_member(project.id, ProjectMemberCreate(contact_id=contact.id))
    for status in ("TODO", "DONE", "TODO"):
        await make_task(task_service, project.id, status=status)

    stats = await project_service.get_project_stats(project.id)

    assert stats.total_tasks == 3
    assert stats.total_members == 2
    assert stats.tasks_by_status == {"TODO": 2, "DONE": 1}


@pytest.mark.asyncio
async def test_get_project_stats_counts_stored_status_values(database, project_service):
    project = await make_project(project_service)
    with database.cursor() as cursor:
        for status in ("pending", "completed", "pending"):
            cursor.execute(
                "INSERT INTO tasks (title, status, project_id) VALUES (?, ?, ?)",
                ("legacy", status, project.id),
            )

    stats = await project_service.get_project_stats(project.id)

    assert stats.tasks_by_status == {"pending": 2, "completed": 1}


@pytest.mark.asyncio
async def test_get_project_stats_empty_project(project_service):
    project = await make_project(project_service)

    stats = await project_service.get_project_stats(project.id)

    assert stats.model_dump() == {"total_tasks": 0, "total_members": 0, "tasks_by_status": {}}


@pytest.mark.asyncio
async def test_get_project_stats_missing_project_returns_none(project_service):
    assert await project_service.get_project_stats(999) is None
