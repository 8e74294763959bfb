"""
Project endpoints for API v1.

Besides CRUD these routes manage project membership and expose a
small statistics view.  Deleting a project also deletes its tasks and
memberships (atomically, see ``ProjectService.remove``).  Adding a
contact that is already a member answers 400 with the message
"Contact is already a member of this project".
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import JSONResponse

from record_manager_api.app.api.deps import get_project_service
from record_manager_api.app.api.responses import conflict, created, not_found, ok, server_error
from record_manager_api.app.core.errors import ConflictError
from record_manager_api.app.schemas.project import (
    ProjectCreate,
    ProjectFilters,
    ProjectMemberCreate,
    ProjectStatus,
    ProjectUpdate,
)
from record_manager_api.app.services.project_service import ProjectService

router = APIRouter()

PROJECT_NOT_FOUND = "Project not found"


@router.get("/list", summary="List projects")
async def list_projects(
    status: Optional[ProjectStatus] = Query(None, description="Only projects with this status"),
    service: ProjectService = Depends(get_project_service),
) -> JSONResponse:
    try:
        projects = await service.find_all(ProjectFilters(status=status))
    except Exception as exc:
        return server_error("Failed to fetch projects", exc)
    return ok(projects, "Projects retrieved successfully")


@router.get("/{project_id}", summary="Get a project")
async def get_project(
    project_id: int = Path(..., ge=1),
    service: ProjectService = Depends(get_project_service),
) -> JSONResponse:
    try:
        project = await service.find_by_id(project_id)
    except Exception as exc:
        return server_error("Failed to fetch project", exc)
    if project is None:
        return not_found(PROJECT_NOT_FOUND)
    return ok(project, "Project retrieved successfully")


@router.post("/create", summary="Create a project")
async def create_project(
    project_in: ProjectCreate,
    service: ProjectService = Depends(get_project_service),
) -> JSONResponse:
    try:
        project = await service.create(project_in)
    except Exception as exc:
        return server_error("Failed to create project", exc)
    return created(project, "Project created successfully")


@router.put("/{project_id}", summary="Update a project")
async def update_project(
    project_in: ProjectUpdate,
    project_id: int = Path(..., ge=1),
    service: ProjectService = Depends(get_project_service),
) -> JSONResponse:
    try:
        project = await service.update(project_id, project_in)
    except Exception as exc:
        return server_error("Failed to update project", exc)
    if project is None:
        return not_found(PROJECT_NOT_FOUND)
    return ok(project, "Project updated successfully")


@router.delete("/{project_id}", summary="Delete a project with its tasks and members")
async def delete_project(
    project_id: int = Path(..., ge=1),
    service: ProjectService = Depends(get_project_service),
) -> JSONResponse:
    try:
        deleted = await service.remove(project_id)
    except Exception as exc:
        return server_error("Failed to delete project", exc)
    if not deleted:
        return not_found(PROJECT_NOT_FOUND)
    return ok(None, "Project deleted successfully")


@router.get("/{project_id}/stats", summary="Task and member statistics of a project")
async def get_project_stats(
    project_id: int = Path(..., ge=1),
    service: ProjectService = Depends(get_project_service),
) -> JSONResponse:
    try:
        stats = await service.get_project_stats(project_id)
    except Exception as exc:
        return server_error("Failed to fetch project statistics", exc)
    if stats is None:
        return not_found(PROJECT_NOT_FOUND)
    return ok(stats, "Project statistics retrieved successfully")


@router.post("/{project_id}/members", summary="Add a contact to a project")
async def add_project_member(
    member_in: ProjectMemberCreate,
    project_id: int = Path(..., ge=1),
    service: ProjectService = Depends(get_project_service),
) -> JSONResponse:
    try:
        member = await service.add_member(project_id, member_in)
    except ConflictError as exc:
        return conflict(exc)
    except Exception as exc:
        return server_error("Failed to add member to project", exc)
    return created(member, "Member added to project successfully")


@router.get("/{project_id}/members", summary="List the members of a project")
async def list_project_members(
    project_id: int = Path(..., ge=1),
    service: ProjectService = Depends(get_project_service),
) -> JSONResponse:
    try:
        members = await service.get_members(project_id)
    except Exception as exc:
        return server_error("Failed to fetch project members", exc)
    return ok(members, "Project members retrieved successfully")


@router.delete("/{project_id}/members/{contact_id}", summary="Remove a contact from a project")
async def remove_project_member(
    project_id: int = Path(..., ge=1),
    contact_id: int = Path(..., ge=1),
    service: ProjectService = Depends(get_project_service),
) -> JSONResponse:
    try:
        removed = await service.remove_member(project_id, contact_id)
    except Exception as exc:
        return server_error("Failed to remove member from project", exc)
    if not removed:
        return not_found("Member not found in project")
    return ok(None, "Member removed from project successfully")
