"""
Task endpoints for API v1.

Listings accept optional ``status``, ``priority``, ``assignee_id`` and
``project_id`` query parameters; each one given narrows the result to
tasks with that exact value.  Results are always ordered by priority,
due date and creation time (see ``TaskService``).

Static paths (``/list``, ``/project/...``, ``/assignee/...``) are
registered before ``/{task_id}`` so they are never captured by it.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import JSONResponse

from record_manager_api.app.api.deps import get_task_service
from record_manager_api.app.api.responses import created, not_found, ok, server_error
from record_manager_api.app.schemas.task import (
    TaskCreate,
    TaskFilters,
    TaskPriority,
    TaskStatus,
    TaskStatusUpdate,
    TaskUpdate,
)
from record_manager_api.app.services.task_service import TaskService

router = APIRouter()

TASK_NOT_FOUND = "Task not found"


@router.get("/list", summary="List tasks")
async def list_tasks(
    status: Optional[TaskStatus] = Query(None, description="Only tasks with this status"),
    priority: Optional[TaskPriority] = Query(None, description="Only tasks with this priority"),
    assignee_id: Optional[int] = Query(None, ge=1, description="Only tasks assigned to this contact"),
    project_id: Optional[int] = Query(None, ge=1, description="Only tasks of this project"),
    service: TaskService = Depends(get_task_service),
) -> JSONResponse:
    filters = TaskFilters(
        status=status, priority=priority, assignee_id=assignee_id, project_id=project_id
    )
    try:
        tasks = await service.find_all(filters)
    except Exception as exc:
        return server_error("Failed to fetch tasks", exc)
    return ok(tasks, "Tasks retrieved successfully")


@router.get("/project/{project_id}", summary="List the tasks of a project")
async def list_project_tasks(
    project_id: int = Path(..., ge=1),
    service: TaskService = Depends(get_task_service),
) -> JSONResponse:
    try:
        tasks = await service.find_by_project(project_id)
    except Exception as exc:
        return server_error("Failed to fetch tasks", exc)
    return ok(tasks, "Tasks retrieved successfully")


@router.get("/assignee/{assignee_id}", summary="List the tasks assigned to a contact")
async def list_assignee_tasks(
    assignee_id: int = Path(..., ge=1),
    service: TaskService = Depends(get_task_service),
) -> JSONResponse:
    try:
        tasks = await service.find_by_assignee(assignee_id)
    except Exception as exc:
        return server_error("Failed to fetch tasks", exc)
    return ok(tasks, "Tasks retrieved successfully")


@router.get("/{task_id}", summary="Get a task")
async def get_task(
    task_id: int = Path(..., ge=1),
    service: TaskService = Depends(get_task_service),
) -> JSONResponse:
    try:
        task = await service.find_by_id(task_id)
    except Exception as exc:
        return server_error("Failed to fetch task", exc)
    if task is None:
        return not_found(TASK_NOT_FOUND)
    return ok(task, "Task retrieved successfully")


@router.post("/create", summary="Create a task")
async def create_task(
    task_in: TaskCreate,
    service: TaskService = Depends(get_task_service),
) -> JSONResponse:
    try:
        task = await service.create(task_in)
    except Exception as exc:
        return server_error("Failed to create task", exc)
    return created(task, "Task created successfully")


@router.put("/{task_id}", summary="Update a task")
async def update_task(
    task_in: TaskUpdate,
    task_id: int = Path(..., ge=1),
    service: TaskService = Depends(get_task_service),
) -> JSONResponse:
    try:
        task = await service.update(task_id, task_in)
    except Exception as exc:
        return server_error("Failed to update task", exc)
    if task is None:
        return not_found(TASK_NOT_FOUND)
    return ok(task, "Task updated successfully")


@router.patch("/{task_id}/status", summary="Change the status of a task")
async def update_task_status(
    body: TaskStatusUpdate,
    task_id: int = Path(..., ge=1),
    service: TaskService = Depends(get_task_service),
) -> JSONResponse:
    try:
        task = await service.update_status(task_id, body.status)
    except Exception as exc:
        return server_error("Failed to update task status", exc)
    if task is None:
        return not_found(TASK_NOT_FOUND)
    return ok(task, "Task status updated successfully")


@router.delete("/{task_id}", summary="Delete a task")
async def delete_task(
    task_id: int = Path(..., ge=1),
    service: TaskService = Depends(get_task_service),
) -> JSONResponse:
    try:
        deleted = await service.remove(task_id)
    except Exception as exc:
        return server_error("Failed to delete task", exc)
    if not deleted:
        return not_found(TASK_NOT_FOUND)
    return ok(None, "Task deleted successfully")
