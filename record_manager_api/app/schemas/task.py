"""
Pydantic models for tasks.

A task belongs to exactly one project and may be assigned to a
contact.  ``status`` and ``priority`` are closed enumerations validated
on input; read models keep them as plain strings so rows written by
older clients still load.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .contact import ContactSummary


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class TaskCreate(BaseModel):
    """Schema for creating a task."""

    title: str = Field(..., min_length=1, max_length=255, examples=["Write release notes"])
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee_id: Optional[int] = Field(None, ge=1)
    project_id: int = Field(..., ge=1)
    due_date: Optional[date] = Field(None, examples=["2024-12-31"])


class TaskUpdate(BaseModel):
    """Schema for updating a task.

    All fields are optional; only provided values will be updated.
    Passing ``assignee_id: null`` explicitly unassigns the task.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assignee_id: Optional[int] = Field(None, ge=1)
    project_id: Optional[int] = Field(None, ge=1)
    due_date: Optional[date] = None


class TaskStatusUpdate(BaseModel):
    """Body of ``PATCH /task/{id}/status``."""

    status: TaskStatus


class TaskFilters(BaseModel):
    """Optional equality predicates for task listings.

    Every field left as ``None`` imposes no constraint.
    """

    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assignee_id: Optional[int] = None
    project_id: Optional[int] = None


class ProjectSummary(BaseModel):
    """Reduced project projection embedded in tasks."""

    id: int
    name: str
    status: str


class TaskRead(BaseModel):
    """Schema for reading a task, optionally enriched with its relations."""

    id: int
    title: str
    description: Optional[str] = None
    status: str
    priority: str
    assignee_id: Optional[int] = None
    project_id: int
    due_date: Optional[date] = None
    created_at: str
    updated_at: str
    assignee: Optional[ContactSummary] = None
    project: Optional[ProjectSummary] = None

    model_config = {
        "from_attributes": True,
    }
