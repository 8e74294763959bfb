"""
Pydantic models for projects and project membership.

Project read models are returned enriched: they embed the project's
members (each with the full contact), its tasks, and the derived
``task_count``/``member_count`` values.
"""

from datetime import date
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .contact import ContactRead
from .task import TaskRead


class ProjectStatus(str, Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ProjectCreate(BaseModel):
    """Schema for creating a project."""

    name: str = Field(..., min_length=1, max_length=255, examples=["Website relaunch"])
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    start_date: Optional[date] = Field(None, examples=["2024-01-01"])
    end_date: Optional[date] = Field(None, examples=["2024-12-31"])


class ProjectUpdate(BaseModel):
    """Schema for updating a project.

    All fields are optional; only provided values will be updated.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class ProjectFilters(BaseModel):
    """Optional equality predicates for project listings."""

    status: Optional[ProjectStatus] = None


class ProjectMemberCreate(BaseModel):
    """Body of ``POST /project/{id}/members``."""

    contact_id: int = Field(..., ge=1)
    role: str = Field("member", min_length=1, max_length=100, examples=["developer"])


class ProjectMemberRead(BaseModel):
    """A membership link, with the member's contact details."""

    id: int
    contact_id: int
    project_id: int
    role: str
    joined_at: str
    contact: Optional[ContactRead] = None


class ProjectRead(BaseModel):
    """Schema for reading a project with its members and tasks."""

    id: int
    name: str
    description: Optional[str] = None
    status: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: str
    updated_at: str
    members: List[ProjectMemberRead] = []
    tasks: List[TaskRead] = []
    task_count: int = 0
    member_count: int = 0

    model_config = {
        "from_attributes": True,
    }


class ProjectStats(BaseModel):
    """Aggregate figures for a single project."""

    total_tasks: int
    total_members: int
    tasks_by_status: Dict[str, int]
