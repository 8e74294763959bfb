"""
Top-level router for version 1 of the API.

This router aggregates the domain-specific routers (contacts, tasks,
projects) under a unified prefix.  When new domains are introduced,
update this file to include their routers.
"""

from fastapi import APIRouter

from .endpoints import contacts, health, projects, tasks

router = APIRouter()

# The health router defines its own "/health" path internally.
router.include_router(health.router, tags=["health"])
router.include_router(contacts.router, prefix="/contact", tags=["contacts"])
router.include_router(tasks.router, prefix="/task", tags=["tasks"])
router.include_router(projects.router, prefix="/project", tags=["projects"])
