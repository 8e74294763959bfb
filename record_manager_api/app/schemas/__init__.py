"""
Pydantic schema definitions for API payloads.

Each domain (contacts, tasks, projects) defines its own Pydantic
models for request bodies, filters and read models.  Schemas are
separated from the storage layer to decouple API representation from
persistence.
"""
