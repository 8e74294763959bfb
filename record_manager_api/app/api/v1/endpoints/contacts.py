"""
Contact endpoints for API v1.

Plain CRUD over contacts.  Every response is wrapped in the standard
envelope; a duplicate email is reported as 400 with a readable
message.
"""

from fastapi import APIRouter, Depends, Path
from fastapi.responses import JSONResponse

from record_manager_api.app.api.deps import get_contact_service
from record_manager_api.app.api.responses import conflict, created, not_found, ok, server_error
from record_manager_api.app.core.errors import ConflictError
from record_manager_api.app.schemas.contact import ContactCreate, ContactUpdate
from record_manager_api.app.services.contact_service import ContactService

router = APIRouter()

CONTACT_NOT_FOUND = "Contact not found"


@router.get("/list", summary="List all contacts")
async def list_contacts(service: ContactService = Depends(get_contact_service)) -> JSONResponse:
    try:
        contacts = await service.find_all()
    except Exception as exc:
        return server_error("Failed to retrieve contacts", exc)
    return ok(contacts)


@router.get("/{contact_id}", summary="Get a contact")
async def get_contact(
    contact_id: int = Path(..., ge=1),
    service: ContactService = Depends(get_contact_service),
) -> JSONResponse:
    try:
        contact = await service.find_by_id(contact_id)
    except Exception as exc:
        return server_error("Failed to retrieve contact", exc)
    if contact is None:
        return not_found(CONTACT_NOT_FOUND)
    return ok(contact)


@router.post("", summary="Create a contact")
async def create_contact(
    contact_in: ContactCreate,
    service: ContactService = Depends(get_contact_service),
) -> JSONResponse:
    try:
        contact = await service.create(contact_in)
    except ConflictError as exc:
        return conflict(exc)
    except Exception as exc:
        return server_error("Failed to create contact", exc)
    return created(contact)


@router.put("/{contact_id}", summary="Update a contact")
async def update_contact(
    contact_in: ContactUpdate,
    contact_id: int = Path(..., ge=1),
    service: ContactService = Depends(get_contact_service),
) -> JSONResponse:
    try:
        contact = await service.update(contact_id, contact_in)
    except ConflictError as exc:
        return conflict(exc)
    except Exception as exc:
        return server_error("Failed to update contact", exc)
    if contact is None:
        return not_found(CONTACT_NOT_FOUND)
    return ok(contact)


@router.delete("/{contact_id}", summary="Delete a contact")
async def delete_contact(
    contact_id: int = Path(..., ge=1),
    service: ContactService = Depends(get_contact_service),
) -> JSONResponse:
    try:
        contact = await service.delete(contact_id)
    except Exception as exc:
        return server_error("Failed to delete contact", exc)
    if contact is None:
        return not_found(CONTACT_NOT_FOUND)
    return ok(contact)
