"""
Pydantic models for contacts.

A contact is a person that can be assigned to tasks and added to
projects as a member.  Email addresses are validated on input; the
database additionally enforces their uniqueness.
"""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class ContactCreate(BaseModel):
    """Schema for creating a contact."""

    first_name: str = Field(..., min_length=1, max_length=255, examples=["John"])
    last_name: str = Field(..., min_length=1, max_length=255, examples=["Doe"])
    email: EmailStr = Field(..., examples=["john@example.com"])


class ContactUpdate(BaseModel):
    """Schema for updating a contact.

    All fields are optional; only provided values will be updated.
    """

    first_name: Optional[str] = Field(None, min_length=1, max_length=255)
    last_name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None


class ContactSummary(BaseModel):
    """Reduced contact projection embedded in tasks."""

    id: int
    first_name: str
    last_name: str
    email: str


class ContactRead(ContactSummary):
    """Schema for reading a contact from the API."""

    created_at: str
    updated_at: str

    model_config = {
        "from_attributes": True,
    }
