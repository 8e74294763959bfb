"""
Service layer for contacts.

Contacts have no relationships of their own to manage; the database
takes care of unassigning tasks and dropping memberships when a
contact is deleted.  Email uniqueness is not checked up front: the
UNIQUE constraint is the single source of truth and a violation is
reported as :class:`ConflictError`.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import List, Optional, Union

from record_manager_api.app.core.db import Database, delete_row, insert_row, update_row
from record_manager_api.app.core.errors import ConflictError, ErrorKind, classify_error
from record_manager_api.app.schemas.contact import ContactCreate, ContactRead, ContactUpdate
from record_manager_api.app.utils.ids import normalize_id

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "A contact with this email already exists"

_NON_NULLABLE = {"first_name", "last_name", "email"}


def _select_contact(conn: sqlite3.Connection, contact_id: int) -> Optional[ContactRead]:
    row = conn.execute("SELECT * FROM contacts WHERE id = ?", (contact_id,)).fetchone()
    return ContactRead.model_validate(dict(row)) if row else None


class ContactService:
    """CRUD operations over the ``contacts`` table."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def find_all(self) -> List[ContactRead]:
        """Return every contact, ordered by id."""

        def query(conn: sqlite3.Connection) -> List[ContactRead]:
            rows = conn.execute("SELECT * FROM contacts ORDER BY id").fetchall()
            return [ContactRead.model_validate(dict(row)) for row in rows]

        return await self.db.run(query)

    async def find_by_id(self, contact_id: Union[int, str]) -> Optional[ContactRead]:
        """Return the contact or ``None`` if it does not exist."""
        return await self.db.run(_select_contact, normalize_id(contact_id))

    async def create(self, data: ContactCreate) -> ContactRead:
        """Insert a new contact and return it.

        Raises
        ------
        ConflictError
            If another contact already uses the same email address.
        """

        def insert(conn: sqlite3.Connection) -> ContactRead:
            contact_id = insert_row(conn, "contacts", data.model_dump(mode="json"))
            return _select_contact(conn, contact_id)

        try:
            contact = await self.db.run(insert)
        except Exception as exc:
            if classify_error(exc) is ErrorKind.CONFLICT:
                logger.warning("Duplicate contact email %s", data.email)
                raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from exc
            raise
        logger.info("Created contact %s", contact.id)
        return contact

    async def update(self, contact_id: Union[int, str], data: ContactUpdate) -> Optional[ContactRead]:
        """Apply the provided fields; ``None`` if the contact does not exist."""
        contact_id = normalize_id(contact_id)
        values = {
            key: value
            for key, value in data.model_dump(mode="json", exclude_unset=True).items()
            if not (key in _NON_NULLABLE and value is None)
        }

        def apply(conn: sqlite3.Connection) -> ContactRead:
            update_row(conn, "contacts", {"id": contact_id}, values)
            return _select_contact(conn, contact_id)

        try:
            contact = await self.db.run(apply)
        except Exception as exc:
            kind = classify_error(exc)
            if kind is ErrorKind.NOT_FOUND:
                return None
            if kind is ErrorKind.CONFLICT:
                raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from exc
            raise
        logger.info("Updated contact %s", contact_id)
        return contact

    async def delete(self, contact_id: Union[int, str]) -> Optional[ContactRead]:
        """Delete a contact and return the removed record.

        Returns ``None`` if the contact does not exist.  Tasks assigned
        to the contact are unassigned and its memberships removed by
        the database's referential actions.
        """
        contact_id = normalize_id(contact_id)

        def remove(conn: sqlite3.Connection) -> Optional[ContactRead]:
            contact = _select_contact(conn, contact_id)
            delete_row(conn, "contacts", {"id": contact_id})
            return contact

        try:
            contact = await self.db.run_in_transaction(remove)
        except Exception as exc:
            if classify_error(exc) is ErrorKind.NOT_FOUND:
                return None
            raise
        logger.info("Deleted contact %s", contact_id)
        return contact
