"""
SQLite database integration and simple migration system.

This module provides the :class:`Database` storage handle used by the
service layer.  A ``Database`` knows where the SQLite file lives, how
to open a properly configured connection, how to run a unit of work in
the worker thread pool (optionally inside a transaction) and how to
apply the schema migrations at application start (``init_db``).

Services never share connections: every call opens its own connection
inside the worker thread, uses it and closes it again.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator, Mapping, TypeVar

from fastapi.concurrency import run_in_threadpool

T = TypeVar("T")

# Millisecond precision keeps "created_at" ordering meaningful for rows
# inserted within the same second.
NOW_SQL = "strftime('%Y-%m-%dT%H:%M:%fZ', 'now')"


class RecordNotFoundError(Exception):
    """Raised when an update or delete addressed by key matches no row."""

    def __init__(self, table: str, key: Mapping[str, Any]) -> None:
        described = ", ".join(f"{col}={value!r}" for col, value in key.items())
        super().__init__(f"No row in {table} where {described}")
        self.table = table
        self.key = dict(key)


def get_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    If ``database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the package root.
    """
    if os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # record_manager_api/
    return str((base_dir / database_url).resolve())


def _where(key: Mapping[str, Any]) -> tuple[str, list[Any]]:
    clause = " AND ".join(f"{col} = ?" for col in key)
    return clause, list(key.values())


def insert_row(conn: sqlite3.Connection, table: str, values: Mapping[str, Any]) -> int:
    """Insert ``values`` into ``table`` and return the new row id."""
    columns = ", ".join(values)
    placeholders = ", ".join("?" for _ in values)
    cursor = conn.execute(
        f"INSERT INTO {table} ({columns}) VALUES ({placeholders})",
        list(values.values()),
    )
    return cursor.lastrowid


def update_row(
    conn: sqlite3.Connection,
    table: str,
    key: Mapping[str, Any],
    values: Mapping[str, Any],
) -> None:
    """Update the row identified by ``key``.

    ``updated_at`` is always refreshed, so an empty ``values`` mapping
    still verifies that the row exists.  Raises
    :class:`RecordNotFoundError` if no row matched.
    """
    assignments = [f"{col} = ?" for col in values]
    assignments.append(f"updated_at = {NOW_SQL}")
    where, params = _where(key)
    cursor = conn.execute(
        f"UPDATE {table} SET {', '.join(assignments)} WHERE {where}",
        list(values.values()) + params,
    )
    if cursor.rowcount == 0:
        raise RecordNotFoundError(table, key)


def delete_row(conn: sqlite3.Connection, table: str, key: Mapping[str, Any]) -> None:
    """Delete exactly the row identified by ``key`` or raise ``RecordNotFoundError``."""
    if delete_rows(conn, table, key) == 0:
        raise RecordNotFoundError(table, key)


def delete_rows(conn: sqlite3.Connection, table: str, key: Mapping[str, Any]) -> int:
    """Delete every row matching ``key`` and return how many were removed."""
    where, params = _where(key)
    cursor = conn.execute(f"DELETE FROM {table} WHERE {where}", params)
    return cursor.rowcount


class Database:
    """Storage handle shared by all services of one application."""

    def __init__(self, path: str) -> None:
        self.path = path

    def connect(self) -> sqlite3.Connection:
        """Create and return a new SQLite connection.

        Connections run in autocommit mode; multi-statement work goes
        through :meth:`transaction`.  Rows are returned as
        ``sqlite3.Row`` so columns can be accessed by name.  Foreign key
        enforcement is disabled by default in SQLite and must be turned
        on per connection.
        """
        conn = sqlite3.connect(self.path, isolation_level=None, timeout=30)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def cursor(self) -> Iterator[sqlite3.Cursor]:
        """Context manager that yields a cursor and closes the connection on exit."""
        conn = self.connect()
        try:
            yield conn.cursor()
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection inside ``BEGIN IMMEDIATE`` ... ``COMMIT``.

        Any exception rolls the whole unit of work back before it is
        re-raised.
        """
        conn = self.connect()
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                conn.rollback()
                raise
            conn.commit()
        finally:
            conn.close()

    def _call(self, fn: Callable[..., T], args: tuple, transactional: bool) -> T:
        if transactional:
            with self.transaction() as conn:
                return fn(conn, *args)
        conn = self.connect()
        try:
            return fn(conn, *args)
        finally:
            conn.close()

    async def run(self, fn: Callable[..., T], *args: Any) -> T:
        """Run ``fn(conn, *args)`` in the worker thread pool."""
        return await run_in_threadpool(self._call, fn, args, False)

    async def run_in_transaction(self, fn: Callable[..., T], *args: Any) -> T:
        """Like :meth:`run` but all statements commit or roll back together."""
        return await run_in_threadpool(self._call, fn, args, True)

    def init_db(self) -> None:
        """Initialise the database and apply pending migrations.

        Creates the ``migrations`` table if it does not exist, checks the
        current schema version, and applies any new migrations defined in
        ``MIGRATIONS``.  If you add a migration, append it with an
        incremented version number.
        """
        with self.cursor() as cursor:
            cursor.execute(
                "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
            )
            cursor.execute("SELECT MAX(version) AS version FROM migrations")
            row = cursor.fetchone()
            current_version = row["version"] if row and row["version"] is not None else 0

            for version, sql in MIGRATIONS:
                if version > current_version:
                    cursor.executescript(sql)
                    cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
                    current_version = version


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: initial schema
    (
        1,
        f"""
        CREATE TABLE IF NOT EXISTS contacts (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            first_name TEXT NOT NULL,
            last_name TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE,
            created_at TEXT NOT NULL DEFAULT ({NOW_SQL}),
            updated_at TEXT NOT NULL DEFAULT ({NOW_SQL})
        );

        CREATE TABLE IF NOT EXISTS projects (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            description TEXT,
            status TEXT NOT NULL DEFAULT 'active',
            start_date TEXT,
            end_date TEXT,
            created_at TEXT NOT NULL DEFAULT ({NOW_SQL}),
            updated_at TEXT NOT NULL DEFAULT ({NOW_SQL})
        );

        -- Rows referencing projects carry no ON DELETE action: the
        -- project service removes them explicitly in one transaction.
        CREATE TABLE IF NOT EXISTS tasks (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            description TEXT,
            status TEXT NOT NULL DEFAULT 'TODO',
            priority TEXT NOT NULL DEFAULT 'MEDIUM',
            assignee_id INTEGER REFERENCES contacts(id) ON DELETE SET NULL,
            project_id INTEGER NOT NULL REFERENCES projects(id),
            due_date TEXT,
            created_at TEXT NOT NULL DEFAULT ({NOW_SQL}),
            updated_at TEXT NOT NULL DEFAULT ({NOW_SQL})
        );

        CREATE TABLE IF NOT EXISTS project_members (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            contact_id INTEGER NOT NULL REFERENCES contacts(id) ON DELETE CASCADE,
            project_id INTEGER NOT NULL REFERENCES projects(id),
            role TEXT NOT NULL DEFAULT 'member',
            joined_at TEXT NOT NULL DEFAULT ({NOW_SQL}),
            UNIQUE (contact_id, project_id)
        );
        """,
    ),
    # Migration 2: indices on foreign keys used by filters and joins
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_tasks_project_id ON tasks(project_id);
        CREATE INDEX IF NOT EXISTS idx_tasks_assignee_id ON tasks(assignee_id);
        CREATE INDEX IF NOT EXISTS idx_project_members_project_id ON project_members(project_id);
        """,
    ),
]
