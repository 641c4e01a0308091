"""Database repository for the remote resume store.

Async SQLite storage of one resume document per user.
"""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import aiosqlite

from resume_matcher.documents.models import generate_id

# SQL schema for the user_resumes table
CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS user_resumes (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL UNIQUE,
    resume_data TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""

UPSERT_SQL = """
INSERT INTO user_resumes (id, user_id, resume_data, created_at, updated_at)
VALUES (?, ?, ?, ?, ?)
ON CONFLICT(user_id) DO UPDATE SET
    resume_data = excluded.resume_data,
    updated_at = excluded.updated_at
"""


@dataclass
class StoredResume:
    """A row of the user_resumes table."""

    id: str
    user_id: str
    resume_data: Any
    created_at: datetime
    updated_at: datetime


class ResumeRepository:
    """Async SQLite repository for user resumes."""

    def __init__(self, db_path: Path | str):
        """Initialize the repository.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = Path(db_path)
        self._connection: aiosqlite.Connection | None = None
        self._initialized = False

    @asynccontextmanager
    async def _get_connection(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """Get a database connection, creating the schema on first use.

        Yields:
            An aiosqlite connection.
        """
        if self._connection is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._connection = await aiosqlite.connect(self.db_path)
            self._connection.row_factory = aiosqlite.Row
        if not self._initialized:
            await self._connection.execute(CREATE_TABLE_SQL)
            await self._connection.commit()
            self._initialized = True
        yield self._connection

    async def initialize(self) -> None:
        """Initialize the database, creating tables if needed."""
        async with self._get_connection():
            pass

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None
            self._initialized = False

    async def get_by_user(self, user_id: str) -> StoredResume | None:
        """Get the stored resume for a user.

        Args:
            user_id: The owning user.

        Returns:
            The stored resume if found, None otherwise. ``resume_data`` is
            the decoded JSON, not yet validated.
        """
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM user_resumes WHERE user_id = ? ORDER BY updated_at DESC LIMIT 1",
                (user_id,),
            )
            row = await cursor.fetchone()

        if row is None:
            return None

        try:
            resume_data = json.loads(row["resume_data"])
        except json.JSONDecodeError:
            resume_data = None

        return StoredResume(
            id=row["id"],
            user_id=row["user_id"],
            resume_data=resume_data,
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    async def upsert(
        self,
        user_id: str,
        resume_data: dict[str, Any],
        now: datetime | None = None,
    ) -> datetime:
        """Insert or replace a user's resume.

        Args:
            user_id: The owning user.
            resume_data: Wire-format resume document.
            now: Save time; defaults to the current UTC time.

        Returns:
            The stored ``updated_at`` timestamp.
        """
        timestamp = now or datetime.now(timezone.utc)
        async with self._get_connection() as conn:
            await conn.execute(
                UPSERT_SQL,
                (
                    generate_id(),
                    user_id,
                    json.dumps(resume_data),
                    timestamp.isoformat(),
                    timestamp.isoformat(),
                ),
            )
            await conn.commit()
        return timestamp
