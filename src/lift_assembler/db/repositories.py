"""Data access layer for lift-assembler."""

import json
from pathlib import Path

import aiosqlite

from ..models.program import Program
from .engine import get_db_path


class ProgramRepository:
    """Key-value store of assembled programs."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def save(self, program: Program) -> str:
        """Insert or replace a program. Returns its id."""
        data = program.to_dict()
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                """
                INSERT INTO programs (id, name, user_id, data)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    user_id = excluded.user_id,
                    data = excluded.data,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (program.id, program.name, program.user_id, json.dumps(data)),
            )
            await db.commit()
        return program.id

    async def get(self, program_id: str) -> Program | None:
        """Get a program by ID."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT data FROM programs WHERE id = ?", (program_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return Program.from_dict(json.loads(row["data"]))

    async def get_raw(self, program_id: str) -> dict | None:
        """Get a program's stored JSON document without parsing it."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT data FROM programs WHERE id = ?", (program_id,)
            )
            row = await cursor.fetchone()
            return json.loads(row["data"]) if row else None

    async def list_all(self, user_id: str | None = None) -> list[Program]:
        """List programs, newest first, optionally for one user."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            if user_id is None:
                cursor = await db.execute(
                    "SELECT data FROM programs ORDER BY created_at DESC, rowid DESC"
                )
            else:
                cursor = await db.execute(
                    "SELECT data FROM programs WHERE user_id = ? "
                    "ORDER BY created_at DESC, rowid DESC",
                    (user_id,),
                )
            rows = await cursor.fetchall()
            return [Program.from_dict(json.loads(row["data"])) for row in rows]

    async def delete(self, program_id: str) -> bool:
        """Delete a program. Returns False if it did not exist."""
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute("DELETE FROM programs WHERE id = ?", (program_id,))
            await db.commit()
            return cursor.rowcount > 0
