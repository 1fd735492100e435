"""Database access — aiosqlite for weekly move records and economy snapshots.

Provides async database operations for:
- Weekly moves (append-only revisions per player per week)
- Economy snapshots (cycle and market returns per game week)
"""

from __future__ import annotations

import json
import logging
from typing import Any

import aiosqlite

from sowgame.models.actions import Move, move_from_bundle

log = logging.getLogger(__name__)

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS weekly_moves (
    game_id TEXT NOT NULL,
    player_id TEXT NOT NULL,
    week INTEGER NOT NULL,
    revision INTEGER NOT NULL,
    moves_json TEXT NOT NULL,
    submitted_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    PRIMARY KEY (game_id, player_id, week, revision)
);
CREATE TABLE IF NOT EXISTS economy_snapshots (
    game_id TEXT NOT NULL,
    week INTEGER NOT NULL,
    cycle TEXT NOT NULL,
    returns_json TEXT NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    PRIMARY KEY (game_id, week)
);
"""


class Database:
    """Async SQLite database wrapper.

    Args:
        db_path: Path to the SQLite database file (``:memory:`` for tests).
    """

    def __init__(self, db_path: str = "sowgame.db") -> None:
        self._db_path = db_path
        self._conn: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Open the database connection and create tables if needed."""
        self._conn = await aiosqlite.connect(self._db_path)
        self._conn.row_factory = aiosqlite.Row
        await self._conn.executescript(_SCHEMA)
        await self._conn.commit()
        log.info("Database connected: %s", self._db_path)

    async def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    # -- Weekly moves ----------------------------------------------------

    async def append_moves(self, game_id: str, player_id: str, week: int,
                           moves: list[Move]) -> int:
        """Store *moves* as the next revision. Returns the new revision number.

        Earlier revisions are never updated or deleted.
        """
        assert self._conn is not None
        async with self._conn.execute(
            "SELECT COALESCE(MAX(revision), 0) FROM weekly_moves "
            "WHERE game_id = ? AND player_id = ? AND week = ?",
            (game_id, player_id, week),
        ) as cursor:
            row = await cursor.fetchone()
        revision = row[0] + 1
        payload = json.dumps([m.to_bundle() for m in moves])
        await self._conn.execute(
            "INSERT INTO weekly_moves (game_id, player_id, week, revision, moves_json) "
            "VALUES (?, ?, ?, ?, ?)",
            (game_id, player_id, week, revision, payload),
        )
        await self._conn.commit()
        log.info("Stored moves game=%s player=%s week=%d revision=%d (%d moves)",
                 game_id, player_id, week, revision, len(moves))
        return revision

    async def list_revisions(self, game_id: str, player_id: str, week: int) -> list[dict]:
        """All stored revisions for a player's week, oldest first."""
        assert self._conn is not None
        async with self._conn.execute(
            "SELECT revision, moves_json, submitted_at FROM weekly_moves "
            "WHERE game_id = ? AND player_id = ? AND week = ? ORDER BY revision",
            (game_id, player_id, week),
        ) as cursor:
            rows = await cursor.fetchall()
        return [
            {
                "revision": r[0],
                "moves": [move_from_bundle(b) for b in json.loads(r[1])],
                "submitted_at": str(r[2]) if r[2] else "",
            }
            for r in rows
        ]

    async def latest_moves(self, game_id: str, player_id: str, week: int) -> dict | None:
        """The authoritative (highest) revision, or None if nothing was submitted."""
        revisions = await self.list_revisions(game_id, player_id, week)
        return revisions[-1] if revisions else None

    # -- Economy snapshots -----------------------------------------------

    async def save_economy_snapshot(self, game_id: str, week: int, cycle: str,
                                    returns: dict[str, float]) -> None:
        """Store the economy of a game week, replacing an earlier snapshot."""
        assert self._conn is not None
        await self._conn.execute(
            "INSERT OR REPLACE INTO economy_snapshots (game_id, week, cycle, returns_json) "
            "VALUES (?, ?, ?, ?)",
            (game_id, week, cycle, json.dumps(returns)),
        )
        await self._conn.commit()
        log.info("Economy snapshot game=%s week=%d cycle=%s", game_id, week, cycle)

    async def get_economy_snapshot(self, game_id: str, week: int) -> dict[str, Any] | None:
        """Look up the economy snapshot of a game week."""
        assert self._conn is not None
        async with self._conn.execute(
            "SELECT cycle, returns_json, created_at FROM economy_snapshots "
            "WHERE game_id = ? AND week = ?",
            (game_id, week),
        ) as cursor:
            row = await cursor.fetchone()
        if row is None:
            return None
        return {
            "game_id": game_id,
            "week": week,
            "cycle": row[0],
            "returns": json.loads(row[1]),
            "created_at": str(row[2]) if row[2] else "",
        }
