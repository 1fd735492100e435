"""Moves service — collects, submits and edits players' weekly moves.

Handles the lifecycle of a player's week:
  select moves → submit (persisted revision) → edit → resubmit → week closed

A player may queue at most ``max_moves_per_week`` moves.  Every submit
stores the complete list as a new immutable revision; editing replaces
the whole list, never individual stored records.  Soldiers are not
debited here, that happens when the backend executes the week.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from sowgame.persistence.database import Database
    from sowgame.util.events import EventBus

from sowgame.engine.action_validator import validate_move
from sowgame.loaders.game_config_loader import GameConfig
from sowgame.models.actions import Move
from sowgame.models.weekly import WeeklyMoves
from sowgame.util.events import MovesSubmitted, WeekClosed

log = logging.getLogger(__name__)

_SUBMITTED_MSG = ("Your moves for this week have been submitted. "
                  "Edit your moves to make changes.")


class MovesService:
    """Service managing weekly move sessions.

    Args:
        event_bus: Receives ``MovesSubmitted`` and ``WeekClosed``.
        game_config: Move limit and validation thresholds.
        database: Store for submitted revisions; without one, revisions
            are only counted in memory.
    """

    def __init__(self, event_bus: EventBus,
                 game_config: GameConfig | None = None,
                 database: Database | None = None) -> None:
        self._events = event_bus
        self._config = game_config or GameConfig()
        self._db = database
        self._sessions: dict[tuple[str, str, int], WeeklyMoves] = {}
        self._edit_backup: dict[tuple[str, str, int], list[Move]] = {}
        self._closed_weeks: set[tuple[str, int]] = set()
        self._submitting: set[tuple[str, str, int]] = set()

    # -- Query -----------------------------------------------------------

    def get(self, game_id: str, player_id: str, week: int) -> WeeklyMoves:
        """Return the session for a player's week, creating it if needed."""
        key = (game_id, player_id, week)
        session = self._sessions.get(key)
        if session is None:
            session = WeeklyMoves(
                game_id=game_id, player_id=player_id, week=week,
                locked=(game_id, week) in self._closed_weeks,
            )
            self._sessions[key] = session
        return session

    def find(self, game_id: str, player_id: str, week: int) -> Optional[WeeklyMoves]:
        """Return the session if one exists."""
        return self._sessions.get((game_id, player_id, week))

    def actions_remaining(self, session: WeeklyMoves) -> int:
        return max(0, self._config.max_moves_per_week - len(session.moves))

    def is_week_closed(self, game_id: str, week: int) -> bool:
        return (game_id, week) in self._closed_weeks

    async def restore(self, game_id: str, player_id: str, week: int) -> WeeklyMoves:
        """Load the latest stored revision into the session (after a restart)."""
        session = self.get(game_id, player_id, week)
        if self._db is None or session.revision:
            return session
        latest = await self._db.latest_moves(game_id, player_id, week)
        if latest is not None:
            session.moves = list(latest["moves"])
            session.revision = latest["revision"]
            session.submitted = True
            log.info("Restored moves game=%s player=%s week=%d revision=%d",
                     game_id, player_id, week, session.revision)
        return session

    # -- Selection -------------------------------------------------------

    def add_move(self, game_id: str, player_id: str, week: int,
                 raw_move: Any, soldiers: float) -> Move | str:
        """Validate and queue a move. Returns the normalized Move or an error string."""
        session = self.get(game_id, player_id, week)
        if session.locked:
            return f"Week {week} is closed"
        if session.submitted and not session.editing:
            return _SUBMITTED_MSG

        result = validate_move(raw_move, soldiers,
                               self.actions_remaining(session), self._config)
        if not result.valid:
            return result.message

        session.moves.append(result.move)
        log.info("Move queued: game=%s player=%s week=%d %s/%s (%d/%d)",
                 game_id, player_id, week, result.move.category, result.move.type,
                 len(session.moves), self._config.max_moves_per_week)
        return result.move

    def remove_move(self, game_id: str, player_id: str, week: int,
                    index: int) -> WeeklyMoves | str:
        """Drop the move at *index*. Returns the session or an error string."""
        session = self.find(game_id, player_id, week)
        if session is None:
            return f"No moves selected for week {week}"
        if session.locked:
            return f"Week {week} is closed"
        if not session.is_open:
            return _SUBMITTED_MSG
        if not 0 <= index < len(session.moves):
            return f"Move {index} not found"
        removed = session.moves.pop(index)
        log.info("Move removed: game=%s player=%s week=%d %s/%s",
                 game_id, player_id, week, removed.category, removed.type)
        return session

    def toggle_edit(self, game_id: str, player_id: str, week: int) -> WeeklyMoves | str:
        """Start or cancel editing submitted moves.

        Cancelling restores the moves of the last submitted revision.
        """
        session = self.find(game_id, player_id, week)
        if session is None or not session.submitted:
            return "Moves have not been submitted yet"
        if session.locked:
            return f"Week {week} is closed"

        if session.editing:
            session.moves = self._edit_backup.pop(session.key, session.moves)
            session.editing = False
        else:
            self._edit_backup[session.key] = list(session.moves)
            session.editing = True
        log.info("Edit moves %s: game=%s player=%s week=%d",
                 "started" if session.editing else "cancelled", game_id, player_id, week)
        return session

    # -- Submission ------------------------------------------------------

    async def submit(self, game_id: str, player_id: str, week: int) -> WeeklyMoves | str:
        """Persist the queued moves as a new revision. Returns the session or an error string."""
        session = self.find(game_id, player_id, week)
        if session is None or not session.moves:
            return "No moves selected for this week"
        if session.locked:
            return f"Week {week} is closed"
        if session.submitted and not session.editing:
            return "Moves for this week were already submitted"
        if session.key in self._submitting:
            return "Moves for this week are already being submitted"

        moves = list(session.moves)
        if self._db is not None:
            self._submitting.add(session.key)
            try:
                revision = await self._db.append_moves(game_id, player_id, week, moves)
            finally:
                self._submitting.discard(session.key)
        else:
            revision = session.revision + 1

        session.moves = moves
        session.revision = revision
        session.submitted = True
        session.editing = False
        self._edit_backup.pop(session.key, None)

        log.info("Moves submitted: game=%s player=%s week=%d revision=%d",
                 game_id, player_id, week, revision)
        self._events.emit(MovesSubmitted(
            game_id=game_id, player_id=player_id, week=week,
            revision=revision, move_count=len(moves),
        ))
        return session

    def close_week(self, game_id: str, week: int) -> int:
        """Lock every session of a game week. Returns the number of sessions locked.

        Pending edits are discarded; the last submitted revision stands.
        """
        self._closed_weeks.add((game_id, week))
        count = 0
        for session in self._sessions.values():
            if session.game_id != game_id or session.week != week:
                continue
            if session.editing:
                session.moves = self._edit_backup.pop(session.key, session.moves)
                session.editing = False
            session.locked = True
            count += 1
        log.info("Week closed: game=%s week=%d (%d sessions locked)", game_id, week, count)
        self._events.emit(WeekClosed(game_id=game_id, week=week))
        return count
