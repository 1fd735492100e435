"""Weekly moves model — a player's pending decisions for one game week.

Lifecycle:
  drafting → submitted → (editing → submitted)* → locked

Each submit persists the whole move list as a new revision; earlier
revisions are never modified.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sowgame.models.actions import Move


@dataclass
class WeeklyMoves:
    """Move session of one player for one week.

    Attributes:
        game_id: Game the week belongs to.
        player_id: Acting player.
        week: Game week number (1-based).
        moves: Pending moves in selection order.
        submitted: True once a revision was persisted.
        editing: True while a submitted list is being replaced.
        locked: True after the week's deadline; no further changes.
        revision: Number of the last persisted revision (0 = none).
    """

    game_id: str
    player_id: str
    week: int
    moves: list[Move] = field(default_factory=list)
    submitted: bool = False
    editing: bool = False
    locked: bool = False
    revision: int = 0

    @property
    def key(self) -> tuple[str, str, int]:
        return (self.game_id, self.player_id, self.week)

    @property
    def is_open(self) -> bool:
        """Whether moves may currently be added or removed."""
        return not self.locked and (not self.submitted or self.editing)

    def to_dict(self) -> dict[str, Any]:
        return {
            "game_id": self.game_id,
            "player_id": self.player_id,
            "week": self.week,
            "moves": [m.to_bundle() for m in self.moves],
            "submitted": self.submitted,
            "editing": self.editing,
            "locked": self.locked,
            "revision": self.revision,
        }
