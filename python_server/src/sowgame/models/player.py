"""Player model — the fields of a commander the rules core reads."""

from __future__ import annotations

from dataclasses import dataclass, field

from sowgame.util.constants import DEFENSE_RATINGS, STARTING_SOLDIERS


@dataclass
class Player:
    """A commander's state as fetched from the game backend.

    Attributes:
        uid: Player ID.
        name: Display name, used as the target name of offensive moves.
        soldiers: Current resource pool.
        defense: Defense label (Weak, Moderate, Strong, Very Strong).
        investments: Percentage allocation per market, display only.
    """

    uid: str
    name: str = ""
    soldiers: int = STARTING_SOLDIERS
    defense: str = "Moderate"
    investments: dict[str, float] = field(default_factory=dict)

    @property
    def defense_rating(self) -> float:
        """Numeric multiplier of the defense label."""
        try:
            return DEFENSE_RATINGS[self.defense]
        except KeyError:
            raise ValueError(f"Unknown defense level: {self.defense!r}") from None
