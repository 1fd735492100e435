"""Action models — a player's move as a tagged union.

Each move is exactly one of ``InvestmentMove``, ``OffensiveMove`` or
``DefensiveMove``.  ``to_bundle()`` renders the client wire shape, in
which the two inactive categories are explicit ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Mapping, Optional, Union

from sowgame.util.constants import DEFAULT_INVESTMENT_TYPE, UNKNOWN_COMMANDER

CATEGORIES: tuple[str, ...] = ("investment", "offensive", "defensive")


class _MoveBase:
    category: ClassVar[str]

    def to_dict(self) -> dict[str, Any]:
        raise NotImplementedError

    def to_bundle(self) -> dict[str, Optional[dict[str, Any]]]:
        """Wire form: the active category set, the others ``None``."""
        bundle: dict[str, Optional[dict[str, Any]]] = {c: None for c in CATEGORIES}
        bundle[self.category] = self.to_dict()
        return bundle


@dataclass(frozen=True)
class InvestmentMove(_MoveBase):
    """Deploy soldiers into a market, diversify, or hold."""

    category: ClassVar[str] = "investment"

    type: str = DEFAULT_INVESTMENT_TYPE
    amount: Optional[float] = None
    market: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "amount": self.amount, "market": self.market}


@dataclass(frozen=True)
class OffensiveMove(_MoveBase):
    """Attack, spy on, or manipulate against another player or market."""

    category: ClassVar[str] = "offensive"

    type: str
    target_player: Optional[str] = None
    target_name: Optional[str] = None
    market: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type,
            "targetPlayer": self.target_player,
            "targetName": self.target_name,
        }
        if self.market is not None:
            data["market"] = self.market
        return data


@dataclass(frozen=True)
class DefensiveMove(_MoveBase):
    """Fortify, insure a market position, or run counter-intelligence."""

    category: ClassVar[str] = "defensive"

    type: str
    market: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "market": self.market}


Move = Union[InvestmentMove, OffensiveMove, DefensiveMove]


def move_from_bundle(bundle: Mapping[str, Any]) -> Move:
    """Rebuild a move from its normalized wire form (e.g. a stored record).

    Raises:
        ValueError: If the bundle does not carry exactly one category.
    """
    active = [c for c in CATEGORIES if bundle.get(c) is not None]
    if len(active) != 1:
        raise ValueError(f"Expected exactly one active category, got {active}")
    category = active[0]
    data = bundle[category]
    if category == "investment":
        return InvestmentMove(
            type=data.get("type") or DEFAULT_INVESTMENT_TYPE,
            amount=data.get("amount"),
            market=data.get("market"),
        )
    if category == "offensive":
        return OffensiveMove(
            type=data["type"],
            target_player=data.get("targetPlayer"),
            target_name=data.get("targetName") or (
                UNKNOWN_COMMANDER if data.get("targetPlayer") else None
            ),
            market=data.get("market"),
        )
    return DefensiveMove(type=data["type"], market=data.get("market"))
