"""Market model — one investment channel of the simulated economy.

A Market carries its static catalog data (base return range, per-cycle
modifiers, display labels) plus the ``current_return`` derived from the
active economic cycle.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ReturnRange:
    """Percentage bounds of a market's base return."""

    min: float
    max: float


@dataclass
class Market:
    """State of a single market.

    Attributes:
        key: Catalog key (stocks, realEstate, crypto, business).
        name: Display name.
        base_return: Base return bounds in percent.
        modifiers: Percentage delta per cycle name.
        risk: Display label, no effect on calculations.
        sensitivity: Display label, no effect on calculations.
        requires_startup_cost: Flag shown for business investments.
        current_return: Percent return under the active cycle.
    """

    key: str
    name: str
    base_return: ReturnRange
    modifiers: dict[str, float] = field(default_factory=dict)
    risk: str = ""
    sensitivity: str = ""
    requires_startup_cost: bool = False
    current_return: float = 0.0

    def return_for(self, cycle: str) -> float:
        """Return percentage this market yields under *cycle*."""
        return self.base_return.max + self.modifiers[cycle]

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "risk": self.risk,
            "sensitivity": self.sensitivity,
            "base_return": {"min": self.base_return.min, "max": self.base_return.max},
            "modifiers": dict(self.modifiers),
            "requires_startup_cost": self.requires_startup_cost,
            "current_return": self.current_return,
        }
