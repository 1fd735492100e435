"""Economic cycle state — the session-scoped economy.

Holds the active cycle and every market.  Only ``CycleService`` mutates
an instance after construction.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from sowgame.models.market import Market
from sowgame.util.constants import CYCLES, INITIAL_CYCLE
from sowgame.util.errors import InvalidCycleError


@dataclass
class EconomicCycleState:
    """Current cycle plus derived market returns.

    Attributes:
        markets: Markets keyed by market key.
        current_cycle: One of boom, stable, downturn, crisis.
        last_update: Unix timestamp of the last transition.
    """

    markets: dict[str, Market]
    current_cycle: str = INITIAL_CYCLE
    last_update: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        if self.current_cycle not in CYCLES:
            raise InvalidCycleError(f"Unknown economic cycle: {self.current_cycle!r}")
        # current_return must match the active cycle from the start
        for market in self.markets.values():
            market.current_return = market.return_for(self.current_cycle)

    def market_status(self) -> dict[str, float]:
        """Current return percentage per market key."""
        return {key: m.current_return for key, m in self.markets.items()}

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_cycle": self.current_cycle,
            "last_update": self.last_update,
            "markets": {key: m.to_dict() for key, m in self.markets.items()},
        }
