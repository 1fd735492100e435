"""Return calculator — projected outcome of deploying soldiers.

Pure functions: callers pass the market status explicitly (usually
``CycleService.market_status()``), nothing here reads shared state.
"""

from __future__ import annotations

import math
from typing import Mapping


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +infinity."""
    return math.floor(value + 0.5)


def potential_return(market: str, amount: float, market_status_percent: float) -> int:
    """Soldiers expected back from investing *amount* in *market*.

    ``round(amount * (100 + status) / 100)``.  The minimum deployment is
    not enforced here, the action validator owns that rule.

    Raises:
        ValueError: If *amount* is negative.
    """
    if amount < 0:
        raise ValueError(f"Invested amount for {market} must not be negative: {amount}")
    return round_half_up(amount * (100 + market_status_percent) / 100)


def potential_returns(amounts: Mapping[str, float],
                      market_status: Mapping[str, float]) -> dict[str, int]:
    """Projected return for each market in *amounts*.

    Raises:
        KeyError: If a market has no status entry.
    """
    return {
        market: potential_return(market, amount, market_status[market])
        for market, amount in amounts.items()
    }
