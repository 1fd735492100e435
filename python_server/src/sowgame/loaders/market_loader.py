"""Market loader — parses the market catalog YAML into Market models.

The catalog maps each market key to its display data, base return range
and per-cycle modifiers.  Without a catalog file the built-in four
markets are used.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from sowgame.models.market import Market, ReturnRange
from sowgame.util.constants import CYCLES

log = logging.getLogger(__name__)

DEFAULT_MARKETS_PATH = "config/markets.yaml"

_BUILTIN_CATALOG: dict[str, dict[str, Any]] = {
    "stocks": {
        "name": "Stock Market",
        "risk": "High",
        "sensitivity": "High",
        "base_return": {"min": -15, "max": 15},
        "modifiers": {"boom": 20, "stable": 0, "downturn": -15, "crisis": -30},
    },
    "realEstate": {
        "name": "Real Estate",
        "risk": "Medium",
        "sensitivity": "Medium",
        "base_return": {"min": -5, "max": 8},
        "modifiers": {"boom": 12, "stable": 0, "downturn": -5, "crisis": -15},
    },
    "crypto": {
        "name": "Cryptocurrency",
        "risk": "Very High",
        "sensitivity": "Variable",
        "base_return": {"min": -25, "max": 25},
        "modifiers": {"boom": 30, "stable": 0, "downturn": -20, "crisis": -40},
    },
    "business": {
        "name": "Business Investment",
        "risk": "Medium-High",
        "sensitivity": "High",
        "base_return": {"min": -12, "max": 18},
        "requires_startup_cost": True,
        "modifiers": {"boom": 25, "stable": 0, "downturn": -10, "crisis": -25},
    },
}


def _parse_market(key: str, attrs: dict[str, Any]) -> Market:
    """Parse a single catalog entry into a Market."""
    modifiers = {k: float(v) for k, v in (attrs.get("modifiers") or {}).items()}
    missing = [cycle for cycle in CYCLES if cycle not in modifiers]
    if missing:
        raise ValueError(f"Market {key!r} has no modifier for cycles {missing}")
    base = attrs.get("base_return") or {}
    return Market(
        key=key,
        name=attrs.get("name", key),
        base_return=ReturnRange(min=float(base.get("min", 0)), max=float(base.get("max", 0))),
        modifiers=modifiers,
        risk=attrs.get("risk", ""),
        sensitivity=attrs.get("sensitivity", ""),
        requires_startup_cost=bool(attrs.get("requires_startup_cost", False)),
    )


def parse_markets(catalog: dict[str, Any]) -> dict[str, Market]:
    """Build Market objects from a catalog mapping, keeping its order."""
    markets: dict[str, Market] = {}
    for key, attrs in (catalog or {}).items():
        if not isinstance(attrs, dict):
            continue
        markets[key] = _parse_market(key, attrs)
    return markets


def default_markets() -> dict[str, Market]:
    """Fresh copies of the built-in stocks, real estate, crypto and business markets."""
    return parse_markets(_BUILTIN_CATALOG)


def load_markets(path: str | Path = DEFAULT_MARKETS_PATH) -> dict[str, Market]:
    """Load the market catalog from YAML.

    Returns the built-in catalog (with a warning) if the file is missing.

    Raises:
        ValueError: If a market lacks a modifier for one of the cycles.
    """
    p = Path(path)
    if not p.exists():
        log.warning("Market catalog not found at %s, using built-in markets", p)
        return default_markets()

    with p.open() as f:
        data = yaml.safe_load(f) or {}

    markets = parse_markets(data.get("markets", data))
    log.info("Loaded %d markets from %s", len(markets), p)
    return markets
