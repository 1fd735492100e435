"""Game configuration — loads tunable constants from config/game.yaml.

Provides a single ``GameConfig`` dataclass that is loaded once at startup
and then passed (or injected) wherever constants are needed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

import yaml

from sowgame.util import constants as c

log = logging.getLogger(__name__)

DEFAULT_GAME_CONFIG_PATH = "config/game.yaml"


@dataclass
class GameConfig:
    """All tunable gameplay constants.

    Loaded from ``config/game.yaml``.  Every field has a sensible default
    so the server can start even without the file.
    """

    # -- Economy -----------------------------------------------------
    initial_cycle: str = c.INITIAL_CYCLE
    cycle_weights: Dict[str, float] = field(default_factory=lambda: dict(c.CYCLE_WEIGHTS))

    # -- Auto simulation ---------------------------------------------
    auto_simulation_period_s: float = c.AUTO_SIMULATION_PERIOD_S
    simulation_step_s: float = 1.0

    # -- Investment limits -------------------------------------------
    min_investment: int = c.MIN_INVESTMENT
    max_investment_per_market: int = c.MAX_INVESTMENT_PER_MARKET

    # -- Offensive thresholds ----------------------------------------
    min_attack_soldiers: int = c.MIN_ATTACK_SOLDIERS
    min_spy_soldiers: int = c.MIN_SPY_SOLDIERS
    max_success_chance: int = c.MAX_SUCCESS_CHANCE

    # -- Weekly moves ------------------------------------------------
    max_moves_per_week: int = c.MAX_MOVES_PER_WEEK

    # -- Network / storage -------------------------------------------
    rest_host: str = "0.0.0.0"
    rest_port: int = 8080
    db_path: str = "sowgame.db"


def load_game_config(path: str | Path = DEFAULT_GAME_CONFIG_PATH) -> GameConfig:
    """Load game configuration from a YAML file.

    Missing keys fall back to dataclass defaults.  If the file does not
    exist, a warning is logged and pure defaults are returned.

    Raises:
        ValueError: If ``cycle_weights`` names an unknown cycle or does
            not sum to 1.0.
    """
    p = Path(path)
    if not p.exists():
        log.warning("Game config not found at %s, using defaults", p)
        return GameConfig()

    with p.open() as f:
        raw = yaml.safe_load(f) or {}

    log.info("Loaded game config from %s (%d keys)", p, len(raw))

    unknown = sorted(k for k in raw if k not in GameConfig.__dataclass_fields__)
    if unknown:
        log.warning("Ignoring unknown game config keys: %s", ", ".join(unknown))

    cfg = GameConfig(**{
        k: v for k, v in raw.items()
        if k in GameConfig.__dataclass_fields__
    })

    bad = [name for name in cfg.cycle_weights if name not in c.CYCLES]
    if bad:
        raise ValueError(f"cycle_weights contains unknown cycles: {bad}")
    if abs(sum(cfg.cycle_weights.values()) - 1.0) > 1e-9:
        raise ValueError("cycle_weights must sum to 1.0")
    return cfg
