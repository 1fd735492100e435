"""Rules server entry point.

Initializes all components and starts the asyncio event loop:
1. Load configuration (game constants, market catalog)
2. Initialize persistence layer (database)
3. Create engine services (cycle, moves, simulation loop)
4. Create event bus and wire up handlers
5. Start REST API (uvicorn)
6. Run the auto-simulation loop until shutdown

Usage:
    python -m sowgame.main [--config_dir <path>]
    # or via entry point:
    sowgame
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys
from dataclasses import dataclass, field
from typing import Any, Optional

from sowgame.engine.cycle_service import CycleService
from sowgame.engine.moves_service import MovesService
from sowgame.engine.simulation_loop import SimulationLoop
from sowgame.loaders.game_config_loader import GameConfig, load_game_config
from sowgame.loaders.market_loader import load_markets
from sowgame.models.market import Market
from sowgame.persistence.database import Database
from sowgame.util.events import (
    AutoSimulationToggled,
    CycleChanged,
    EventBus,
    MovesSubmitted,
    WeekClosed,
)

log = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = "config"

# ---------------------------------------------------------------------------
# Container for all loaded configuration
# ---------------------------------------------------------------------------


@dataclass
class Configuration:
    """Holds all data loaded from config files."""

    markets: dict[str, Market] = field(default_factory=dict)
    game: GameConfig = field(default_factory=GameConfig)


# ---------------------------------------------------------------------------
# Container for all services (makes passing around easier)
# ---------------------------------------------------------------------------


@dataclass
class Services:
    """Holds references to all engine services."""

    game_config: Optional[GameConfig] = None
    event_bus: Optional[EventBus] = None
    cycle_service: Optional[CycleService] = None
    moves_service: Optional[MovesService] = None
    simulation_loop: Optional[SimulationLoop] = None
    database: Optional[Database] = None
    rest_server: Any = None


# ===================================================================
# 1. Load configuration
# ===================================================================


def load_configuration(config_dir: str = DEFAULT_CONFIG_DIR) -> Configuration:
    """Load game constants and the market catalog from YAML files.

    Args:
        config_dir: Directory holding ``game.yaml`` and ``markets.yaml``.
    """
    log.info("Loading configuration …")

    game_cfg = load_game_config(os.path.join(config_dir, "game.yaml"))
    log.info("  game_config:  loaded (initial cycle %s)", game_cfg.initial_cycle)

    markets = load_markets(os.path.join(config_dir, "markets.yaml"))
    log.info("  markets:      %s", ", ".join(markets))

    return Configuration(markets=markets, game=game_cfg)


# ===================================================================
# 2. Initialize persistence layer
# ===================================================================


async def init_persistence(db_path: str) -> Database:
    """Open the database (creating tables on first use)."""
    log.info("Initializing persistence …")
    database = Database(db_path)
    await database.connect()
    log.info("  database:     connected (%s)", db_path)
    return database


# ===================================================================
# 3. Create engine services
# ===================================================================


def create_services(config: Configuration, database: Optional[Database]) -> Services:
    """Instantiate all services with proper dependency injection.

    Args:
        config: Loaded configuration.
        database: Connected database instance (None keeps revisions in memory).
    """
    log.info("Creating services …")

    gc = config.game
    event_bus = EventBus()
    cycle_service = CycleService(config.markets, event_bus, gc)
    moves_service = MovesService(event_bus, gc, database)
    simulation_loop = SimulationLoop(cycle_service, gc)

    log.info("  all services created")

    return Services(
        game_config=gc,
        event_bus=event_bus,
        cycle_service=cycle_service,
        moves_service=moves_service,
        simulation_loop=simulation_loop,
        database=database,
    )


# ===================================================================
# 4. Wire up event handlers
# ===================================================================


def wire_events(services: Services) -> None:
    """Register event handlers that connect services via the EventBus."""
    log.info("Wiring event handlers …")
    bus = services.event_bus

    bus.on(CycleChanged, lambda evt: log.info(
        "Economy now %s (was %s)", evt.current, evt.previous))
    bus.on(AutoSimulationToggled, lambda evt: log.info(
        "Weekly economic events %s", "on" if evt.enabled else "off"))
    bus.on(MovesSubmitted, lambda evt: log.info(
        "Player %s submitted %d moves for %s week %d (revision %d)",
        evt.player_id, evt.move_count, evt.game_id, evt.week, evt.revision))
    bus.on(WeekClosed, lambda evt: log.info(
        "Game %s week %d closed", evt.game_id, evt.week))

    log.info("  event handlers registered")


# ===================================================================
# 5. Start network server
# ===================================================================


async def start_network(services: Services) -> None:
    """Start the FastAPI REST app via uvicorn as a background task."""
    log.info("Starting REST API …")

    from sowgame.network.rest_api import create_app
    import uvicorn

    rest_app = create_app(services)
    gc = services.game_config or GameConfig()
    config = uvicorn.Config(
        rest_app,
        host=gc.rest_host,
        port=gc.rest_port,
        log_level="info",
        access_log=False,
    )
    rest_server = uvicorn.Server(config)
    services.rest_server = rest_server
    asyncio.create_task(rest_server.serve())
    log.info("  REST API listening on http://%s:%d", gc.rest_host, gc.rest_port)


# ===================================================================
# 6. Run simulation loop
# ===================================================================


async def run_simulation_loop(services: Services) -> None:
    """Run the auto-simulation loop until SIGINT / SIGTERM, then clean up."""
    log.info("Starting simulation loop …")
    loop = asyncio.get_running_loop()

    def _request_shutdown() -> None:
        log.info("Shutdown signal received, stopping …")
        services.simulation_loop.stop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _request_shutdown)

    await services.simulation_loop.run()

    log.info("Shutting down …")
    if services.rest_server is not None:
        services.rest_server.should_exit = True
        log.info("  REST API server stopped")
    if services.database is not None:
        await services.database.close()
        log.info("  database closed")
    log.info("  goodbye")


# ===================================================================
# Entry points
# ===================================================================


async def _start(config_dir: str = DEFAULT_CONFIG_DIR) -> None:
    """Initialize and run all server components."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    log.info("=== Soldiers of Wealth rules server starting ===")

    config = load_configuration(config_dir=config_dir)
    database = await init_persistence(config.game.db_path)
    services = create_services(config, database)
    wire_events(services)
    await start_network(services)
    await run_simulation_loop(services)


def main() -> None:
    """Entry point for the rules server.

    Supports command-line arguments:
        --config_dir <path>  Directory with game.yaml / markets.yaml (default: config)
    """
    config_dir = DEFAULT_CONFIG_DIR

    if "--config_dir" in sys.argv:
        idx = sys.argv.index("--config_dir")
        if idx + 1 >= len(sys.argv):
            print("Error: --config_dir requires an argument", file=sys.stderr)
            sys.exit(1)
        config_dir = sys.argv[idx + 1]

    asyncio.run(_start(config_dir=config_dir))


if __name__ == "__main__":
    main()
