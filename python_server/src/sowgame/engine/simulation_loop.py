"""Simulation loop — asyncio timer for automatic economic events.

While auto simulation is enabled on the cycle service, a random
economic event fires once per ``auto_simulation_period_s`` (one game
week by default).  Disabling auto simulation resets the countdown, so
re-enabling starts a full period.

The loop only triggers ``generate_random_event``; each event runs to
completion synchronously before the next tick.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sowgame.engine.cycle_service import CycleService
    from sowgame.loaders.game_config_loader import GameConfig


class SimulationLoop:
    """Periodic driver for ``CycleService.generate_random_event``.

    Args:
        cycle_service: The economy to advance.
        game_config: Period and tick interval.
    """

    def __init__(self, cycle_service: CycleService,
                 game_config: GameConfig | None = None) -> None:
        self._cycles = cycle_service
        self._running = False
        if game_config is not None:
            self._period = game_config.auto_simulation_period_s
            self._step_interval = game_config.simulation_step_s
        else:
            self._period = 7 * 24 * 60 * 60.0
            self._step_interval = 1.0
        if self._period <= 0:
            raise ValueError("auto_simulation_period_s must be positive")

        self.elapsed: float = 0.0
        self.event_count: int = 0
        self.tick_count: int = 0

    async def run(self) -> None:
        """Start the loop. Runs until stop() is called."""
        self._running = True
        last = time.monotonic()
        while self._running:
            await asyncio.sleep(self._step_interval)
            now = time.monotonic()
            self._step(now - last)
            last = now

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def seconds_until_event(self) -> float | None:
        """Countdown to the next automatic event, None while disabled."""
        if not self._cycles.auto_simulation:
            return None
        return max(0.0, self._period - self.elapsed)

    def stop(self) -> None:
        """Signal the loop to stop."""
        self._running = False

    def _step(self, dt: float) -> None:
        """Advance the countdown by dt seconds, firing due events."""
        self.tick_count += 1
        if not self._cycles.auto_simulation:
            self.elapsed = 0.0
            return
        self.elapsed += dt
        while self.elapsed >= self._period:
            self.elapsed -= self._period
            self._cycles.generate_random_event()
            self.event_count += 1
