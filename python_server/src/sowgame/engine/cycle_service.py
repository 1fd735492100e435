"""Cycle service — the economic cycle state machine.

States: boom, stable, downturn, crisis (initial: stable, no terminal
state).  Transitions happen through an explicit admin ``set_cycle`` or
a weighted ``generate_random_event``.  Every transition recomputes all
market returns before anything is written back, so a rejected cycle
never leaves the markets half-updated.
"""

from __future__ import annotations

import logging
import random
import time
from typing import TYPE_CHECKING, Callable, Optional, Protocol

if TYPE_CHECKING:
    from sowgame.loaders.game_config_loader import GameConfig
    from sowgame.models.market import Market
    from sowgame.util.events import EventBus

from sowgame.models.economy import EconomicCycleState
from sowgame.util.constants import CYCLE_WEIGHTS, CYCLES, INITIAL_CYCLE
from sowgame.util.errors import InvalidCycleError
from sowgame.util.events import AutoSimulationToggled, CycleChanged

log = logging.getLogger(__name__)


class RandomSource(Protocol):
    """Anything with ``random() -> float`` in [0, 1), e.g. ``random.Random``."""

    def random(self) -> float: ...


def draw_cycle(draw: float, weights: dict[str, float] = CYCLE_WEIGHTS) -> str:
    """Pick a cycle by cumulative weight for a uniform draw in [0, 1).

    The first cycle whose cumulative weight meets or exceeds *draw* wins:
    with the default weights 0–0.2 boom, 0.2–0.6 stable, 0.6–0.9 downturn,
    0.9–1.0 crisis.
    """
    cumulative = 0.0
    name = INITIAL_CYCLE
    for name, weight in weights.items():
        cumulative += weight
        if draw <= cumulative:
            return name
    # float drift can leave the total a hair under 1.0
    return name


class CycleService:
    """Owns the single economic cycle and the market returns derived from it.

    Args:
        markets: Market catalog (see ``loaders.market_loader``).
        event_bus: Receives ``CycleChanged`` and ``AutoSimulationToggled``.
        game_config: Initial cycle and draw weights.
        rng: Random source for ``generate_random_event``.
        clock: Timestamp source for ``last_update``.
    """

    def __init__(
        self,
        markets: dict[str, Market],
        event_bus: EventBus | None = None,
        game_config: GameConfig | None = None,
        rng: Optional[RandomSource] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._events = event_bus
        self._rng: RandomSource = rng if rng is not None else random.Random()
        self._clock = clock
        if game_config is not None:
            initial = game_config.initial_cycle
            self._weights = dict(game_config.cycle_weights)
        else:
            initial = INITIAL_CYCLE
            self._weights = dict(CYCLE_WEIGHTS)
        self.state = EconomicCycleState(
            markets=markets, current_cycle=initial, last_update=clock(),
        )
        self.auto_simulation: bool = False

    # -- Query -----------------------------------------------------------

    @property
    def current_cycle(self) -> str:
        return self.state.current_cycle

    def market_status(self) -> dict[str, float]:
        """Current return percentage per market, for the return calculator."""
        return self.state.market_status()

    # -- Transitions -----------------------------------------------------

    def set_cycle(self, cycle: str) -> EconomicCycleState:
        """Switch to *cycle* and recompute every market's current return.

        Raises:
            InvalidCycleError: If *cycle* is not a known cycle name.  The
                state is left untouched.
        """
        if cycle not in CYCLES:
            raise InvalidCycleError(f"Unknown economic cycle: {cycle!r}")

        returns = {key: m.return_for(cycle) for key, m in self.state.markets.items()}

        previous = self.state.current_cycle
        now = self._clock()
        for key, value in returns.items():
            self.state.markets[key].current_return = value
        self.state.current_cycle = cycle
        self.state.last_update = now

        log.info("Economic cycle %s -> %s", previous, cycle)
        if self._events is not None:
            self._events.emit(CycleChanged(previous=previous, current=cycle, timestamp=now))
        return self.state

    def generate_random_event(self) -> str:
        """Draw a cycle from the weighted distribution and apply it.

        Returns the chosen cycle name.
        """
        cycle = draw_cycle(self._rng.random(), self._weights)
        log.info("Random economic event: %s", cycle)
        self.set_cycle(cycle)
        return cycle

    def toggle_auto_simulation(self) -> bool:
        """Flip periodic random events on or off. Returns the new flag."""
        self.auto_simulation = not self.auto_simulation
        log.info("Auto simulation %s", "enabled" if self.auto_simulation else "disabled")
        if self._events is not None:
            self._events.emit(AutoSimulationToggled(enabled=self.auto_simulation))
        return self.auto_simulation
