"""Tests for the economic cycle state machine."""

from __future__ import annotations

import pytest

from sowgame.engine.cycle_service import CycleService, draw_cycle
from sowgame.loaders.game_config_loader import GameConfig
from sowgame.loaders.market_loader import default_markets
from sowgame.util.constants import CYCLES
from sowgame.util.errors import InvalidCycleError
from sowgame.util.events import AutoSimulationToggled, CycleChanged, EventBus


class FixedRandom:
    """Random source that always draws the same value."""

    def __init__(self, value: float) -> None:
        self.value = value

    def random(self) -> float:
        return self.value


def _service(draw: float = 0.5, clock=lambda: 1000.0, bus: EventBus | None = None) -> CycleService:
    return CycleService(default_markets(), bus or EventBus(), rng=FixedRandom(draw), clock=clock)


# -------------------------------------------------------------------
# Initial state
# -------------------------------------------------------------------


class TestInitialState:
    def test_starts_stable(self):
        svc = _service()
        assert svc.current_cycle == "stable"
        assert svc.auto_simulation is False

    def test_initial_returns_match_stable_cycle(self):
        svc = _service()
        assert svc.market_status() == {
            "stocks": 15.0, "realEstate": 8.0, "crypto": 25.0, "business": 18.0,
        }

    def test_initial_cycle_from_config(self):
        gc = GameConfig(initial_cycle="crisis")
        svc = CycleService(default_markets(), EventBus(), gc, clock=lambda: 0.0)
        assert svc.current_cycle == "crisis"
        assert svc.market_status()["stocks"] == -15.0

    def test_invalid_initial_cycle_rejected(self):
        with pytest.raises(InvalidCycleError):
            CycleService(default_markets(), EventBus(), GameConfig(initial_cycle="panic"))

    def test_last_update_from_clock(self):
        svc = _service(clock=lambda: 42.0)
        assert svc.state.last_update == 42.0


# -------------------------------------------------------------------
# set_cycle
# -------------------------------------------------------------------


class TestSetCycle:
    @pytest.mark.parametrize("cycle", CYCLES)
    def test_every_market_recomputed(self, cycle):
        svc = _service()
        svc.set_cycle(cycle)
        assert svc.current_cycle == cycle
        for market in svc.state.markets.values():
            assert market.current_return == market.base_return.max + market.modifiers[cycle]

    def test_boom_returns(self):
        svc = _service()
        svc.set_cycle("boom")
        assert svc.market_status() == {
            "stocks": 35.0, "realEstate": 20.0, "crypto": 55.0, "business": 43.0,
        }

    def test_crisis_returns(self):
        svc = _service()
        svc.set_cycle("crisis")
        assert svc.market_status() == {
            "stocks": -15.0, "realEstate": -7.0, "crypto": -15.0, "business": -7.0,
        }

    def test_updates_timestamp(self):
        ticks = iter([1.0, 2.0])
        svc = _service(clock=lambda: next(ticks))
        svc.set_cycle("downturn")
        assert svc.state.last_update == 2.0

    def test_invalid_cycle_leaves_state_unchanged(self):
        svc = _service()
        svc.set_cycle("boom")
        before_returns = svc.market_status()
        before_update = svc.state.last_update

        with pytest.raises(InvalidCycleError):
            svc.set_cycle("nonsense")

        assert svc.current_cycle == "boom"
        assert svc.market_status() == before_returns
        assert svc.state.last_update == before_update

    def test_invalid_cycle_is_value_error(self):
        svc = _service()
        with pytest.raises(ValueError, match="nonsense"):
            svc.set_cycle("nonsense")

    def test_emits_cycle_changed(self):
        bus = EventBus()
        events = []
        bus.on(CycleChanged, events.append)
        svc = _service(bus=bus, clock=lambda: 7.0)
        svc.set_cycle("downturn")
        assert events == [CycleChanged(previous="stable", current="downturn", timestamp=7.0)]

    def test_invalid_cycle_emits_nothing(self):
        bus = EventBus()
        events = []
        bus.on(CycleChanged, events.append)
        svc = _service(bus=bus)
        with pytest.raises(InvalidCycleError):
            svc.set_cycle("")
        assert events == []


# -------------------------------------------------------------------
# Random events
# -------------------------------------------------------------------


class TestDrawCycle:
    @pytest.mark.parametrize("draw,expected", [
        (0.0, "boom"),
        (0.15, "boom"),
        (0.2, "boom"),
        (0.25, "stable"),
        (0.50, "stable"),
        (0.75, "downturn"),
        (0.95, "crisis"),
        (0.999999, "crisis"),
    ])
    def test_cumulative_bands(self, draw, expected):
        assert draw_cycle(draw) == expected

    def test_custom_weights(self):
        weights = {"boom": 0.0, "stable": 0.0, "downturn": 0.0, "crisis": 1.0}
        assert draw_cycle(0.1, weights) == "crisis"


class TestGenerateRandomEvent:
    @pytest.mark.parametrize("draw,expected", [
        (0.15, "boom"),
        (0.50, "stable"),
        (0.75, "downturn"),
        (0.95, "crisis"),
    ])
    def test_fixed_draw_selects_cycle(self, draw, expected):
        svc = _service(draw=draw)
        assert svc.generate_random_event() == expected
        assert svc.current_cycle == expected

    def test_applies_market_returns(self):
        svc = _service(draw=0.95)
        svc.generate_random_event()
        assert svc.market_status()["crypto"] == -15.0

    def test_repeated_calls_are_stable_for_same_draw(self):
        svc = _service(draw=0.15)
        svc.generate_random_event()
        first = svc.market_status()
        svc.generate_random_event()
        assert svc.market_status() == first
        assert svc.current_cycle == "boom"

    def test_seeded_random_is_reproducible(self):
        import random

        a = CycleService(default_markets(), EventBus(), rng=random.Random(7))
        b = CycleService(default_markets(), EventBus(), rng=random.Random(7))
        assert [a.generate_random_event() for _ in range(20)] == \
               [b.generate_random_event() for _ in range(20)]


# -------------------------------------------------------------------
# Auto simulation flag
# -------------------------------------------------------------------


class TestToggleAutoSimulation:
    def test_toggle_flips_flag(self):
        svc = _service()
        assert svc.toggle_auto_simulation() is True
        assert svc.auto_simulation is True
        assert svc.toggle_auto_simulation() is False

    def test_toggle_emits_event(self):
        bus = EventBus()
        events = []
        bus.on(AutoSimulationToggled, events.append)
        svc = _service(bus=bus)
        svc.toggle_auto_simulation()
        svc.toggle_auto_simulation()
        assert events == [AutoSimulationToggled(enabled=True), AutoSimulationToggled(enabled=False)]

    def test_toggle_does_not_change_cycle(self):
        svc = _service()
        svc.toggle_auto_simulation()
        assert svc.current_cycle == "stable"
