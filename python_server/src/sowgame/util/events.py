"""Typed event bus — decoupled inter-service communication.

Services publish state transitions here; ``main.wire_events`` attaches
the logging handlers.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, TypeVar, Type

T = TypeVar("T")


# -- Economy events ------------------------------------------------------

@dataclass(frozen=True)
class CycleChanged:
    """The economic cycle was set (manually or by a random event)."""
    previous: str
    current: str
    timestamp: float


@dataclass(frozen=True)
class AutoSimulationToggled:
    """Automatic weekly events were switched on or off."""
    enabled: bool


# -- Weekly move events --------------------------------------------------

@dataclass(frozen=True)
class MovesSubmitted:
    """A player's weekly moves were persisted as a new revision."""
    game_id: str
    player_id: str
    week: int
    revision: int
    move_count: int


@dataclass(frozen=True)
class WeekClosed:
    """The deadline of a game week passed; its moves are locked."""
    game_id: str
    week: int


# -- Event Bus -----------------------------------------------------------

class EventBus:
    """Simple synchronous event bus with typed events.

    Usage:
        bus = EventBus()
        bus.on(CycleChanged, lambda e: print(e.current))
        bus.emit(CycleChanged(previous="stable", current="boom", timestamp=0.0))
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable[[Any], None]]] = defaultdict(list)

    def on(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """Register a handler for an event type."""
        self._handlers[event_type].append(handler)

    def off(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """Unregister a handler."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: object) -> None:
        """Emit an event to all registered handlers."""
        for handler in list(self._handlers.get(type(event), [])):
            handler(event)

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()
