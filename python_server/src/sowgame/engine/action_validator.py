"""Action validator — checks, normalizes and scores player actions.

``validate_action`` implements the submission contract for a raw action
bundle, ``validate_move`` the stricter per-move checks of the weekly
moves form.  Both report failures inside a ``ValidationResult`` instead
of raising, so callers can show the message directly and keep the
player's original selections for a retry.

``success_chance`` computes attack odds from the attacker/defender
strength ratio, capped so that no attack is ever certain.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, Optional, Type

if TYPE_CHECKING:
    from sowgame.models.player import Player

from sowgame.engine.return_calculator import round_half_up
from sowgame.loaders.game_config_loader import GameConfig
from sowgame.models.actions import (
    CATEGORIES,
    DefensiveMove,
    InvestmentMove,
    Move,
    OffensiveMove,
)
from sowgame.util.constants import (
    DEFAULT_INVESTMENT_TYPE,
    DEFENSE_RATINGS,
    DEFENSIVE_TYPES,
    INVESTMENT_TYPES,
    MAX_SUCCESS_CHANCE,
    OFFENSIVE_TYPES,
    UNKNOWN_COMMANDER,
)
from sowgame.util.errors import (
    ActionError,
    InsufficientForcesError,
    InsufficientResourcesError,
    InvalidAmountError,
    InvalidStructureError,
    MissingActionError,
    MissingMarketError,
    MissingOperationTypeError,
    MissingTargetError,
    MoveLimitError,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating an action.

    Attributes:
        valid: True if the action may be submitted.
        message: Human-readable failure reason (empty on success).
        error: Failure class from ``util.errors`` (None on success).
        move: The normalized move (None on failure).
    """

    valid: bool
    message: str = ""
    error: Optional[Type[ActionError]] = None
    move: Optional[Move] = None

    @property
    def cleaned_data(self) -> Optional[dict[str, Any]]:
        """Normalized bundle with explicit ``None`` siblings, or None."""
        return self.move.to_bundle() if self.move is not None else None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"valid": self.valid}
        if self.valid:
            data["cleaned_data"] = self.cleaned_data
        else:
            data["message"] = self.message
            data["error"] = self.error.__name__ if self.error else ""
        return data


# -- Helpers -------------------------------------------------------------

def _is_positive_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def _check_forces(op_type: str, soldiers: float, cfg: GameConfig) -> None:
    """Minimum soldiers to launch an attack or deploy a spy."""
    if op_type == "attack" and soldiers < cfg.min_attack_soldiers:
        raise InsufficientForcesError(
            f"Need at least {cfg.min_attack_soldiers} soldiers to launch an attack"
        )
    if op_type == "spy" and soldiers < cfg.min_spy_soldiers:
        raise InsufficientForcesError(
            f"Need at least {cfg.min_spy_soldiers} soldiers to deploy a spy"
        )


def _section(bundle: Mapping[str, Any], category: str) -> Mapping[str, Any]:
    data = bundle[category]
    if not isinstance(data, Mapping):
        raise InvalidStructureError(f"Invalid {category} action structure")
    return data


def _run(resolve, *args: Any) -> ValidationResult:
    try:
        move = resolve(*args)
    except ActionError as exc:
        log.debug("Action rejected (%s): %s", type(exc).__name__, exc)
        return ValidationResult(valid=False, message=str(exc), error=type(exc))
    return ValidationResult(valid=True, move=move)


# -- Bundle validation ---------------------------------------------------

def _resolve_investment(data: Mapping[str, Any], soldiers: float) -> InvestmentMove:
    amount = data.get("amount")
    if not _is_positive_number(amount):
        raise InvalidAmountError("Investment amount must be positive")
    if amount > soldiers:
        raise InsufficientResourcesError(
            f"Cannot invest {amount} soldiers when you only have {soldiers}"
        )
    market = data.get("market")
    if not market:
        raise MissingMarketError("No market selected for investment")
    return InvestmentMove(
        type=data.get("type") or DEFAULT_INVESTMENT_TYPE,
        amount=amount,
        market=market,
    )


def _resolve_offensive(data: Mapping[str, Any], soldiers: float,
                       cfg: GameConfig) -> OffensiveMove:
    op_type = data.get("type")
    if not op_type:
        raise MissingOperationTypeError("No offensive action type specified")
    target = data.get("targetPlayer")
    if not target:
        raise MissingTargetError("No target selected for offensive action")
    _check_forces(op_type, soldiers, cfg)
    return OffensiveMove(
        type=op_type,
        target_player=target,
        target_name=data.get("targetName") or UNKNOWN_COMMANDER,
    )


def _resolve_action(bundle: Any, soldiers: float, cfg: GameConfig) -> Move:
    if not bundle:
        raise MissingActionError("No action selected")
    if not isinstance(bundle, Mapping):
        raise InvalidStructureError("Invalid action structure")
    if bundle.get("investment") is None and bundle.get("offensive") is None:
        raise MissingActionError(
            "Action must contain either an investment or offensive operation"
        )
    if bundle.get("investment") is not None:
        return _resolve_investment(_section(bundle, "investment"), soldiers)
    if bundle.get("offensive") is not None:
        return _resolve_offensive(_section(bundle, "offensive"), soldiers, cfg)
    raise InvalidStructureError("Invalid action structure")


def validate_action(bundle: Any, soldiers: float,
                    game_config: GameConfig | None = None) -> ValidationResult:
    """Validate and normalize a submitted action bundle.

    Investment is checked first; a valid investment wins over any
    offensive part.  Only the resolved category survives normalization,
    the others are rendered as ``None`` in ``cleaned_data``.  The input
    mapping is never modified.

    Args:
        bundle: Raw bundle in client wire form
            (``{"investment": {...}}`` / ``{"offensive": {...}}``).
        soldiers: The acting player's current soldiers.
        game_config: Thresholds; defaults when omitted.
    """
    return _run(_resolve_action, bundle, soldiers, game_config or GameConfig())


# -- Single move validation ----------------------------------------------

def _resolve_investment_move(data: Mapping[str, Any], soldiers: float,
                             cfg: GameConfig) -> InvestmentMove:
    op_type = data.get("type") or DEFAULT_INVESTMENT_TYPE
    if op_type not in INVESTMENT_TYPES:
        raise InvalidStructureError(f"Unknown investment action: {op_type!r}")
    if op_type != "invest":
        return InvestmentMove(type=op_type)

    market = data.get("market")
    if not market:
        raise MissingMarketError("Please select a market for your investment")
    amount = data.get("amount")
    if not _is_positive_number(amount):
        raise InvalidAmountError("Investment amount must be positive")
    if amount < cfg.min_investment:
        raise InvalidAmountError(f"Minimum investment is {cfg.min_investment} soldiers")
    if amount > cfg.max_investment_per_market:
        raise InvalidAmountError(
            f"Maximum investment is {cfg.max_investment_per_market} soldiers per market"
        )
    if amount > soldiers:
        raise InsufficientResourcesError(
            f"Cannot invest {amount} soldiers when you only have {soldiers}"
        )
    return InvestmentMove(type=op_type, amount=amount, market=market)


def _resolve_offensive_move(data: Mapping[str, Any], soldiers: float,
                            cfg: GameConfig) -> OffensiveMove:
    op_type = data.get("type")
    if not op_type:
        raise MissingOperationTypeError("No offensive action type specified")
    if op_type not in OFFENSIVE_TYPES:
        raise InvalidStructureError(f"Unknown offensive action: {op_type!r}")

    if op_type == "manipulate":
        market = data.get("market")
        if not market:
            raise MissingMarketError("Please select a market to manipulate")
        return OffensiveMove(type=op_type, market=market)

    target = data.get("targetPlayer")
    if not target:
        raise MissingTargetError("Please select a target player")
    _check_forces(op_type, soldiers, cfg)
    return OffensiveMove(
        type=op_type,
        target_player=target,
        target_name=data.get("targetName") or UNKNOWN_COMMANDER,
    )


def _resolve_defensive_move(data: Mapping[str, Any]) -> DefensiveMove:
    op_type = data.get("type")
    if not op_type:
        raise MissingOperationTypeError("No defensive action type specified")
    if op_type not in DEFENSIVE_TYPES:
        raise InvalidStructureError(f"Unknown defensive action: {op_type!r}")
    if op_type == "insurance":
        market = data.get("market")
        if not market:
            raise MissingMarketError("Please select a market to secure")
        return DefensiveMove(type=op_type, market=market)
    return DefensiveMove(type=op_type)


def _resolve_move(raw_move: Any, soldiers: float, actions_remaining: Optional[int],
                  cfg: GameConfig) -> Move:
    if actions_remaining is not None and actions_remaining <= 0:
        raise MoveLimitError("No actions remaining this week")
    if not raw_move:
        raise MissingActionError("No action selected")
    if not isinstance(raw_move, Mapping):
        raise InvalidStructureError("Invalid action structure")

    active = [c for c in CATEGORIES if raw_move.get(c) is not None]
    if not active:
        raise MissingActionError("No action selected")
    if len(active) > 1:
        raise InvalidStructureError("A move must contain exactly one action category")

    category = active[0]
    data = _section(raw_move, category)
    if category == "investment":
        return _resolve_investment_move(data, soldiers, cfg)
    if category == "offensive":
        return _resolve_offensive_move(data, soldiers, cfg)
    return _resolve_defensive_move(data)


def validate_move(raw_move: Any, soldiers: float,
                  actions_remaining: Optional[int] = None,
                  game_config: GameConfig | None = None) -> ValidationResult:
    """Validate one weekly move (investment, offensive or defensive).

    Adds the weekly-form rules on top of ``validate_action``: minimum and
    per-market maximum deployment, market selection for manipulate and
    insurance, and the remaining action count.

    Args:
        raw_move: Mapping with exactly one of investment/offensive/defensive.
        soldiers: The acting player's current soldiers.
        actions_remaining: Moves left this week; None skips the check.
        game_config: Thresholds; defaults when omitted.
    """
    return _run(_resolve_move, raw_move, soldiers, actions_remaining,
                game_config or GameConfig())


# -- Combat odds ---------------------------------------------------------

def success_chance(attacker_soldiers: float, defender_soldiers: float,
                   defense: str, cap: int = MAX_SUCCESS_CHANCE) -> int:
    """Attack success percentage.

    ``min(round(attacker / (defender * rating[defense]) * 100), cap)``.
    There is no floor.  A defender with no effective strength yields the
    cap (or 0 when the attacker has no soldiers either).

    Raises:
        ValueError: If *defense* is not a known defense label.
    """
    rating = DEFENSE_RATINGS.get(defense)
    if rating is None:
        raise ValueError(f"Unknown defense level: {defense!r}")
    strength = defender_soldiers * rating
    if strength <= 0:
        return cap if attacker_soldiers > 0 else 0
    return min(round_half_up(attacker_soldiers / strength * 100), cap)


def calculate_success_chance(attacker: Player, defender: Player,
                             cap: int = MAX_SUCCESS_CHANCE) -> int:
    """Success percentage of *attacker* assaulting *defender*."""
    return success_chance(attacker.soldiers, defender.soldiers, defender.defense, cap)
