"""Rule errors — the failure taxonomy of the rules core.

Validators never raise these to their callers; they report the class
and message inside a ``ValidationResult``.  Only ``set_cycle`` raises
(``InvalidCycleError``) because it is an admin operation with no
result object.
"""

from __future__ import annotations


class GameRuleError(Exception):
    """Base class for every recoverable rules failure."""


class InvalidCycleError(GameRuleError, ValueError):
    """Unrecognized cycle name."""


# -- Action validation ---------------------------------------------------

class ActionError(GameRuleError):
    """A proposed action was rejected."""


class MissingActionError(ActionError):
    """Empty action bundle."""


class InvalidAmountError(ActionError):
    """Investment amount missing, non-numeric or not positive."""


class InsufficientResourcesError(ActionError):
    """Investment larger than the player's soldiers."""


class MissingMarketError(ActionError):
    """Action requires a market but none was selected."""


class MissingOperationTypeError(ActionError):
    """Offensive operation without a type."""


class MissingTargetError(ActionError):
    """Offensive operation without a target player."""


class InsufficientForcesError(ActionError):
    """Too few soldiers for an attack or spy mission."""


class InvalidStructureError(ActionError):
    """Bundle matches neither an investment nor an offensive shape."""


# -- Weekly moves --------------------------------------------------------

class MoveLimitError(ActionError):
    """No actions remaining this week."""
