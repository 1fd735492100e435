"""Game constants — cycles, draw weights, thresholds.

All magic numbers of the rules core, centralized here.  ``GameConfig``
uses these as its defaults.
"""

# -- Economic cycles -----------------------------------------------------

BOOM = "boom"
STABLE = "stable"
DOWNTURN = "downturn"
CRISIS = "crisis"

CYCLES: tuple[str, ...] = (BOOM, STABLE, DOWNTURN, CRISIS)
"""Valid cycle names, in draw order."""

INITIAL_CYCLE: str = STABLE

CYCLE_WEIGHTS: dict[str, float] = {
    BOOM: 0.2,
    STABLE: 0.4,
    DOWNTURN: 0.3,
    CRISIS: 0.1,
}
"""Probability of each cycle in a random economic event (sums to 1.0)."""

AUTO_SIMULATION_PERIOD_S: float = 7 * 24 * 60 * 60
"""Seconds between automatic economic events (one game week)."""

# -- Action types --------------------------------------------------------

INVESTMENT_TYPES: tuple[str, ...] = ("invest", "diversify", "hold")
OFFENSIVE_TYPES: tuple[str, ...] = ("attack", "manipulate", "spy")
DEFENSIVE_TYPES: tuple[str, ...] = ("defense", "insurance", "counter")

DEFAULT_INVESTMENT_TYPE = "invest"
UNKNOWN_COMMANDER = "Unknown Commander"

# -- Thresholds ----------------------------------------------------------

MIN_INVESTMENT: int = 10
MAX_INVESTMENT_PER_MARKET: int = 1000
MIN_ATTACK_SOLDIERS: int = 25
MIN_SPY_SOLDIERS: int = 10

# -- Combat --------------------------------------------------------------

DEFENSE_RATINGS: dict[str, float] = {
    "Weak": 0.25,
    "Moderate": 0.5,
    "Strong": 0.75,
    "Very Strong": 0.9,
}
"""Multiplier applied to a defender's soldiers per defense label."""

MAX_SUCCESS_CHANCE: int = 90
"""Upper bound for attack success percentage; no attack is certain."""

# -- Players -------------------------------------------------------------

STARTING_SOLDIERS: int = 100
MAX_MOVES_PER_WEEK: int = 3
