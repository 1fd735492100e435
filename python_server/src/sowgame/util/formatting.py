"""Formatting utilities — move headlines and percentages for display."""

from __future__ import annotations

from sowgame.models.actions import DefensiveMove, InvestmentMove, Move, OffensiveMove


def format_percent(value: float) -> str:
    """Format a signed percentage: 20 -> '+20%', -15 -> '-15%'."""
    sign = "+" if value > 0 else ""
    if value == int(value):
        return f"{sign}{int(value)}%"
    return f"{sign}{value:.1f}%"


def describe_move(move: Move) -> str:
    """One-line headline of a queued weekly move."""
    if isinstance(move, InvestmentMove):
        if move.type == "invest":
            return f"INVEST {move.amount} SOLDIERS IN {(move.market or '').upper()}"
        if move.type == "diversify":
            return "DIVERSIFY FORCES ACROSS MARKETS"
        if move.type == "hold":
            return "HOLD POSITION (CASH RESERVES)"
    elif isinstance(move, OffensiveMove):
        target = (move.target_name or "ENEMY").upper()
        if move.type == "attack":
            return f"DIRECT ASSAULT ON {target}"
        if move.type == "spy":
            return f"DEPLOY SPY TO {target}"
        if move.type == "manipulate":
            return f"MARKET STRIKE ON {(move.market or 'MARKET').upper()}"
    elif isinstance(move, DefensiveMove):
        if move.type == "defense":
            return "FORTIFY DEFENSES"
        if move.type == "insurance":
            return f"SECURE ASSETS IN {(move.market or 'MARKET').upper()}"
        if move.type == "counter":
            return "DEPLOY COUNTER-INTELLIGENCE"
    return "UNKNOWN MOVE TYPE"
