"""Tests for move headlines and percentage display."""

from sowgame.models.actions import DefensiveMove, InvestmentMove, OffensiveMove
from sowgame.util.formatting import describe_move, format_percent


def test_format_percent():
    assert format_percent(20) == "+20%"
    assert format_percent(-15) == "-15%"
    assert format_percent(0) == "0%"
    assert format_percent(2.5) == "+2.5%"


def test_describe_investments():
    assert describe_move(InvestmentMove(amount=50, market="crypto")) == \
        "INVEST 50 SOLDIERS IN CRYPTO"
    assert describe_move(InvestmentMove(type="diversify")) == "DIVERSIFY FORCES ACROSS MARKETS"
    assert describe_move(InvestmentMove(type="hold")) == "HOLD POSITION (CASH RESERVES)"


def test_describe_offensive():
    assert describe_move(OffensiveMove(type="attack", target_player="p2",
                                       target_name="Bob")) == "DIRECT ASSAULT ON BOB"
    assert describe_move(OffensiveMove(type="spy", target_player="p2")) == "DEPLOY SPY TO ENEMY"
    assert describe_move(OffensiveMove(type="manipulate", market="stocks")) == \
        "MARKET STRIKE ON STOCKS"


def test_describe_defensive():
    assert describe_move(DefensiveMove(type="defense")) == "FORTIFY DEFENSES"
    assert describe_move(DefensiveMove(type="insurance", market="realEstate")) == \
        "SECURE ASSETS IN REALESTATE"
    assert describe_move(DefensiveMove(type="counter")) == "DEPLOY COUNTER-INTELLIGENCE"


def test_unknown_type():
    assert describe_move(DefensiveMove(type="pray")) == "UNKNOWN MOVE TYPE"
