"""Tests for single weekly-move validation."""

import pytest

from sowgame.engine.action_validator import validate_move
from sowgame.loaders.game_config_loader import GameConfig
from sowgame.models.actions import DefensiveMove, InvestmentMove, OffensiveMove
from sowgame.util.errors import (
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


class TestMoveShape:
    def test_no_actions_remaining(self):
        result = validate_move({"defensive": {"type": "defense"}}, 100, actions_remaining=0)
        assert result.error is MoveLimitError
        assert result.message == "No actions remaining this week"

    def test_remaining_not_checked_when_omitted(self):
        assert validate_move({"defensive": {"type": "defense"}}, 100).valid is True

    def test_empty_move(self):
        assert validate_move({}, 100).error is MissingActionError

    def test_two_categories_rejected(self):
        move = {"defensive": {"type": "defense"}, "investment": {"type": "hold"}}
        assert validate_move(move, 100).error is InvalidStructureError

    def test_empty_section_counts_as_selected(self):
        result = validate_move({"investment": {}}, 100)
        assert result.error is MissingMarketError
        assert result.message == "Please select a market for your investment"

    def test_empty_section_beside_valid_one_rejected(self):
        move = {"investment": {}, "offensive": {"type": "spy", "targetPlayer": "p2"}}
        result = validate_move(move, 100)
        assert result.error is InvalidStructureError
        assert result.move is None

    def test_null_siblings_ignored(self):
        move = {"investment": None, "offensive": None, "defensive": {"type": "counter"}}
        assert validate_move(move, 100).move == DefensiveMove(type="counter")

    @pytest.mark.parametrize("move", [
        {"investment": {"type": "short"}},
        {"offensive": {"type": "nuke"}},
        {"defensive": {"type": "wall"}},
    ])
    def test_unknown_types(self, move):
        assert validate_move(move, 100).error is InvalidStructureError


class TestInvestmentMoves:
    def test_invest(self):
        result = validate_move({"investment": {"type": "invest", "amount": 10, "market": "crypto"}}, 100)
        assert result.move == InvestmentMove(type="invest", amount=10, market="crypto")

    def test_type_defaults_to_invest(self):
        result = validate_move({"investment": {"amount": 10, "market": "crypto"}}, 100)
        assert result.move.type == "invest"

    def test_market_required_first(self):
        result = validate_move({"investment": {"type": "invest", "amount": 5}}, 100)
        assert result.error is MissingMarketError
        assert result.message == "Please select a market for your investment"

    def test_minimum_deployment(self):
        result = validate_move({"investment": {"amount": 9, "market": "stocks"}}, 100)
        assert result.error is InvalidAmountError
        assert result.message == "Minimum investment is 10 soldiers"

    def test_maximum_per_market(self):
        result = validate_move({"investment": {"amount": 1001, "market": "stocks"}}, 5000)
        assert result.error is InvalidAmountError
        assert "1000" in result.message

    def test_more_than_owned(self):
        result = validate_move({"investment": {"amount": 150, "market": "stocks"}}, 100)
        assert result.error is InsufficientResourcesError

    @pytest.mark.parametrize("op", ["diversify", "hold"])
    def test_no_amount_needed(self, op):
        result = validate_move({"investment": {"type": op}}, 0)
        assert result.move == InvestmentMove(type=op)
        assert result.cleaned_data["investment"] == {"type": op, "amount": None, "market": None}

    def test_minimum_from_config(self):
        gc = GameConfig(min_investment=20)
        result = validate_move({"investment": {"amount": 15, "market": "stocks"}}, 100, game_config=gc)
        assert result.message == "Minimum investment is 20 soldiers"


class TestOffensiveMoves:
    def test_attack(self):
        result = validate_move(
            {"offensive": {"type": "attack", "targetPlayer": "p2", "targetName": "Bob"}}, 30)
        assert result.move == OffensiveMove(type="attack", target_player="p2", target_name="Bob")

    def test_attack_target_required(self):
        result = validate_move({"offensive": {"type": "attack"}}, 30)
        assert result.error is MissingTargetError
        assert result.message == "Please select a target player"

    def test_attack_forces(self):
        result = validate_move({"offensive": {"type": "attack", "targetPlayer": "p2"}}, 24)
        assert result.error is InsufficientForcesError

    def test_spy_placeholder_name(self):
        result = validate_move({"offensive": {"type": "spy", "targetPlayer": "p2"}}, 10)
        assert result.move.target_name == "Unknown Commander"

    def test_manipulate_needs_market(self):
        result = validate_move({"offensive": {"type": "manipulate"}}, 100)
        assert result.error is MissingMarketError
        assert result.message == "Please select a market to manipulate"

    def test_manipulate_keeps_market(self):
        result = validate_move({"offensive": {"type": "manipulate", "market": "crypto"}}, 100)
        assert result.move == OffensiveMove(type="manipulate", market="crypto")
        assert result.cleaned_data["offensive"]["market"] == "crypto"

    def test_type_required(self):
        result = validate_move({"offensive": {"targetPlayer": "p2"}}, 100)
        assert result.error is MissingOperationTypeError


class TestDefensiveMoves:
    @pytest.mark.parametrize("op", ["defense", "counter"])
    def test_simple_defenses(self, op):
        result = validate_move({"defensive": {"type": op}}, 0)
        assert result.move == DefensiveMove(type=op)
        assert result.cleaned_data == {
            "investment": None, "offensive": None, "defensive": {"type": op, "market": None},
        }

    def test_insurance_needs_market(self):
        result = validate_move({"defensive": {"type": "insurance"}}, 100)
        assert result.error is MissingMarketError
        assert result.message == "Please select a market to secure"

    def test_insurance(self):
        result = validate_move({"defensive": {"type": "insurance", "market": "realEstate"}}, 100)
        assert result.move == DefensiveMove(type="insurance", market="realEstate")

    def test_type_required(self):
        assert validate_move({"defensive": {"market": "stocks"}}, 100).error is MissingOperationTypeError
