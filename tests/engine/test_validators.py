"""
Dix Mille - Score Validator Tests
"""

from dataclasses import replace

import pytest

from dixmille.engine.base import GamePhase, GameRules
from dixmille.engine.player import Player
from dixmille.engine.validators import (
    ValidationErrorCode,
    ValidationResult,
    determine_winner,
    should_end_game,
    should_trigger_final_round,
    validate_commit_turn,
    validate_game_active,
    validate_has_entries,
    validate_has_history,
    validate_new_game,
    validate_player_can_act,
    validate_score_does_not_exceed_target,
    validate_score_entry,
    validate_target_score,
)
from tests.builders import entry, make_game, play_commit


class TestValidationResult:

    def test_valid(self):
        result = ValidationResult.valid()
        assert result.is_valid is True
        assert result.is_invalid is False
        assert str(result) == "Valid"

    def test_invalid(self):
        result = ValidationResult.invalid(ValidationErrorCode.GAME_ALREADY_ENDED, "Game has already ended")
        assert result.is_invalid is True
        assert result.code == ValidationErrorCode.GAME_ALREADY_ENDED
        assert str(result) == "Game has already ended"


class TestScoreEntry:

    @pytest.mark.parametrize("points", [0, -50])
    def test_non_positive_invalid(self, points):
        result = validate_score_entry(points, is_preset=False)
        assert result.code == ValidationErrorCode.INVALID_SCORE_VALUE

    @pytest.mark.parametrize("points", [50, 100, 150, 2000])
    def test_preset_values_valid(self, points):
        assert validate_score_entry(points, is_preset=True).is_valid

    def test_non_preset_value_rejected_as_preset(self):
        result = validate_score_entry(350, is_preset=True)
        assert result.code == ValidationErrorCode.INVALID_SCORE_VALUE

    @pytest.mark.parametrize("points", [350, 75, 3050])
    def test_custom_accepts_any_positive(self, points):
        assert validate_score_entry(points, is_preset=False).is_valid

    def test_exceeds_target(self):
        result = validate_score_does_not_exceed_target(600, 9500, 10_000)
        assert result.code == ValidationErrorCode.SCORE_EXCEEDS_TARGET
        assert validate_score_does_not_exceed_target(500, 9500, 10_000).is_valid


class TestCommitTurn:

    @pytest.fixture
    def rules(self):
        return GameRules(entry_minimum_score=500)

    def test_no_turn(self, rules):
        result = validate_commit_turn(Player(id="p0", name="Alice"), rules)
        assert result.code == ValidationErrorCode.NO_TURN_IN_PROGRESS

    def test_busted_turn(self, rules):
        player = Player(id="p0", name="Alice").start_turn("t").add_score_entry(entry(500))
        player = replace(player, current_turn=player.current_turn.bust())
        assert validate_commit_turn(player, rules).code == ValidationErrorCode.TURN_ALREADY_BUSTED

    def test_empty_turn(self, rules):
        player = Player(id="p0", name="Alice", has_entered_game=True).start_turn("t")
        assert validate_commit_turn(player, rules).code == ValidationErrorCode.MUST_SCORE_TO_COMMIT

    def test_insufficient_to_enter(self, rules):
        player = Player(id="p0", name="Alice").start_turn("t").add_score_entry(entry(400))
        result = validate_commit_turn(player, rules)
        assert result.code == ValidationErrorCode.INSUFFICIENT_POINTS_TO_ENTER
        assert "500" in result.message

    def test_exact_entry_minimum(self, rules):
        player = Player(id="p0", name="Alice").start_turn("t").add_score_entry(entry(500))
        assert validate_commit_turn(player, rules).is_valid

    def test_entered_player_small_turn(self, rules):
        player = Player(id="p0", name="Alice", has_entered_game=True).start_turn("t")
        player = player.add_score_entry(entry(50))
        assert validate_commit_turn(player, rules).is_valid


class TestGameChecks:

    def test_active_game(self, three_player_game):
        assert validate_game_active(three_player_game).is_valid

    def test_ended_game(self, three_player_game):
        game = replace(three_player_game, game_phase=GamePhase.ENDED)
        assert validate_game_active(game).code == ValidationErrorCode.GAME_ALREADY_ENDED
        assert validate_player_can_act(game, "p0").code == ValidationErrorCode.GAME_ALREADY_ENDED

    def test_current_player_can_act(self, three_player_game):
        assert validate_player_can_act(three_player_game, "p0").is_valid

    def test_other_player_cannot_act(self, three_player_game):
        result = validate_player_can_act(three_player_game, "p1")
        assert result.code == ValidationErrorCode.NOT_PLAYERS_TURN

    def test_already_played_final_round(self, three_player_game):
        game = replace(
            three_player_game,
            game_phase=GamePhase.FINAL_ROUND,
            triggering_player_id="p2",
        )
        game = game.update_current_player(game.current_player.mark_final_round_played())
        result = validate_player_can_act(game, "p0")
        assert result.code == ValidationErrorCode.ALREADY_PLAYED_FINAL_ROUND

    def test_has_entries(self, three_player_game):
        result = validate_has_entries(three_player_game.current_player)
        assert result.code == ValidationErrorCode.NO_ENTRIES_TO_UNDO
        game = three_player_game.add_entry_to_current_turn(entry(50))
        assert validate_has_entries(game.current_player).is_valid

    def test_has_entries_without_turn(self):
        result = validate_has_entries(Player(id="p0", name="Alice"))
        assert result.code == ValidationErrorCode.NO_TURN_IN_PROGRESS

    def test_has_history(self, three_player_game):
        assert validate_has_history(three_player_game).code == ValidationErrorCode.NO_TURNS_TO_UNDO
        assert validate_has_history(play_commit(three_player_game, 100)).is_valid


class TestNewGame:

    def test_valid_setup(self):
        assert validate_new_game(["Alice", "Bob"], GameRules()).is_valid

    def test_too_few(self):
        result = validate_new_game(["Alice"], GameRules())
        assert result.code == ValidationErrorCode.INVALID_PLAYER_COUNT

    def test_too_many(self):
        result = validate_new_game([str(i) for i in range(7)], GameRules())
        assert result.code == ValidationErrorCode.INVALID_PLAYER_COUNT

    def test_blank_name(self):
        result = validate_new_game(["Alice", "   "], GameRules())
        assert result.code == ValidationErrorCode.INVALID_PLAYER_NAME

    def test_target_score(self):
        assert validate_target_score(0).code == ValidationErrorCode.INVALID_TARGET_SCORE
        assert validate_target_score(5000).is_valid


class TestPhaseChecks:

    def test_should_trigger_final_round(self):
        rules = GameRules(target_score=1000, entry_minimum_score=0)
        game = make_game(rules=rules)
        assert should_trigger_final_round(game) is False
        player = replace(game.current_player, total_score=1000)
        assert should_trigger_final_round(game.update_current_player(player)) is True

    def test_should_end_game(self):
        rules = GameRules(target_score=1000, entry_minimum_score=0)
        game = play_commit(make_game(names=("Alice", "Bob"), rules=rules), 1000)
        assert should_end_game(game) is False
        bob = game.get_player("p1").mark_final_round_played()
        assert should_end_game(game.update_player(bob)) is True

    def test_determine_winner(self):
        rules = GameRules(target_score=1000, entry_minimum_score=0, enable_final_round=False)
        game = make_game(rules=rules)
        assert determine_winner(game) is None
        game = play_commit(game, 1000)
        assert determine_winner(game).name == "Alice"
