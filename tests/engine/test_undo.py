"""
Dix Mille - Undo Tests

Single-level undo of the most recent history record.
"""

import pytest

from dixmille.engine.base import GamePhase, GameRules, TurnOutcome
from tests.builders import make_game, play_bust, play_commit, play_skip


class TestUndoScore:

    def test_undo_entry_turn(self, three_player_game):
        game = play_commit(three_player_game, 500)
        game = game.undo_last_turn("t-undo")
        alice = game.get_player("p0")
        assert alice.total_score == 0
        assert alice.has_entered_game is False
        assert game.turn_history == ()
        assert game.current_player_index == 0
        assert game.current_player.current_turn.id == "t-undo"
        assert game.round_number == 1

    def test_undo_later_turn_keeps_entry(self):
        game = make_game(names=("Alice", "Bob"))
        game = play_commit(game, 500)
        game = play_skip(game)
        game = play_commit(game, 200)
        game = game.undo_last_turn("t-undo")
        alice = game.get_player("p0")
        assert alice.total_score == 500
        assert alice.has_entered_game is True

    def test_undo_rewinds_round(self):
        game = make_game(names=("Alice", "Bob"))
        game = play_commit(game, 500)
        game = play_commit(game, 300)
        assert game.round_number == 2
        game = game.undo_last_turn("t-undo")
        assert game.round_number == 1
        assert game.current_player_index == 1
        assert game.get_player("p1").total_score == 0
        assert game.get_player("p1").has_entered_game is False

    def test_undo_clears_other_active_turn(self):
        game = make_game(names=("Alice", "Bob"))
        game = play_commit(game, 500)
        game = play_commit(game, 300)
        game = game.undo_last_turn("t-undo")
        active = [p.id for p in game.players if p.current_turn is not None]
        assert active == ["p1"]

    def test_undo_without_history_raises(self, three_player_game):
        with pytest.raises(ValueError, match="No turns to undo"):
            three_player_game.undo_last_turn("t-undo")

    def test_undo_drops_only_last_record(self, three_player_game):
        game = play_commit(three_player_game, 500)
        game = play_skip(game)
        game = game.undo_last_turn("t-undo")
        assert [r.outcome for r in game.turn_history] == [TurnOutcome.SCORED]


class TestUndoBusts:

    def test_bust_counter_rederived_through_skips(self):
        game = make_game(names=("Alice", "Bob"))
        game = play_commit(game, 500)
        game = play_skip(game)
        game = play_bust(game)
        game = play_skip(game)
        game = play_skip(game)   # Alice skips
        game = play_skip(game)
        game = play_bust(game)
        assert game.get_player("p0").consecutive_busts == 2

        game = game.undo_last_turn("t-undo")
        alice = game.get_player("p0")
        assert alice.consecutive_busts == 1
        assert alice.total_score == 500
        assert game.current_player_index == 0
        assert game.round_number == 4

    def test_undo_penalty_bust_restores_score(self):
        game = make_game(names=("Alice", "Bob"))
        game = play_commit(game, 500)
        game = play_skip(game)
        game = play_commit(game, 200)
        for _ in range(3):
            game = play_skip(game)
            game = play_bust(game)
        assert game.get_player("p0").total_score == 500

        game = game.undo_last_turn("t-undo")
        alice = game.get_player("p0")
        assert alice.total_score == 700
        assert alice.consecutive_busts == 2

    def test_scored_record_stops_bust_count(self):
        game = make_game(names=("Alice", "Bob"))
        game = play_bust(game)
        game = play_skip(game)
        game = play_commit(game, 500)
        game = play_skip(game)
        game = play_skip(game)
        game = game.undo_last_turn("t-undo")
        assert game.get_player("p0").consecutive_busts == 0


class TestUndoCollision:

    def test_undo_collision_restores_victim(self, three_player_game):
        game = play_commit(three_player_game, 500)
        game = play_skip(game)
        game = play_commit(game, 500)
        assert game.last_record.outcome == TurnOutcome.COLLISION

        game = game.undo_last_turn("t-undo")
        assert game.get_player("p0").total_score == 500
        assert game.get_player("p0").has_entered_game is True
        assert game.get_player("p2").total_score == 500
        assert game.current_player_index == 0
        assert game.round_number == 1


class TestUndoPhase:

    def test_ended_back_to_final_round(self):
        rules = GameRules(target_score=1000, entry_minimum_score=0)
        game = play_commit(make_game(rules=rules), 1000)
        game = play_skip(game)
        game = play_commit(game, 200)
        assert game.game_phase == GamePhase.ENDED

        game = game.undo_last_turn("t-undo")
        assert game.game_phase == GamePhase.FINAL_ROUND
        assert game.triggering_player_id == "p0"
        assert game.current_player_index == 2
        carol = game.get_player("p2")
        assert carol.total_score == 0
        assert carol.has_played_final_round is False
        assert carol.current_turn.id == "t-undo"

    def test_ended_back_to_in_progress(self):
        rules = GameRules(target_score=1000, entry_minimum_score=0, enable_final_round=False)
        game = play_commit(make_game(rules=rules), 1000)
        assert game.game_phase == GamePhase.ENDED

        game = game.undo_last_turn("t-undo")
        assert game.game_phase == GamePhase.IN_PROGRESS
        assert game.triggering_player_id is None
        assert game.get_player("p0").total_score == 0

    def test_final_round_flag_reset_on_undo(self):
        rules = GameRules(target_score=1000, entry_minimum_score=0)
        game = play_commit(make_game(rules=rules), 1000)
        game = play_skip(game)
        assert game.get_player("p1").has_played_final_round is True
        game = game.undo_last_turn("t-undo")
        assert game.get_player("p1").has_played_final_round is False
        assert game.current_player_index == 1
