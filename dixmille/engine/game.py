"""
Dix Mille - Game Aggregate

The Game holds every player, the active phase, turn order, round counter,
and the full turn history. It owns phase transitions, the bust penalty,
score collision resolution, and undo.

All methods are pure: they return a new Game and never mutate in place.
"""

from collections import deque
from dataclasses import dataclass, field, replace

from dixmille.engine.base import (
    GamePhase,
    GameRules,
    ScoreEntry,
    TurnOutcome,
    TurnRecord,
)
from dixmille.engine.player import Player
from dixmille.engine.validators import should_end_game, should_trigger_final_round


@dataclass(frozen=True)
class Game:
    """
    Complete state of a Dix Mille game.

    Attributes:
        id: Unique game identifier
        players: Players in fixed turn order
        target_score: Score that ends regular play
        current_player_index: Index of the player whose turn it is
        game_phase: Current phase
        triggering_player_id: Player who reached the target first (final round only)
        created_at: Creation timestamp in epoch milliseconds
        turn_history: Append-only ledger of turn records
        round_number: Current round, starting at 1
        rules: Rules frozen at creation
    """
    id: str
    players: tuple[Player, ...]
    created_at: int
    target_score: int = 10_000
    current_player_index: int = 0
    game_phase: GamePhase = GamePhase.IN_PROGRESS
    triggering_player_id: str | None = None
    turn_history: tuple[TurnRecord, ...] = field(default_factory=tuple)
    round_number: int = 1
    rules: GameRules = field(default_factory=GameRules)

    def __post_init__(self) -> None:
        """Validate structural invariants."""
        count = len(self.players)
        ids = {p.id for p in self.players}
        if not self.rules.min_players <= count <= self.rules.max_players:
            raise ValueError(
                f"Game must have {self.rules.min_players}-{self.rules.max_players} players, got {count}."
            )
        if len(ids) != count:
            raise ValueError("Player ids must be unique.")
        if self.target_score <= 0:
            raise ValueError(f"Target score must be positive, got {self.target_score}.")
        if not 0 <= self.current_player_index < count:
            raise ValueError(f"Invalid player index {self.current_player_index}.")
        if self.round_number < 1:
            raise ValueError(f"Round number must be >= 1, got {self.round_number}.")
        if self.game_phase == GamePhase.FINAL_ROUND and self.triggering_player_id is None:
            raise ValueError("Final round requires a triggering player.")
        if self.triggering_player_id is not None and self.triggering_player_id not in ids:
            raise ValueError(f"Unknown triggering player {self.triggering_player_id}.")

    # -- Queries -----------------------------------------------------------

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    @property
    def is_over(self) -> bool:
        return self.game_phase == GamePhase.ENDED

    @property
    def last_record(self) -> TurnRecord | None:
        """Most recent history record, if any."""
        return self.turn_history[-1] if self.turn_history else None

    @property
    def winner(self) -> Player | None:
        """Highest scorer once the game has ended; earliest seat wins ties."""
        if self.game_phase != GamePhase.ENDED:
            return None
        return max(self.players, key=lambda p: p.total_score)

    def players_by_score(self) -> list[Player]:
        """Players sorted by total score, highest first."""
        return sorted(self.players, key=lambda p: p.total_score, reverse=True)

    def player_index(self, player_id: str) -> int:
        for i, player in enumerate(self.players):
            if player.id == player_id:
                return i
        raise ValueError(f"Unknown player {player_id}.")

    def get_player(self, player_id: str) -> Player:
        return self.players[self.player_index(player_id)]

    def history_for(self, player_id: str) -> list[TurnRecord]:
        """History records belonging to one player, oldest first."""
        return [r for r in self.turn_history if r.player_id == player_id]

    def round_summary(self) -> dict[int, list[TurnRecord]]:
        """History grouped by round number, for score-sheet display."""
        rounds: dict[int, list[TurnRecord]] = {}
        for record in self.turn_history:
            rounds.setdefault(record.round_number, []).append(record)
        return rounds

    def last_gain_score(self, player_id: str) -> int:
        """
        Score a player held just before their last net-positive gain.

        Walks the player's SCORED records backward and returns the
        previous_score of the first one below their current total.

        Returns:
            The pre-gain score, or 0 if the player never gained
        """
        current = self.get_player(player_id).total_score
        for record in reversed(self.turn_history):
            if (
                record.player_id == player_id
                and record.outcome == TurnOutcome.SCORED
                and record.previous_score < current
            ):
                return record.previous_score
        return 0

    # -- Basic transitions -------------------------------------------------

    def update_player(self, player: Player) -> "Game":
        """Replace the player with the same id."""
        index = self.player_index(player.id)
        players = self.players[:index] + (player,) + self.players[index + 1:]
        return replace(self, players=players)

    def update_current_player(self, player: Player) -> "Game":
        players = list(self.players)
        players[self.current_player_index] = player
        return replace(self, players=tuple(players))

    def start_current_turn(self, turn_id: str) -> "Game":
        return self.update_current_player(self.current_player.start_turn(turn_id))

    def record_turn(
        self,
        player_id: str,
        points: int,
        outcome: TurnOutcome,
        previous_score: int,
    ) -> "Game":
        """Append a history record stamped with the current round."""
        record = TurnRecord(
            round_number=self.round_number,
            player_id=player_id,
            points=points,
            outcome=outcome,
            previous_score=previous_score,
        )
        return replace(self, turn_history=self.turn_history + (record,))

    def advance_to_next_player(self) -> "Game":
        """
        Move to the next seat, incrementing the round on wrap-around.

        During the final round the triggering player is passed over.
        """
        game = self._step()
        if (
            game.game_phase == GamePhase.FINAL_ROUND
            and game.current_player.id == game.triggering_player_id
        ):
            game = game._step()
        return game

    def _step(self) -> "Game":
        next_index = (self.current_player_index + 1) % len(self.players)
        next_round = self.round_number + 1 if next_index == 0 else self.round_number
        return replace(self, current_player_index=next_index, round_number=next_round)

    # -- Phase state machine -----------------------------------------------

    def check_and_trigger_final_round(self) -> "Game":
        """
        Leave IN_PROGRESS once the current player reaches the target.

        Goes to FINAL_ROUND with the current player as trigger, or straight
        to ENDED when the final round is disabled.
        """
        if not should_trigger_final_round(self):
            return self
        if self.rules.enable_final_round:
            return replace(
                self,
                game_phase=GamePhase.FINAL_ROUND,
                triggering_player_id=self.current_player.id,
            )
        return replace(self, game_phase=GamePhase.ENDED, triggering_player_id=None)

    def check_and_end_game(self) -> "Game":
        """End the final round once every other player has had their turn."""
        if should_end_game(self):
            return replace(self, game_phase=GamePhase.ENDED)
        return self

    def finish_turn(self, player_id: str, next_turn_id: str) -> "Game":
        """
        Close out a turn that has already been recorded.

        Marks final-round participation, ends the game if due, otherwise
        advances to the next eligible player and starts their turn.
        """
        game = self
        if game.game_phase == GamePhase.FINAL_ROUND:
            game = game.update_player(game.get_player(player_id).mark_final_round_played())

        game = game.check_and_end_game()
        if game.game_phase == GamePhase.ENDED:
            return game

        game = game.advance_to_next_player()
        return game.start_current_turn(next_turn_id)

    # -- Penalties and collisions ------------------------------------------

    def apply_bust_penalty(self, player_id: str) -> "Game":
        """
        Revert a player's score after too many busts in a row.

        The score drops back to what it was before their last net-positive
        gain and the bust counter resets.
        """
        player = self.get_player(player_id)
        if not self.rules.enable_bust_penalty:
            return self
        if player.consecutive_busts < self.rules.consecutive_busts_for_penalty:
            return self

        revert_to = self.last_gain_score(player_id)
        return self.update_player(player.revert_score(revert_to).reset_consecutive_busts())

    def resolve_collisions(self, immune_player_id: str) -> "Game":
        """
        Knock back every player sitting on a score someone just landed on.

        Breadth-first over score values: each hit player is reverted to
        their last pre-gain score, gets a COLLISION record, becomes immune,
        and their new score is checked in turn. Zero never collides.
        """
        game = self
        immune = {immune_player_id}
        pending: deque[int] = deque()

        start = game.get_player(immune_player_id).total_score
        if start > 0:
            pending.append(start)

        while pending:
            score = pending.popleft()
            hit = [p for p in game.players if p.id not in immune and p.total_score == score]
            for victim in hit:
                revert_to = game.last_gain_score(victim.id)
                game = game.update_player(victim.revert_score(revert_to))
                game = game.record_turn(victim.id, 0, TurnOutcome.COLLISION, score)
                immune.add(victim.id)
                if revert_to > 0:
                    pending.append(revert_to)

        return game

    # -- Turn operations ---------------------------------------------------

    def add_entry_to_current_turn(self, entry: ScoreEntry) -> "Game":
        return self.update_current_player(self.current_player.add_score_entry(entry))

    def undo_last_entry(self) -> "Game":
        return self.update_current_player(self.current_player.undo_last_entry())

    def commit_current_turn(self, next_turn_id: str) -> "Game":
        """Bank the current player's turn, resolve collisions, and move on."""
        player = self.current_player
        points = player.turn_total

        game = self.update_current_player(player.commit_turn(self.rules.entry_minimum_score))
        game = game.record_turn(player.id, points, TurnOutcome.SCORED, player.total_score)
        game = game.resolve_collisions(player.id)
        game = game.check_and_trigger_final_round()
        return game.finish_turn(player.id, next_turn_id)

    def bust_current_turn(self, next_turn_id: str) -> "Game":
        """Record a bust for the current player, applying the penalty if due."""
        player = self.current_player

        game = self.update_current_player(player.bust_turn())
        game = game.record_turn(player.id, 0, TurnOutcome.BUST, player.total_score)
        game = game.apply_bust_penalty(player.id)
        return game.finish_turn(player.id, next_turn_id)

    def skip_current_turn(self, next_turn_id: str) -> "Game":
        """Pass the turn without scoring and without counting a bust."""
        player = self.current_player

        game = self.update_current_player(player.skip_turn())
        game = game.record_turn(player.id, 0, TurnOutcome.SKIP, player.total_score)
        return game.finish_turn(player.id, next_turn_id)

    # -- Undo --------------------------------------------------------------

    def undo_last_turn(self, next_turn_id: str) -> "Game":
        """
        Invert the most recent history record.

        Restores the affected player's score, entry flag and bust counter,
        drops the record, rewinds the round if needed, and hands the turn
        back to that player. The final-round flag of the affected player is
        always cleared since no per-turn flag history is kept.

        Raises:
            ValueError: If there is no history
        """
        record = self.last_record
        if record is None:
            raise ValueError("No turns to undo.")

        index = self.player_index(record.player_id)
        player = self.players[index]
        remaining = self.turn_history[:-1]

        was_entry_turn = (
            record.outcome == TurnOutcome.SCORED
            and record.previous_score == 0
            and player.has_entered_game
        )

        busts = 0
        for past in reversed(remaining):
            if past.player_id != player.id:
                continue
            if past.outcome == TurnOutcome.SCORED:
                break
            if past.outcome == TurnOutcome.BUST:
                busts += 1

        reverted = replace(
            player,
            total_score=record.previous_score,
            has_entered_game=False if was_entry_turn else player.has_entered_game,
            current_turn=None,
            has_played_final_round=False,
            consecutive_busts=busts,
        )

        game = self.update_current_player(self.current_player.clear_turn())
        game = game.update_player(reverted)
        game = replace(
            game,
            turn_history=remaining,
            round_number=min(game.round_number, record.round_number),
            current_player_index=index,
        )
        game = game.start_current_turn(next_turn_id)

        if game.game_phase == GamePhase.ENDED:
            game = game._recompute_phase()
        return game

    def _recompute_phase(self) -> "Game":
        reached = any(p.total_score >= self.target_score for p in self.players)
        if reached and self.rules.enable_final_round and self.triggering_player_id is not None:
            return replace(self, game_phase=GamePhase.FINAL_ROUND)
        return replace(self, game_phase=GamePhase.IN_PROGRESS, triggering_player_id=None)
