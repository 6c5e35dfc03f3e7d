"""
Dix Mille - Score Validator

Stateless rule checks consumed by every game operation. Validators never
raise for an expected rule violation; they return a ValidationResult
carrying the failure code and a readable message.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Sequence

from dixmille.engine.base import VALID_PRESET_VALUES, GamePhase, GameRules
from dixmille.engine.player import Player

if TYPE_CHECKING:
    from dixmille.engine.game import Game


class ValidationErrorCode(Enum):
    """Reasons a game action can be rejected."""
    INSUFFICIENT_POINTS_TO_ENTER = auto()
    INVALID_SCORE_VALUE = auto()
    SCORE_EXCEEDS_TARGET = auto()
    GAME_ALREADY_ENDED = auto()
    NOT_PLAYERS_TURN = auto()
    MUST_SCORE_TO_COMMIT = auto()
    TURN_ALREADY_BUSTED = auto()
    NO_TURN_IN_PROGRESS = auto()
    ALREADY_PLAYED_FINAL_ROUND = auto()
    NO_ENTRIES_TO_UNDO = auto()
    NO_TURNS_TO_UNDO = auto()
    INVALID_PLAYER_COUNT = auto()
    INVALID_PLAYER_NAME = auto()
    INVALID_TARGET_SCORE = auto()


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of a validation check.

    Attributes:
        code: Failure reason, None when valid
        message: Human-readable explanation of the failure
    """
    code: ValidationErrorCode | None = None
    message: str = ""

    @classmethod
    def valid(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def invalid(cls, code: ValidationErrorCode, message: str) -> "ValidationResult":
        return cls(code=code, message=message)

    @property
    def is_valid(self) -> bool:
        return self.code is None

    @property
    def is_invalid(self) -> bool:
        return self.code is not None

    def __str__(self) -> str:
        return "Valid" if self.is_valid else self.message


VALID = ValidationResult.valid()


def validate_score_entry(points: int, is_preset: bool) -> ValidationResult:
    """
    Check a single score entry.

    Any positive value is accepted for custom entries; preset entries must
    match the preset table.
    """
    if points <= 0:
        return ValidationResult.invalid(
            ValidationErrorCode.INVALID_SCORE_VALUE,
            f"Score of {points} is not valid",
        )
    if is_preset and points not in VALID_PRESET_VALUES:
        return ValidationResult.invalid(
            ValidationErrorCode.INVALID_SCORE_VALUE,
            f"Score of {points} is not a preset value",
        )
    return VALID


def validate_score_does_not_exceed_target(
    points: int,
    player_current_score: int,
    target_score: int,
) -> ValidationResult:
    """Check that adding points keeps a player at or under the target."""
    if player_current_score + points > target_score:
        return ValidationResult.invalid(
            ValidationErrorCode.SCORE_EXCEEDS_TARGET,
            f"Adding {points} to {player_current_score} would exceed the target of {target_score}",
        )
    return VALID


def validate_commit_turn(player: Player, rules: GameRules) -> ValidationResult:
    """
    Check that a player's current turn can be banked.

    A player who has not entered must clear the entry minimum in this
    single turn; short turns are rejected rather than zeroed.
    """
    turn = player.current_turn
    if turn is None:
        return ValidationResult.invalid(
            ValidationErrorCode.NO_TURN_IN_PROGRESS, "No turn in progress"
        )
    if turn.is_busted:
        return ValidationResult.invalid(
            ValidationErrorCode.TURN_ALREADY_BUSTED, "Turn has already been busted"
        )
    if turn.is_empty or turn.turn_total == 0:
        return ValidationResult.invalid(
            ValidationErrorCode.MUST_SCORE_TO_COMMIT,
            "Must score at least one point to end turn",
        )
    if not player.has_entered_game and turn.turn_total < rules.entry_minimum_score:
        return ValidationResult.invalid(
            ValidationErrorCode.INSUFFICIENT_POINTS_TO_ENTER,
            f"Need at least {rules.entry_minimum_score} points in a turn to enter the game",
        )
    return VALID


def validate_turn_in_progress(player: Player) -> ValidationResult:
    if player.current_turn is None:
        return ValidationResult.invalid(
            ValidationErrorCode.NO_TURN_IN_PROGRESS, "No turn in progress"
        )
    return VALID


def validate_has_entries(player: Player) -> ValidationResult:
    """Check that the current turn has an entry to remove."""
    in_progress = validate_turn_in_progress(player)
    if in_progress.is_invalid:
        return in_progress
    if player.current_turn.is_empty:
        return ValidationResult.invalid(
            ValidationErrorCode.NO_ENTRIES_TO_UNDO, "No score entries to undo"
        )
    return VALID


def validate_has_history(game: Game) -> ValidationResult:
    if not game.turn_history:
        return ValidationResult.invalid(
            ValidationErrorCode.NO_TURNS_TO_UNDO, "No turns to undo"
        )
    return VALID


def validate_game_active(game: Game) -> ValidationResult:
    """Check that the game accepts actions."""
    if game.is_over:
        return ValidationResult.invalid(
            ValidationErrorCode.GAME_ALREADY_ENDED, "Game has already ended"
        )
    return VALID


def validate_player_can_act(game: Game, player_id: str) -> ValidationResult:
    """
    Check that a player may take an action now.

    The game must be active, it must be the player's turn, and during
    the final round they must not have played already.
    """
    active = validate_game_active(game)
    if active.is_invalid:
        return active

    if game.current_player.id != player_id:
        return ValidationResult.invalid(
            ValidationErrorCode.NOT_PLAYERS_TURN, f"Not player {player_id}'s turn"
        )

    if game.game_phase == GamePhase.FINAL_ROUND and game.current_player.has_played_final_round:
        return ValidationResult.invalid(
            ValidationErrorCode.ALREADY_PLAYED_FINAL_ROUND,
            "Player has already played final round",
        )
    return VALID


def validate_new_game(
    player_names: Sequence[str],
    rules: GameRules,
) -> ValidationResult:
    """Check player names and count against the rules for a new game."""
    count = len(player_names)
    if not rules.min_players <= count <= rules.max_players:
        return ValidationResult.invalid(
            ValidationErrorCode.INVALID_PLAYER_COUNT,
            f"Game must have {rules.min_players}-{rules.max_players} players, got {count}",
        )
    if any(not name or not name.strip() for name in player_names):
        return ValidationResult.invalid(
            ValidationErrorCode.INVALID_PLAYER_NAME, "All player names must be non-blank"
        )
    return VALID


def validate_target_score(score: int) -> ValidationResult:
    if score <= 0:
        return ValidationResult.invalid(
            ValidationErrorCode.INVALID_TARGET_SCORE,
            f"Target score must be positive, got {score}",
        )
    return VALID


def should_trigger_final_round(game: Game) -> bool:
    """True when the current player has reached the target during regular play."""
    if game.game_phase != GamePhase.IN_PROGRESS:
        return False
    return game.current_player.total_score >= game.target_score


def should_end_game(game: Game) -> bool:
    """True when every non-triggering player has played their final turn."""
    if game.game_phase != GamePhase.FINAL_ROUND:
        return False
    if game.triggering_player_id is None:
        return False
    return all(
        p.has_played_final_round
        for p in game.players
        if p.id != game.triggering_player_id
    )


def determine_winner(game: Game) -> Player | None:
    return game.winner
