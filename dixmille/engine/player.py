"""
Dix Mille - Player

A participant's persistent state plus the operations that start, edit,
and finish their turn. All methods return new Player values.
"""

from dataclasses import dataclass, replace

from dixmille.engine.base import ScoreEntry, Turn


@dataclass(frozen=True)
class Player:
    """
    A player in a Dix Mille game.

    Attributes:
        id: Unique player identifier
        name: Display name
        total_score: Banked points
        has_entered_game: Whether the player has cleared the entry minimum
        current_turn: The turn in progress, if any
        has_played_final_round: Whether the player used their final-round turn
        consecutive_busts: Busts in a row since the last scored turn
    """
    id: str
    name: str
    total_score: int = 0
    has_entered_game: bool = False
    current_turn: Turn | None = None
    has_played_final_round: bool = False
    consecutive_busts: int = 0

    def __post_init__(self) -> None:
        if self.total_score < 0:
            raise ValueError(f"Total score cannot be negative, got {self.total_score}.")
        if self.consecutive_busts < 0:
            raise ValueError(
                f"Consecutive busts cannot be negative, got {self.consecutive_busts}."
            )

    @property
    def turn_total(self) -> int:
        """Points in the current turn, 0 when no turn is in progress."""
        if self.current_turn is None:
            return 0
        return self.current_turn.turn_total

    def start_turn(self, turn_id: str) -> "Player":
        """Begin a fresh, empty turn."""
        return replace(self, current_turn=Turn(id=turn_id))

    def add_score_entry(self, entry: ScoreEntry) -> "Player":
        """Append an entry to the current turn."""
        if self.current_turn is None:
            raise ValueError("No turn in progress.")
        return replace(self, current_turn=self.current_turn.add_entry(entry))

    def undo_last_entry(self) -> "Player":
        """Remove the last entry of the current turn."""
        if self.current_turn is None:
            raise ValueError("No turn in progress.")
        return replace(self, current_turn=self.current_turn.remove_last_entry())

    def commit_turn(self, entry_minimum_score: int) -> "Player":
        """
        Bank the current turn.

        Adds the turn total to the score, enters the game when the entry
        minimum is met, and resets the consecutive bust counter.

        Raises:
            ValueError: If there is no turn, it is busted, it is worth
                nothing, or the player has not entered and falls short
                of the entry minimum
        """
        turn = self.current_turn
        if turn is None:
            raise ValueError("No turn in progress.")
        if turn.is_busted:
            raise ValueError("Cannot commit a busted turn.")

        points = turn.turn_total
        if points <= 0:
            raise ValueError("Cannot commit a turn worth no points.")
        if not self.has_entered_game and points < entry_minimum_score:
            raise ValueError(
                f"Need at least {entry_minimum_score} points in a turn to enter the game, got {points}."
            )

        return replace(
            self,
            total_score=self.total_score + points,
            has_entered_game=True,
            current_turn=None,
            consecutive_busts=0,
        )

    def bust_turn(self) -> "Player":
        """Discard the current turn and count the bust."""
        return replace(
            self,
            current_turn=None,
            consecutive_busts=self.consecutive_busts + 1,
        )

    def skip_turn(self) -> "Player":
        """Discard the current turn without counting a bust."""
        return replace(self, current_turn=None)

    def clear_turn(self) -> "Player":
        return replace(self, current_turn=None)

    def revert_score(self, score: int) -> "Player":
        """Set the total score back to an earlier value."""
        return replace(self, total_score=score)

    def reset_consecutive_busts(self) -> "Player":
        return replace(self, consecutive_busts=0)

    def mark_final_round_played(self) -> "Player":
        return replace(self, has_played_final_round=True)
