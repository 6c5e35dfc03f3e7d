"""
Dix Mille - Game Engine Base Classes

This module defines the foundational data structures and enums used throughout
the game engine: rules configuration, score entries, turns, and the turn
history ledger. All classes are immutable (frozen dataclasses); mutations
return new copies.
"""

from dataclasses import dataclass, field, replace
from enum import Enum


ABSOLUTE_MIN_PLAYERS = 2
ABSOLUTE_MAX_PLAYERS = 10


class GamePhase(Enum):
    """Phase of a game. ENDED is terminal except through undo."""
    IN_PROGRESS = "IN_PROGRESS"
    FINAL_ROUND = "FINAL_ROUND"
    ENDED = "ENDED"


class ScoreType(Enum):
    """How a score entry was produced."""
    PRESET = "PRESET"  # Quick-tap value from the preset table
    CUSTOM = "CUSTOM"  # Manually entered value


class TurnOutcome(Enum):
    """Outcome of a turn history record."""
    SCORED = "SCORED"
    BUST = "BUST"
    SKIP = "SKIP"
    COLLISION = "COLLISION"  # Reverted by another player landing on the same score


@dataclass(frozen=True)
class GameRules:
    """
    Immutable rules configuration, frozen into a Game at creation.

    Attributes:
        target_score: Score that triggers the final round
        entry_minimum_score: Points needed in a single turn to enter the game
        consecutive_busts_for_penalty: Busts in a row that trigger the penalty
        min_players: Minimum number of players
        max_players: Maximum number of players
        enable_bust_penalty: Whether consecutive busts revert the score
        enable_final_round: Whether reaching the target grants a final round
    """
    target_score: int = 10_000
    entry_minimum_score: int = 500
    consecutive_busts_for_penalty: int = 3
    min_players: int = 2
    max_players: int = 6
    enable_bust_penalty: bool = True
    enable_final_round: bool = True

    def __post_init__(self) -> None:
        """Validate rule bounds."""
        if self.target_score <= 0:
            raise ValueError(f"Target score must be positive, got {self.target_score}.")
        if self.entry_minimum_score < 0:
            raise ValueError(
                f"Entry minimum score must be non-negative, got {self.entry_minimum_score}."
            )
        if self.consecutive_busts_for_penalty < 2:
            raise ValueError(
                "Consecutive busts for penalty must be at least 2, "
                f"got {self.consecutive_busts_for_penalty}."
            )
        if self.min_players < ABSOLUTE_MIN_PLAYERS:
            raise ValueError(
                f"Minimum players must be at least {ABSOLUTE_MIN_PLAYERS}, got {self.min_players}."
            )
        if self.max_players < self.min_players:
            raise ValueError(
                f"Maximum players ({self.max_players}) must be >= minimum players ({self.min_players})."
            )
        if self.max_players > ABSOLUTE_MAX_PLAYERS:
            raise ValueError(
                f"Maximum players must be at most {ABSOLUTE_MAX_PLAYERS}, got {self.max_players}."
            )

    def with_target_score(self, target_score: int) -> "GameRules":
        """Return a copy of these rules with a different target score."""
        return replace(self, target_score=target_score)


@dataclass(frozen=True)
class PresetScore:
    """A quick-entry score value with its display label."""
    points: int
    label: str


PRESET_SCORES: tuple[PresetScore, ...] = (
    PresetScore(50, "One 5"),
    PresetScore(100, "One 1"),
    PresetScore(150, "1 + 5"),
    PresetScore(200, "Two 1s / Three 2s"),
    PresetScore(250, "Two 1s + 5"),
    PresetScore(300, "Three 1s / Three 3s"),
    PresetScore(400, "Four 1s / Three 4s"),
    PresetScore(500, "Five 1s / Three 5s"),
    PresetScore(600, "Six 1s / Three 6s"),
    PresetScore(1000, "Three 1s (first roll)"),
    PresetScore(1500, "Four 1s (first roll)"),
    PresetScore(2000, "Five 1s (first roll)"),
)

VALID_PRESET_VALUES: frozenset[int] = frozenset(p.points for p in PRESET_SCORES)


def preset_label(points: int) -> str | None:
    """Label of the preset with the given value, or None if not a preset."""
    for preset in PRESET_SCORES:
        if preset.points == points:
            return preset.label
    return None


@dataclass(frozen=True)
class ScoreEntry:
    """
    A single score entry within a turn.

    Attributes:
        id: Unique entry identifier
        points: Points for this entry (always positive)
        type: Preset or custom entry
        label: Optional display label
    """
    id: str
    points: int
    type: ScoreType = ScoreType.PRESET
    label: str | None = None

    def __post_init__(self) -> None:
        if self.points <= 0:
            raise ValueError(f"Score entry points must be positive, got {self.points}.")


@dataclass(frozen=True)
class Turn:
    """
    A player's in-progress turn.

    Entries accumulate as the player keeps rolling. A busted turn is
    worth nothing regardless of its entries.
    """
    id: str
    entries: tuple[ScoreEntry, ...] = field(default_factory=tuple)
    is_busted: bool = False

    @property
    def turn_total(self) -> int:
        """Points accumulated this turn; 0 when busted."""
        if self.is_busted:
            return 0
        return sum(entry.points for entry in self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def add_entry(self, entry: ScoreEntry) -> "Turn":
        """Return a copy with the entry appended."""
        return replace(self, entries=self.entries + (entry,))

    def remove_last_entry(self) -> "Turn":
        """Return a copy without the last entry. No-op on an empty turn."""
        if not self.entries:
            return self
        return replace(self, entries=self.entries[:-1])

    def bust(self) -> "Turn":
        return replace(self, is_busted=True)


@dataclass(frozen=True)
class TurnRecord:
    """
    Append-only history entry for a completed turn or a collision.

    Attributes:
        round_number: Round in which the record was made
        player_id: Player the record applies to
        points: Points scored (0 for bust, skip and collision)
        outcome: What happened
        previous_score: Player's total BEFORE this record's effect
    """
    round_number: int
    player_id: str
    points: int
    outcome: TurnOutcome
    previous_score: int

    def __post_init__(self) -> None:
        if self.round_number < 1:
            raise ValueError(f"Round number must be >= 1, got {self.round_number}.")
        if self.points < 0:
            raise ValueError(f"Record points cannot be negative, got {self.points}.")
        if self.previous_score < 0:
            raise ValueError(f"Previous score cannot be negative, got {self.previous_score}.")
