"""
Dix Mille - Snapshot Models

Pydantic models that mirror the stored game and rules snapshots. Field
names are serialized in camelCase so the stored JSON matches the game's
documented shape (targetScore, turnHistory, ...).
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from dixmille.engine.base import (
    GamePhase,
    GameRules,
    ScoreEntry,
    ScoreType,
    Turn,
    TurnOutcome,
    TurnRecord,
)
from dixmille.engine.game import Game
from dixmille.engine.player import Player


class SnapshotModel(BaseModel):
    """Base config shared by every snapshot model."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class GameRulesSnapshot(SnapshotModel):
    """Mirrors GameRules."""

    target_score: int = 10_000
    entry_minimum_score: int = 500
    consecutive_busts_for_penalty: int = 3
    min_players: int = 2
    max_players: int = 6
    enable_bust_penalty: bool = True
    enable_final_round: bool = True

    @classmethod
    def from_rules(cls, rules: GameRules) -> "GameRulesSnapshot":
        return cls(
            target_score=rules.target_score,
            entry_minimum_score=rules.entry_minimum_score,
            consecutive_busts_for_penalty=rules.consecutive_busts_for_penalty,
            min_players=rules.min_players,
            max_players=rules.max_players,
            enable_bust_penalty=rules.enable_bust_penalty,
            enable_final_round=rules.enable_final_round,
        )

    def to_rules(self) -> GameRules:
        return GameRules(**self.model_dump())


class ScoreEntrySnapshot(SnapshotModel):
    """Mirrors ScoreEntry."""

    id: str
    points: int
    type: ScoreType = ScoreType.PRESET
    label: str | None = None


class TurnSnapshot(SnapshotModel):
    """Mirrors Turn."""

    id: str
    entries: list[ScoreEntrySnapshot] = Field(default_factory=list)
    is_busted: bool = False

    @classmethod
    def from_turn(cls, turn: Turn) -> "TurnSnapshot":
        return cls(
            id=turn.id,
            entries=[
                ScoreEntrySnapshot(id=e.id, points=e.points, type=e.type, label=e.label)
                for e in turn.entries
            ],
            is_busted=turn.is_busted,
        )

    def to_turn(self) -> Turn:
        return Turn(
            id=self.id,
            entries=tuple(
                ScoreEntry(id=e.id, points=e.points, type=e.type, label=e.label)
                for e in self.entries
            ),
            is_busted=self.is_busted,
        )


class PlayerSnapshot(SnapshotModel):
    """Mirrors Player."""

    id: str
    name: str
    total_score: int = 0
    has_entered_game: bool = False
    current_turn: TurnSnapshot | None = None
    has_played_final_round: bool = False
    consecutive_busts: int = 0

    @classmethod
    def from_player(cls, player: Player) -> "PlayerSnapshot":
        return cls(
            id=player.id,
            name=player.name,
            total_score=player.total_score,
            has_entered_game=player.has_entered_game,
            current_turn=(
                TurnSnapshot.from_turn(player.current_turn)
                if player.current_turn is not None
                else None
            ),
            has_played_final_round=player.has_played_final_round,
            consecutive_busts=player.consecutive_busts,
        )

    def to_player(self) -> Player:
        return Player(
            id=self.id,
            name=self.name,
            total_score=self.total_score,
            has_entered_game=self.has_entered_game,
            current_turn=self.current_turn.to_turn() if self.current_turn else None,
            has_played_final_round=self.has_played_final_round,
            consecutive_busts=self.consecutive_busts,
        )


class TurnRecordSnapshot(SnapshotModel):
    """Mirrors TurnRecord."""

    round_number: int
    player_id: str
    points: int
    outcome: TurnOutcome
    previous_score: int


class GameSnapshot(SnapshotModel):
    """Mirrors Game. This is the unit written to the game store."""

    id: str
    players: list[PlayerSnapshot]
    target_score: int = 10_000
    current_player_index: int = 0
    game_phase: GamePhase = GamePhase.IN_PROGRESS
    triggering_player_id: str | None = None
    created_at: int
    turn_history: list[TurnRecordSnapshot] = Field(default_factory=list)
    round_number: int = 1
    rules: GameRulesSnapshot = Field(default_factory=GameRulesSnapshot)

    @classmethod
    def from_game(cls, game: Game) -> "GameSnapshot":
        return cls(
            id=game.id,
            players=[PlayerSnapshot.from_player(p) for p in game.players],
            target_score=game.target_score,
            current_player_index=game.current_player_index,
            game_phase=game.game_phase,
            triggering_player_id=game.triggering_player_id,
            created_at=game.created_at,
            turn_history=[
                TurnRecordSnapshot(
                    round_number=r.round_number,
                    player_id=r.player_id,
                    points=r.points,
                    outcome=r.outcome,
                    previous_score=r.previous_score,
                )
                for r in game.turn_history
            ],
            round_number=game.round_number,
            rules=GameRulesSnapshot.from_rules(game.rules),
        )

    def to_game(self) -> Game:
        """Rebuild the engine Game. Raises ValueError on broken invariants."""
        return Game(
            id=self.id,
            players=tuple(p.to_player() for p in self.players),
            target_score=self.target_score,
            current_player_index=self.current_player_index,
            game_phase=self.game_phase,
            triggering_player_id=self.triggering_player_id,
            created_at=self.created_at,
            turn_history=tuple(
                TurnRecord(
                    round_number=r.round_number,
                    player_id=r.player_id,
                    points=r.points,
                    outcome=r.outcome,
                    previous_score=r.previous_score,
                )
                for r in self.turn_history
            ),
            round_number=self.round_number,
            rules=self.rules.to_rules(),
        )
