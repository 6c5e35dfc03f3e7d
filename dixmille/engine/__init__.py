"""
Dix Mille Game Engine.

Pure Python rules engine with zero storage/UI dependencies.
Handles turns, scoring, the entry rule, bust penalties, score collisions,
the final round, and undo.
"""

from dixmille.engine.base import (
    PRESET_SCORES,
    VALID_PRESET_VALUES,
    GamePhase,
    GameRules,
    PresetScore,
    ScoreEntry,
    ScoreType,
    Turn,
    TurnOutcome,
    TurnRecord,
)
from dixmille.engine.game import Game
from dixmille.engine.player import Player
from dixmille.engine.validators import ValidationErrorCode, ValidationResult

__all__ = [
    # Data Classes
    "Game",
    "GameRules",
    "Player",
    "PresetScore",
    "ScoreEntry",
    "Turn",
    "TurnRecord",
    "ValidationResult",
    # Enums
    "GamePhase",
    "ScoreType",
    "TurnOutcome",
    "ValidationErrorCode",
    # Constants
    "PRESET_SCORES",
    "VALID_PRESET_VALUES",
]
