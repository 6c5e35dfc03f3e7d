"""
Dix Mille.

Rules engine for the Dix Mille dice scoring game: turn tracking, the entry
rule, bust penalties, score collisions, the final round, and undo.
"""

from dixmille.engine import Game, GamePhase, GameRules, Player, TurnOutcome
from dixmille.errors import (
    DixMilleError,
    PersistenceError,
    StateNotFoundError,
    ValidationError,
)
from dixmille.session import GameSession

__all__ = [
    "DixMilleError",
    "Game",
    "GamePhase",
    "GameRules",
    "GameSession",
    "PersistenceError",
    "Player",
    "StateNotFoundError",
    "TurnOutcome",
    "ValidationError",
]
