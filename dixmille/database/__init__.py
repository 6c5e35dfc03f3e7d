"""
Dix Mille Database Layer.

Local key-value persistence for the current game and the saved rules.
"""

from dixmille.database.client import create_storage, get_storage
from dixmille.database.game_store import GameStore
from dixmille.database.models import GameRulesSnapshot, GameSnapshot
from dixmille.database.rules_store import RulesStore
from dixmille.database.storage import FileStorage, LocalStorage, MemoryStorage

__all__ = [
    "create_storage",
    "get_storage",
    "FileStorage",
    "GameRulesSnapshot",
    "GameSnapshot",
    "GameStore",
    "LocalStorage",
    "MemoryStorage",
    "RulesStore",
]
