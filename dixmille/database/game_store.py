"""
Dix Mille - Game Store

Save/load/delete for the single current game snapshot.
"""

import logging

from dixmille.database.models import GameSnapshot
from dixmille.database.storage import LocalStorage
from dixmille.engine.game import Game
from dixmille.errors import PersistenceError, StateNotFoundError

logger = logging.getLogger(__name__)


class GameStore:
    """Persists the current game as JSON under a fixed key."""

    KEY = "current_game"

    def __init__(self, storage: LocalStorage) -> None:
        self.storage = storage

    def save(self, game: Game) -> None:
        """Write the game snapshot, replacing any previous one."""
        payload = GameSnapshot.from_game(game).model_dump_json(by_alias=True, indent=2)
        try:
            self.storage.save_string(self.KEY, payload)
        except OSError as exc:
            logger.exception("Failed to save game %s", game.id)
            raise PersistenceError(f"Could not save game {game.id}") from exc

    def load(self) -> Game:
        """
        Read the current game.

        Raises:
            StateNotFoundError: If no game has been saved
            PersistenceError: If the store fails or the snapshot is corrupt
        """
        try:
            payload = self.storage.get_string(self.KEY)
        except OSError as exc:
            logger.exception("Failed to read current game")
            raise PersistenceError("Could not read current game") from exc

        if payload is None:
            raise StateNotFoundError("No game found")

        try:
            return GameSnapshot.model_validate_json(payload).to_game()
        except ValueError as exc:  # pydantic.ValidationError is a ValueError
            logger.exception("Stored game snapshot is corrupt")
            raise PersistenceError("Stored game snapshot is corrupt") from exc

    def delete(self) -> None:
        try:
            self.storage.remove(self.KEY)
        except OSError as exc:
            logger.exception("Failed to delete current game")
            raise PersistenceError("Could not delete current game") from exc

    def exists(self) -> bool:
        try:
            return self.storage.get_string(self.KEY) is not None
        except OSError as exc:
            logger.exception("Failed to read current game")
            raise PersistenceError("Could not read current game") from exc
