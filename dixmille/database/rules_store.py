"""
Dix Mille - Rules Store

Save/load/delete for the player's preferred GameRules. A missing
snapshot means "use the defaults".
"""

import logging

from dixmille.database.models import GameRulesSnapshot
from dixmille.database.storage import LocalStorage
from dixmille.engine.base import GameRules
from dixmille.errors import PersistenceError, StateNotFoundError

logger = logging.getLogger(__name__)


class RulesStore:
    """Persists GameRules as JSON under a fixed key."""

    KEY = "game_rules"

    def __init__(self, storage: LocalStorage) -> None:
        self.storage = storage

    def save(self, rules: GameRules) -> None:
        payload = GameRulesSnapshot.from_rules(rules).model_dump_json(by_alias=True, indent=2)
        try:
            self.storage.save_string(self.KEY, payload)
        except OSError as exc:
            logger.exception("Failed to save game rules")
            raise PersistenceError("Could not save game rules") from exc

    def load(self) -> GameRules:
        """
        Read the saved rules.

        Raises:
            StateNotFoundError: If no rules have been saved
            PersistenceError: If the store fails or the snapshot is corrupt
        """
        try:
            payload = self.storage.get_string(self.KEY)
        except OSError as exc:
            logger.exception("Failed to read game rules")
            raise PersistenceError("Could not read game rules") from exc

        if payload is None:
            raise StateNotFoundError("No saved rules found")

        try:
            return GameRulesSnapshot.model_validate_json(payload).to_rules()
        except ValueError as exc:
            logger.exception("Stored rules snapshot is corrupt")
            raise PersistenceError("Stored rules snapshot is corrupt") from exc

    def load_or_default(self) -> GameRules:
        """Saved rules, or the defaults when none are saved."""
        try:
            return self.load()
        except StateNotFoundError:
            logger.debug("No saved rules, using defaults")
            return GameRules()

    def delete(self) -> None:
        try:
            self.storage.remove(self.KEY)
        except OSError as exc:
            logger.exception("Failed to delete game rules")
            raise PersistenceError("Could not delete game rules") from exc

    def exists(self) -> bool:
        try:
            return self.storage.get_string(self.KEY) is not None
        except OSError as exc:
            logger.exception("Failed to read game rules")
            raise PersistenceError("Could not read game rules") from exc
