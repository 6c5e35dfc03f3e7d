"""
Dix Mille - Game Session

Orchestrates player actions against the current game: load the snapshot,
validate, apply the pure engine transition, and persist the result.

Every operation is all-or-nothing. The next Game is computed fully in
memory and written with a single save; a rejected action or a failed save
leaves the stored snapshot untouched.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from typing import Callable, Sequence

from dixmille.config.settings import Settings, get_settings
from dixmille.database.client import create_storage, get_storage
from dixmille.database.game_store import GameStore
from dixmille.database.rules_store import RulesStore
from dixmille.engine.base import GamePhase, GameRules, ScoreEntry, ScoreType, TurnOutcome, preset_label
from dixmille.engine.game import Game
from dixmille.engine.player import Player
from dixmille.engine import validators
from dixmille.errors import raise_for_result

logger = logging.getLogger(__name__)


def generate_id() -> str:
    return str(uuid.uuid4())


def current_time_millis() -> int:
    return int(time.time() * 1000)


class GameSession:
    """Runs game operations against a game store and a rules store.

    Operations are serialized with a re-entrant lock; callers on several
    threads see each operation as a single read-modify-write.

    Args:
        game_store: Store holding the current game.
        rules_store: Store holding the saved rules.
        id_factory: Returns a fresh unique id for games, players, turns and entries.
        clock: Returns the creation timestamp (epoch ms) for new games.
        settings: Application settings; defaults to the cached instance.
    """

    def __init__(
        self,
        game_store: GameStore,
        rules_store: RulesStore,
        *,
        id_factory: Callable[[], str] = generate_id,
        clock: Callable[[], int] = current_time_millis,
        settings: Settings | None = None,
    ) -> None:
        self.game_store = game_store
        self.rules_store = rules_store
        self._new_id = id_factory
        self._clock = clock
        self._settings = settings
        self._lock = threading.RLock()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "GameSession":
        """Build a session on the configured storage backend."""
        storage = create_storage(settings) if settings is not None else get_storage()
        return cls(GameStore(storage), RulesStore(storage), settings=settings)

    @property
    def settings(self) -> Settings:
        return self._settings or get_settings()

    # -- Game lifecycle ----------------------------------------------------

    def create_game(
        self,
        player_names: Sequence[str],
        target_score: int | None = None,
    ) -> Game:
        """
        Start a new game, replacing any current one.

        Loads the saved rules (or defaults) and applies the target score
        override. The first player's turn is started.

        Raises:
            ValidationError: On a bad player count, blank name, or target
            PersistenceError: If the rules cannot be read or the game saved
        """
        with self._lock:
            if target_score is None:
                target_score = self.settings.default_target_score
            raise_for_result(validators.validate_target_score(target_score))

            rules = self.rules_store.load_or_default().with_target_score(target_score)
            raise_for_result(validators.validate_new_game(player_names, rules))

            players = tuple(
                Player(id=self._new_id(), name=name.strip()) for name in player_names
            )
            game = Game(
                id=self._new_id(),
                players=players,
                target_score=target_score,
                created_at=self._clock(),
                rules=rules,
            )
            game = game.start_current_turn(self._new_id())

            self.game_store.save(game)
            logger.info(
                "Created game %s with %d players, target %d",
                game.id, len(players), target_score,
            )
            return game

    def get_current_game(self) -> Game:
        """
        Raises:
            StateNotFoundError: If no game exists yet
        """
        with self._lock:
            return self.game_store.load()

    def has_game(self) -> bool:
        with self._lock:
            return self.game_store.exists()

    def delete_game(self) -> None:
        with self._lock:
            self.game_store.delete()
            logger.info("Deleted current game")

    # -- Turn actions ------------------------------------------------------

    def add_score_entry(
        self,
        points: int,
        is_preset: bool = False,
        label: str | None = None,
        player_id: str | None = None,
    ) -> Game:
        """Add points to the current player's turn."""
        with self._lock:
            game = self.game_store.load()
            raise_for_result(validators.validate_game_active(game))
            raise_for_result(validators.validate_score_entry(points, is_preset))
            self._check_can_act(game, player_id)
            raise_for_result(validators.validate_turn_in_progress(game.current_player))

            if label is None and is_preset:
                label = preset_label(points)
            entry = ScoreEntry(
                id=self._new_id(),
                points=points,
                type=ScoreType.PRESET if is_preset else ScoreType.CUSTOM,
                label=label,
            )
            updated = game.add_entry_to_current_turn(entry)
            logger.debug(
                "Player %s added %d (turn total %d)",
                game.current_player.name, points, updated.current_player.turn_total,
            )
            return self._save(updated)

    def undo_last_entry(self, player_id: str | None = None) -> Game:
        """Remove the last entry from the current player's turn."""
        with self._lock:
            game = self.game_store.load()
            raise_for_result(validators.validate_game_active(game))
            self._check_can_act(game, player_id)
            raise_for_result(validators.validate_has_entries(game.current_player))

            return self._save(game.undo_last_entry())

    def commit_turn(self, player_id: str | None = None) -> Game:
        """
        Bank the current turn and pass play to the next player.

        Resolves score collisions and may trigger the final round or end
        the game.
        """
        with self._lock:
            game = self.game_store.load()
            raise_for_result(validators.validate_game_active(game))
            self._check_can_act(game, player_id)
            player = game.current_player
            result = validators.validate_commit_turn(player, game.rules)
            if result.is_invalid:
                logger.warning("Commit rejected for %s: %s", player.name, result.message)
            raise_for_result(result)

            updated = game.commit_current_turn(self._new_id())
            logger.info(
                "Player %s scored %d (total %d)",
                player.name, player.turn_total, updated.get_player(player.id).total_score,
            )
            self._log_collisions(game, updated)
            self._log_phase_change(game, updated)
            return self._save(updated)

    def bust_turn(self, player_id: str | None = None) -> Game:
        """Record a bust and pass play, applying the bust penalty if due."""
        with self._lock:
            game = self.game_store.load()
            raise_for_result(validators.validate_game_active(game))
            self._check_can_act(game, player_id)

            player = game.current_player
            updated = game.bust_current_turn(self._new_id())
            after = updated.get_player(player.id)
            if after.total_score != player.total_score:
                logger.info(
                    "Bust penalty for %s: %d -> %d",
                    player.name, player.total_score, after.total_score,
                )
            else:
                logger.info("Player %s busted (%d in a row)", player.name, after.consecutive_busts)
            self._log_phase_change(game, updated)
            return self._save(updated)

    def skip_turn(self, player_id: str | None = None) -> Game:
        """Pass play without scoring; does not count as a bust."""
        with self._lock:
            game = self.game_store.load()
            raise_for_result(validators.validate_game_active(game))
            self._check_can_act(game, player_id)

            updated = game.skip_current_turn(self._new_id())
            logger.info("Player %s skipped", game.current_player.name)
            self._log_phase_change(game, updated)
            return self._save(updated)

    def undo_last_turn(self) -> Game:
        """
        Revert the most recent history record.

        Allowed after the game has ended; it may reopen the game.
        """
        with self._lock:
            game = self.game_store.load()
            raise_for_result(validators.validate_has_history(game))

            record = game.last_record
            updated = game.undo_last_turn(self._new_id())
            logger.info(
                "Undid %s for player %s (round %d)",
                record.outcome.value, updated.current_player.name, record.round_number,
            )
            self._log_phase_change(game, updated)
            return self._save(updated)

    # -- Rules -------------------------------------------------------------

    def get_rules(self) -> GameRules:
        """Saved rules, or the defaults."""
        with self._lock:
            return self.rules_store.load_or_default()

    def save_rules(self, rules: GameRules) -> GameRules:
        """Store rules for future games. The current game keeps its own."""
        with self._lock:
            self.rules_store.save(rules)
            logger.info("Saved game rules: %s", rules)
            return rules

    def reset_rules(self) -> GameRules:
        with self._lock:
            self.rules_store.delete()
            return GameRules()

    # -- Helpers -----------------------------------------------------------

    def _check_can_act(self, game: Game, player_id: str | None) -> None:
        acting = player_id if player_id is not None else game.current_player.id
        result = validators.validate_player_can_act(game, acting)
        if result.is_invalid:
            logger.warning("Action rejected: %s", result.message)
        raise_for_result(result)

    def _save(self, game: Game) -> Game:
        self.game_store.save(game)
        return game

    def _log_collisions(self, before: Game, after: Game) -> None:
        for record in after.turn_history[len(before.turn_history):]:
            if record.outcome == TurnOutcome.COLLISION:
                victim = after.get_player(record.player_id)
                logger.info(
                    "Collision at %d: %s knocked back to %d",
                    record.previous_score, victim.name, victim.total_score,
                )

    def _log_phase_change(self, before: Game, after: Game) -> None:
        if before.game_phase == after.game_phase:
            return
        logger.info(
            "Game %s phase %s -> %s",
            after.id, before.game_phase.value, after.game_phase.value,
        )
        if after.game_phase == GamePhase.ENDED and after.winner is not None:
            logger.info("Game %s won by %s", after.id, after.winner.name)
