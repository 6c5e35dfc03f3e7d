"""
Dix Mille - Test Configuration and Fixtures

Common fixtures for all test modules. Game builders live in tests.builders.
"""

import pytest

from dixmille.database.game_store import GameStore
from dixmille.database.rules_store import RulesStore
from dixmille.database.storage import MemoryStorage
from dixmille.engine.game import Game
from dixmille.session import GameSession
from tests.builders import FIXED_TIME, SequentialIds, make_game


# =============================================================================
# DETERMINISTIC COLLABORATORS
# =============================================================================

@pytest.fixture
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture
def clock():
    return lambda: FIXED_TIME


# =============================================================================
# STORAGE AND SESSION FIXTURES
# =============================================================================

@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def game_store(storage) -> GameStore:
    return GameStore(storage)


@pytest.fixture
def rules_store(storage) -> RulesStore:
    return RulesStore(storage)


@pytest.fixture
def session(game_store, rules_store, ids, clock) -> GameSession:
    return GameSession(game_store, rules_store, id_factory=ids, clock=clock)


# =============================================================================
# GAME FIXTURES
# =============================================================================

@pytest.fixture
def three_player_game() -> Game:
    """Alice, Bob, Carol with no entry minimum; Alice to play."""
    return make_game()
