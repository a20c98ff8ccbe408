"""
Shared pytest fixtures for the karasim test suite.

Fixtures:
    no_sleep: Replaces KaraStepper's delay with an instant, recording fake
    fast_config: KaraConfig with zero replay delay
    corridor_game: Game on the small corridor world
    garden_game: Game on the garden world (mushroom reachable)
    mock_kara: MagicMock standing in for a Kara handle
"""
import pytest
from unittest.mock import MagicMock


# =============================================================================
# REPLAY TIMING FIXTURES
# =============================================================================

@pytest.fixture
def no_sleep(monkeypatch) -> list:
    """
    Make every stepped action run without waiting.

    Returns:
        List that receives the delay of every skipped sleep, in order.

    Example:
        >>> def test_paced(no_sleep, corridor_game):
        ...     corridor_game.run(follow_wall, delay=0.3)
        ...     assert no_sleep == [0.3, 0.3, 0.3]
    """
    from karasim.stepper import KaraStepper

    delays = []

    async def fake_sleeper(self) -> None:
        delays.append(self.delay)

    monkeypatch.setattr(KaraStepper, "sleeper", fake_sleeper)
    return delays


# =============================================================================
# GAME FIXTURES
# =============================================================================

@pytest.fixture
def fast_config():
    """KaraConfig with zero replay delay and default capture bound."""
    from karasim.config import KaraConfig
    return KaraConfig(step_delay=0.0)


@pytest.fixture
def corridor_game(fast_config):
    """
    Game on the corridor world.

        TTTTT
        T   T
        T>  T     Kara at (1, 2) facing RIGHT
        TTTTT
    """
    from karasim.game import Game
    from karasim.worlds import CORRIDOR_WORLD
    return Game.from_string_spec(CORRIDOR_WORLD, fast_config)


@pytest.fixture
def garden_game(fast_config):
    """
    Game on the garden world; find_mushroom reaches the mushroom in 6 actions.

        TTTTTTT
        T    MT
        T     T
        T>    T   Kara at (1, 3) facing RIGHT
        TTTTTTT
    """
    from karasim.game import Game
    from karasim.worlds import GARDEN_WORLD
    return Game.from_string_spec(GARDEN_WORLD, fast_config)


# =============================================================================
# UTILITY FIXTURES
# =============================================================================

@pytest.fixture
def mock_kara() -> MagicMock:
    """
    A MagicMock with Kara's sensor and mutator methods.

    Sensors return False by default, so routines see an open, empty world.
    """
    mock = MagicMock()
    for sensor in ("tree_front", "tree_left", "tree_right", "mushroom_front", "on_leaf"):
        getattr(mock, sensor).return_value = False
    return mock
