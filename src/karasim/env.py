"""
Gymnasium environment around a Kara game.

KaraEnv exposes the same world the record-then-replay engine runs on as a
step-wise environment: one action per step, applied directly to the live
Kara. It is the programmatic twin of manual (keyboard) control, and lets
learning agents or scripted tests drive Kara one decision at a time.

Observation Space Components:
    - sensors: (5,) binary (tree front, tree left, tree right,
      mushroom front, on leaf)
    - position: (2,) Kara's (x, y) cell
    - direction: Discrete(4), index in Directions.ALL (→ ↑ ← ↓)
    - grid: (height, width) cell type codes, see CellType.code

Action Space:
    Discrete(5) with actions:
    0=MOVE, 1=TURN_LEFT, 2=TURN_RIGHT, 3=PUT_LEAF, 4=REMOVE_LEAF

Episode End:
    - terminated: a mushroom is directly ahead of Kara
    - truncated: config.max_steps steps taken

Usage:
    >>> from karasim.env import KaraEnv
    >>> env = KaraEnv(KaraConfig(world="garden"))
    >>> obs, info = env.reset()
    >>> obs, reward, terminated, truncated, info = env.step(0)  # MOVE

Dependencies:
    - gymnasium: For the Gym environment interface
    - numpy: For observation arrays
    - karasim.game: The world being driven
    - karasim.rewards: For reward calculation
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from karasim.actions import Action
from karasim.cells import CellType
from karasim.config import KaraConfig
from karasim.errors import InvalidMoveError
from karasim.game import Game
from karasim.geometry import Directions
from karasim.rewards import KaraState, RewardFunction, create_reward
from karasim.worlds import load_world

logger = logging.getLogger(__name__)


class KaraEnv(gym.Env):
    """
    Gymnasium environment in which each step is one Kara action.

    Attributes:
        config: World, episode length and reward settings.
        reward_fn: Reward function in use.
        render_mode: 'ansi', 'rgb_array' or None.
        game: The Game of the current episode.
        step_count: Steps taken in the current episode.
    """

    metadata = {"render_modes": ["ansi", "rgb_array"], "render_fps": 2}

    def __init__(
        self,
        config: KaraConfig | None = None,
        reward_fn: RewardFunction | str | None = None,
        render_mode: str | None = None,
    ):
        """
        Initialize the environment.

        Args:
            config: Settings; defaults to KaraConfig().
            reward_fn: A reward name ('goal', 'exploration') or a RewardFunction
                instance. Defaults to config.reward.
            render_mode: 'ansi' for text frames, 'rgb_array' for images.

        Raises:
            ValueError: On an unsupported render mode or unknown reward name.
            FileNotFoundError: If config.world names no known world or file.
        """
        super().__init__()

        if render_mode is not None and render_mode not in self.metadata["render_modes"]:
            raise ValueError(f"Unsupported render_mode: {render_mode}")

        self.config = config or KaraConfig()
        self.render_mode = render_mode

        if reward_fn is None or isinstance(reward_fn, str):
            self.reward_fn = create_reward(
                reward_fn or self.config.reward,
                goal_reward=self.config.goal_reward,
                step_penalty=self.config.step_penalty,
                invalid_move_penalty=self.config.invalid_move_penalty,
                explore_weight=self.config.explore_weight,
            )
        else:
            self.reward_fn = reward_fn

        # The world text is read once; every reset decodes it afresh
        self._world_spec = load_world(self.config.world)
        self.game = Game.from_string_spec(self._world_spec, self.config)

        self.step_count = 0
        self.prev_state: KaraState | None = None

        self._define_spaces()

    def _define_spaces(self) -> None:
        height, width = self.game.grid.height, self.game.grid.width
        self.observation_space = spaces.Dict(
            {
                "sensors": spaces.MultiBinary(5),
                "position": spaces.Box(
                    low=0,
                    high=max(width, height) - 1,
                    shape=(2,),
                    dtype=np.int64,
                ),
                "direction": spaces.Discrete(len(Directions.ALL)),
                "grid": spaces.Box(
                    low=0,
                    high=len(CellType) - 1,
                    shape=(height, width),
                    dtype=np.uint8,
                ),
            }
        )
        self.action_space = spaces.Discrete(len(Action))

    # -------------------------------------------------------------------------
    # Gymnasium API
    # -------------------------------------------------------------------------

    def reset(
        self,
        *,
        seed: int | None = None,
        options: dict | None = None,
    ) -> tuple[dict[str, np.ndarray], dict[str, Any]]:
        """
        Rebuild the world from its spec and start a new episode.

        The world is deterministic; `seed` and `options` are accepted for API
        compliance only.
        """
        super().reset(seed=seed)

        self.game = Game.from_string_spec(self._world_spec, self.config)
        self.step_count = 0
        self.prev_state = None
        self.reward_fn.reset()

        return self._get_observation(), self._get_info(invalid_move=False)

    def step(
        self, action: int
    ) -> tuple[dict[str, np.ndarray], float, bool, bool, dict[str, Any]]:
        """
        Apply one action to the live Kara.

        A move into a tree or off the grid leaves the world unchanged; it is
        reported as info["invalid_move"] and penalised by the reward function.

        Raises:
            ValueError: If `action` is not a valid action index.
        """
        action = Action(int(action))

        invalid_move = False
        try:
            self.game.kara.perform(action)
        except InvalidMoveError as e:
            logger.debug("step %d: %s", self.step_count, e)
            invalid_move = True

        self.step_count += 1

        state = KaraState.from_kara(self.game.kara, self.step_count, invalid_move)
        reward = self.reward_fn.calculate(state, self.prev_state)
        self.prev_state = state

        terminated = state.mushroom_front
        truncated = not terminated and self.step_count >= self.config.max_steps

        return self._get_observation(), reward, terminated, truncated, self._get_info(invalid_move)

    def _get_observation(self) -> dict[str, np.ndarray]:
        kara = self.game.kara
        return {
            "sensors": np.array(kara.sensors(), dtype=np.int8),
            "position": np.array([kara.coords.x, kara.coords.y], dtype=np.int64),
            "direction": Directions.index(kara.direction),
            "grid": self.game.grid.to_array(),
        }

    def _get_info(self, invalid_move: bool) -> dict[str, Any]:
        kara = self.game.kara
        return {
            "step": self.step_count,
            "position": (kara.coords.x, kara.coords.y),
            "direction": kara.direction.name,
            "invalid_move": invalid_move,
            "leaves": self.game.grid.count(CellType.CLOVER),
            **self.reward_fn.get_info(),
        }

    def render(self) -> np.ndarray | str | None:
        """
        Render the current frame.

        Returns:
            Text for render_mode='ansi', an RGB array for 'rgb_array',
            None otherwise.
        """
        if self.render_mode == "ansi":
            return self.game.render_text()
        elif self.render_mode == "rgb_array":
            return self.game.draw(self.config.cell_size)
        return None


def make_env(config: KaraConfig | None = None, seed: int = 0, rank: int = 0) -> Callable[[], gym.Env]:
    """
    Factory for vectorized setups (gymnasium.vector.SyncVectorEnv and friends).

    Example:
        >>> envs = gym.vector.SyncVectorEnv([make_env(rank=i) for i in range(4)])
    """

    def _init() -> gym.Env:
        env = KaraEnv(config=config)
        env.reset(seed=seed + rank)
        return env

    return _init
