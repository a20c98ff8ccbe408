"""
Configuration dataclass for karasim.

All tunable settings (which world to load, replay pacing, the capture bound,
rendering and the Gymnasium environment's reward shaping) live in a single
KaraConfig dataclass.

Key Features:
    - Type-safe configuration using Python dataclasses
    - Validation of parameters in __post_init__
    - from_dict() ignores unknown keys, from_yaml() reads YAML config files

Architecture Role:
    KaraConfig is used by:
    - game.py: max_commands for capture, step_delay for replay
    - env.py: world, max_steps and reward settings
    - __main__.py: built from CLI flags or a --config YAML file

Example Usage:
    >>> config = KaraConfig(world="demo", step_delay=0.2)
    >>> config.max_commands
    50
    >>> config = KaraConfig.from_dict({"step_delay": 0.1, "unknown": 1})

Dependencies:
    - dataclasses: For the dataclass decorator
    - pathlib: For config file paths
    - pyyaml: For config file parsing
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from karasim.actions import MAX_COMMANDS
from karasim.stepper import DEFAULT_DELAY


@dataclass
class KaraConfig:
    """
    Configuration for a karasim game and environment.

    Attributes:
        world (str): World registry name ("empty", "demo", ...) or a path to a
            world spec text file.
        step_delay (float): Seconds between two replayed actions.
        max_commands (int): Upper bound on actions recorded per capture run.
        cell_size (int): Pixel size of one cell in RGB renders.
        max_steps (int): Steps per KaraEnv episode before truncation.
        reward (str): Reward function name for KaraEnv ("goal", "exploration").
        goal_reward (float): Bonus when a mushroom comes into view ahead.
        step_penalty (float): Cost charged on every environment step.
        invalid_move_penalty (float): Cost of bumping into a tree or the edge.
        explore_weight (float): Bonus per newly visited cell.
    """

    # =========================================================================
    # WORLD
    # =========================================================================

    # Registry name (see worlds.WORLDS) or a path to a UTF-8 world spec file
    world: str = "garden"

    # =========================================================================
    # CAPTURE / REPLAY
    # =========================================================================

    # Delay before each replayed action, in seconds
    step_delay: float = DEFAULT_DELAY

    # Bound on the capture log; protects against routines that never stop moving
    max_commands: int = MAX_COMMANDS

    # =========================================================================
    # RENDERING
    # =========================================================================

    cell_size: int = 50

    # =========================================================================
    # ENVIRONMENT (KaraEnv)
    # =========================================================================

    max_steps: int = 500
    reward: str = "goal"
    goal_reward: float = 1.0
    step_penalty: float = 0.01
    invalid_move_penalty: float = 0.1
    explore_weight: float = 0.05

    def __post_init__(self) -> None:
        """
        Validate configuration after initialization.

        Raises:
            ValueError: If step_delay < 0, max_commands < 1, cell_size < 1 or
                max_steps < 1.
        """
        if isinstance(self.world, Path):
            self.world = str(self.world)

        if self.step_delay < 0:
            raise ValueError(f"step_delay must be >= 0, got {self.step_delay}")

        if self.max_commands < 1:
            raise ValueError(
                f"max_commands must be >= 1, got {self.max_commands}. "
                "A routine must be allowed to record at least one action."
            )

        if self.cell_size < 1:
            raise ValueError(f"cell_size must be >= 1, got {self.cell_size}")

        if self.max_steps < 1:
            raise ValueError(f"max_steps must be >= 1, got {self.max_steps}")

    @classmethod
    def from_dict(cls, d: dict) -> KaraConfig:
        """
        Create a KaraConfig from a dictionary, ignoring unknown keys.

        Example:
            >>> KaraConfig.from_dict({"max_commands": 10, "colour": "red"}).max_commands
            10
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)

    @classmethod
    def from_yaml(cls, path: str | Path) -> KaraConfig:
        """
        Load a KaraConfig from a YAML file.

        The values may sit at the top level or under a `karasim:` key:

            karasim:
              world: demo
              step_delay: 0.2

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the document is not a mapping.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        section = data.get("karasim", data)
        if not isinstance(section, dict):
            raise ValueError(f"'karasim' section of {path} must be a mapping")
        return cls.from_dict(section)
