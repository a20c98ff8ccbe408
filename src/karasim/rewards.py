"""
Reward functions for KaraEnv.

Reward functions follow a Protocol, so any object with calculate(), reset()
and get_info() can be plugged into the environment.

Architecture Role:
    env.py (step) → KaraState.from_kara() → RewardFunction.calculate() → reward

Available Reward Functions:
    - GoalReward: Bonus once a mushroom is straight ahead, a small cost per
      step and a penalty for bumping into trees or the grid edge
    - ExplorationReward: Bonus for each newly visited cell

Usage:
    reward_fn = create_reward("goal", goal_reward=1.0, step_penalty=0.01)
    state = KaraState.from_kara(game.kara, step_count, invalid_move=False)
    reward = reward_fn.calculate(state, prev_state)

Dependencies:
    - dataclasses: For state snapshots and reward bookkeeping
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from karasim.geometry import Directions

if TYPE_CHECKING:
    from karasim.kara import Kara


# =============================================================================
# STATE SNAPSHOT
# =============================================================================


@dataclass(frozen=True)
class KaraState:
    """
    Snapshot of Kara's situation after one environment step.

    Attributes:
        x: Column of Kara's cell.
        y: Row of Kara's cell (increases downward).
        direction: Index of the facing in Directions.ALL.
        mushroom_front: Whether a mushroom is directly ahead.
        on_leaf: Whether Kara stands on a clover leaf.
        invalid_move: Whether the step that led here was a rejected move.
        step_count: Environment steps taken this episode.
    """

    x: int = 0
    y: int = 0
    direction: int = 0
    mushroom_front: bool = False
    on_leaf: bool = False
    invalid_move: bool = False
    step_count: int = 0

    @classmethod
    def from_kara(cls, kara: Kara, step_count: int = 0, invalid_move: bool = False) -> KaraState:
        return cls(
            x=kara.coords.x,
            y=kara.coords.y,
            direction=Directions.index(kara.direction),
            mushroom_front=kara.mushroom_front(),
            on_leaf=kara.on_leaf(),
            invalid_move=invalid_move,
            step_count=step_count,
        )


# =============================================================================
# PROTOCOL
# =============================================================================


class RewardFunction(Protocol):
    """
    Interface for KaraEnv reward functions.

    calculate() is called once per step, reset() once per episode, and
    get_info() after each calculate() to fill the step's info dict.
    """

    def calculate(self, state: KaraState, prev_state: KaraState | None) -> float:
        """
        Calculate the reward for transitioning to `state`.

        Args:
            state: Kara's state after the action.
            prev_state: State before the action, or None on the first step.
        """
        ...

    def reset(self) -> None:
        """Clear per-episode bookkeeping."""
        ...

    def get_info(self) -> dict:
        """Reward breakdown of the last calculate() call."""
        ...


# =============================================================================
# IMPLEMENTATIONS
# =============================================================================


@dataclass
class GoalReward:
    """
    Goal-directed reward: find the mushroom in as few steps as possible.

    Components:
        - goal: +goal_reward on the step a mushroom comes into view ahead
        - step: -step_penalty on every step
        - invalid: -invalid_move_penalty for a rejected move

    Example:
        >>> reward_fn = GoalReward(goal_reward=1.0, step_penalty=0.01)
        >>> reward_fn.calculate(KaraState(mushroom_front=True), None)
        0.99
    """

    goal_reward: float = 1.0
    step_penalty: float = 0.01
    invalid_move_penalty: float = 0.1

    last_rewards: dict = field(default_factory=dict)
    goals_reached: int = 0

    def calculate(self, state: KaraState, prev_state: KaraState | None) -> float:
        rewards = {"goal": 0.0, "step": -self.step_penalty, "invalid": 0.0}

        # Only the transition into view counts, not standing in front of it
        if state.mushroom_front and not (prev_state is not None and prev_state.mushroom_front):
            rewards["goal"] = self.goal_reward
            self.goals_reached += 1

        if state.invalid_move:
            rewards["invalid"] = -self.invalid_move_penalty

        self.last_rewards = rewards
        return sum(rewards.values())

    def reset(self) -> None:
        self.last_rewards = {}
        self.goals_reached = 0

    def get_info(self) -> dict:
        return {
            "reward_breakdown": self.last_rewards.copy(),
            "goals_reached": self.goals_reached,
        }


@dataclass
class ExplorationReward:
    """
    Curiosity reward: +explore_weight for every cell visited for the first time
    in the episode. Rejected moves still cost invalid_move_penalty.
    """

    explore_weight: float = 0.05
    invalid_move_penalty: float = 0.1

    visited_cells: set = field(default_factory=set)
    last_rewards: dict = field(default_factory=dict)

    def calculate(self, state: KaraState, prev_state: KaraState | None) -> float:
        rewards = {"explore": 0.0, "invalid": 0.0}

        cell = (state.x, state.y)
        if cell not in self.visited_cells:
            self.visited_cells.add(cell)
            rewards["explore"] = self.explore_weight

        if state.invalid_move:
            rewards["invalid"] = -self.invalid_move_penalty

        self.last_rewards = rewards
        return sum(rewards.values())

    def reset(self) -> None:
        self.visited_cells = set()
        self.last_rewards = {}

    def get_info(self) -> dict:
        return {
            "reward_breakdown": self.last_rewards.copy(),
            "unique_cells": len(self.visited_cells),
        }


# =============================================================================
# FACTORY
# =============================================================================


REWARD_FUNCTIONS: dict[str, type] = {
    "goal": GoalReward,
    "exploration": ExplorationReward,
}


def create_reward(
    name: str = "goal",
    goal_reward: float = 1.0,
    step_penalty: float = 0.01,
    invalid_move_penalty: float = 0.1,
    explore_weight: float = 0.05,
) -> RewardFunction:
    """
    Create a reward function by name.

    Args:
        name: "goal" or "exploration".
        goal_reward: Bonus for a mushroom coming into view (goal only).
        step_penalty: Cost per step (goal only).
        invalid_move_penalty: Cost of a rejected move (both).
        explore_weight: Bonus per newly visited cell (exploration only).

    Raises:
        ValueError: If the reward name is not recognized.
    """
    if name not in REWARD_FUNCTIONS:
        available = list(REWARD_FUNCTIONS.keys())
        raise ValueError(f"Unknown reward: {name}. Available: {available}")

    if name == "goal":
        return GoalReward(
            goal_reward=goal_reward,
            step_penalty=step_penalty,
            invalid_move_penalty=invalid_move_penalty,
        )
    return ExplorationReward(
        explore_weight=explore_weight, invalid_move_penalty=invalid_move_penalty
    )
