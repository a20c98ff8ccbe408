"""
A Kara game: one grid, one Kara, and the record-then-replay run protocol.

The Game owns the canonical (visible) grid and Kara. Running a control
routine happens in two strictly sequential phases:

    1. CAPTURE  The routine runs synchronously against a KaraRecorder that
                wraps a deep copy of the world. Every mutator call is applied
                to the copy and appended to a bounded ActionLog.
    2. REPLAY   The frozen log is driven, front to back, through a
                KaraStepper around the live Kara. Each action waits for the
                step delay and is awaited before the next one starts, so
                observers (a render loop) see the run unfold step by step.

    routine ──► KaraRecorder(copy) ──► ActionLog ──► KaraStepper(live Kara)

Failure Policy:
    - InvalidMoveError during capture is logged and swallowed. The failing
      move is already in the log, so replay raises the same error, visibly,
      when it reaches that step.
    - LogOverflowError during capture is logged and ends capture; the
      actions recorded up to the bound are still replayed.
    - Any other exception from the routine is a bug in the routine and
      propagates unchanged.
    - Errors during replay propagate to whoever awaits the replay. Actions
      applied before the failure stay applied.

Determinism:
    The protocol assumes a deterministic world: the same starting state and
    the same routine always produce the same log, and replaying the log on
    the starting state reproduces the state the capture ended in.

Dependencies:
    - asyncio: For the replay phase
    - numpy: For the RGB draw hook
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any

import numpy as np

from karasim.actions import Action, ActionLog, dispatch
from karasim.config import KaraConfig
from karasim.errors import (
    GameBusyError,
    InvalidMoveError,
    LogOverflowError,
    MalformedSpecError,
)
from karasim.geometry import Coordinates, Direction
from karasim.grid import Grid
from karasim.kara import Kara
from karasim.recorder import KaraRecorder
from karasim.render import render_rgb, render_text
from karasim.routines import find_mushroom
from karasim.stepper import KaraStepper
from karasim.worlds import EMPTY_GRID_SPEC

logger = logging.getLogger(__name__)

Routine = Callable[[Any], None]


class GamePhase(Enum):
    """Where a Game is in its run protocol."""

    IDLE = "idle"
    CAPTURE = "capture"
    REPLAY = "replay"


class Key(Enum):
    """Keys understood by the manual control handler."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


# =============================================================================
# GAME
# =============================================================================


class Game:
    """
    A Kara game including a game grid and one Kara beetle.

    Attributes:
        grid: The live grid that renderers observe.
        kara: The live Kara.
        config: Settings for capture bound and replay delay.
        recorder: The recorder of the latest (or upcoming) capture run.
        phase: Current GamePhase.

    Example:
        >>> game = Game.from_string_spec(WORLDS["garden"])
        >>> log = game.run(find_mushroom, delay=0)
        >>> game.kara.mushroom_front()
        True
    """

    @classmethod
    def from_string_spec(
        cls, spec: str = EMPTY_GRID_SPEC, config: KaraConfig | None = None
    ) -> Game:
        """
        Create a new game from a grid spec.

        Kara's start cell is always EMPTY afterwards, so a game cannot start
        with Kara standing on a leaf or a mushroom.

        Raises:
            MalformedSpecError: If the world spec is ragged or offers no cell for Kara.
        """
        grid = Grid.from_string_spec(spec)
        kara = grid.find_kara()
        if kara is None:
            raise MalformedSpecError("grid spec has neither a Kara start glyph nor an empty cell")
        return cls(grid, kara, config=config)

    def __init__(self, grid: Grid, kara: Kara, config: KaraConfig | None = None) -> None:
        if kara.grid is not grid:
            raise ValueError("kara must be bound to the game's grid")
        self.grid = grid
        self.kara = kara
        self.config = config or KaraConfig()
        self.phase = GamePhase.IDLE
        self.recorder = self._new_recorder()

    def _new_recorder(self) -> KaraRecorder:
        grid_copy = self.grid.copy()
        return KaraRecorder(self.kara.copy(grid_copy), max_commands=self.config.max_commands)

    def get_recorder(self) -> KaraRecorder:
        return self.recorder

    # -------------------------------------------------------------------------
    # Capture
    # -------------------------------------------------------------------------

    def capture(self, routine: Routine) -> ActionLog:
        """
        Run `routine` against a private copy of the world and return its log.

        The recorder is rebuilt from the current live state, so repeated runs
        always start from what is visible now.

        Raises:
            GameBusyError: If a run is already in progress.
        """
        self._ensure_idle()
        self.phase = GamePhase.CAPTURE
        try:
            self.recorder = self._new_recorder()
            try:
                routine(self.recorder)
            except InvalidMoveError as e:
                # Recorded already; replay raises it again at the same step
                logger.warning("capture stopped after %d actions: %s", len(self.recorder.commands), e)
            except LogOverflowError as e:
                logger.error("capture aborted: %s", e)
            return self.recorder.commands.freeze()
        finally:
            self.phase = GamePhase.IDLE

    # -------------------------------------------------------------------------
    # Replay
    # -------------------------------------------------------------------------

    async def replay(self, commands: Iterable[Action], delay: float | None = None) -> None:
        """
        Apply `commands` to the live Kara, one per `delay` seconds, in order.

        Raises:
            GameBusyError: If a run is already in progress.
            InvalidMoveError: When a replayed move is illegal on the live world.
        """
        self._ensure_idle()
        delay = self.config.step_delay if delay is None else delay
        stepper = KaraStepper(self.kara, delay)
        self.phase = GamePhase.REPLAY
        try:
            for action in commands:
                await dispatch(stepper, action)
        finally:
            self.phase = GamePhase.IDLE

    async def execute_kara(
        self, client_function: Routine = find_mushroom, delay: float | None = None
    ) -> ActionLog:
        """
        Capture the actions of `client_function`, then replay them with delay.

        This assumes a deterministic world where the same commands executed
        in the same order always have the same outcome.

        Returns:
            The frozen ActionLog that was replayed.
        """
        commands = self.capture(client_function)
        logger.info("captured %d actions: %s", len(commands), commands.labels())
        await self.replay(commands, delay)
        return commands

    def run(self, client_function: Routine = find_mushroom, delay: float | None = None) -> ActionLog:
        """Blocking variant of execute_kara for callers without an event loop."""
        return asyncio.run(self.execute_kara(client_function, delay))

    def _ensure_idle(self) -> None:
        if self.phase is not GamePhase.IDLE:
            raise GameBusyError(f"game is busy ({self.phase.value})")

    # -------------------------------------------------------------------------
    # Manual control and presentation
    # -------------------------------------------------------------------------

    def key_pressed(self, key: Key | str) -> bool:
        """
        A key handler for manual Kara movement.

        UP moves, LEFT/RIGHT turn, DOWN toggles a leaf under Kara. Keys are
        ignored while a run is in progress.

        Returns:
            True if the key was handled.

        Raises:
            InvalidMoveError: If UP would move Kara into a tree or off the grid.
        """
        if self.phase is not GamePhase.IDLE:
            logger.debug("ignoring %s during %s", key, self.phase.value)
            return False
        try:
            key = Key(key)
        except ValueError:
            return False

        if key is Key.UP:
            self.kara.move()
        elif key is Key.LEFT:
            self.kara.turn_left()
        elif key is Key.RIGHT:
            self.kara.turn_right()
        elif self.kara.on_leaf():
            self.kara.remove_leaf()
        else:
            self.kara.put_leaf()
        return True

    def draw(self, cell_size: int | None = None) -> np.ndarray:
        """Draw hook: an RGB frame of the live world."""
        return render_rgb(self.grid, self.kara, cell_size or self.config.cell_size)

    def render_text(self, emoji: bool = False) -> str:
        return render_text(self.grid, self.kara, emoji=emoji)

    def snapshot(self) -> tuple[str, Coordinates, Direction]:
        """Comparable view of the live state: (grid text, position, facing)."""
        return str(self.grid), self.kara.coords, self.kara.direction
