"""
Recording decorator for Kara.

KaraRecorder wraps a Kara bound to a private copy of the world. Sensor calls
pass straight through; every mutator first appends its Action to a bounded
ActionLog and then applies it to the wrapped Kara, so later sensor calls in
the same routine see up-to-date state.

The append happens before the action is applied. A move that fails with
InvalidMoveError is therefore still in the log, and replaying the log fails
at exactly the same step, this time against the visible world.

Architecture Role:
    Game.capture():  routine(recorder) → recorder.commands (ActionLog)
    Game.replay():   ActionLog → KaraStepper → live Kara

Dependencies:
    - karasim.actions: Action enum and ActionLog
    - karasim.kara: The wrapped Kara
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from karasim.actions import MAX_COMMANDS, Action, ActionLog, dispatch

if TYPE_CHECKING:
    from karasim.kara import Kara

logger = logging.getLogger(__name__)


class KaraRecorder:
    """
    A Kara decorator that records actions (not sensor requests) in addition
    to executing them.

    Attributes:
        kara: The wrapped (private) Kara.
        commands: The ActionLog filled by this recorder.

    Example:
        >>> recorder = KaraRecorder(kara_copy, max_commands=10)
        >>> recorder.move()
        >>> recorder.commands.labels()
        ['move']
    """

    def __init__(self, target: Kara, max_commands: int = MAX_COMMANDS) -> None:
        self.kara = target
        self.commands = ActionLog(max_commands)

    @property
    def max_commands(self) -> int:
        return self.commands.max_length

    def record(self, action: Action) -> None:
        """Append `action` to the log. Raises LogOverflowError when full."""
        logger.debug("recording %s", action.label)
        self.commands.append(action)

    def _record_and_apply(self, action: Action) -> None:
        self.record(action)
        dispatch(self.kara, action)

    async def replay(self, target: Any) -> None:
        """Invoke every recorded action on an awaitable target, in order."""
        for action in self.commands:
            await dispatch(target, action)

    # Sensors

    def tree_front(self) -> bool:
        return self.kara.tree_front()

    def tree_left(self) -> bool:
        return self.kara.tree_left()

    def tree_right(self) -> bool:
        return self.kara.tree_right()

    def mushroom_front(self) -> bool:
        return self.kara.mushroom_front()

    def on_leaf(self) -> bool:
        return self.kara.on_leaf()

    # Mutators

    def move(self) -> None:
        self._record_and_apply(Action.MOVE)

    def turn_left(self) -> None:
        self._record_and_apply(Action.TURN_LEFT)

    def turn_right(self) -> None:
        self._record_and_apply(Action.TURN_RIGHT)

    def put_leaf(self) -> None:
        self._record_and_apply(Action.PUT_LEAF)

    def remove_leaf(self) -> None:
        self._record_and_apply(Action.REMOVE_LEAF)

    def __repr__(self) -> str:
        return f"KaraRecorder({self.kara!r}, commands={len(self.commands)})"
