"""
Kara's action vocabulary and the bounded action log.

Actions are the only things the capture phase records and the replay phase
consumes. They form a closed enumeration; every consumer dispatches on it
explicitly, so there is no lookup of methods by name.

Action Index Reference (also the Gymnasium action space of KaraEnv):
    0=MOVE, 1=TURN_LEFT, 2=TURN_RIGHT, 3=PUT_LEAF, 4=REMOVE_LEAF

Dependencies:
    None (pure logic module)
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import IntEnum
from typing import Any

from karasim.errors import LogOverflowError

# Default bound on the number of recorded actions per capture run
MAX_COMMANDS = 50


class Action(IntEnum):
    """Kara's mutating actions."""

    MOVE = 0
    TURN_LEFT = 1
    TURN_RIGHT = 2
    PUT_LEAF = 3
    REMOVE_LEAF = 4

    @property
    def label(self) -> str:
        """Method-style name, e.g. 'turn_left'."""
        return self.name.lower()


def dispatch(handle: Any, action: Action) -> Any:
    """
    Invoke the method of `handle` that performs `action`.

    Returns whatever the method returns, so the same dispatch serves plain
    Karas (None) and KaraStepper (a coroutine to await).

    Raises:
        ValueError: If `action` is not an Action.
    """
    if action is Action.MOVE:
        return handle.move()
    if action is Action.TURN_LEFT:
        return handle.turn_left()
    if action is Action.TURN_RIGHT:
        return handle.turn_right()
    if action is Action.PUT_LEAF:
        return handle.put_leaf()
    if action is Action.REMOVE_LEAF:
        return handle.remove_leaf()
    raise ValueError(f"unknown action: {action!r}")


class ActionLog:
    """
    Ordered, append-only, bounded sequence of Actions.

    The log never holds more than `max_length` entries: the append that would
    exceed the bound raises LogOverflowError and leaves the log unchanged.
    Once frozen (end of capture) the log is read-only.

    Attributes:
        max_length: Maximum number of entries.
        frozen: True once capture has finished.

    Example:
        >>> log = ActionLog(max_length=2)
        >>> log.append(Action.MOVE)
        >>> log.append(Action.TURN_LEFT)
        >>> log.append(Action.MOVE)
        Traceback (most recent call last):
        ...
        karasim.errors.LogOverflowError: too many commands recorded (limit 2)
    """

    __slots__ = ("_actions", "max_length", "frozen")

    def __init__(self, max_length: int = MAX_COMMANDS) -> None:
        if max_length < 0:
            raise ValueError(f"max_length must be >= 0, got {max_length}")
        self._actions: list[Action] = []
        self.max_length = max_length
        self.frozen = False

    def append(self, action: Action) -> None:
        if self.frozen:
            raise RuntimeError("action log is frozen, capture has finished")
        if len(self._actions) >= self.max_length:
            raise LogOverflowError(f"too many commands recorded (limit {self.max_length})")
        self._actions.append(Action(action))

    def freeze(self) -> ActionLog:
        self.frozen = True
        return self

    def labels(self) -> list[str]:
        return [action.label for action in self._actions]

    def __iter__(self) -> Iterator[Action]:
        return iter(tuple(self._actions))

    def __len__(self) -> int:
        return len(self._actions)

    def __getitem__(self, index: int) -> Action:
        return self._actions[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ActionLog):
            return self._actions == other._actions
        if isinstance(other, (list, tuple)):
            return self._actions == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ActionLog({self.labels()}, max_length={self.max_length})"
