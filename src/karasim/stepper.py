"""
Timed-replay decorator for Kara.

KaraStepper wraps the live, visible Kara. Sensors pass straight through.
Every mutator is a coroutine that first sleeps for the configured delay and
only then applies the action, so an event loop can service other work (a
render loop, input handling) between two visible steps.

Scheduling Model:
    Single-threaded asyncio. The caller awaits each mutator before issuing
    the next one, so at most one mutation is ever in flight. Cancelling the
    awaiting task during the sleep cancels the pending action before it
    touches the world.

Dependencies:
    - asyncio: For the non-blocking delay
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from karasim.actions import Action, dispatch

if TYPE_CHECKING:
    from karasim.kara import Kara

logger = logging.getLogger(__name__)

# Default replay delay in seconds between two visible actions
DEFAULT_DELAY = 0.5


class KaraStepper:
    """
    A Kara decorator that delays actions (but not sensors) to allow stepped
    replay.

    Attributes:
        kara: The wrapped live Kara.
        delay: Seconds to wait before each action.
    """

    def __init__(self, kara: Kara, delay: float = DEFAULT_DELAY) -> None:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        self.kara = kara
        self.delay = delay

    async def sleeper(self) -> None:
        await asyncio.sleep(self.delay)

    async def _step(self, action: Action) -> None:
        await self.sleeper()
        logger.debug("replaying %s at %s", action.label, self.kara.coords)
        dispatch(self.kara, action)

    async def perform(self, action: Action) -> None:
        await dispatch(self, action)

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

    async def move(self) -> None:
        await self._step(Action.MOVE)

    async def turn_left(self) -> None:
        await self._step(Action.TURN_LEFT)

    async def turn_right(self) -> None:
        await self._step(Action.TURN_RIGHT)

    async def put_leaf(self) -> None:
        await self._step(Action.PUT_LEAF)

    async def remove_leaf(self) -> None:
        await self._step(Action.REMOVE_LEAF)
