"""Tests for KaraStepper timing and cancellation."""
import asyncio

import pytest

from karasim.actions import Action
from karasim.geometry import Coordinates, Directions
from karasim.grid import Grid
from karasim.stepper import DEFAULT_DELAY, KaraStepper
from karasim.worlds import CORRIDOR_WORLD


@pytest.fixture
def kara():
    return Grid.from_string_spec(CORRIDOR_WORLD).find_kara()


class TestKaraStepper:
    def test_default_delay(self, kara):
        assert KaraStepper(kara).delay == DEFAULT_DELAY == 0.5

    def test_negative_delay(self, kara):
        with pytest.raises(ValueError):
            KaraStepper(kara, delay=-0.1)

    def test_sensors_pass_through(self, kara):
        stepper = KaraStepper(kara, delay=0)
        assert stepper.tree_right() is True
        assert stepper.tree_front() is False
        assert stepper.mushroom_front() is False

    def test_each_action_waits_then_applies(self, kara, no_sleep):
        stepper = KaraStepper(kara, delay=0.2)

        async def scenario():
            await stepper.move()
            await stepper.turn_left()
            await stepper.put_leaf()
            await stepper.perform(Action.REMOVE_LEAF)
            await stepper.turn_right()

        asyncio.run(scenario())

        assert no_sleep == [0.2] * 5
        assert kara.coords == Coordinates(2, 2)
        assert kara.direction is Directions.RIGHT
        assert not kara.on_leaf()

    def test_nothing_applied_before_sleep_finishes(self, kara):
        stepper = KaraStepper(kara, delay=0)
        seen = []

        async def watching_sleeper(self):
            seen.append(kara.coords)

        stepper.sleeper = watching_sleeper.__get__(stepper)
        asyncio.run(stepper.move())

        assert seen == [Coordinates(1, 2)]
        assert kara.coords == Coordinates(2, 2)

    def test_cancel_during_delay(self, kara):
        stepper = KaraStepper(kara, delay=60)

        async def scenario():
            task = asyncio.create_task(stepper.move())
            await asyncio.sleep(0)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(scenario())
        assert kara.coords == Coordinates(1, 2)
