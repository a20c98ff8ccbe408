"""
Example control routines and routine loading.

A control routine is any callable taking one Kara handle and returning
nothing. It is called exactly once per run, during capture, and must only
talk to the world through the handle's sensors and mutators.

Routine References (CLI and config):
    "karasim.routines:find_mushroom"   importable module, function name
    "path/to/my_routine.py:solve"      file path, function name
    "path/to/my_routine.py"            file path, function `my_kara`
"""

from __future__ import annotations

import importlib
import importlib.util
from collections.abc import Callable
from pathlib import Path
from typing import Any

# Well-known entry point name for user-written routine files
DEFAULT_ROUTINE_NAME = "my_kara"

Routine = Callable[[Any], None]


def find_mushroom(kara: Any) -> None:
    """Walk forward, turning left at trees, until a mushroom is ahead."""
    while not kara.mushroom_front():
        if kara.tree_front():
            kara.turn_left()
        else:
            kara.move()


def follow_wall(kara: Any, steps: int = 3) -> None:
    """Take `steps` decisions: turn left if a tree is ahead, else move."""
    for _ in range(steps):
        if kara.tree_front():
            kara.turn_left()
        else:
            kara.move()


def collect_leaves(kara: Any) -> None:
    """Walk like find_mushroom, picking up every leaf on the way."""
    while not kara.mushroom_front():
        if kara.on_leaf():
            kara.remove_leaf()
        if kara.tree_front():
            kara.turn_left()
        else:
            kara.move()
    if kara.on_leaf():
        kara.remove_leaf()


def load_routine(reference: str) -> Routine:
    """
    Resolve a routine reference to a callable.

    Raises:
        ImportError: If the module or file cannot be loaded.
        AttributeError: If the function does not exist.
        TypeError: If the attribute is not callable.
    """
    target, _, name = reference.partition(":")
    name = name or DEFAULT_ROUTINE_NAME

    if target.endswith(".py") or Path(target).is_file():
        path = Path(target)
        if not path.is_file():
            raise ImportError(f"Routine file not found: {path}")
        spec = importlib.util.spec_from_file_location(path.stem, path)
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot load routine file: {path}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
    else:
        module = importlib.import_module(target)

    routine = getattr(module, name)
    if not callable(routine):
        raise TypeError(f"{reference} is not callable")
    return routine
