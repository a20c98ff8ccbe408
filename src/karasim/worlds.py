"""
Built-in Kara worlds and world file loading.

World legend:
    T: Tree
    M: Mushroom
    C: Clover leaf
    <^>v: Kara start position and direction
    ' ' or _: Empty cell
"""

from __future__ import annotations

from pathlib import Path

EMPTY_GRID_SPEC = """
    TTTTTTTTT
    T       T
    T       T
    T       T
    T       T
    T       T
    T       T
    T       T
    TTTTTTTTT
"""

DEMO_WORLD = """
    TTTTTTTTT
    T       T
    T  C    T
    T >   T T
    T       T
    M       T
    T    T  T
    T       T
    TTTTTTTTT
"""

CORRIDOR_WORLD = """
    TTTTT
    T   T
    T>  T
    TTTTT
"""

GARDEN_WORLD = """
    TTTTTTT
    T    MT
    T     T
    T>    T
    TTTTTTT
"""

WORLDS: dict[str, str] = {
    "empty": EMPTY_GRID_SPEC,
    "demo": DEMO_WORLD,
    "corridor": CORRIDOR_WORLD,
    "garden": GARDEN_WORLD,
}


def load_world(name_or_path: str | Path) -> str:
    """
    Return the world spec text of a registered world or of a world file.

    Raises:
        FileNotFoundError: If `name_or_path` is neither a registered name nor
            an existing file.
    """
    if isinstance(name_or_path, str) and name_or_path in WORLDS:
        return WORLDS[name_or_path]
    path = Path(name_or_path)
    if not path.is_file():
        known = ", ".join(sorted(WORLDS))
        raise FileNotFoundError(f"No world named or stored at {name_or_path!r} (known: {known})")
    return path.read_text(encoding="utf-8")
