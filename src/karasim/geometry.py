"""
Grid coordinates and the four-direction rotation algebra.

This module is the leaf of the karasim data model. Everything else (grid
access, Kara's sensors, movement, rendering) is expressed in terms of the two
value types defined here.

Coordinate System:
    The origin (0, 0) is the upper-left cell. X grows to the right and Y grows
    downward, matching both the row-major layout of a textual world spec and
    the usual screen convention.

        (0,0) ──► x
          │
          ▼
          y

Rotation Order:
    The four directions form a closed cycle. Turning left walks it one way,
    turning right the other:

        RIGHT ─left─► UP ─left─► LEFT ─left─► DOWN ─left─► RIGHT

    `left` and `right` are inverses, and four turns in either sense return to
    the starting direction.

Design Decisions:
    - Coordinates is a frozen dataclass: hashable, compared by value.
    - Directions are process-wide singletons. Their `left`/`right` links are
      wired exactly once, at import time, and the objects refuse mutation
      afterwards.
    - Each direction carries a presentation angle (radians, clockwise from
      UP) so renderers can rotate Kara's sprite without a lookup table.

Dependencies:
    - dataclasses: For the immutable Coordinates value type
    - math: For presentation angles
"""

from __future__ import annotations

import math
from dataclasses import dataclass

# =============================================================================
# COORDINATES
# =============================================================================


@dataclass(frozen=True)
class Coordinates:
    """
    Integer grid cell coordinates.

    Attributes:
        x: Column index (0 = leftmost).
        y: Row index (0 = topmost).

    Example:
        >>> Coordinates(1, 2) + Coordinates(1, 0)
        Coordinates(x=2, y=2)
        >>> Coordinates(1, 2).move(Directions.UP)
        Coordinates(x=1, y=1)
    """

    x: int
    y: int

    @classmethod
    def from_xy(cls, x: int, y: int) -> Coordinates:
        """Create coordinates from an x/y pair."""
        return cls(x, y)

    def add(self, other: Coordinates) -> Coordinates:
        """Component-wise sum. Pure, never fails."""
        return Coordinates(self.x + other.x, self.y + other.y)

    def __add__(self, other: Coordinates) -> Coordinates:
        return self.add(other)

    def move(self, direction: Direction) -> Coordinates:
        """Return the neighbouring coordinates one step towards `direction`."""
        return direction.apply(self)

    def __str__(self) -> str:
        return f"[{self.x}, {self.y}]"


# =============================================================================
# DIRECTION
# =============================================================================


class Direction:
    """
    One of the four grid directions.

    Instances are only created by this module (see `Directions`). Once the
    rotation links are wired the object is sealed; any later attribute
    assignment raises AttributeError.

    Attributes:
        name: Arrow glyph used in messages and text rendering.
        vector: Unit displacement applied by `apply`.
        angle: Presentation rotation in radians, clockwise from UP.
        symbol: The world-spec glyph that starts Kara facing this way.
        left: The direction reached by turning left.
        right: The direction reached by turning right.
    """

    __slots__ = ("name", "vector", "angle", "symbol", "left", "right", "_sealed")

    def __init__(self, name: str, x: int, y: int, angle: float, symbol: str) -> None:
        object.__setattr__(self, "_sealed", False)
        self.name = name
        self.vector = Coordinates(x, y)
        self.angle = angle
        self.symbol = symbol

    def __setattr__(self, key: str, value: object) -> None:
        if self._sealed:
            raise AttributeError(f"Direction {self.name} is immutable")
        object.__setattr__(self, key, value)

    def _seal(self) -> None:
        object.__setattr__(self, "_sealed", True)

    def __copy__(self) -> Direction:
        return self

    def __deepcopy__(self, memo: dict) -> Direction:
        return self

    def __reduce__(self) -> str:
        # Pickle by reference so unpickling yields the module singleton.
        return _SINGLETON_NAMES[self.symbol]

    def apply(self, coords: Coordinates) -> Coordinates:
        """Return `coords` displaced by this direction's unit vector."""
        return coords.add(self.vector)

    def rotate_left(self) -> Direction:
        return self.left

    def rotate_right(self) -> Direction:
        return self.right

    def __repr__(self) -> str:
        return f"Direction({self.name})"

    def __str__(self) -> str:
        return self.name


class _DirectionTable:
    """
    Frozen namespace holding the four Direction singletons.

    Example:
        >>> Directions.RIGHT.left is Directions.UP
        True
        >>> Directions.from_symbol("v") is Directions.DOWN
        True
    """

    __slots__ = ("UP", "DOWN", "LEFT", "RIGHT", "ALL", "_by_symbol")

    def __init__(self) -> None:
        up = Direction("↑", 0, -1, 0.0, "^")
        down = Direction("↓", 0, 1, math.pi, "v")
        right = Direction("→", 1, 0, math.pi / 2, ">")
        left = Direction("←", -1, 0, -math.pi / 2, "<")

        up.left, up.right = left, right
        left.left, left.right = down, up
        down.left, down.right = right, left
        right.left, right.right = up, down

        for direction in (up, down, right, left):
            direction._seal()

        object.__setattr__(self, "UP", up)
        object.__setattr__(self, "DOWN", down)
        object.__setattr__(self, "LEFT", left)
        object.__setattr__(self, "RIGHT", right)
        # Rotational order (each entry is the previous one turned left)
        object.__setattr__(self, "ALL", (right, up, left, down))
        object.__setattr__(
            self,
            "_by_symbol",
            {"^": up, "v": down, "V": down, "<": left, ">": right},
        )

    def __setattr__(self, key: str, value: object) -> None:
        raise AttributeError("Directions is read-only")

    def from_symbol(self, symbol: str) -> Direction | None:
        """Return the direction for a Kara start glyph, or None."""
        return self._by_symbol.get(symbol)

    def is_start_symbol(self, symbol: str) -> bool:
        return symbol in self._by_symbol

    def index(self, direction: Direction) -> int:
        """Position of `direction` in ALL (used for discrete observations)."""
        return self.ALL.index(direction)

    def __iter__(self):
        return iter(self.ALL)


Directions = _DirectionTable()

# Module-level aliases, so Direction.__reduce__ can name them
UP = Directions.UP
DOWN = Directions.DOWN
LEFT = Directions.LEFT
RIGHT = Directions.RIGHT

_SINGLETON_NAMES = {"^": "UP", "v": "DOWN", "<": "LEFT", ">": "RIGHT"}
