"""
The Kara game grid.

A Grid is a fixed-size rectangle of Cells addressed by Coordinates. It is
built once (from a textual spec, or as a copy of another grid) and then
mutated in place by Kara's leaf actions and by the initial Kara extraction.

Architecture Role:
    text spec → Grid.from_string_spec() → Grid.find_kara() → Kara
                                       └→ Grid.copy() (capture clone)

World Spec Format:
    One line per row, one symbol per column. `from_string_spec` trims every
    line, so rows must start with a non-blank symbol (use "_" for a leading
    empty cell). Symbols are split by grapheme rather than by code point:
    marks of any kind (including spacing marks and keycaps), variation
    selectors, skin-tone modifiers and zero-width-joiner sequences stay
    attached to their base character, and regional indicators pair into flags.

        TTTTT
        T  MT
        T>  T
        TTTTT

Invariants:
    - width >= 1 and height >= 1
    - every decoded row has the same symbol count as the first row
    - at()/set()/clear() never wrap negative indices; anything outside
      [0, width) x [0, height) raises OutOfBoundsError

Dependencies:
    - numpy: For the array view used by observations and rendering
    - unicodedata: For grapheme splitting of world spec lines
"""

from __future__ import annotations

import unicodedata
from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING

import numpy as np

from karasim.cells import Cell, Cells, CellType
from karasim.errors import MalformedSpecError, OutOfBoundsError
from karasim.geometry import Coordinates, Directions

if TYPE_CHECKING:
    from karasim.kara import Kara

# Default grid size (width, height) for an empty Grid()
GRID_SIZE = (8, 8)

# Code points that extend the preceding symbol instead of starting a new one
_ZWJ = "\u200d"


def _is_extender(char: str) -> bool:
    cp = ord(char)
    return (
        unicodedata.category(char).startswith("M")  # Mn, Mc and Me (keycap U+20E3)
        or 0xFE00 <= cp <= 0xFE0F  # variation selectors
        or 0x1F3FB <= cp <= 0x1F3FF  # emoji skin-tone modifiers
        or 0xE0020 <= cp <= 0xE007F  # tag characters (flag sequences)
    )


def _is_regional_indicator(char: str) -> bool:
    return 0x1F1E6 <= ord(char) <= 0x1F1FF


def split_symbols(line: str) -> list[str]:
    """
    Split a spec line into user-perceived symbols.

    Regional indicators pair up into one flag symbol; a third indicator in a
    row starts the next flag.

    Example:
        >>> split_symbols("T🌳 M")
        ['T', '🌳', ' ', 'M']
    """
    symbols: list[str] = []
    join_next = False
    for char in line:
        flag_half = (
            bool(symbols)
            and _is_regional_indicator(char)
            and len(symbols[-1]) == 1
            and _is_regional_indicator(symbols[-1])
        )
        if symbols and (join_next or flag_half or char == _ZWJ or _is_extender(char)):
            symbols[-1] += char
            join_next = char == _ZWJ
        else:
            symbols.append(char)
            join_next = False
    return symbols


# =============================================================================
# GRID
# =============================================================================


class Grid:
    """
    A fixed-size 2D Kara grid.

    Attributes:
        size: (width, height) tuple.
        width: Number of columns.
        height: Number of rows.

    Example:
        >>> grid = Grid.from_string_spec('''
        ...     TTT
        ...     T>T
        ...     TTT''')
        >>> kara = grid.find_kara()
        >>> kara.coords
        Coordinates(x=1, y=1)
    """

    def __init__(self, size: Sequence[int] = GRID_SIZE) -> None:
        width, height = int(size[0]), int(size[1])
        if width < 1 or height < 1:
            raise MalformedSpecError(f"unexpected grid size: {tuple(size)}")
        self.size = (width, height)
        self._rows: list[list[Cell]] = [[Cells.EMPTY] * width for _ in range(height)]

    @property
    def width(self) -> int:
        return self.size[0]

    @property
    def height(self) -> int:
        return self.size[1]

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_string_spec(cls, spec: str) -> Grid:
        """
        Create a grid from a single multi-line text spec.

        Every line is trimmed. Blank lines before the first and after the last
        row are dropped, so indented triple-quoted strings can be used as-is.

        Raises:
            MalformedSpecError: If the world spec has no rows or its rows differ in
                length.
        """
        lines = [line.strip() for line in spec.splitlines()]
        while lines and not lines[0]:
            lines.pop(0)
        while lines and not lines[-1]:
            lines.pop()
        return cls.from_string_array(lines)

    @classmethod
    def from_string_array(cls, lines: Sequence[str]) -> Grid:
        """
        Create a grid from a list of rows, top to bottom. Rows are not trimmed.

        Raises:
            MalformedSpecError: If there are no rows, the first row is empty,
                or any row's symbol count differs from the first row's.
        """
        if not lines:
            raise MalformedSpecError("Unexpected grid spec, no rows")
        rows = [split_symbols(line) for line in lines]
        width = len(rows[0])
        if width == 0:
            raise MalformedSpecError("Unexpected grid spec, first row is empty")
        grid = cls((width, len(rows)))
        for y, row in enumerate(rows):
            if len(row) != width:
                raise MalformedSpecError(
                    f"Unexpected grid spec, line {y} has length {len(row)}, expected {width}"
                )
            for x, symbol in enumerate(row):
                grid._rows[y][x] = Cell.from_symbol(symbol)
        return grid

    def copy(self) -> Grid:
        """Return an independent deep copy of this grid."""
        return Grid.from_string_array(str(self).split("\n"))

    # -------------------------------------------------------------------------
    # Cell access
    # -------------------------------------------------------------------------

    def in_bounds(self, coords: Coordinates) -> bool:
        return 0 <= coords.x < self.width and 0 <= coords.y < self.height

    def _check(self, coords: Coordinates) -> None:
        if not self.in_bounds(coords):
            raise OutOfBoundsError(f"{coords} is outside the {self.width}x{self.height} grid")

    def at(self, coords: Coordinates) -> Cell:
        """Return the cell at `coords`."""
        self._check(coords)
        return self._rows[coords.y][coords.x]

    def set(self, coords: Coordinates, cell: Cell) -> None:
        """Replace the cell at `coords`."""
        self._check(coords)
        self._rows[coords.y][coords.x] = cell

    def clear(self, coords: Coordinates) -> None:
        """Reset the cell at `coords` to EMPTY."""
        self.set(coords, Cells.EMPTY)

    def cells(self) -> Iterator[tuple[Coordinates, Cell]]:
        """Yield (coords, cell) in row-major order, top-left first."""
        for y, row in enumerate(self._rows):
            for x, cell in enumerate(row):
                yield Coordinates(x, y), cell

    def rows(self) -> list[list[Cell]]:
        """Return a shallow copy of the rows (cells are immutable)."""
        return [list(row) for row in self._rows]

    def count(self, cell_type: CellType) -> int:
        return sum(1 for _, cell in self.cells() if cell.type is cell_type)

    # -------------------------------------------------------------------------
    # Kara extraction
    # -------------------------------------------------------------------------

    def find_kara(self) -> Kara | None:
        """
        Find the first Kara start glyph and return a matching Kara.

        Scans rows top to bottom, each row left to right. The first start
        glyph (< ^ > v V) fixes Kara's position and direction; every start
        glyph encountered is cleared to EMPTY. Without a start glyph, Kara is
        placed on the first EMPTY cell facing RIGHT.

        Returns:
            The Kara bound to this grid, or None if the grid has neither a
            start glyph nor an empty cell.
        """
        from karasim.kara import Kara

        kara: Kara | None = None
        first_empty: Coordinates | None = None
        for coords, cell in list(self.cells()):
            if cell == Cells.EMPTY and first_empty is None:
                first_empty = coords
            if cell.is_custom and Directions.is_start_symbol(cell.symbol):
                if kara is None:
                    kara = Kara(self, coords, Directions.from_symbol(cell.symbol))
                self.clear(coords)
        if kara is None and first_empty is not None:
            kara = Kara(self, first_empty, Directions.RIGHT)
        return kara

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def to_array(self) -> np.ndarray:
        """Return a (height, width) uint8 array of CellType codes."""
        return np.array(
            [[cell.type.code for cell in row] for row in self._rows],
            dtype=np.uint8,
        )

    def to_lines(self) -> list[str]:
        return ["".join(str(cell) for cell in row) for row in self._rows]

    def __str__(self) -> str:
        return "\n".join(self.to_lines())

    def __repr__(self) -> str:
        return f"Grid(size={self.size})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.size == other.size and self._rows == other._rows

    __hash__ = None  # type: ignore[assignment]
