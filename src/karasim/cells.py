"""
Cell vocabulary of the Kara world.

A cell is a small immutable value: the glyph shown to the user plus a
semantic type. The five known cells are interned in `Cells`; any other
symbol found in a world spec becomes a CUSTOM cell that keeps its glyph, so
unknown decorations survive a decode/serialise round trip.

Symbol Table:
    symbol(s)      type       display
    " " or "_"     EMPTY      " "
    "T" or 🌳      TREE       🌳
    "B" or 🐞      BUG        🐞   (Kara's sprite, never placed by actions)
    "M" or 🍄      MUSHROOM   🍄   (goal)
    "C" or 🍀      CLOVER     🍀   (leaf / marker)
    anything else  CUSTOM     the symbol itself

Kara's start glyphs (< ^ > v V) decode to CUSTOM cells; Grid.find_kara()
recognises and clears them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CellType(Enum):
    """Semantic cell types. The value is the canonical serialisation symbol."""

    EMPTY = "_"
    TREE = "T"
    BUG = "B"
    MUSHROOM = "M"
    CLOVER = "C"
    CUSTOM = "?"

    @property
    def code(self) -> int:
        """Small integer code used in numpy grid arrays."""
        return _TYPE_CODES[self]


_TYPE_CODES = {cell_type: i for i, cell_type in enumerate(CellType)}


@dataclass(frozen=True)
class Cell:
    """
    An immutable grid cell.

    Equality is by value, so a freshly decoded tree compares equal to
    `Cells.TREE`; identity is never relied on.

    Attributes:
        display: Glyph used when drawing the cell.
        type: Semantic type.
        symbol: Serialisation symbol; for CUSTOM cells this is the glyph.
    """

    display: str = " "
    type: CellType = CellType.EMPTY
    symbol: str = "_"

    @staticmethod
    def from_symbol(symbol: str) -> Cell:
        """Decode one world-spec symbol. Unknown symbols never fail."""
        known = _SYMBOLS.get(symbol)
        if known is not None:
            return known
        return Cell(display=symbol, type=CellType.CUSTOM, symbol=symbol)

    @property
    def is_custom(self) -> bool:
        return self.type is CellType.CUSTOM

    def __str__(self) -> str:
        return self.symbol


class Cells:
    """Interned cells of the known vocabulary."""

    EMPTY = Cell(" ", CellType.EMPTY, "_")
    TREE = Cell("🌳", CellType.TREE, "T")
    BUG = Cell("🐞", CellType.BUG, "B")
    MUSHROOM = Cell("🍄", CellType.MUSHROOM, "M")
    CLOVER = Cell("🍀", CellType.CLOVER, "C")


_SYMBOLS: dict[str, Cell] = {
    " ": Cells.EMPTY,
    "_": Cells.EMPTY,
    "T": Cells.TREE,
    "🌳": Cells.TREE,
    "B": Cells.BUG,
    "🐞": Cells.BUG,
    "M": Cells.MUSHROOM,
    "🍄": Cells.MUSHROOM,
    "C": Cells.CLOVER,
    "🍀": Cells.CLOVER,
}
