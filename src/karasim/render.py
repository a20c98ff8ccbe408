"""
Presentation helpers: text and RGB frames of a grid with Kara on it.

These are read-only views. They may be called at any time, including while a
replay is suspended between two actions, and never mutate the world.

Two renderers:
    render_text(): one line per row. In the default ASCII mode the output is
        itself a valid world spec (Kara appears as her start glyph) and loads
        back with Game.from_string_spec(). Kara's glyph hides the cell under
        her, so a leaf or mushroom she stands on reloads as an empty cell.
    render_rgb(): a (height*cell_size, width*cell_size, 3) uint8 image with a
        flat colour per cell type, grey grid lines, and Kara as a red cell with
        a dark band on the side she is facing.

Dependencies:
    - numpy: For image arrays
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from karasim.cells import CellType
from karasim.geometry import Directions

if TYPE_CHECKING:
    from karasim.grid import Grid
    from karasim.kara import Kara

CELL_COLORS: dict[CellType, tuple[int, int, int]] = {
    CellType.EMPTY: (245, 245, 235),
    CellType.TREE: (34, 139, 34),
    CellType.BUG: (220, 30, 30),
    CellType.MUSHROOM: (160, 82, 45),
    CellType.CLOVER: (130, 210, 90),
    CellType.CUSTOM: (150, 150, 150),
}

GRID_LINE_COLOR = (115, 115, 115)
KARA_COLOR = (220, 30, 30)
KARA_HEAD_COLOR = (60, 0, 0)


def render_text(grid: Grid, kara: Kara | None = None, emoji: bool = False) -> str:
    """
    Render the grid as text, one line per row.

    Args:
        grid: The grid to draw.
        kara: Optional Kara to overlay.
        emoji: Use display glyphs and arrow glyphs instead of spec symbols.
    """
    rows = grid.rows()
    lines = []
    for y, row in enumerate(rows):
        chars = [cell.display if emoji else cell.symbol for cell in row]
        if kara is not None and kara.coords.y == y:
            direction = kara.direction
            chars[kara.coords.x] = direction.name if emoji else direction.symbol
        lines.append("".join(chars))
    return "\n".join(lines)


def render_rgb(grid: Grid, kara: Kara | None = None, cell_size: int = 25) -> np.ndarray:
    """
    Render the grid as an RGB image.

    Returns:
        uint8 array of shape (grid.height * cell_size, grid.width * cell_size, 3).
    """
    if cell_size < 1:
        raise ValueError(f"cell_size must be >= 1, got {cell_size}")

    codes = grid.to_array()
    palette = np.zeros((len(CellType), 3), dtype=np.uint8)
    for cell_type, color in CELL_COLORS.items():
        palette[cell_type.code] = color

    # One pixel per cell, then scale every cell up to a cell_size block
    image = palette[codes]
    image = np.repeat(np.repeat(image, cell_size, axis=0), cell_size, axis=1)

    if cell_size > 2:
        image[::cell_size, :] = GRID_LINE_COLOR
        image[:, ::cell_size] = GRID_LINE_COLOR

    if kara is not None:
        _draw_kara(image, kara, cell_size)
    return image


def _draw_kara(image: np.ndarray, kara: Kara, cell_size: int) -> None:
    top = kara.coords.y * cell_size
    left = kara.coords.x * cell_size
    margin = 1 if cell_size > 2 else 0
    block = image[top + margin : top + cell_size, left + margin : left + cell_size]
    block[:] = KARA_COLOR

    band = max(1, block.shape[0] // 4)
    direction = kara.direction
    if direction is Directions.UP:
        block[:band, :] = KARA_HEAD_COLOR
    elif direction is Directions.DOWN:
        block[-band:, :] = KARA_HEAD_COLOR
    elif direction is Directions.LEFT:
        block[:, :band] = KARA_HEAD_COLOR
    else:
        block[:, -band:] = KARA_HEAD_COLOR
