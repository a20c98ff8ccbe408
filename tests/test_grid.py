"""Tests for cell decoding, Grid construction, access and Kara extraction."""
import numpy as np
import pytest

from karasim.cells import Cell, Cells, CellType
from karasim.errors import KaraError, MalformedSpecError, OutOfBoundsError
from karasim.geometry import Coordinates, Directions
from karasim.grid import Grid, split_symbols


# =============================================================================
# CELLS
# =============================================================================


class TestCells:
    @pytest.mark.parametrize(
        "symbol,cell_type",
        [
            ("T", CellType.TREE),
            ("🌳", CellType.TREE),
            ("B", CellType.BUG),
            ("M", CellType.MUSHROOM),
            ("🍄", CellType.MUSHROOM),
            ("C", CellType.CLOVER),
            ("🍀", CellType.CLOVER),
            (" ", CellType.EMPTY),
            ("_", CellType.EMPTY),
        ],
    )
    def test_known_symbols(self, symbol, cell_type):
        assert Cell.from_symbol(symbol).type is cell_type

    def test_unknown_symbol_is_custom(self):
        cell = Cell.from_symbol("X")
        assert cell.is_custom
        assert cell.symbol == "X"
        assert cell.display == "X"

    def test_value_equality(self):
        assert Cell.from_symbol("T") == Cells.TREE
        assert Cell("🌳", CellType.TREE, "T") == Cells.TREE
        assert Cell.from_symbol("X") == Cell.from_symbol("X")

    def test_codes_follow_enum_order(self):
        assert [t.code for t in CellType] == list(range(len(CellType)))


# =============================================================================
# CONSTRUCTION
# =============================================================================


class TestGridConstruction:
    def test_from_string_spec_trims_lines(self):
        grid = Grid.from_string_spec("""
            TTT
            T M
            TTT
        """)
        assert grid.size == (3, 3)
        assert grid.at(Coordinates(1, 1)) == Cells.EMPTY
        assert grid.at(Coordinates(2, 1)) == Cells.MUSHROOM

    def test_serialisation(self):
        grid = Grid.from_string_spec("T🌳 X\nC_MB")
        assert str(grid) == "TT_X\nC_MB"
        assert Grid.from_string_spec(str(grid)) == grid

    def test_ragged_rows(self):
        with pytest.raises(MalformedSpecError, match="line 1 has length 2, expected 3"):
            Grid.from_string_array(["TTT", "TT"])

    def test_malformed_is_value_error(self):
        with pytest.raises(ValueError):
            Grid.from_string_spec("TT\nT")

    def test_empty_spec(self):
        with pytest.raises(MalformedSpecError):
            Grid.from_string_spec("   \n\n")
        with pytest.raises(MalformedSpecError):
            Grid.from_string_array([])

    def test_bad_size(self):
        with pytest.raises(MalformedSpecError):
            Grid((0, 3))

    def test_default_grid_is_empty(self):
        grid = Grid()
        assert grid.size == (8, 8)
        assert grid.count(CellType.EMPTY) == 64

    def test_copy_is_independent(self):
        grid = Grid.from_string_spec("T M\nC X")
        clone = grid.copy()
        assert clone == grid
        clone.set(Coordinates(1, 0), Cells.CLOVER)
        assert grid.at(Coordinates(1, 0)) == Cells.EMPTY
        assert clone != grid
        assert clone.at(Coordinates(2, 1)).symbol == "X"


# =============================================================================
# ACCESS
# =============================================================================


class TestGridAccess:
    @pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (3, 0), (0, 2)])
    def test_out_of_bounds(self, x, y):
        grid = Grid((3, 2))
        coords = Coordinates(x, y)
        assert not grid.in_bounds(coords)
        with pytest.raises(OutOfBoundsError):
            grid.at(coords)
        with pytest.raises(IndexError):
            grid.set(coords, Cells.TREE)

    def test_out_of_bounds_is_kara_error(self):
        with pytest.raises(KaraError):
            Grid((1, 1)).clear(Coordinates(1, 1))

    def test_set_and_clear(self):
        grid = Grid((2, 2))
        grid.set(Coordinates(1, 1), Cells.TREE)
        assert grid.at(Coordinates(1, 1)) == Cells.TREE
        grid.clear(Coordinates(1, 1))
        assert grid.at(Coordinates(1, 1)) == Cells.EMPTY

    def test_to_array(self):
        grid = Grid.from_string_spec("T_\nMC")
        array = grid.to_array()
        assert array.dtype == np.uint8
        assert array.shape == (2, 2)
        assert array[0, 0] == CellType.TREE.code
        assert array[1, 1] == CellType.CLOVER.code

    def test_cells_row_major(self):
        grid = Grid((2, 2))
        assert [coords for coords, _ in grid.cells()] == [
            Coordinates(0, 0),
            Coordinates(1, 0),
            Coordinates(0, 1),
            Coordinates(1, 1),
        ]


# =============================================================================
# KARA EXTRACTION
# =============================================================================


class TestFindKara:
    def test_first_glyph_wins_and_all_cleared(self):
        grid = Grid.from_string_spec("T>_\n_<T")
        kara = grid.find_kara()
        assert kara.coords == Coordinates(1, 0)
        assert kara.direction is Directions.RIGHT
        assert kara.grid is grid
        assert grid.at(Coordinates(1, 0)) == Cells.EMPTY
        assert grid.at(Coordinates(1, 1)) == Cells.EMPTY

    @pytest.mark.parametrize(
        "glyph,direction", [("^", "UP"), ("v", "DOWN"), ("V", "DOWN"), ("<", "LEFT")]
    )
    def test_start_direction(self, glyph, direction):
        kara = Grid.from_string_spec(f"T{glyph}").find_kara()
        assert kara.direction is getattr(Directions, direction)

    def test_fallback_first_empty(self):
        kara = Grid.from_string_spec("TT\nT_").find_kara()
        assert kara.coords == Coordinates(1, 1)
        assert kara.direction is Directions.RIGHT

    def test_no_place_for_kara(self):
        assert Grid.from_string_spec("TT\nTM").find_kara() is None


# =============================================================================
# SYMBOL SPLITTING
# =============================================================================


class TestSplitSymbols:
    def test_plain(self):
        assert split_symbols("T M") == ["T", " ", "M"]

    def test_combining_mark(self):
        assert split_symbols("Te\u0301") == ["T", "e\u0301"]

    def test_variation_selector(self):
        assert split_symbols("\u2764\ufe0fT") == ["\u2764\ufe0f", "T"]

    def test_zwj_sequence(self):
        family = "\U0001F469\u200d\U0001F469\u200d\U0001F467"
        assert split_symbols(f"T{family}M") == ["T", family, "M"]

    def test_spacing_mark(self):
        # Devanagari KA + vowel sign I (category Mc, combining class 0)
        assert split_symbols("T\u0915\u093fM") == ["T", "\u0915\u093f", "M"]

    def test_keycap(self):
        keycap = "1\ufe0f\u20e3"
        assert split_symbols(f"T{keycap}M") == ["T", keycap, "M"]

    def test_flag_pairs(self):
        germany = "\U0001F1E9\U0001F1EA"
        france = "\U0001F1EB\U0001F1F7"
        assert split_symbols(f"T{germany}{france}") == ["T", germany, france]

    @pytest.mark.parametrize(
        "symbol",
        ["\U0001F1E9\U0001F1EA", "1\ufe0f\u20e3", "\u0915\u093f"],
    )
    def test_multi_codepoint_cell_builds(self, symbol):
        grid = Grid.from_string_spec(f"TTT\nT{symbol}T\nTTT")
        assert grid.size == (3, 3)
        assert grid.at(Coordinates(1, 1)).symbol == symbol

    def test_emoji_row_width(self):
        grid = Grid.from_string_spec("🌳🍄🍀\nT M")
        assert grid.size == (3, 2)
