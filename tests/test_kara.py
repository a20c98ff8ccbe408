"""Tests for Kara's sensors and mutators."""
import pytest

from karasim.actions import Action
from karasim.cells import Cells, CellType
from karasim.errors import InvalidMoveError, InvalidPositionError
from karasim.geometry import Coordinates, Directions
from karasim.grid import Grid
from karasim.kara import Kara


def make_kara(spec: str) -> Kara:
    return Grid.from_string_spec(spec).find_kara()


class TestSensors:
    def test_corridor_start(self, corridor_game):
        kara = corridor_game.kara
        assert kara.coords == Coordinates(1, 2)
        assert not kara.tree_front()
        assert not kara.tree_left()
        assert kara.tree_right()
        assert not kara.mushroom_front()
        assert not kara.on_leaf()

    def test_sensors_tuple(self):
        kara = make_kara("""
            _T_
            _>M
            _T_
        """)
        assert kara.sensors() == (False, True, True, True, False)

    def test_off_grid_is_not_a_tree(self):
        kara = make_kara("_>")
        assert not kara.tree_front()
        assert not kara.tree_left()
        assert not kara.tree_right()
        assert not kara.mushroom_front()

    def test_on_leaf(self):
        grid = Grid.from_string_spec("C_")
        kara = Kara(grid, Coordinates(0, 0))
        assert kara.on_leaf()

    def test_sensors_do_not_mutate(self):
        kara = make_kara("T>M")
        before = (str(kara.grid), kara.coords, kara.direction)
        kara.sensors()
        assert (str(kara.grid), kara.coords, kara.direction) == before


class TestMove:
    def test_move_forward(self):
        kara = make_kara("v\n_")
        kara.move()
        assert kara.coords == Coordinates(0, 1)

    def test_move_into_tree(self, corridor_game):
        kara = corridor_game.kara
        kara.move()
        kara.move()
        with pytest.raises(InvalidMoveError, match=r"Unable to move from \[3, 2\] in direction →!") as exc:
            kara.move()
        assert exc.value.coords == Coordinates(3, 2)
        assert exc.value.direction is Directions.RIGHT
        assert kara.coords == Coordinates(3, 2)

    def test_move_off_grid(self):
        kara = make_kara("_>")
        with pytest.raises(InvalidMoveError):
            kara.move()
        assert kara.coords == Coordinates(1, 0)
        assert kara.direction is Directions.RIGHT

    def test_failed_move_keeps_sensor_readings(self, corridor_game):
        kara = corridor_game.kara
        kara.move()
        kara.move()
        before = (kara.sensors(), kara.coords, kara.direction, str(kara.grid))
        with pytest.raises(InvalidMoveError):
            kara.move()
        assert (kara.sensors(), kara.coords, kara.direction, str(kara.grid)) == before

    def test_move_onto_mushroom_and_leaf(self):
        kara = make_kara(">CM")
        kara.move()
        kara.move()
        assert kara.coords == Coordinates(2, 0)

    def test_can_move(self, corridor_game):
        kara = corridor_game.kara
        assert kara.can_move()
        assert kara.can_move(Directions.UP)
        assert not kara.can_move(Directions.DOWN)


class TestTurnsAndLeaves:
    def test_turns(self):
        kara = make_kara(">")
        kara.turn_left()
        assert kara.direction is Directions.UP
        kara.turn_right()
        kara.turn_right()
        assert kara.direction is Directions.DOWN

    def test_put_and_remove_leaf(self):
        kara = make_kara(">_")
        kara.put_leaf()
        assert kara.on_leaf()
        assert kara.grid.at(kara.coords) == Cells.CLOVER
        kara.remove_leaf()
        assert not kara.on_leaf()
        assert kara.grid.at(kara.coords) == Cells.EMPTY

    def test_remove_leaf_without_leaf_is_noop(self):
        grid = Grid.from_string_spec("M_X\nTC_")
        before = str(grid)
        kara = Kara(grid, Coordinates(0, 0))
        kara.remove_leaf()
        assert grid.at(Coordinates(0, 0)) == Cells.MUSHROOM
        assert str(grid) == before
        kara.move()
        kara.remove_leaf()
        assert str(grid) == before

    def test_put_leaf_replaces_mushroom(self):
        grid = Grid.from_string_spec("M_")
        kara = Kara(grid, Coordinates(0, 0))
        kara.put_leaf()
        assert grid.count(CellType.MUSHROOM) == 0
        assert kara.on_leaf()

    def test_perform(self):
        kara = make_kara(">_")
        kara.perform(Action.MOVE)
        kara.perform(Action.TURN_RIGHT)
        kara.perform(Action.PUT_LEAF)
        assert kara.coords == Coordinates(1, 0)
        assert kara.direction is Directions.DOWN
        assert kara.on_leaf()

    def test_copy_binds_new_grid(self):
        kara = make_kara(">_")
        clone_grid = kara.grid.copy()
        clone = kara.copy(clone_grid)
        clone.move()
        clone.put_leaf()
        assert kara.coords == Coordinates(0, 0)
        assert kara.grid.count(CellType.CLOVER) == 0


class TestPlacement:
    @pytest.mark.parametrize("x,y", [(-1, 0), (1, 0), (0, 1)])
    def test_off_grid_rejected(self, x, y):
        grid = Grid.from_string_spec("_")
        with pytest.raises(InvalidPositionError, match="outside"):
            Kara(grid, Coordinates(x, y))

    def test_default_position_must_fit(self):
        with pytest.raises(InvalidPositionError):
            Kara(Grid.from_string_spec("_"))

    def test_tree_rejected(self):
        grid = Grid.from_string_spec("T_")
        with pytest.raises(InvalidPositionError, match="tree"):
            Kara(grid, Coordinates(0, 0))

    def test_placement_error_is_value_error(self):
        with pytest.raises(ValueError):
            Kara(Grid.from_string_spec("T_"), Coordinates(0, 0))

    def test_single_cell_grid_leaf_actions(self):
        kara = Kara(Grid.from_string_spec("_"), Coordinates(0, 0))
        kara.put_leaf()
        assert kara.on_leaf()
        kara.remove_leaf()
        assert str(kara.grid) == "_"

    def test_copy_onto_tree_rejected(self):
        kara = Kara(Grid.from_string_spec("__"), Coordinates(0, 0))
        with pytest.raises(InvalidPositionError):
            kara.copy(Grid.from_string_spec("T_"))
