"""Tests for the world catalogue and routine loading."""
import pytest

from karasim.game import Game
from karasim.routines import (
    DEFAULT_ROUTINE_NAME,
    collect_leaves,
    find_mushroom,
    follow_wall,
    load_routine,
)
from karasim.worlds import WORLDS, load_world


class TestWorlds:
    @pytest.mark.parametrize("name", sorted(WORLDS))
    def test_registered_worlds_decode(self, name):
        game = Game.from_string_spec(WORLDS[name])
        assert game.grid.width >= 5
        assert game.kara is not None

    def test_load_by_name(self):
        assert load_world("corridor") == WORLDS["corridor"]

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "tiny.txt"
        path.write_text("TTT\nT>M\nTTT\n", encoding="utf-8")
        game = Game.from_string_spec(load_world(path))
        assert game.kara.mushroom_front()

    def test_unknown_world(self):
        with pytest.raises(FileNotFoundError, match="known: corridor, demo, empty, garden"):
            load_world("atlantis")


class TestRoutines:
    def test_find_mushroom_on_mock(self, mock_kara):
        mock_kara.mushroom_front.side_effect = [False, False, True]
        mock_kara.tree_front.side_effect = [False, True]
        find_mushroom(mock_kara)
        mock_kara.move.assert_called_once_with()
        mock_kara.turn_left.assert_called_once_with()

    def test_follow_wall_steps(self, mock_kara):
        follow_wall(mock_kara, steps=4)
        assert mock_kara.move.call_count == 4

    def test_collect_leaves_stops_at_mushroom(self, mock_kara):
        mock_kara.mushroom_front.return_value = True
        mock_kara.on_leaf.return_value = True
        collect_leaves(mock_kara)
        mock_kara.remove_leaf.assert_called_once_with()
        mock_kara.move.assert_not_called()


class TestLoadRoutine:
    def test_module_reference(self):
        assert load_routine("karasim.routines:follow_wall") is follow_wall

    def test_file_default_name(self, tmp_path):
        path = tmp_path / "mine.py"
        path.write_text(f"def {DEFAULT_ROUTINE_NAME}(kara):\n    kara.turn_left()\n")
        routine = load_routine(str(path))
        assert routine.__name__ == "my_kara"

    def test_file_named_function(self, tmp_path):
        path = tmp_path / "mine.py"
        path.write_text("def solve(kara):\n    kara.move()\n")
        assert load_routine(f"{path}:solve").__name__ == "solve"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ImportError):
            load_routine(str(tmp_path / "absent.py"))

    def test_missing_module(self):
        with pytest.raises(ImportError):
            load_routine("karasim_no_such_module:run")

    def test_missing_function(self):
        with pytest.raises(AttributeError):
            load_routine("karasim.routines:fly")

    def test_not_callable(self):
        with pytest.raises(TypeError):
            load_routine("karasim.routines:DEFAULT_ROUTINE_NAME")
