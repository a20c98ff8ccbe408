"""
Kara, the lady beetle, on top of a Grid.

Kara holds a position, a facing direction and a reference to the exact Grid
instance she senses and mutates. Her interface has two halves:

Sensors (read-only, never raise):
    tree_front(), tree_left(), tree_right(), mushroom_front(), on_leaf()
    Looking past the edge of the grid reports "nothing there".

Mutators (atomic, either fully applied or not at all):
    move()         one step forward; InvalidMoveError into trees / off-grid
    turn_left()    rotate in place
    turn_right()   rotate in place
    put_leaf()     drop a clover leaf, replacing whatever is underneath
    remove_leaf()  pick up a clover leaf; no-op when there is none

Architecture Role:
    The same contract (KaraHandle) is implemented by Kara itself, by the
    recording decorator used during capture (KaraRecorder) and, with
    awaitable mutators, by the timed-replay decorator (KaraStepper). A
    control routine never knows which one it is talking to.

Dependencies:
    - karasim.grid: The grid Kara lives on (type only)
    - karasim.cells: Cell constants for sensing and leaf actions
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from karasim.actions import Action, dispatch
from karasim.cells import Cell, Cells, CellType
from karasim.errors import InvalidMoveError, InvalidPositionError, OutOfBoundsError
from karasim.geometry import Coordinates, Direction, Directions

if TYPE_CHECKING:
    from karasim.grid import Grid


class KaraHandle(Protocol):
    """
    The sensor/mutator contract handed to control routines.

    Anything with these methods can drive (or be driven by) a routine.
    Mutators of KaraStepper return awaitables; everywhere else they return
    None.
    """

    def tree_front(self) -> bool: ...

    def tree_left(self) -> bool: ...

    def tree_right(self) -> bool: ...

    def mushroom_front(self) -> bool: ...

    def on_leaf(self) -> bool: ...

    def move(self) -> Any: ...

    def turn_left(self) -> Any: ...

    def turn_right(self) -> Any: ...

    def put_leaf(self) -> Any: ...

    def remove_leaf(self) -> Any: ...


class Kara:
    """
    The Kara agent.

    Attributes:
        grid: The grid Kara senses and mutates.
        coords: Current position; always in bounds and never a tree.
        direction: Current facing.
    """

    def __init__(
        self,
        grid: Grid,
        coords: Coordinates = Coordinates(1, 1),
        direction: Direction = Directions.RIGHT,
    ) -> None:
        """
        Raises:
            InvalidPositionError: If `coords` is outside `grid` or on a tree.
        """
        if not grid.in_bounds(coords):
            raise InvalidPositionError(f"{coords} is outside the {grid.width}x{grid.height} grid")
        if grid.at(coords).type is CellType.TREE:
            raise InvalidPositionError(f"Kara cannot stand on the tree at {coords}")
        self.grid = grid
        self.coords = Coordinates(coords.x, coords.y)
        self.direction = direction

    def copy(self, grid: Grid) -> Kara:
        """Return a Kara with the same position and facing, bound to `grid`."""
        return Kara(grid, self.coords, self.direction)

    # -------------------------------------------------------------------------
    # Sensors
    # -------------------------------------------------------------------------

    def _cell(self, coords: Coordinates) -> Cell | None:
        try:
            return self.grid.at(coords)
        except OutOfBoundsError:
            return None

    def _is(self, coords: Coordinates, cell_type: CellType) -> bool:
        cell = self._cell(coords)
        return cell is not None and cell.type is cell_type

    def tree_front(self) -> bool:
        return self._is(self.direction.apply(self.coords), CellType.TREE)

    def tree_left(self) -> bool:
        return self._is(self.direction.left.apply(self.coords), CellType.TREE)

    def tree_right(self) -> bool:
        return self._is(self.direction.right.apply(self.coords), CellType.TREE)

    def mushroom_front(self) -> bool:
        return self._is(self.direction.apply(self.coords), CellType.MUSHROOM)

    def on_leaf(self) -> bool:
        return self._is(self.coords, CellType.CLOVER)

    def sensors(self) -> tuple[bool, bool, bool, bool, bool]:
        """All five sensor readings, in declaration order."""
        return (
            self.tree_front(),
            self.tree_left(),
            self.tree_right(),
            self.mushroom_front(),
            self.on_leaf(),
        )

    # -------------------------------------------------------------------------
    # Mutators
    # -------------------------------------------------------------------------

    def can_move(self, direction: Direction | None = None) -> bool:
        """Whether one step towards `direction` (default: facing) is legal."""
        destination = self.coords.move(direction or self.direction)
        cell = self._cell(destination)
        return cell is not None and cell.type is not CellType.TREE

    def move(self) -> None:
        """
        Step one cell forward.

        Raises:
            InvalidMoveError: If the destination is off the grid or a tree.
                Position and direction are unchanged.
        """
        if not self.can_move():
            raise InvalidMoveError(
                f"Unable to move from {self.coords} in direction {self.direction}!",
                coords=self.coords,
                direction=self.direction,
            )
        self.coords = self.coords.move(self.direction)

    def turn_left(self) -> None:
        self.direction = self.direction.left

    def turn_right(self) -> None:
        self.direction = self.direction.right

    def put_leaf(self) -> None:
        # Replaces mushrooms too
        self.grid.set(self.coords, Cells.CLOVER)

    def remove_leaf(self) -> None:
        if self.on_leaf():
            self.grid.clear(self.coords)

    def perform(self, action: Action) -> None:
        dispatch(self, action)

    def __repr__(self) -> str:
        return f"Kara(coords={self.coords}, direction={self.direction})"
