"""
Board module for Minesweeper.

Implements the game board with deferred mine placement, flood
revealing, flagging, cursor movement and win detection.
"""
import logging
import random
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, List, Optional, Set, Tuple

import numpy as np

from .cell import Cell


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

MINE_DENSITY = 0.123


class Direction(Enum):
    """Cursor movement directions as (dx, dy) steps."""

    UP = (0, -1)
    RIGHT = (1, 0)
    DOWN = (0, 1)
    LEFT = (-1, 0)

    @property
    def dx(self) -> int:
        """Column step."""
        return self.value[0]

    @property
    def dy(self) -> int:
        """Row step."""
        return self.value[1]


class OpenResult(Enum):
    """Outcome of opening a cell."""

    OK = auto()
    BLOCKED = auto()
    DETONATED = auto()


@dataclass
class BoardConfig:
    """
    Configuration for a Minesweeper board.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        num_mines: Total mines to place. Defaults to about 12.3% of
            the cells, rounded down.
    """

    width: int = 9
    height: int = 9
    num_mines: Optional[int] = None

    def __post_init__(self) -> None:
        """Fill in the default mine count and validate."""
        self._validate_dimensions()
        if self.num_mines is None:
            self.num_mines = int(MINE_DENSITY * self.width * self.height)
        self._validate_mines()

    def _validate_dimensions(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError("Board dimensions must be positive")

    def _validate_mines(self) -> None:
        if self.num_mines < 0:
            raise ValueError("Number of mines cannot be negative")
        max_mines = self.width * self.height - 1
        if self.num_mines > max_mines:
            raise ValueError(f"Too many mines (max {max_mines})")

    @property
    def total_cells(self) -> int:
        """Cells on the board."""
        return self.width * self.height


@dataclass(frozen=True, eq=False)
class BoardSnapshot:
    """
    Read-only view of a board for rendering.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        cursor: (x, y) cursor position.
        num_mines: Mines on the board.
        flagged: Number of flagged cells.
        opened: Number of open cells.
        elapsed: Seconds since mines were placed (0 before that).
        cells: int8 grid indexed [y, x], see Cell.to_observation.
    """

    width: int
    height: int
    cursor: Tuple[int, int]
    num_mines: int
    flagged: int
    opened: int
    elapsed: float
    cells: np.ndarray


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Minesweeper game board.

    Cells live in a flat list indexed ``y * width + x``. Mines are laid
    on the first open, never on the opened cell. A board is used for a
    single round; a new round gets a new Board.
    """

    config: BoardConfig = field(default_factory=lambda: BoardConfig())
    rng: random.Random = field(default_factory=random.Random, repr=False)
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    _cells: List[Cell] = field(init=False, repr=False)
    _cursor_x: int = field(init=False, default=0)
    _cursor_y: int = field(init=False, default=0)
    _flagged_count: int = field(init=False, default=0)
    _opened_count: int = field(init=False, default=0)
    _start_time: Optional[float] = field(init=False, default=None)

    def __post_init__(self) -> None:
        """Create the empty grid."""
        self._cells = [Cell() for _ in range(self.config.total_cells)]

    # ========================================================================
    # Grid Utilities (Low-level)
    # ========================================================================

    def _index(self, x: int, y: int) -> int:
        return y * self.config.width + x

    def _is_valid_position(self, x: int, y: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= x < self.config.width and 0 <= y < self.config.height

    def _get_neighbors(self, x: int, y: int) -> List[Tuple[int, int]]:
        """
        Get the up-to-8 neighboring positions, clipped at the edges.

        Args:
            x: Column of center cell.
            y: Row of center cell.

        Returns:
            List of (x, y) tuples for valid neighbors.
        """
        neighbors = []
        for delta_y in (-1, 0, 1):
            for delta_x in (-1, 0, 1):
                if delta_x == 0 and delta_y == 0:
                    continue
                new_x = x + delta_x
                new_y = y + delta_y
                if self._is_valid_position(new_x, new_y):
                    neighbors.append((new_x, new_y))
        return neighbors

    def _get_orthogonal_neighbors(
        self, x: int, y: int
    ) -> List[Tuple[int, int]]:
        """Get the up-to-4 left/up/right/down neighbors."""
        neighbors = []
        for direction in (Direction.LEFT, Direction.UP,
                          Direction.RIGHT, Direction.DOWN):
            new_x = x + direction.dx
            new_y = y + direction.dy
            if self._is_valid_position(new_x, new_y):
                neighbors.append((new_x, new_y))
        return neighbors

    # ========================================================================
    # Mine Placement (Low-level)
    # ========================================================================

    def generate(self, exclude_x: int, exclude_y: int) -> None:
        """
        Place mines at random, keeping one cell mine-free.

        Draws uniformly random cell indices and rejects the excluded
        cell and cells that already hold a mine. Only the excluded cell
        itself is guaranteed safe; its neighbors may hold mines.

        Args:
            exclude_x: Column of the cell to keep mine-free.
            exclude_y: Row of the cell to keep mine-free.

        Raises:
            RuntimeError: If mines were already placed.
            IndexError: If the excluded position is off the board.
        """
        if self.is_generated:
            raise RuntimeError("Mines already placed on this board")
        if not self._is_valid_position(exclude_x, exclude_y):
            raise IndexError(f"Position ({exclude_x}, {exclude_y}) is off the board")

        excluded = self._index(exclude_x, exclude_y)
        remaining = self.config.num_mines
        while remaining > 0:
            pos = self.rng.randrange(self.config.total_cells)
            if pos == excluded or self._cells[pos].is_mine:
                continue
            self._lay_mine(pos)
            remaining -= 1

        self._start_time = self.clock()
        logger.debug(
            "Placed %d mines on %dx%d board, excluding (%d, %d)",
            self.config.num_mines, self.config.width, self.config.height,
            exclude_x, exclude_y,
        )

    def _lay_mine(self, pos: int) -> None:
        """Mark a mine and bump the counts of its non-mine neighbors."""
        cell = self._cells[pos]
        cell.is_mine = True
        cell.adjacent_mines = 0
        x, y = pos % self.config.width, pos // self.config.width
        for neighbor_x, neighbor_y in self._get_neighbors(x, y):
            neighbor = self._cells[self._index(neighbor_x, neighbor_y)]
            if not neighbor.is_mine:
                neighbor.adjacent_mines += 1

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def reveal(self, x: int, y: int) -> bool:
        """
        Open a cell and flood-fill outward from it.

        Cells with a non-zero count end the flood; zero-count cells
        continue it to their left/up/right/down neighbors. An explicit
        stack keeps deep floods off the call stack. Flags on flooded
        cells are cleared.

        Args:
            x: Column to reveal.
            y: Row to reveal.

        Returns:
            True if the cell was opened, False if it was blocked
            (flagged, already open, or off the board).
        """
        if not self._is_valid_position(x, y):
            return False
        cell = self._cells[self._index(x, y)]
        if cell.is_open or cell.is_flagged:
            return False

        opened_before = self._opened_count
        stack = [(x, y)]
        while stack:
            cur_x, cur_y = stack.pop()
            cell = self._cells[self._index(cur_x, cur_y)]
            if cell.is_open:
                continue
            if cell.open():
                self._flagged_count -= 1
            self._opened_count += 1
            if cell.adjacent_mines != 0:
                continue
            for neighbor_x, neighbor_y in self._get_orthogonal_neighbors(cur_x, cur_y):
                if not self._cells[self._index(neighbor_x, neighbor_y)].is_open:
                    stack.append((neighbor_x, neighbor_y))

        logger.debug(
            "Revealed (%d, %d): %d cells opened",
            x, y, self._opened_count - opened_before,
        )
        return True

    def open(self, x: int, y: int) -> OpenResult:
        """
        Open a cell on the player's behalf.

        Places the mines first if this is the board's first open.

        Args:
            x: Column to open.
            y: Row to open.

        Returns:
            BLOCKED if the cell is flagged, open or off the board,
            DETONATED if it holds a mine (board left unchanged),
            OK otherwise.
        """
        if not self._is_valid_position(x, y):
            return OpenResult.BLOCKED
        if not self.is_generated:
            self.generate(x, y)

        cell = self._cells[self._index(x, y)]
        if cell.is_flagged or cell.is_open:
            return OpenResult.BLOCKED
        if cell.is_mine:
            logger.debug("Mine detonated at (%d, %d)", x, y)
            return OpenResult.DETONATED

        self.reveal(x, y)
        return OpenResult.OK

    def toggle_flag(self, x: int, y: int) -> bool:
        """
        Toggle flag on a cell.

        Args:
            x: Column.
            y: Row.

        Returns:
            True if flag was toggled, False if the cell is open or off
            the board.
        """
        if not self._is_valid_position(x, y):
            return False
        cell = self._cells[self._index(x, y)]
        if not cell.toggle_flag():
            return False
        self._flagged_count += 1 if cell.is_flagged else -1
        return True

    def move_cursor(self, direction: Direction, steps: int = 1) -> int:
        """
        Move the cursor, stopping at the board edge.

        Args:
            direction: Direction to move in.
            steps: Number of steps requested.

        Returns:
            Number of steps actually taken.
        """
        taken = 0
        while taken < steps:
            new_x = self._cursor_x + direction.dx
            new_y = self._cursor_y + direction.dy
            if not self._is_valid_position(new_x, new_y):
                break
            self._cursor_x, self._cursor_y = new_x, new_y
            taken += 1
        return taken

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def width(self) -> int:
        """Number of columns."""
        return self.config.width

    @property
    def height(self) -> int:
        """Number of rows."""
        return self.config.height

    @property
    def num_mines(self) -> int:
        """Mines on the board, placed or not."""
        return self.config.num_mines

    @property
    def cursor(self) -> Tuple[int, int]:
        """Current (x, y) cursor position."""
        return self._cursor_x, self._cursor_y

    @property
    def flagged_count(self) -> int:
        """Number of flagged cells."""
        return self._flagged_count

    @property
    def opened_count(self) -> int:
        """Number of open cells."""
        return self._opened_count

    @property
    def start_time(self) -> Optional[float]:
        """Clock reading when mines were placed, or None."""
        return self._start_time

    @property
    def is_generated(self) -> bool:
        """Check if mines have been placed."""
        return self._start_time is not None

    def has_won(self) -> bool:
        """Check if every non-mine cell is open."""
        if not self.is_generated:
            return False
        return self._opened_count == self.config.total_cells - self.config.num_mines

    def elapsed(self) -> float:
        """Seconds since mines were placed, 0 before the first open."""
        if self._start_time is None:
            return 0.0
        return max(0.0, self.clock() - self._start_time)

    def get_cell(self, x: int, y: int) -> Optional[Cell]:
        """Get cell at position, or None if invalid."""
        if not self._is_valid_position(x, y):
            return None
        return self._cells[self._index(x, y)]

    def all_mine_positions(self) -> Set[Tuple[int, int]]:
        """Get the (x, y) position of every mine."""
        width = self.config.width
        return {
            (pos % width, pos // width)
            for pos, cell in enumerate(self._cells)
            if cell.is_mine
        }

    def get_observation(self, show_mines: bool = False) -> np.ndarray:
        """
        Get board state as a numpy array.

        Args:
            show_mines: Report every mine as 9.

        Returns:
            2D int8 array indexed [y, x] where:
                -1 = hidden
                -2 = flagged
                0-8 = open with adjacent count
                9 = mine (show_mines only)
        """
        obs = np.array(
            [cell.to_observation(show_mines) for cell in self._cells],
            dtype=np.int8,
        )
        return obs.reshape(self.config.height, self.config.width)

    def snapshot(self, show_mines: bool = False) -> BoardSnapshot:
        """Capture everything a renderer needs to draw the board."""
        return BoardSnapshot(
            width=self.config.width,
            height=self.config.height,
            cursor=self.cursor,
            num_mines=self.config.num_mines,
            flagged=self._flagged_count,
            opened=self._opened_count,
            elapsed=self.elapsed(),
            cells=self.get_observation(show_mines),
        )
