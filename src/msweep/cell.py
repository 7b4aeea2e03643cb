"""
Cell module for Minesweeper.

Represents one grid position: its visual state (hidden/open/flagged)
and its content (mine or adjacent mine count).
"""
from enum import Enum, auto
from dataclasses import dataclass


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """Possible visual states of a cell."""

    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    Represents a single cell in the Minesweeper grid.

    Open and flagged are both derived from ``state``, so a cell can
    never be open and flagged at the same time.

    Attributes:
        is_mine: Whether this cell contains a mine.
        adjacent_mines: Count of mines in neighboring cells (0-8).
            Always 0 for a mine cell.
        state: Current visual state (hidden, revealed, or flagged).
    """

    is_mine: bool = False
    adjacent_mines: int = 0
    state: CellState = CellState.HIDDEN

    def open(self) -> bool:
        """
        Open this cell, clearing any flag on it.

        Returns:
            True if a flag was cleared in the process.
        """
        was_flagged = self.state == CellState.FLAGGED
        self.state = CellState.REVEALED
        return was_flagged

    def toggle_flag(self) -> bool:
        """
        Toggle flag on this cell.

        Returns:
            True if flag was toggled, False if cell is open.
        """
        if self.state == CellState.REVEALED:
            return False
        if self.state == CellState.HIDDEN:
            self.state = CellState.FLAGGED
        else:
            self.state = CellState.HIDDEN
        return True

    @property
    def is_open(self) -> bool:
        """Check if cell is open."""
        return self.state == CellState.REVEALED

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged."""
        return self.state == CellState.FLAGGED

    @property
    def is_hidden(self) -> bool:
        """Check if cell is neither open nor flagged."""
        return self.state == CellState.HIDDEN

    def to_observation(self, show_mines: bool = False) -> int:
        """
        Convert cell to a snapshot value.

        Args:
            show_mines: Report closed mine cells as 9 (end of round).

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            0-8: Open cell with adjacent mine count
            9: Mine (only when show_mines is set)
        """
        if show_mines and self.is_mine:
            return 9
        if self.state == CellState.HIDDEN:
            return -1
        if self.state == CellState.FLAGGED:
            return -2
        return self.adjacent_mines
