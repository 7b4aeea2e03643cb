"""
Pytest configuration and shared fixtures.
"""
import io
import random
import pytest
import sys
from pathlib import Path
from typing import Iterable, List, Set, Tuple

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from msweep import (
    BaseFrontend,
    Board,
    BoardConfig,
    BoardSnapshot,
    ByteSource,
    Cell,
    InputDecoder,
    Outcome,
)


# ============================================================================
# Helpers
# ============================================================================

class ScriptedRandom(random.Random):
    """Random whose randrange replays a fixed sequence of values."""

    def __init__(self, values: Iterable[int]) -> None:
        super().__init__(0)
        self._values = list(values)

    def randrange(self, *args, **kwargs) -> int:
        return self._values.pop(0)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def board_with_mines(
    width: int,
    height: int,
    mines: List[Tuple[int, int]],
    clock: FakeClock = None,
) -> Board:
    """Build a board whose mines land on the given (x, y) positions."""
    config = BoardConfig(width, height, len(mines))
    rng = ScriptedRandom(y * width + x for x, y in mines)
    return Board(config, rng=rng, clock=clock or FakeClock())


def decoder_for(data: bytes) -> InputDecoder:
    return InputDecoder(ByteSource(io.BytesIO(data)))


class RecordingFrontend(BaseFrontend):
    """Front end that records calls and answers prompts from a script."""

    def __init__(self, quit_answers=(), again_answers=()) -> None:
        self.quit_answers = list(quit_answers)
        self.again_answers = list(again_answers)
        self.alerts = 0
        self.renders: List[BoardSnapshot] = []
        self.revealed: List[Set[Tuple[int, int]]] = []
        self.outcomes: List[Tuple[Outcome, float]] = []

    def render(self, snapshot: BoardSnapshot) -> None:
        self.renders.append(snapshot)

    def alert(self) -> None:
        self.alerts += 1

    def reveal_mines(self, snapshot, mines) -> None:
        self.revealed.append(set(mines))

    def confirm_quit(self) -> bool:
        return self.quit_answers.pop(0)

    def play_again(self, outcome: Outcome, elapsed: float) -> bool:
        self.outcomes.append((outcome, elapsed))
        return self.again_answers.pop(0)


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def default_board() -> Board:
    """Create a default 9x9 board with 9 mines."""
    return Board()


@pytest.fixture
def beginner_board() -> Board:
    """Create a 9x9 board with 10 mines."""
    return Board(BoardConfig(9, 9, 10))


@pytest.fixture
def empty_board() -> Board:
    """Create a board with no mines for cascade testing."""
    return Board(BoardConfig(5, 5, 0), clock=FakeClock())


@pytest.fixture
def corner_mine_board() -> Board:
    """
    5x5 board with one mine in the bottom-right corner.

    Counts:
        0 0 0 0 0
        0 0 0 0 0
        0 0 0 0 0
        0 0 0 1 1
        0 0 0 1 *
    """
    return board_with_mines(5, 5, [(4, 4)])


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def mine_cell() -> Cell:
    """Create a cell containing a mine."""
    return Cell(is_mine=True)


@pytest.fixture
def numbered_cell() -> Cell:
    """Create an open cell with adjacent mines."""
    cell = Cell(adjacent_mines=3)
    cell.open()
    return cell


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_config() -> BoardConfig:
    """Create a valid board configuration."""
    return BoardConfig(9, 9, 10)
