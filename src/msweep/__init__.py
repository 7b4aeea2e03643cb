"""
Minesweeper game module.

Provides the board engine, the key decoder, the game session loop and
a terminal front end.
"""
from .cell import Cell, CellState
from .board import Board, BoardConfig, BoardSnapshot, Direction, OpenResult
from .decoder import ByteSource, Char, Command, Digit, InputDecoder, Move
from .session import (
    BaseFrontend,
    GameSession,
    Outcome,
    RepeatCounter,
    SessionState,
    format_elapsed,
)
from .environment import MinesweeperEnv

__all__ = [
    "Cell",
    "CellState",
    "Board",
    "BoardConfig",
    "BoardSnapshot",
    "Direction",
    "OpenResult",
    "ByteSource",
    "Char",
    "Command",
    "Digit",
    "InputDecoder",
    "Move",
    "BaseFrontend",
    "GameSession",
    "Outcome",
    "RepeatCounter",
    "SessionState",
    "format_elapsed",
    "MinesweeperEnv",
]
