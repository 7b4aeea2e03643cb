"""
Game session for Minesweeper.

Drives rounds of play: reads commands from the input decoder, applies
them to the board and reports to a front end. A session moves between
PLAYING, ROUND_END and TERMINATED.
"""
import logging
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Callable, Optional, Set, Tuple

from .board import Board, BoardConfig, BoardSnapshot, OpenResult
from .decoder import Char, Command, Digit, InputDecoder, Move


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

MAX_REPEAT = 2**31 - 1


class SessionState(Enum):
    """Phases of a game session."""

    PLAYING = auto()
    ROUND_END = auto()
    TERMINATED = auto()


class Outcome(Enum):
    """How a round ended."""

    WON = auto()
    LOST = auto()


def format_elapsed(seconds: float) -> str:
    """Format a duration as MM:SS, or HH:MM:SS from one hour up."""
    total = max(0, int(seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


# ============================================================================
# Repeat Count
# ============================================================================

class RepeatCounter:
    """
    Accumulates a decimal repeat prefix typed before a command.

    The count is 1 until a non-zero digit starts it; a leading zero is
    ignored. Taking the count resets it to 1.
    """

    def __init__(self, limit: int = MAX_REPEAT) -> None:
        self.limit = limit
        self._count = 1
        self._pending = False

    @property
    def count(self) -> int:
        """Current repeat count, 1 by default."""
        return self._count

    @property
    def pending(self) -> bool:
        """Check if digits have been typed since the last reset."""
        return self._pending

    def push(self, digit: int) -> bool:
        """
        Append a digit to the count.

        Returns:
            False if the digit would push the count past the limit, in
            which case the count is reset.
        """
        if self._pending:
            if self._count >= (self.limit - digit) // 10:
                self.reset()
                return False
            self._count = self._count * 10 + digit
        elif digit >= 1:
            self._count = digit
            self._pending = True
        return True

    def take(self) -> int:
        """Return the count and reset it."""
        count = self._count
        self.reset()
        return count

    def reset(self) -> None:
        self._count = 1
        self._pending = False


# ============================================================================
# Front End Interface
# ============================================================================

class BaseFrontend(ABC):
    """
    Abstract base class for whatever shows the game to the player.

    The session calls these hooks; none of them touch the board.
    """

    @abstractmethod
    def render(self, snapshot: BoardSnapshot) -> None:
        """Draw the board."""
        pass

    @abstractmethod
    def alert(self) -> None:
        """Signal a rejected action (terminal bell or similar)."""
        pass

    @abstractmethod
    def reveal_mines(
        self, snapshot: BoardSnapshot, mines: Set[Tuple[int, int]]
    ) -> None:
        """Show every mine after a detonation."""
        pass

    @abstractmethod
    def confirm_quit(self) -> bool:
        """Ask whether to really quit."""
        pass

    @abstractmethod
    def play_again(self, outcome: Outcome, elapsed: float) -> bool:
        """Report a finished round and ask whether to play another."""
        pass


# ============================================================================
# Game Session
# ============================================================================

class GameSession:
    """
    The game loop.

    Each iteration draws the board, checks for a win, then reads and
    applies one command. Digits build up a repeat count that the next
    movement uses; for any other command a pending count is an error
    and triggers an alert.
    """

    def __init__(
        self,
        config: BoardConfig,
        decoder: InputDecoder,
        frontend: BaseFrontend,
        board_factory: Optional[Callable[[BoardConfig], Board]] = None,
    ) -> None:
        """
        Initialize the session and its first board.

        Args:
            config: Board configuration used for every round.
            decoder: Source of player commands.
            frontend: Renderer and prompt provider.
            board_factory: Builds a board from the config (default: Board).
        """
        self.config = config
        self.decoder = decoder
        self.frontend = frontend
        self._board_factory = board_factory or Board
        self.repeat = RepeatCounter()
        self.state = SessionState.PLAYING
        self.outcome: Optional[Outcome] = None
        self.rounds_played = 0
        self.board = self._new_board()

    def _new_board(self) -> Board:
        board = self._board_factory(self.config)
        logger.info(
            "New round: %dx%d with %d mines",
            self.config.width, self.config.height, self.config.num_mines,
        )
        return board

    # ========================================================================
    # Loop
    # ========================================================================

    def run(self) -> None:
        """Play until the player quits or declines another round."""
        while self.state != SessionState.TERMINATED:
            self.step()
        logger.info("Session ended after %d rounds", self.rounds_played)

    def step(self) -> None:
        """
        Run one iteration of the loop.

        Input running out, whether mid-game or at a prompt, ends the
        session.
        """
        if self.state == SessionState.TERMINATED:
            return
        try:
            self._iterate()
        except EOFError:
            logger.info("Input closed, ending session")
            self.state = SessionState.TERMINATED

    def _iterate(self) -> None:
        if self.state == SessionState.ROUND_END:
            self._finish_round()
            return

        self.frontend.render(self.board.snapshot())
        if self.board.has_won():
            self._end_round(Outcome.WON)
            return

        self.handle(self.decoder.next_command())

    def handle(self, command: Command) -> None:
        """Apply one command while playing."""
        if isinstance(command, Digit):
            if not self.repeat.push(command.value):
                self.frontend.alert()
        elif isinstance(command, Move):
            self.board.move_cursor(command.direction, self.repeat.take())
        else:
            self._handle_char(command)

    def _handle_char(self, command: Char) -> None:
        had_repeat = self.repeat.pending
        self.repeat.reset()

        if command.char == "q":
            if self.frontend.confirm_quit():
                logger.info("Player quit")
                self.state = SessionState.TERMINATED
        elif command.char == "f":
            if not self.board.toggle_flag(*self.board.cursor):
                self.frontend.alert()
        elif command.char == "r":
            logger.info("Restarting round")
            self.board = self._new_board()
        elif command.char == " ":
            self._open_at_cursor()
        else:
            self.frontend.alert()

        if had_repeat:
            self.frontend.alert()

    def _open_at_cursor(self) -> None:
        result = self.board.open(*self.board.cursor)
        if result == OpenResult.BLOCKED:
            self.frontend.alert()
        elif result == OpenResult.DETONATED:
            self.frontend.reveal_mines(
                self.board.snapshot(show_mines=True),
                self.board.all_mine_positions(),
            )
            self._end_round(Outcome.LOST)

    # ========================================================================
    # Round End
    # ========================================================================

    def _end_round(self, outcome: Outcome) -> None:
        self.outcome = outcome
        self.state = SessionState.ROUND_END
        self.rounds_played += 1
        logger.info(
            "Round %s after %s", outcome.name.lower(),
            format_elapsed(self.board.elapsed()),
        )

    def _finish_round(self) -> None:
        """Ask for another round; start it or end the session."""
        if self.frontend.play_again(self.outcome, self.board.elapsed()):
            self.board = self._new_board()
            self.repeat.reset()
            self.outcome = None
            self.state = SessionState.PLAYING
        else:
            self.state = SessionState.TERMINATED
