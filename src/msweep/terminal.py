"""
Terminal front end for Minesweeper.

Draws the board with ANSI escape codes, rings the bell on rejected
actions and asks yes/no questions. Used as a context manager it puts
the terminal into non-canonical no-echo mode on the alternate screen
and restores it on exit.
"""
import sys
import termios
import tty
from typing import List, Optional, Set, TextIO, Tuple

from .board import BoardSnapshot
from .decoder import Char, InputDecoder
from .session import BaseFrontend, Outcome, format_elapsed


# ============================================================================
# Constants
# ============================================================================

BELL = "\x07"
RESET = "\x1b[0m"
INVERSE = "\x1b[7m"
CLEAR_LINE = "\x1b[2K"
LINE_UP = "\x1b[A"
ENTER_ALT_SCREEN = "\x1b[?1049h\x1b[2J\x1b[H"
LEAVE_ALT_SCREEN = "\x1b[?1049l"

GREEN = "\x1b[32m"
YELLOW = "\x1b[33m"
RED = "\x1b[31m"

HELP_LINES = {
    5: "'f' to flag, <space> to open",
    6: "arrow keys to move, 'r' to restart",
    7: "'q' to quit",
}


def goto(x: int, y: int) -> str:
    """Escape code moving the terminal cursor to 0-indexed (x, y)."""
    return f"\x1b[{y + 1};{x + 1}H"


def cell_position(x: int, y: int) -> Tuple[int, int]:
    """Screen position of board cell (x, y) inside the frame."""
    return 2 + 2 * x, 1 + y


def draw_cell(value: int) -> str:
    """
    Render one snapshot value.

    Hidden cells are '.', flags '#', mines '*', zero counts blank.
    Counts are coloured green (1), yellow (2-4) or red (5+).
    """
    if value == -1:
        return "."
    if value == -2:
        return "#"
    if value == 9:
        return "*"
    if value == 0:
        return " "
    if value == 1:
        color = GREEN
    elif value <= 4:
        color = YELLOW
    else:
        color = RED
    return f"{color}{value}{RESET}"


def _status_line(snapshot: BoardSnapshot, row: int) -> str:
    if row == 1:
        return f"{snapshot.width}x{snapshot.height} minesweeper"
    if row == 2:
        return f"{snapshot.num_mines} mines"
    if row == 3:
        plural = "" if snapshot.flagged == 1 else "s"
        return f"{snapshot.flagged} flag{plural} placed "
    return HELP_LINES.get(row, "")


def draw_board(snapshot: BoardSnapshot) -> str:
    """Render the framed board with its side panel, without cursor moves."""
    border = "+" + "--" * snapshot.width + "-+"
    lines: List[str] = [border]
    for y in range(snapshot.height):
        row = "|"
        for x in range(snapshot.width):
            row += " " + draw_cell(int(snapshot.cells[y, x]))
        row += " |"
        status = _status_line(snapshot, y)
        if status:
            row += "   " + status
        lines.append(row)
    lines.append(border)
    return "\n".join(lines) + "\n"


# ============================================================================
# Terminal Front End
# ============================================================================

class TerminalFrontend(BaseFrontend):
    """
    Front end drawing to a VT100-compatible terminal.

    Prompts read their answers through the same decoder the game uses.
    """

    def __init__(
        self,
        decoder: InputDecoder,
        out: TextIO = sys.stdout,
        fd: Optional[int] = None,
    ) -> None:
        """
        Initialize the front end.

        Args:
            decoder: Key decoder used to read prompt answers.
            out: Stream to draw on.
            fd: Terminal file descriptor to switch modes on; None leaves
                the terminal mode alone.
        """
        self.decoder = decoder
        self.out = out
        self.fd = fd
        self._saved_attrs: Optional[list] = None
        self._prompt_row = 0
        self._cursor = (0, 0)

    def __enter__(self) -> "TerminalFrontend":
        if self.fd is not None:
            self._saved_attrs = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd, termios.TCSAFLUSH)
            attrs = termios.tcgetattr(self.fd)
            # no newline echo, no special handling of ^V and ^O
            attrs[3] &= ~(termios.ECHONL | termios.IEXTEN)
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, attrs)
        self._write(ENTER_ALT_SCREEN)
        return self

    def __exit__(self, *exc_info) -> None:
        if self._saved_attrs is not None:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, self._saved_attrs)
            self._saved_attrs = None
        self._write(LEAVE_ALT_SCREEN)

    def _write(self, text: str) -> None:
        self.out.write(text)
        self.out.flush()

    def _goto_cursor(self) -> str:
        return goto(*cell_position(*self._cursor))

    # ========================================================================
    # BaseFrontend Hooks
    # ========================================================================

    def render(self, snapshot: BoardSnapshot) -> None:
        self._cursor = snapshot.cursor
        self._prompt_row = snapshot.height + 2
        self._write(goto(0, 0) + draw_board(snapshot) + self._goto_cursor())

    def alert(self) -> None:
        self._write(BELL)

    def reveal_mines(
        self, snapshot: BoardSnapshot, mines: Set[Tuple[int, int]]
    ) -> None:
        """Redraw every mine in inverse video."""
        parts = [INVERSE]
        for x, y in sorted(mines):
            parts.append(goto(*cell_position(x, y)))
            parts.append(draw_cell(int(snapshot.cells[y, x])))
        parts.append(RESET)
        parts.append(self._goto_cursor())
        self._write("".join(parts))

    def confirm_quit(self) -> bool:
        answer = self.prompt("Really quit?")
        if not answer:
            self._write(CLEAR_LINE)
        return answer

    def play_again(self, outcome: Outcome, elapsed: float) -> bool:
        message = "You win!" if outcome == Outcome.WON else "BOOM!"
        header = f"{INVERSE}{format_elapsed(elapsed)} ({message}){RESET}"
        return self.prompt(f"{header}\nPlay again?")

    # ========================================================================
    # Prompts
    # ========================================================================

    def prompt(self, message: str) -> bool:
        """
        Ask a yes/no question below the board.

        'y' answers yes; 'n' or Enter answers no. Other keys are
        ignored.
        """
        self._write(f"{goto(0, self._prompt_row)}{message} [y/N] ")
        while True:
            command = self.decoder.next_command()
            if not isinstance(command, Char):
                continue
            if command.char in ("n", "\n", "\r"):
                answer = False
                break
            if command.char == "y":
                answer = True
                break
        self._write(CLEAR_LINE + LINE_UP + CLEAR_LINE)
        return answer
