"""
Input decoder for Minesweeper.

Turns a raw keyboard byte stream into discrete commands: digits for
repeat counts, cursor moves (vi keys and arrow-key escape sequences)
and plain characters.
"""
import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import BinaryIO, Optional, Union

from .board import Direction


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

ESC = 0x1B
CSI_FINAL_MIN = 64
CSI_FINAL_MAX = 126

VI_KEYS = {
    ord("h"): Direction.LEFT,
    ord("j"): Direction.DOWN,
    ord("k"): Direction.UP,
    ord("l"): Direction.RIGHT,
}

ARROW_KEYS = {
    ord("A"): Direction.UP,
    ord("B"): Direction.DOWN,
    ord("C"): Direction.RIGHT,
    ord("D"): Direction.LEFT,
}


# ============================================================================
# Commands
# ============================================================================

@dataclass(frozen=True)
class Digit:
    """A decimal digit key, 0-9."""

    value: int


@dataclass(frozen=True)
class Move:
    """A cursor movement key."""

    direction: Direction


@dataclass(frozen=True)
class Char:
    """Any other key, as a one-character string."""

    char: str


Command = Union[Digit, Move, Char]


# ============================================================================
# Byte Source
# ============================================================================

class ByteSource:
    """
    Blocking byte reader with a one-byte push-back buffer.

    Wraps any binary stream with a ``read(n)`` method, such as
    ``sys.stdin.buffer`` or ``io.BytesIO``.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._pushed: Optional[int] = None

    def read(self) -> int:
        """
        Read one byte, blocking until it is available.

        Raises:
            EOFError: If the stream is exhausted.
        """
        if self._pushed is not None:
            byte, self._pushed = self._pushed, None
            return byte
        data = self._stream.read(1)
        if not data:
            raise EOFError("Input stream closed")
        return data[0]

    def unread(self, byte: int) -> None:
        """Push one byte back so the next read returns it."""
        if self._pushed is not None:
            raise RuntimeError("Push-back buffer already holds a byte")
        self._pushed = byte


# ============================================================================
# Decoder State Machine
# ============================================================================

class _State(Enum):
    START = auto()
    ESC_SEEN = auto()
    CSI = auto()
    SKIP_UNKNOWN = auto()


class InputDecoder:
    """
    Decodes key presses into commands, one command per call.

    States:
        START: plain keys; ESC moves on to ESC_SEEN.
        ESC_SEEN: '[' starts a CSI sequence. Any other byte is pushed
            back and also returned as a Char, so the ESC itself is
            dropped.
        CSI: A/B/C/D are arrow keys, anything else is skipped.
        SKIP_UNKNOWN: bytes are dropped up to and including the CSI
            final byte (64-126), then decoding starts over without
            producing a command.
    """

    def __init__(self, source: ByteSource) -> None:
        self.source = source

    def next_command(self) -> Command:
        """
        Block until a full command has been read.

        Raises:
            EOFError: If input ends.
        """
        state = _State.START
        byte = 0
        while True:
            if state == _State.START:
                byte = self.source.read()
                if ord("0") <= byte <= ord("9"):
                    return Digit(byte - ord("0"))
                if byte in VI_KEYS:
                    return Move(VI_KEYS[byte])
                if byte == ESC:
                    state = _State.ESC_SEEN
                    continue
                return Char(chr(byte))

            if state == _State.ESC_SEEN:
                byte = self.source.read()
                if byte == ord("["):
                    state = _State.CSI
                    continue
                self.source.unread(byte)
                return Char(chr(byte))

            if state == _State.CSI:
                byte = self.source.read()
                if byte in ARROW_KEYS:
                    return Move(ARROW_KEYS[byte])
                state = _State.SKIP_UNKNOWN
                continue

            # SKIP_UNKNOWN: the byte that ended CSI counts as the first one
            while not CSI_FINAL_MIN <= byte <= CSI_FINAL_MAX:
                byte = self.source.read()
            logger.debug("Discarded unknown escape sequence ending in %r", chr(byte))
            state = _State.START
