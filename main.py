#!/usr/bin/env python3
"""
Minesweeper - terminal entry point.

Usage:
    python main.py [width] [height] [mines] [--log-file PATH] [--verbose]
"""
import argparse
import logging
import sys

from src.msweep.board import BoardConfig
from src.msweep.decoder import ByteSource, InputDecoder
from src.msweep.session import GameSession
from src.msweep.terminal import TerminalFrontend


logger = logging.getLogger(__name__)


def configure_logging(args: argparse.Namespace) -> None:
    """Log to a file when asked, otherwise only warnings to stderr."""
    if args.log_file:
        logging.basicConfig(
            filename=args.log_file,
            level=logging.DEBUG if args.verbose else logging.INFO,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )
    else:
        logging.basicConfig(level=logging.WARNING)


def play(config: BoardConfig) -> None:
    """Run a session on the controlling terminal."""
    decoder = InputDecoder(ByteSource(sys.stdin.buffer))
    fd = sys.stdin.fileno() if sys.stdin.isatty() else None
    with TerminalFrontend(decoder, sys.stdout, fd) as frontend:
        GameSession(config, decoder, frontend).run()


def main() -> None:
    """Parse arguments and start the game."""
    parser = argparse.ArgumentParser(
        description="Simple terminal minesweeper"
    )
    parser.add_argument(
        "width", type=int, nargs="?", default=9, help="Board width"
    )
    parser.add_argument(
        "height", type=int, nargs="?", default=9, help="Board height"
    )
    parser.add_argument(
        "mines", type=int, nargs="?", default=None,
        help="Number of mines (default: 12.3%% of cells)",
    )
    parser.add_argument(
        "--log-file", default=None, help="Write a log to this file"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log debug detail"
    )
    args = parser.parse_args()
    configure_logging(args)

    try:
        config = BoardConfig(args.width, args.height, args.mines)
    except ValueError as error:
        print(f"Invalid board: {error}", file=sys.stderr)
        sys.exit(1)

    try:
        play(config)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        sys.exit(1)


if __name__ == "__main__":
    main()
