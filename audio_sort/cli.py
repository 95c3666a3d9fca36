from __future__ import annotations

import argparse
import logging
import sys
import traceback
from pathlib import Path
from typing import NoReturn, Optional, Sequence

from .config import load_settings
from .errors import ApplicationError, ArgumentsError
from .organizer import organize

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"
UNHANDLED_EXIT_CODE = 255

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}


class ShortPathFormatter(logging.Formatter):
    def __init__(self, fmt: str, roots: list[Path]) -> None:
        super().__init__(fmt)
        self.roots = [str(root) for root in roots if root]

    def _shorten(self, message: str) -> str:
        for root in self.roots:
            if not message:
                break
            message = message.replace(f"{root}/", "")
        return message

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        return self._shorten(message)


class ColorFormatter(ShortPathFormatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


class ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise ArgumentsError(message)


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="audio-sort",
        description="Sort audio files into Artist/Album/Track using their tags",
    )
    parser.add_argument("root", type=Path, help="Directory to reorganize in place")
    parser.add_argument("--verbose", action="store_true", help="Be verbose")
    parser.add_argument("--config", type=Path, help="Path to audio-sort.yaml")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only report the planned moves",
    )
    return parser


def configure_logging(verbose: bool, root: Path) -> logging.Logger:
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.INFO if verbose else logging.WARNING)
    handler = logging.StreamHandler()
    if sys.stderr.isatty():
        handler.setFormatter(ColorFormatter(LOG_FORMAT, [root]))
    else:
        handler.setFormatter(ShortPathFormatter(LOG_FORMAT, [root]))
    root_logger.addHandler(handler)
    logging.getLogger("mutagen").setLevel(logging.WARNING)
    return logging.getLogger("audio_sort")


def run(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    root = args.root.expanduser().resolve()
    if not root.is_dir():
        raise ArgumentsError(f"Not a directory: {args.root}")
    settings = load_settings(args.config)
    log = configure_logging(args.verbose, root)
    organize(root, settings=settings, log=log, dry_run=args.dry_run)


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        run(argv)
    except ApplicationError as exc:
        print(str(exc), file=sys.stderr)
        return exc.exit_code
    except Exception as exc:
        print(f"Unhandled error: {exc!r}", file=sys.stderr)
        print(traceback.format_exc(), end="", file=sys.stderr)
        return UNHANDLED_EXIT_CODE
    return 0
