"""Console output helpers and button input for the text interface."""

from __future__ import annotations

import enum
import math
import re
import sys
import time
from typing import Iterable, Iterator, Optional, TextIO, Tuple

_APP_VERSION = "1.6.0"

RESET = "\x1b[0m"
RED_BACKGROUND = "\x1b[41m"
GREEN_BACKGROUND = "\x1b[42m"
BLUE_BACKGROUND = "\x1b[44m"
MAGENTA_BACKGROUND = "\x1b[45m"

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")
_TOKEN_SPLIT = re.compile(r"[\s,]+")


def get_app_version() -> str:
    """Return the application version string."""
    return _APP_VERSION


def _visible_length(text: str) -> int:
    return len(_ANSI_ESCAPE.sub("", text))


class Button(enum.IntFlag):
    """Controller buttons, combinable as bit flags."""

    NONE = 0
    A = 1 << 0
    B = 1 << 1
    X = 1 << 2
    Y = 1 << 3
    L = 1 << 6
    R = 1 << 7
    ZL = 1 << 8
    ZR = 1 << 9
    PLUS = 1 << 10
    MINUS = 1 << 11
    LEFT = 1 << 12
    UP = 1 << 13
    RIGHT = 1 << 14
    DOWN = 1 << 15


_KEY_NAMES = {
    "a": Button.A,
    "b": Button.B,
    "x": Button.X,
    "y": Button.Y,
    "l": Button.L,
    "r": Button.R,
    "zl": Button.ZL,
    "zr": Button.ZR,
    "+": Button.PLUS,
    "plus": Button.PLUS,
    "-": Button.MINUS,
    "minus": Button.MINUS,
    "left": Button.LEFT,
    "up": Button.UP,
    "right": Button.RIGHT,
    "down": Button.DOWN,
}


class Terminal:
    """A fixed-size text console fed by a stream of key lines."""

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        width: int = 80,
        height: int = 45,
        keys: Optional[Iterable[str]] = None,
    ) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.width = width
        self.height = height
        self._keys: Iterator[str] = iter(keys) if keys is not None else iter(sys.stdin)
        self._last_displayed_value: float = -1
        self._last_timestamp: float = 0.0

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def _next_line(self) -> Optional[str]:
        try:
            line = next(self._keys)
        except StopIteration:
            return None
        return line.rstrip("\r\n")

    def clear(self) -> None:
        """Clear the screen and move the cursor home."""
        self._write("\x1b[2J\x1b[H")

    def print_left(self, text: str, color: str = "", overwrite: bool = False) -> None:
        """Print a left-aligned line padded to the terminal width."""
        padding = " " * max(self.width - _visible_length(text), 0)
        end = RESET if color else ""
        self._write(f"{color}{text}{padding}{end}" + ("\r" if overwrite else "\n"))

    def print_right(self, text: str, color: str = "") -> None:
        """Print a right-aligned line."""
        padding = " " * max(self.width - _visible_length(text), 0)
        end = RESET if color else ""
        self._write(f"{color}{padding}{text}{end}\n")

    def print_left_right(self, left: str, right: str, color: str = "") -> None:
        """Print one line with text at both edges."""
        gap = max(self.width - _visible_length(left) - _visible_length(right), 1)
        end = RESET if color else ""
        self._write(f"{color}{left}{' ' * gap}{right}{end}\n")

    def rule(self) -> None:
        """Print a separator line of asterisks."""
        self._write("*" * self.width + "\n")

    def read_buttons(self) -> Optional[Tuple[Button, Button]]:
        """Read one frame of input as (pressed, held); None once input ends."""
        line = self._next_line()
        if line is None:
            return None
        buttons = Button.NONE
        for token in _TOKEN_SPLIT.split(line.strip().lower()):
            if token:
                buttons |= _KEY_NAMES.get(token, Button.NONE)
        return buttons, buttons

    def prompt(self, message: str, default: str = "") -> str:
        """Ask for a line of text; an empty answer keeps the default."""
        self._write(f"{message} [{default}]: ")
        line = self._next_line()
        if line is None or not line.strip():
            return default
        return line.strip()

    def display_loading(
        self,
        current_index: int,
        end_index: int,
        title: str,
        prefix: str,
        color: str = "",
        force_display: bool = False,
    ) -> bool:
        """Show a throttled percentage line; return whether it was drawn."""
        if end_index:
            percent = int(math.floor(current_index / end_index * 100.0 + 0.5))
        else:
            percent = 100
        now = time.time()
        if self._last_displayed_value == -1:
            self._last_timestamp = now
        if (
            self._last_displayed_value == -1
            or now - self._last_timestamp >= 1
            or current_index == 0
            or force_display
            or current_index >= end_index - 1
        ):
            self._last_timestamp = now
            self._last_displayed_value = percent
            self.print_left(f"{prefix}{percent}% / {title}", color, True)
            return True
        return False

    def reset_last_displayed_value(self) -> None:
        """Force the next loading line to be drawn."""
        self._last_displayed_value = -1

    def display_progress_bar(self, current: int, total: int, title: str) -> None:
        """Draw a progress bar line that the next line overwrites."""
        fraction = current / total if total > 0 else 1.0
        fraction = min(max(fraction, 0.0), 1.0)
        bar_width = max(self.width // 4, 10)
        filled = int(fraction * bar_width)
        percent = int(math.floor(fraction * 100.0 + 0.5))
        bar = "#" * filled + "-" * (bar_width - filled)
        self.print_left(f"[{bar}] {percent:3d}% {title}", MAGENTA_BACKGROUND, True)