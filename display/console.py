"""Console stand-in for the control-board indicator LED.

The "LED" is a short marker written on the current terminal line; turning
it off blanks the line and returns the cursor to column 0.
"""

from __future__ import annotations

import shutil
import sys
from typing import Optional, Protocol, TextIO

DEFAULT_MARKER = "   *   "


class Display(Protocol):
    def write_marker(self) -> None: ...

    def clear_line(self) -> None: ...


class ConsoleDisplay:
    """Writes the indicator marker to a text stream (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None, marker: str = DEFAULT_MARKER):
        self._stream = stream if stream is not None else sys.stdout
        self.marker = marker

    def write_marker(self) -> None:
        self._stream.write(self.marker)
        self._stream.flush()

    def clear_line(self) -> None:
        width = shutil.get_terminal_size().columns
        self._stream.write("\r" + " " * width + "\r")
        self._stream.flush()
