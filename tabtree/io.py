from __future__ import annotations

import os
import sys
from typing import IO, TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pastel import Pastel

TABTREE_DEBUG = os.environ.get("TABTREE_DEBUG", "0") == "1"

DEBUG_VERBOSITY = 3

STYLES = {
    "u": ("default", ("underline",)),
    "em": ("cyan", ()),
    "em2": ("cyan", ("italic",)),
    "h2": ("default", ("bold",)),
    "h2-dim": ("default", ("dark",)),
    "error": ("light_red", ("bold",)),
}


def guess_ansi_support(file) -> bool:
    if os.environ.get("NO_COLOR", "0")[0] != "0":
        # https://no-color.org/
        return False

    return (
        (sys.platform != "win32" or "ANSICON" in os.environ)
        and hasattr(file, "isatty")
        and file.isatty()
    )


class TabTreeIO:
    """
    Output for both modes of the tool. Messages for people are styled with pastel
    markup and filtered by verbosity: the level from config plus the offset from
    -v/-q flags. Completion candidates are written to stdout as plain lines with
    neither applied. Diagnostics go to the error stream.

    Setting TABTREE_DEBUG=1 pins the verbosity at the debug level.
    """

    output: IO
    error_output: IO
    ansi_enabled: bool

    _level: int = 0
    _offset: int = 0
    _color: Pastel
    _default_io: TabTreeIO | None = None

    def __init__(
        self,
        *,
        parent: TabTreeIO | None = None,
        output: IO | None = None,
        error: IO | None = None,
        ansi: bool | None = None,
        make_default: bool = True,
    ):
        if parent is not None:
            self.output = output or parent.output
            self.error_output = error or parent.error_output
            self.ansi_enabled = parent.ansi_enabled if ansi is None else ansi
            self._level, self._offset = parent._level, parent._offset
        else:
            self.output = output or sys.stdout
            self.error_output = error or sys.stderr
            self.ansi_enabled = (
                guess_ansi_support(self.output) if ansi is None else ansi
            )

        if TABTREE_DEBUG:
            self._level, self._offset = DEBUG_VERBOSITY, 0
        self._init_colors()

        if make_default:
            TabTreeIO._default_io = self

    def _init_colors(self):
        from pastel import Pastel

        self._color = Pastel(self.ansi_enabled)
        for name, (foreground, options) in STYLES.items():
            self._color.add_style(name, foreground, options=list(options) or None)

    @classmethod
    def get_default_io(cls) -> TabTreeIO:
        if cls._default_io is None:
            cls._default_io = cls()
        return cls._default_io

    @property
    def verbosity(self) -> int:
        return self._level + self._offset

    def configure(
        self,
        *,
        ansi_enabled: bool | None = None,
        baseline: int | None = None,
        offset: int | None = None,
    ):
        """
        baseline comes from the config file, offset from the command line. Either can
        be updated independently, but neither while TABTREE_DEBUG is set.
        """
        if ansi_enabled is not None and ansi_enabled != self.ansi_enabled:
            self.ansi_enabled = ansi_enabled
            self._init_colors()
        if TABTREE_DEBUG:
            return
        if baseline is not None:
            self._level = baseline
        if offset is not None:
            self._offset = offset

    def print(
        self, message: str, *values: Any, message_verbosity: int = 0, end: str = "\n"
    ):
        if message_verbosity <= self.verbosity:
            self._emit(self.output, message, values, end)

    def print_error(
        self, message: str, *values: Any, message_verbosity: int = -2, end: str = "\n"
    ):
        if message_verbosity <= self.verbosity:
            self._emit(self.error_output, message, values, end)

    def print_debug(self, message: str, *values: Any, end: str = "\n"):
        if self.is_debug_enabled():
            self._emit(self.error_output, message, values, end)

    def is_debug_enabled(self) -> bool:
        return self.verbosity >= DEBUG_VERBOSITY

    def write_candidates(self, candidates: Iterable[str]):
        for candidate in candidates:
            self.output.write(candidate + "\n")
        self.output.flush()

    def _emit(self, stream: IO, message: str, values: tuple, end: str):
        if values:
            message = message % values
        print(self._color.colorize(message), end=end, file=stream, flush=True)
