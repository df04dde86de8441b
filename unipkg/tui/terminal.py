"""
Exclusive ownership of the user's terminal.

TerminalSession puts stdin in cbreak mode and switches to the alternate
screen on enter, and undoes both exactly once on exit, whatever the exit
path. Failing to restore the terminal raises TerminalError.
"""

import codecs
import logging
import os
import select
import sys
import termios
import tty
from typing import IO, Any, List, Optional, Tuple

import readchar
from rich.console import Console, RenderableType
from rich.errors import ConsoleError
from rich.live import Live

from unipkg.core.exceptions import TerminalError
from unipkg.tui.keymap import BACK_TAB


logger = logging.getLogger(__name__)

CONTROLLING_TTY = "/dev/tty"
READ_SIZE = 32

# Multi-byte sequences a single keypress can produce, longest first.
ESCAPE_SEQUENCES = sorted(
    {
        value for value in vars(readchar.key).values()
        if isinstance(value, str) and len(value) > 1 and value.startswith("\x1b")
    } | {BACK_TAB},
    key=len,
    reverse=True
)


def split_keys(text: str) -> List[str]:
    """
    Split decoded terminal input into individual keys.

    Known escape sequences (arrows, shift-tab, ...) stay whole; anything else
    is one key per character, so an unknown sequence starts with a bare ESC.
    """
    keys = []
    while text:
        key = text[0]
        if key == "\x1b":
            key = next((seq for seq in ESCAPE_SEQUENCES if text.startswith(seq)), key)
        keys.append(key)
        text = text[len(key):]
    return keys


class TerminalSession:
    """
    Context manager around cbreak mode and a full-screen rich Live display.
    """

    def __init__(self, console: Optional[Console] = None, stdin: Any = None):
        """
        Initialize the session. Nothing is acquired until ``__enter__``.

        Args:
            console: Console to draw on. If None, stdout is used when it is a
                terminal, otherwise the controlling terminal is opened.
            stdin: Stream to read keys from. Defaults to sys.stdin.
        """
        self.console = console
        self.stdin = stdin or sys.stdin
        self._owns_console = console is None
        self._tty_file: Optional[IO[str]] = None
        self._fd: Optional[int] = None
        self._saved_attrs: Optional[list] = None
        self._live: Optional[Live] = None
        self._pending: List[str] = []
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    @property
    def active(self) -> bool:
        return self._live is not None or self._saved_attrs is not None

    @property
    def size(self) -> Tuple[int, int]:
        width, height = (self.console or Console()).size
        return width, height

    def __enter__(self) -> "TerminalSession":
        if self.active:
            raise TerminalError("Terminal session is already active")

        try:
            if self.console is None:
                self.console = self._open_console()
            if not self.console.is_terminal:
                raise TerminalError("output is not a terminal")

            self._fd = self.stdin.fileno()
            self._saved_attrs = termios.tcgetattr(self._fd)
            tty.setcbreak(self._fd)
            self._live = Live(
                console=self.console,
                screen=True,
                auto_refresh=False,
                transient=True,
                redirect_stdout=False,
                redirect_stderr=False
            )
            self._live.start()
        except (TerminalError, termios.error, OSError, ValueError, ConsoleError) as e:
            try:
                self.close()
            finally:
                self._release_console()
            raise TerminalError(f"Could not acquire terminal: {e}") from e

        logger.debug("Entered alternate screen")
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    def _open_console(self) -> Console:
        """Console on stdout, or on the controlling terminal when stdout is redirected."""
        if sys.stdout.isatty():
            return Console()
        logger.debug(f"stdout is not a terminal, drawing on {CONTROLLING_TTY}")
        self._tty_file = open(CONTROLLING_TTY, "w", encoding="utf-8")
        return Console(file=self._tty_file)

    def _release_console(self) -> None:
        tty_file, self._tty_file = self._tty_file, None
        if tty_file is not None:
            tty_file.close()
        if self._owns_console:
            self.console = None

    def close(self) -> None:
        """
        Leave the alternate screen and restore terminal attributes.

        Safe to call more than once; only the first call does anything.

        Raises:
            TerminalError: If either step fails. Both steps are always attempted.
        """
        errors = []

        live, self._live = self._live, None
        if live is not None:
            try:
                live.stop()
            except Exception as e:
                errors.append(e)

        attrs, self._saved_attrs = self._saved_attrs, None
        if attrs is not None:
            try:
                termios.tcsetattr(self._fd, termios.TCSADRAIN, attrs)
            except (termios.error, OSError) as e:
                errors.append(e)

        if live is not None or attrs is not None:
            try:
                self._release_console()
            except OSError as e:
                errors.append(e)
        self._pending.clear()

        if errors:
            raise TerminalError(f"Could not restore terminal: {errors[0]}") from errors[0]
        logger.debug("Terminal restored")

    def draw(self, renderable: RenderableType) -> None:
        """Replace the screen contents with a renderable."""
        if self._live is None:
            raise TerminalError("Terminal session is not active")
        try:
            self._live.update(renderable, refresh=True)
        except (OSError, ConsoleError) as e:
            raise TerminalError(f"Could not draw to terminal: {e}") from e

    def poll_key(self, timeout: float) -> Optional[str]:
        """
        Wait up to ``timeout`` seconds for a keypress.

        Bytes are read straight from the input descriptor once ``select``
        reports them, so the wait never outlasts the timeout. Keys that
        arrive together are returned by successive calls.

        Returns:
            The key, using readchar's key constants for special keys, or
            None on timeout.
        """
        if self._pending:
            return self._pending.pop(0)

        try:
            fd = self._fd if self._fd is not None else self.stdin.fileno()
            ready, _, _ = select.select([fd], [], [], timeout)
            if not ready:
                return None
            data = os.read(fd, READ_SIZE)
        except (OSError, ValueError) as e:
            raise TerminalError(f"Could not read from terminal: {e}") from e

        if not data:
            raise TerminalError("Could not read from terminal: end of input")

        self._pending.extend(split_keys(self._decoder.decode(data)))
        return self._pending.pop(0) if self._pending else None
