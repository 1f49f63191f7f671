"""Terminal device control and output for the line editor.

Provides a ``TerminalControl`` protocol and a concrete ``TtyControl``
implementation backed by :mod:`termios` and :mod:`tty` that switches a file
descriptor into raw mode, restores it, queries the viewport width, and reads
a line without echo. ``OutputSink`` wraps the text stream that prompts and
ANSI sequences are written to.
"""

from __future__ import annotations

import contextlib
import logging
import os
import termios
import tty
from typing import Any, Iterator, Protocol, TextIO

from pi.prompt.errors import DeviceError, EndOfInputError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# TerminalControl protocol
# ---------------------------------------------------------------------------


class TerminalControl(Protocol):
    """Interface for the terminal operations the editor relies on."""

    def is_terminal(self, fd: int) -> bool: ...

    def enter_raw_mode(self, fd: int) -> Any: ...

    def restore_mode(self, fd: int, state: Any) -> None: ...

    def columns(self, fd: int) -> int: ...

    def read_secret_line(self, fd: int) -> str: ...


@contextlib.contextmanager
def raw_mode(control: TerminalControl, fd: int) -> Iterator[None]:
    """Hold *fd* in raw mode for the duration of the ``with`` block.

    The prior mode is restored on every exit path, including exceptions
    raised while reading.
    """
    state = control.enter_raw_mode(fd)
    logger.debug("raw mode entered on fd %s", fd)
    try:
        yield
    finally:
        control.restore_mode(fd, state)
        logger.debug("raw mode restored on fd %s", fd)


# ---------------------------------------------------------------------------
# TtyControl implementation
# ---------------------------------------------------------------------------


class TtyControl:
    """``TerminalControl`` for real POSIX terminals."""

    def is_terminal(self, fd: int) -> bool:
        return fd >= 0 and os.isatty(fd)

    def enter_raw_mode(self, fd: int) -> list:
        """Switch *fd* into raw mode and return the previous attributes."""
        if is_raw_mode(fd):
            logger.debug("fd %s was already in raw mode", fd)
        try:
            state = termios.tcgetattr(fd)
            tty.setraw(fd)
        except (termios.error, OSError) as exc:
            raise DeviceError(f"enter raw mode: {exc}") from exc
        return state

    def restore_mode(self, fd: int, state: list) -> None:
        try:
            termios.tcsetattr(fd, termios.TCSADRAIN, state)
        except (termios.error, OSError) as exc:
            raise DeviceError(f"restore terminal mode: {exc}") from exc

    def columns(self, fd: int) -> int:
        """Return the viewport width, or 0 when it can't be determined."""
        if fd < 0:
            return 0
        try:
            return os.get_terminal_size(fd).columns
        except (ValueError, OSError):
            return 0

    def read_secret_line(self, fd: int) -> str:
        """Read a line from *fd* with local echo disabled.

        Line editing (erase, kill) is left to the terminal driver. Raises
        ``EndOfInputError`` if the input ends before any byte is read.
        """
        try:
            state = termios.tcgetattr(fd)
        except (termios.error, OSError) as exc:
            raise DeviceError(f"read password: {exc}") from exc

        attrs = termios.tcgetattr(fd)
        attrs[0] |= termios.ICRNL  # iflag
        attrs[3] &= ~termios.ECHO  # lflag
        attrs[3] |= termios.ICANON | termios.ISIG
        try:
            termios.tcsetattr(fd, termios.TCSANOW, attrs)
            return _read_fd_line(fd)
        except (termios.error, OSError) as exc:
            raise DeviceError(f"read password: {exc}") from exc
        finally:
            with contextlib.suppress(termios.error, OSError):
                termios.tcsetattr(fd, termios.TCSANOW, state)


def _read_fd_line(fd: int) -> str:
    data = bytearray()
    while True:
        chunk = os.read(fd, 1)
        if not chunk:
            if not data:
                raise EndOfInputError()
            break
        if chunk in (b"\n", b"\r"):
            break
        data += chunk
    return data.decode("utf-8", errors="replace")


def is_raw_mode(fd: int) -> bool:
    """Heuristic check for whether the terminal fd is already in raw mode.

    Raw mode is characterised by the absence of ICANON and ECHO in the
    local-mode flags.
    """
    try:
        attrs = termios.tcgetattr(fd)
        lflag = attrs[3]  # c_lflag
        return not bool(lflag & (termios.ICANON | termios.ECHO))
    except termios.error:
        return False


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class OutputSink:
    """Writes prompt text and ANSI sequences, flushing after each write.

    When *write_log_path* is set every write is also appended to that file,
    which is handy for inspecting the exact escape codes a session emitted.
    """

    def __init__(self, writer: TextIO, write_log_path: str = "") -> None:
        self._writer = writer
        self._write_log_path = write_log_path

    @property
    def writer(self) -> TextIO:
        return self._writer

    def write(self, data: str) -> None:
        if not data:
            return
        try:
            self._writer.write(data)
            flush = getattr(self._writer, "flush", None)
            if flush is not None:
                flush()
        except OSError as exc:
            raise DeviceError(f"write: {exc}") from exc

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a") as f:
                    f.write(data)
            except OSError:
                pass
