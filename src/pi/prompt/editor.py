"""Raw-mode line editor.

Reads a line from an interactive terminal one byte at a time with Emacs-style
editing keys, redrawing the line after every edit:

==========  =========================================
key         action
==========  =========================================
Enter       finish the line
Ctrl+C      interrupt (``PromptInterrupted``)
Ctrl+D      end of input on an empty line, else delete
Ctrl+A/E    start / end of line
Ctrl+B/F    back / forward one character
Ctrl+K      delete to end of line
Ctrl+U      delete to start of line
Ctrl+W      delete previous word
Backspace   delete previous character
Esc ...     arrows, Home/End, Delete, Alt+B/F, Alt+Backspace
==========  =========================================

The terminal is held in raw mode for the whole session and restored on
every way out, including errors raised while reading.
"""

from __future__ import annotations

import unicodedata
from typing import Callable

from pi.prompt.errors import EndOfInputError, PromptInterrupted, RequiredInputError
from pi.prompt.escape import ESC, read_escape_sequence
from pi.prompt.line_buffer import LineBuffer
from pi.prompt.reader import InputReader
from pi.prompt.render import LineRenderer
from pi.prompt.terminal import OutputSink, TerminalControl, raw_mode

CR = 0x0D
LF = 0x0A
CTRL_C = 0x03
CTRL_D = 0x04

_CONTROL_EDITS: dict[int, Callable[[LineBuffer], None]] = {
    0x01: LineBuffer.move_home,  # Ctrl+A
    0x02: LineBuffer.move_left,  # Ctrl+B
    0x05: LineBuffer.move_end,  # Ctrl+E
    0x06: LineBuffer.move_right,  # Ctrl+F
    0x0B: LineBuffer.kill_to_end,  # Ctrl+K
    0x15: LineBuffer.kill_to_start,  # Ctrl+U
    0x17: LineBuffer.kill_word_backward,  # Ctrl+W
    0x08: LineBuffer.backspace,  # Ctrl+H
    0x7F: LineBuffer.backspace,  # DEL
}


def resolve_end_of_input(text: str, default: str, optional: bool) -> str:
    """Value of a read that hit end of input with *text* collected so far."""
    if text:
        return text
    if default:
        return default
    if not optional:
        raise RequiredInputError()
    return ""


def handle_interrupt(out: OutputSink) -> PromptInterrupted:
    out.write("^C\r\n")
    return PromptInterrupted()


class LineEditor:
    """Edits one line read from a terminal in raw mode.

    Parameters
    ----------
    reader:
        Byte source attached to the terminal.
    out:
        Where the edited line and cursor movements are drawn.
    terminal:
        Raw-mode control and width queries for ``reader.fileno()``.
    input_offset:
        Columns already used on the current row by the prompt.
    default, optional:
        End-of-input handling, see :func:`resolve_end_of_input`.
    """

    def __init__(
        self,
        reader: InputReader,
        out: OutputSink,
        terminal: TerminalControl,
        *,
        input_offset: int = 0,
        default: str = "",
        optional: bool = False,
    ) -> None:
        self._reader = reader
        self._out = out
        self._terminal = terminal
        self._input_offset = input_offset
        self._default = default
        self._optional = optional

    def read_line(self) -> str:
        fd = self._reader.fileno()
        with raw_mode(self._terminal, fd):
            return self._edit(fd)

    def _edit(self, fd: int) -> str:
        buffer = LineBuffer()
        renderer = LineRenderer(
            self._out, self._input_offset, lambda: self._terminal.columns(fd)
        )

        while True:
            try:
                b = self._reader.read_byte()
            except EndOfInputError:
                return self._end_of_input(buffer.text)

            if b in (CR, LF):
                self._out.write("\r\n")
                return buffer.text
            if b == CTRL_C:
                raise handle_interrupt(self._out)

            if b == CTRL_D:
                if not len(buffer):
                    return self._end_of_input("")
                buffer.delete_forward()
            elif b == ESC:
                buffer.apply_escape(read_escape_sequence(self._reader))
            elif b in _CONTROL_EDITS:
                _CONTROL_EDITS[b](buffer)
            elif not self._insert_char(buffer):
                continue

            renderer.render(buffer.chars, buffer.cursor)

    def _insert_char(self, buffer: LineBuffer) -> bool:
        """Insert the code point starting at the last byte read.

        Returns ``False`` for control characters, which are dropped.
        """
        self._reader.unread_byte()
        char = self._reader.read_rune()
        if unicodedata.category(char) == "Cc":
            return False
        buffer.insert(char)
        return True

    def _end_of_input(self, text: str) -> str:
        return resolve_end_of_input(text, self._default, self._optional)
