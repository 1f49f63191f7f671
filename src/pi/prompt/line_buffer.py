"""LineBuffer - the edit state of a single-line prompt."""

from __future__ import annotations

from pi.prompt.escape import apply_escape_sequence
from pi.prompt.words import backward_kill_line, backward_kill_word


class LineBuffer:
    """Code points of the current line plus a cursor index.

    The buffer holds one entry per code point so that a multi-byte character
    is never split by cursor motion or deletion. Every mutation leaves the
    cursor within ``0 <= cursor <= len(self)``.
    """

    def __init__(self, text: str = "", cursor: int | None = None) -> None:
        self._chars: list[str] = list(text)
        self._cursor = len(self._chars) if cursor is None else cursor
        self._clamp()

    # -- state --------------------------------------------------------------

    @property
    def chars(self) -> list[str]:
        return self._chars

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def text(self) -> str:
        return "".join(self._chars)

    def __len__(self) -> int:
        return len(self._chars)

    def _set(self, chars: list[str], cursor: int) -> None:
        self._chars = chars
        self._cursor = cursor
        self._clamp()

    def _clamp(self) -> None:
        self._cursor = max(0, min(self._cursor, len(self._chars)))

    # -- cursor motion ------------------------------------------------------

    def move_home(self) -> None:
        self._cursor = 0

    def move_end(self) -> None:
        self._cursor = len(self._chars)

    def move_left(self) -> None:
        if self._cursor > 0:
            self._cursor -= 1

    def move_right(self) -> None:
        if self._cursor < len(self._chars):
            self._cursor += 1

    # -- editing ------------------------------------------------------------

    def insert(self, char: str) -> None:
        """Insert a single code point at the cursor and advance past it."""
        self._chars.insert(self._cursor, char)
        self._cursor += 1

    def backspace(self) -> None:
        if self._cursor > 0:
            del self._chars[self._cursor - 1]
            self._cursor -= 1

    def delete_forward(self) -> None:
        if self._cursor < len(self._chars):
            del self._chars[self._cursor]

    def kill_to_end(self) -> None:
        del self._chars[self._cursor :]

    def kill_to_start(self) -> None:
        self._set(*backward_kill_line(self._chars, self._cursor))

    def kill_word_backward(self) -> None:
        self._set(*backward_kill_word(self._chars, self._cursor))

    def apply_escape(self, seq: str) -> None:
        self._set(*apply_escape_sequence(seq, self._chars, self._cursor))
