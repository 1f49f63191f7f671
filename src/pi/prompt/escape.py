"""Escape sequence reading and interpretation for the line editor.

After the editor sees an ESC byte it calls :func:`read_escape_sequence` to
collect the rest of the sequence, then :func:`apply_escape_sequence` to turn
it into a cursor or buffer change. Sequence identifiers are the bytes after
ESC, one character per byte (``"[D"`` for left arrow, ``"b"`` for Alt+B).
"""

from __future__ import annotations

from typing import Callable

from pi.prompt.errors import EndOfInputError
from pi.prompt.reader import InputReader
from pi.prompt.words import backward_kill_word, move_word_left, move_word_right

ESC = 0x1B
MAX_SEQUENCE_LENGTH = 16


def is_escape_sequence_terminator(b: int) -> bool:
    """Return ``True`` if byte *b* ends an escape sequence.

    Terminators are ``~``, DEL, control bytes (C0 and C1), and ASCII letters.
    """
    if b == 0x7E or b == 0x7F or b < 0x20 or 0x80 <= b <= 0x9F:
        return True
    return 0x41 <= b <= 0x5A or 0x61 <= b <= 0x7A


def read_escape_sequence(reader: InputReader) -> str:
    """Read the bytes following ESC up to and including a terminator.

    At most ``MAX_SEQUENCE_LENGTH`` bytes are consumed. End of input returns
    whatever was collected; other read errors propagate.
    """
    seq = bytearray()
    for _ in range(MAX_SEQUENCE_LENGTH):
        try:
            b = reader.read_byte()
        except EndOfInputError:
            break
        seq.append(b)
        if is_escape_sequence_terminator(b):
            break
    return seq.decode("latin-1")


# ---------------------------------------------------------------------------
# Sequence interpretation
# ---------------------------------------------------------------------------

_Edit = Callable[[list[str], int], tuple[list[str], int]]


def _cursor_left(line: list[str], cursor: int) -> tuple[list[str], int]:
    return line, max(cursor - 1, 0)


def _cursor_right(line: list[str], cursor: int) -> tuple[list[str], int]:
    return line, min(cursor + 1, len(line))


def _line_start(line: list[str], cursor: int) -> tuple[list[str], int]:
    return line, 0


def _line_end(line: list[str], cursor: int) -> tuple[list[str], int]:
    return line, len(line)


def _delete_forward(line: list[str], cursor: int) -> tuple[list[str], int]:
    if cursor < len(line):
        return line[:cursor] + line[cursor + 1 :], cursor
    return line, cursor


def _word_left(line: list[str], cursor: int) -> tuple[list[str], int]:
    return line, move_word_left(line, cursor)


def _word_right(line: list[str], cursor: int) -> tuple[list[str], int]:
    return line, move_word_right(line, cursor)


def _build_table() -> dict[str, _Edit]:
    groups: list[tuple[tuple[str, ...], _Edit]] = [
        (("[D", "OD"), _cursor_left),
        (("[C", "OC"), _cursor_right),
        (("[H", "[1~", "[7~", "OH"), _line_start),
        (("[F", "[4~", "[8~", "OF"), _line_end),
        (("[3~",), _delete_forward),
        # Alt+B / Ctrl+Left
        (("b", "B", "[1;5D", "[5D"), _word_left),
        # Alt+F / Ctrl+Right
        (("f", "F", "[1;5C", "[5C"), _word_right),
        # Alt+Backspace as sent by xterm, rxvt, and CSI-u terminals
        (("\x7f", "\x08", "[3;3~", "[8;3u", "[127;3u"), backward_kill_word),
    ]
    return {seq: edit for seqs, edit in groups for seq in seqs}


ESCAPE_SEQUENCES: dict[str, _Edit] = _build_table()


def apply_escape_sequence(
    seq: str, line: list[str], cursor: int
) -> tuple[list[str], int]:
    """Apply the edit bound to *seq*. Unknown sequences leave everything as is."""
    edit = ESCAPE_SEQUENCES.get(seq)
    if edit is None:
        return line, cursor
    return edit(line, cursor)
