"""Word-boundary motion and deletion over a list of code points.

Words are runs of non-whitespace; punctuation is part of a word.
"""

from __future__ import annotations


def move_word_left(line: list[str], cursor: int) -> int:
    """Return the start of the word before *cursor*."""
    # Skip trailing whitespace
    while cursor > 0 and line[cursor - 1].isspace():
        cursor -= 1
    while cursor > 0 and not line[cursor - 1].isspace():
        cursor -= 1
    return cursor


def move_word_right(line: list[str], cursor: int) -> int:
    """Return the end of the word at or after *cursor*."""
    # Skip leading whitespace
    while cursor < len(line) and line[cursor].isspace():
        cursor += 1
    while cursor < len(line) and not line[cursor].isspace():
        cursor += 1
    return cursor


def backward_kill_word(line: list[str], cursor: int) -> tuple[list[str], int]:
    start = move_word_left(line, cursor)
    return line[:start] + line[cursor:], start


def backward_kill_line(line: list[str], cursor: int) -> tuple[list[str], int]:
    return line[cursor:], 0
