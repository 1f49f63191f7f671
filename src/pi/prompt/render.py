"""Minimal redraw of an edited line, including lines that wrap.

The line is drawn once and then patched after every edit: the cursor is
moved back to the first editable column, the buffer is reprinted, leftovers
from a longer previous line are blanked, and the cursor is moved to its
logical position. Positions are computed from the prompt width (the *input
offset*) and the terminal width, so edits stay aligned when the line spans
several rows.

Two strategies implement :class:`Redraw`:

* :class:`WrappingRedraw` when the terminal width is known. Rows are crossed
  with relative up/down moves and columns are reached with ``\\r`` followed
  by a right move, never with absolute positioning.
* :class:`LegacyRedraw` when it isn't. It only moves left and right on a
  single row.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Protocol

from pi.prompt.terminal import OutputSink

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_CURSOR_UP_FMT = "\x1b[{}A"
_CURSOR_DOWN_FMT = "\x1b[{}B"
_CURSOR_RIGHT_FMT = "\x1b[{}C"
_CURSOR_LEFT_FMT = "\x1b[{}D"
_CLEAR_TO_LINE_END = "\x1b[K"
_CARRIAGE_RETURN = "\r"


# ---------------------------------------------------------------------------
# Position math
# ---------------------------------------------------------------------------


def visual_position(input_col: int, index: int, width: int) -> tuple[int, int]:
    """Return the ``(row, col)`` where buffer *index* is drawn.

    Rows are relative to the row the line starts on.
    """
    return divmod(input_col + index, width)


def rendered_position(input_col: int, index: int, width: int) -> tuple[int, int]:
    """Return where the terminal cursor actually sits after printing *index* cells.

    Terminals defer wrapping until the next character is printed, so an
    index that lands on column 0 of a new row is still on the last column of
    the previous row.
    """
    row, col = divmod(input_col + index, width)
    if index > 0 and col == 0:
        row -= 1
        col = width - 1
    return row, col


def move_cursor(from_row: int, to_row: int, to_col: int) -> str:
    parts: list[str] = []
    if from_row > to_row:
        parts.append(_CURSOR_UP_FMT.format(from_row - to_row))
    elif from_row < to_row:
        parts.append(_CURSOR_DOWN_FMT.format(to_row - from_row))
    parts.append(_CARRIAGE_RETURN)
    if to_col > 0:
        parts.append(_CURSOR_RIGHT_FMT.format(to_col))
    return "".join(parts)


def move_visual_cursor(
    input_col: int, width: int, from_index: int, to_index: int
) -> str:
    """Escape codes moving the cursor between two drawn buffer indexes."""
    if from_index == to_index:
        return ""
    from_row, _ = visual_position(input_col, from_index, width)
    to_row, to_col = visual_position(input_col, to_index, width)
    return move_cursor(from_row, to_row, to_col)


def move_rendered_cursor_to_logical(
    input_col: int, width: int, rendered_index: int, logical_index: int
) -> str:
    """Escape codes moving from the end of printed output to the logical cursor."""
    from_row, _ = rendered_position(input_col, rendered_index, width)
    to_row, to_col = visual_position(input_col, logical_index, width)
    return move_cursor(from_row, to_row, to_col)


# ---------------------------------------------------------------------------
# Redraw strategies
# ---------------------------------------------------------------------------


@dataclass
class RenderState:
    """What the previous redraw left on screen."""

    cursor: int = 0
    length: int = 0


class Redraw(Protocol):
    def redraw(self, line: list[str], previous: RenderState, cursor: int) -> str: ...


class LegacyRedraw:
    """Single-row redraw used when the terminal width is unknown."""

    def redraw(self, line: list[str], previous: RenderState, cursor: int) -> str:
        parts: list[str] = []
        if previous.cursor > 0:
            parts.append(_CURSOR_LEFT_FMT.format(previous.cursor))
        parts.append("".join(line))
        parts.append(_CLEAR_TO_LINE_END)
        back = len(line) - cursor
        if back > 0:
            parts.append(_CURSOR_LEFT_FMT.format(back))
        return "".join(parts)


class WrappingRedraw:
    """Row-aware redraw for a known terminal *width*."""

    def __init__(self, input_offset: int, width: int) -> None:
        self.width = width
        self.input_col = input_offset % width

    def redraw(self, line: list[str], previous: RenderState, cursor: int) -> str:
        parts = [move_visual_cursor(self.input_col, self.width, previous.cursor, 0)]
        parts.append("".join(line))
        printed = len(line)
        if previous.length > len(line):
            parts.append(" " * (previous.length - len(line)))
            printed = previous.length
        parts.append(
            move_rendered_cursor_to_logical(self.input_col, self.width, printed, cursor)
        )
        return "".join(parts)


def select_redraw(input_offset: int, width: int) -> Redraw:
    if width <= 0:
        return LegacyRedraw()
    return WrappingRedraw(input_offset, width)


def redraw_line(
    line: list[str],
    old_len: int,
    old_cursor: int,
    cursor: int,
    input_offset: int,
    width: int,
) -> str:
    """Return the escape codes that bring the screen in line with *line*."""
    strategy = select_redraw(input_offset, width)
    return strategy.redraw(line, RenderState(cursor=old_cursor, length=old_len), cursor)


# ---------------------------------------------------------------------------
# Session renderer
# ---------------------------------------------------------------------------


class LineRenderer:
    """Redraws one editing session's line and remembers what was drawn.

    The terminal width is queried on every redraw so a resize between
    keystrokes is picked up on the next edit.
    """

    def __init__(
        self,
        out: OutputSink,
        input_offset: int,
        get_width: Callable[[], int],
    ) -> None:
        self._out = out
        self._input_offset = input_offset
        self._get_width = get_width
        self._warned_legacy = False
        self.state = RenderState()

    def render(self, line: list[str], cursor: int) -> None:
        width = self._get_width()
        if width <= 0 and not self._warned_legacy:
            logger.debug("terminal width unavailable, using single-row redraw")
            self._warned_legacy = True
        strategy = select_redraw(self._input_offset, width)
        self._out.write(strategy.redraw(line, self.state, cursor))
        self.state = RenderState(cursor=cursor, length=len(line))
