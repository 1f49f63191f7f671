"""Prompt session configuration and environment settings."""

from __future__ import annotations

import asyncio
import os
import sys
from dataclasses import dataclass, field, replace
from typing import BinaryIO, Callable, TextIO

from pi.prompt.reader import InputReader
from pi.prompt.terminal import TerminalControl, TtyControl

Check = Callable[[str], None]

WRITE_LOG_ENV = "PI_PROMPT_WRITE_LOG"


# --- Environment ---


@dataclass
class EnvSettings:
    """Settings read from the process environment."""

    write_log: str = ""


def load_env_settings() -> EnvSettings:
    return EnvSettings(write_log=os.environ.get(WRITE_LOG_ENV, ""))


# --- Session configuration ---


_stdin_reader: InputReader | None = None


def _default_reader() -> InputReader:
    # Shared so a byte pushed back by one prompt is seen by the next.
    global _stdin_reader
    if _stdin_reader is None:
        _stdin_reader = InputReader(sys.stdin.buffer)
    return _stdin_reader


def _default_writer() -> TextIO:
    return sys.stdout


@dataclass
class PromptConfig:
    """Options for a prompt.

    Attributes:
        default: Returned when the input is empty (or ends before any input).
        optional: Accept empty input instead of asking again.
        checks: Validators run in order on the input. A check rejects the
            input by raising ``ValueError``; its message is printed and the
            question is asked again.
        reader: Binary input stream. Wrapped in an ``InputReader`` once, so
            prompts sharing a config also share read-ahead state.
        writer: Text stream the prompt and edits are written to.
        terminal: Terminal device control used when *reader* is a terminal.
        cancel: Set to abandon a pending read with ``PromptCancelled``.
    """

    default: str = ""
    optional: bool = False
    checks: list[Check] = field(default_factory=list)
    reader: InputReader | BinaryIO = field(default_factory=_default_reader)
    writer: TextIO = field(default_factory=_default_writer)
    terminal: TerminalControl = field(default_factory=TtyControl)
    cancel: asyncio.Event | None = None

    def __post_init__(self) -> None:
        self.reader = InputReader.wrap(self.reader)

    def with_check(self, *checks: Check) -> PromptConfig:
        """Return a copy of this config with *checks* appended."""
        return replace(self, checks=[*self.checks, *checks])
