"""Ask questions on the command line.

``Prompter`` writes a question, reads the answer, and applies the
configured default, optional flag, and checks, asking again until an
acceptable answer arrives.

How the answer is read depends on the input:

* An interactive terminal is read through the raw-mode :class:`LineEditor`,
  inline on the calling task. Terminal reads never race cancellation, so
  the terminal can't be left in raw mode by an abandoned read.
* Anything else (pipes, files, in-memory streams) is read a line at a time
  on a daemon worker thread. The caller waits for either the worker's
  result or ``PromptConfig.cancel``. When cancellation wins the worker is
  abandoned, still blocked in its read; there is no portable way to
  interrupt it, and the process is normally about to exit anyway.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import replace
from typing import Any, Callable

from pi.prompt.config import Check, EnvSettings, PromptConfig, load_env_settings
from pi.prompt.editor import LineEditor
from pi.prompt.errors import PromptCancelled, RequiredInputError
from pi.prompt.reader import InputReader
from pi.prompt.terminal import OutputSink
from pi.prompt.utils import visible_width

logger = logging.getLogger(__name__)

_YES = ("y", "yes", "true")


def is_yes(answer: str) -> bool:
    return answer.lower() in _YES


def check_yes_or_no(answer: str) -> None:
    if answer.lower() not in ("y", "yes", "n", "no"):
        raise ValueError(f"invalid value {answer!r}, must enter yes or no")


class Prompter:
    """Asks questions using one :class:`PromptConfig`."""

    def __init__(
        self,
        config: PromptConfig | None = None,
        *,
        settings: EnvSettings | None = None,
    ) -> None:
        self.config = config if config is not None else PromptConfig()
        settings = settings if settings is not None else load_env_settings()
        self._out = OutputSink(self.config.writer, settings.write_log)

    @property
    def reader(self) -> InputReader:
        return InputReader.wrap(self.config.reader)

    def is_terminal(self) -> bool:
        fd = self.reader.fileno()
        return fd > -1 and self.config.terminal.is_terminal(fd)

    # -- questions ----------------------------------------------------------

    async def ask(self, prompt: str) -> str:
        """Ask *prompt* and return the answer."""
        return await self._ask(prompt, self.config.checks)

    async def password(self, prompt: str) -> str:
        """Ask *prompt* without echoing the answer."""
        while True:
            self._out.write(f"{prompt} ")
            answer = await self._read_password()
            self._out.write("\n")
            settled = self._settle(answer, self.config.checks)
            if settled is not None:
                return settled

    async def confirm(self, prompt: str) -> bool:
        """Ask a yes/no question, repeating until the answer is one of them."""
        answer = await self._ask(prompt, [*self.config.checks, check_yes_or_no])
        return is_yes(answer)

    async def _ask(self, prompt: str, checks: list[Check]) -> str:
        while True:
            prompt_text = f"{prompt} "
            self._out.write(prompt_text)
            answer = await self._read_input(visible_width(prompt_text))
            settled = self._settle(answer, checks)
            if settled is not None:
                return settled

    def _settle(self, answer: str, checks: list[Check]) -> str | None:
        """Return the accepted answer, or ``None`` to ask again."""
        if not answer:
            if self.config.default:
                return self.config.default
            if not self.config.optional:
                logger.debug("empty answer to a required prompt, asking again")
                return None

        for check in checks:
            try:
                check(answer)
            except ValueError as exc:
                logger.debug("answer rejected by check: %s", exc)
                self._out.write(f"{exc}\n")
                return None
        return answer

    # -- reading ------------------------------------------------------------

    async def _read_input(self, input_offset: int) -> str:
        self._raise_if_cancelled()

        if self.is_terminal():
            editor = LineEditor(
                self.reader,
                self._out,
                self.config.terminal,
                input_offset=input_offset,
                default=self.config.default,
                optional=self.config.optional,
            )
            return editor.read_line()

        return await self._run_cancellable(self._scan_line)

    async def _read_password(self) -> str:
        self._raise_if_cancelled()
        return await self._run_cancellable(self._scan_password)

    def _scan_line(self) -> str:
        line, complete = self.reader.read_line()
        if not complete:
            # A partial last line is discarded unless the prompt is optional.
            if self.config.default:
                return self.config.default
            if not self.config.optional:
                raise RequiredInputError()
        return line.rstrip("\r\n")

    def _scan_password(self) -> str:
        if not self.is_terminal():
            return self._scan_line()
        return self.config.terminal.read_secret_line(self.reader.fileno())

    def _raise_if_cancelled(self) -> None:
        cancel = self.config.cancel
        if cancel is not None and cancel.is_set():
            raise PromptCancelled("before reading")

    async def _run_cancellable(self, read: Callable[[], str]) -> str:
        """Run the blocking *read* on a worker thread, racing the cancel event."""
        loop = asyncio.get_running_loop()
        future: asyncio.Future[str] = loop.create_future()

        def _deliver(result: str | None, error: BaseException | None) -> None:
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(result)

        def _worker() -> None:
            outcome: tuple[Any, BaseException | None]
            try:
                outcome = (read(), None)
            except Exception as exc:
                outcome = (None, exc)
            try:
                loop.call_soon_threadsafe(_deliver, *outcome)
            except RuntimeError:
                logger.debug("prompt read finished after its event loop closed")

        threading.Thread(target=_worker, name="pi-prompt-reader", daemon=True).start()

        cancel = self.config.cancel
        if cancel is None:
            return await future

        abort_task = asyncio.create_task(cancel.wait())
        try:
            done, _ = await asyncio.wait(
                {future, abort_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            if not abort_task.done():
                abort_task.cancel()
            if not future.done():
                future.cancel()

        if future in done:
            return future.result()
        logger.debug("prompt cancelled, abandoning the pending read")
        raise PromptCancelled()


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def _build_config(config: PromptConfig | None, options: dict[str, Any]) -> PromptConfig:
    if config is None:
        return PromptConfig(**options)
    if options:
        return replace(config, **options)
    return config


async def ask(prompt: str, config: PromptConfig | None = None, **options: Any) -> str:
    """Ask *prompt*. Keyword options are :class:`PromptConfig` fields."""
    return await Prompter(_build_config(config, options)).ask(prompt)


async def password(
    prompt: str, config: PromptConfig | None = None, **options: Any
) -> str:
    """Ask *prompt* for a secret. Keyword options are :class:`PromptConfig` fields."""
    return await Prompter(_build_config(config, options)).password(prompt)


async def confirm(
    prompt: str, config: PromptConfig | None = None, **options: Any
) -> bool:
    """Ask a yes/no question. Keyword options are :class:`PromptConfig` fields."""
    return await Prompter(_build_config(config, options)).confirm(prompt)
