"""Tests for pi.prompt.config and pi.prompt.errors."""

from __future__ import annotations

import io

import pytest

from pi.prompt.config import WRITE_LOG_ENV, PromptConfig, load_env_settings
from pi.prompt.errors import (
    DeviceError,
    EndOfInputError,
    ErrorKind,
    PromptCancelled,
    PromptError,
    PromptInterrupted,
    RequiredInputError,
)
from pi.prompt.reader import InputReader
from pi.prompt.terminal import TtyControl


class TestPromptConfig:
    def test_defaults(self) -> None:
        config = PromptConfig(reader=io.BytesIO(b""), writer=io.StringIO())
        assert config.default == ""
        assert config.optional is False
        assert config.checks == []
        assert config.cancel is None
        assert isinstance(config.terminal, TtyControl)

    def test_reader_is_wrapped_once(self) -> None:
        reader = InputReader(io.BytesIO(b"x"))
        config = PromptConfig(reader=reader, writer=io.StringIO())
        assert config.reader is reader
        assert isinstance(
            PromptConfig(reader=io.BytesIO(b""), writer=io.StringIO()).reader,
            InputReader,
        )

    def test_with_check_returns_copy(self) -> None:
        def first(answer: str) -> None:
            pass

        def second(answer: str) -> None:
            pass

        config = PromptConfig(reader=io.BytesIO(b""), writer=io.StringIO(), checks=[first])
        extended = config.with_check(second)
        assert extended.checks == [first, second]
        assert config.checks == [first]
        assert extended.reader is config.reader


class TestEnvSettings:
    def test_write_log_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(WRITE_LOG_ENV, "/tmp/prompt-writes.log")
        assert load_env_settings().write_log == "/tmp/prompt-writes.log"

    def test_write_log_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(WRITE_LOG_ENV, raising=False)
        assert load_env_settings().write_log == ""


class TestErrors:
    @pytest.mark.parametrize(
        "error_type, kind",
        [
            (RequiredInputError, ErrorKind.REQUIRED),
            (PromptInterrupted, ErrorKind.INTERRUPTED),
            (EndOfInputError, ErrorKind.END_OF_INPUT),
            (DeviceError, ErrorKind.DEVICE_FAILURE),
            (PromptCancelled, ErrorKind.CANCELLED),
        ],
    )
    def test_kinds(self, error_type: type[PromptError], kind: ErrorKind) -> None:
        err = error_type()
        assert isinstance(err, PromptError)
        assert err.kind is kind

    def test_message(self) -> None:
        assert str(RequiredInputError()) == "prompt: input is required"

    def test_message_with_detail(self) -> None:
        err = DeviceError("read: input/output error")
        assert str(err) == "prompt: device failure: read: input/output error"
        assert err.detail == "read: input/output error"
