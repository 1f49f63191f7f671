"""Error kinds raised by prompts and the terminal line editor."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    REQUIRED = "required"
    INTERRUPTED = "interrupted"
    END_OF_INPUT = "end_of_input"
    DEVICE_FAILURE = "device_failure"
    CANCELLED = "cancelled"


_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.REQUIRED: "prompt: input is required",
    ErrorKind.INTERRUPTED: "prompt: interrupted",
    ErrorKind.END_OF_INPUT: "prompt: end of input",
    ErrorKind.DEVICE_FAILURE: "prompt: device failure",
    ErrorKind.CANCELLED: "prompt: cancelled",
}


class PromptError(Exception):
    """Base class for prompt errors.

    Errors are compared by ``kind``, never by identity, so each raise site
    can attach its own detail::

        except PromptError as err:
            if err.kind is ErrorKind.REQUIRED:
                ...
    """

    kind: ErrorKind = ErrorKind.DEVICE_FAILURE

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        message = _MESSAGES[self.kind]
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class RequiredInputError(PromptError):
    kind = ErrorKind.REQUIRED


class PromptInterrupted(PromptError):
    kind = ErrorKind.INTERRUPTED


class EndOfInputError(PromptError):
    kind = ErrorKind.END_OF_INPUT


class DeviceError(PromptError):
    kind = ErrorKind.DEVICE_FAILURE


class PromptCancelled(PromptError):
    kind = ErrorKind.CANCELLED
