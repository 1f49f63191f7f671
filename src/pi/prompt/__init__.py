"""pi-prompt: interactive line input for command-line prompts."""

# Configuration
from pi.prompt.config import EnvSettings, PromptConfig, load_env_settings

# Raw-mode line editor
from pi.prompt.editor import LineEditor, resolve_end_of_input

# Errors
from pi.prompt.errors import (
    DeviceError,
    EndOfInputError,
    ErrorKind,
    PromptCancelled,
    PromptError,
    PromptInterrupted,
    RequiredInputError,
)

# Escape sequences
from pi.prompt.escape import apply_escape_sequence, read_escape_sequence

# Edit state
from pi.prompt.line_buffer import LineBuffer

# Questions
from pi.prompt.prompt import Prompter, ask, confirm, password

# Input source
from pi.prompt.reader import InputReader

# Rendering
from pi.prompt.render import LineRenderer, RenderState, redraw_line

# Terminal control
from pi.prompt.terminal import OutputSink, TerminalControl, TtyControl, raw_mode

# Word motion
from pi.prompt.words import (
    backward_kill_line,
    backward_kill_word,
    move_word_left,
    move_word_right,
)

__all__ = [
    # Config
    "EnvSettings",
    "PromptConfig",
    "load_env_settings",
    # Editor
    "LineEditor",
    "resolve_end_of_input",
    # Errors
    "DeviceError",
    "EndOfInputError",
    "ErrorKind",
    "PromptCancelled",
    "PromptError",
    "PromptInterrupted",
    "RequiredInputError",
    # Escape sequences
    "apply_escape_sequence",
    "read_escape_sequence",
    # Edit state
    "LineBuffer",
    # Questions
    "Prompter",
    "ask",
    "confirm",
    "password",
    # Input
    "InputReader",
    # Rendering
    "LineRenderer",
    "RenderState",
    "redraw_line",
    # Terminal
    "OutputSink",
    "TerminalControl",
    "TtyControl",
    "raw_mode",
    # Words
    "backward_kill_line",
    "backward_kill_word",
    "move_word_left",
    "move_word_right",
]
