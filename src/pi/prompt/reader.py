"""InputReader wraps a binary stream with byte, rune, and line reads.

The terminal editor consumes input one byte at a time and sometimes needs to
put a byte back (a non-control lead byte is re-read as the start of a UTF-8
code point). Plain binary streams don't offer that, so this wrapper keeps a
single byte of pushback on top of the underlying stream.
"""

from __future__ import annotations

from typing import BinaryIO

from pi.prompt.errors import DeviceError, EndOfInputError

REPLACEMENT_CHAR = "\ufffd"


def _utf8_length(lead: int) -> int:
    """Return the encoded length implied by a UTF-8 lead byte, or 0 if invalid."""
    if lead < 0x80:
        return 1
    if 0xC2 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF4:
        return 4
    return 0


class InputReader:
    """Byte source with single-byte pushback.

    Parameters
    ----------
    stream:
        Binary stream to read from. Only ``read(1)`` is required.
    fd:
        File descriptor of the stream. When omitted it is taken from
        ``stream.fileno()`` if available, otherwise ``-1`` (treated as
        non-interactive).
    """

    def __init__(self, stream: BinaryIO, fd: int | None = None) -> None:
        self._stream = stream
        self._pending: int | None = None
        self._last: int | None = None
        self._fd = _stream_fd(stream) if fd is None else fd

    @classmethod
    def wrap(cls, source: InputReader | BinaryIO) -> InputReader:
        if isinstance(source, InputReader):
            return source
        return cls(source)

    def fileno(self) -> int:
        return self._fd

    def read_byte(self) -> int:
        """Read one byte. Raises ``EndOfInputError`` when the stream is exhausted."""
        if self._pending is not None:
            b = self._pending
            self._pending = None
            self._last = b
            return b
        try:
            data = self._stream.read(1)
        except OSError as exc:
            raise DeviceError(str(exc)) from exc
        if not data:
            self._last = None
            raise EndOfInputError()
        self._last = data[0]
        return self._last

    def unread_byte(self) -> None:
        """Push the last byte read back onto the stream."""
        if self._last is None or self._pending is not None:
            raise DeviceError("unread_byte: no byte to unread")
        self._pending = self._last
        self._last = None

    def read_rune(self) -> str:
        """Read one UTF-8 encoded code point.

        Invalid encodings yield U+FFFD. A byte that cannot continue the
        sequence is left unread.
        """
        lead = self.read_byte()
        size = _utf8_length(lead)
        if size == 1:
            return chr(lead)
        if size == 0:
            return REPLACEMENT_CHAR

        encoded = bytearray([lead])
        while len(encoded) < size:
            try:
                b = self.read_byte()
            except EndOfInputError:
                return REPLACEMENT_CHAR
            if not 0x80 <= b <= 0xBF:
                self.unread_byte()
                return REPLACEMENT_CHAR
            encoded.append(b)

        try:
            return encoded.decode("utf-8")
        except UnicodeDecodeError:
            # Overlong or surrogate encodings pass the length check above.
            return REPLACEMENT_CHAR

    def read_line(self) -> tuple[str, bool]:
        """Read through the next ``\\n``.

        Returns ``(line, complete)`` where *complete* is ``False`` if the
        stream ended before a newline. The newline is kept in *line*.
        """
        data = bytearray()
        while True:
            try:
                b = self.read_byte()
            except EndOfInputError:
                return data.decode("utf-8", errors="replace"), False
            data.append(b)
            if b == 0x0A:
                return data.decode("utf-8", errors="replace"), True


def _stream_fd(stream: BinaryIO) -> int:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return -1
