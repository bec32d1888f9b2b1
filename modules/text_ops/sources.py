"""
Input sources for the read commands (cat, wc, head).

A source is either a named file or a standard-input stream. Both hand out
a binary stream through open() and a lazy sequence of Line records through
lines().
"""

import os
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Optional

from core.errors import IsDirectoryError, translate_os_error


STDIN_OPERAND = "-"
STDIN_LABEL = "standard input"
CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class Line:
    """One line read from a stream."""
    content: bytes
    terminated: bool

    @property
    def is_empty(self) -> bool:
        return not self.content

    def to_bytes(self) -> bytes:
        """The line as read, terminator included."""
        return self.content + b"\n" if self.terminated else self.content


def iter_lines(stream: Iterable[bytes], label: str = STDIN_LABEL) -> Iterator[Line]:
    """
    Split a binary stream into Line records without buffering it whole.

    Raises:
        ShellkitError: If reading fails, named after ``label``
    """
    raw_lines = iter(stream)
    while True:
        try:
            raw = next(raw_lines)
        except StopIteration:
            return
        except OSError as e:
            raise translate_os_error(e, label, "read") from e
        if raw.endswith(b"\n"):
            yield Line(raw[:-1], True)
        else:
            yield Line(raw, False)


def read_chunks(stream: BinaryIO, label: str = STDIN_LABEL, size: int = CHUNK_SIZE) -> Iterator[bytes]:
    """Yield raw blocks of a binary stream until EOF."""
    while True:
        try:
            chunk = stream.read(size)
        except OSError as e:
            raise translate_os_error(e, label, "read") from e
        if not chunk:
            return
        yield chunk


class InputSource:
    """A readable byte sequence; reopen to read it again."""

    name: Optional[str] = None

    @property
    def label(self) -> str:
        """Name used in messages; standard input has no path."""
        return self.name or STDIN_LABEL

    def open(self):
        raise NotImplementedError

    def lines(self) -> Iterator[Line]:
        """
        Lazily yield the source's lines.

        The underlying stream is released when iteration finishes or the
        generator is closed early.
        """
        with self.open() as stream:
            yield from iter_lines(stream, self.label)


class FileSource(InputSource):
    """Input read from a named file."""

    def __init__(self, path: str):
        self.path = path
        self.name = path

    @contextmanager
    def open(self) -> Iterator[BinaryIO]:
        """
        Open the file for binary reading.

        Raises:
            NotFoundError: If the file doesn't exist
            PermissionDeniedError: If the file can't be read
            IsDirectoryError: If the path is a directory
            IOFailureError: On any other OS error
        """
        if Path(self.path).is_dir():
            raise IsDirectoryError(f"{self.path}: Is a directory", self.path)
        try:
            stream = open(self.path, "rb")
        except OSError as e:
            raise translate_os_error(e, self.path, "open") from e
        with stream:
            yield stream

    def __repr__(self) -> str:
        return f"FileSource({self.path!r})"


class StdinSource(InputSource):
    """
    Input read from a standard-input stream.

    Opening never fails, and the wrapped stream is left open afterwards.
    """

    name = None

    def __init__(self, stream: Optional[BinaryIO] = None):
        self._stream = stream

    @contextmanager
    def open(self) -> Iterator[BinaryIO]:
        yield self._stream if self._stream is not None else sys.stdin.buffer

    def __repr__(self) -> str:
        return "StdinSource()"


def open_source(operand: Optional[str], stdin: Optional[BinaryIO] = None) -> InputSource:
    """
    Pick the source for an optional path operand.

    Args:
        operand: File path, "-" or None (the last two mean standard input)
        stdin: Stream to use for standard input (default: sys.stdin.buffer)
    """
    if operand is None or operand == STDIN_OPERAND:
        return StdinSource(stdin)
    return FileSource(os.path.expanduser(operand))
