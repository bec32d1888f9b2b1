"""
Head selection: the first N lines of a source.
"""

from itertools import islice
from typing import BinaryIO, Iterable, Iterator

from core.options import HeadOptions
from .sources import InputSource, Line, iter_lines


def banner(name: str) -> bytes:
    return f"==> {name} <==\n".encode("utf-8")


def select_lines(lines: Iterable[Line], count: int) -> Iterator[Line]:
    """Yield at most ``count`` lines, pulling no more than needed."""
    return islice(lines, count)


def head(source: InputSource, options: HeadOptions, out: BinaryIO) -> int:
    """
    Write the first lines of a source to a binary output.

    The banner is only written with -v and a named source; standard input
    has no name to show. Reading stops once the count is reached.

    Returns:
        Number of lines written
    """
    written = 0
    with source.open() as stream:
        if options.verbose and source.name:
            out.write(banner(source.name))
        if options.count > 0:
            for line in select_lines(iter_lines(stream, source.label), options.count):
                out.write(line.to_bytes())
                written += 1
    out.flush()
    return written
