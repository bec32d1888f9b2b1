"""
Line rendering for cat.

Rules run per line in a fixed order: squeeze blank runs, number, show tabs,
show non-printing bytes, mark line ends. Line numbers are decided on the
raw line and the number prefix itself is never re-rendered.
"""

from typing import BinaryIO, Iterable, Iterator, List

from core.options import CatOptions
from .sources import InputSource, Line, iter_lines, read_chunks


NUMBER_WIDTH = 6

TAB = 0x09
NEWLINE = 0x0A


def _build_nonprinting_table() -> List[bytes]:
    table = []
    for value in range(256):
        rendered = b""
        low = value
        if low >= 128:
            rendered += b"M-"
            low -= 128
        if low == 127:
            rendered += b"^?"
        elif low < 32 and value not in (TAB, NEWLINE):
            rendered += b"^" + bytes([low + 64])
        else:
            rendered += bytes([low])
        table.append(rendered)
    return table


_NONPRINTING = _build_nonprinting_table()


def render_nonprinting(data: bytes) -> bytes:
    """
    Make control and high-bit bytes visible.

    Control bytes become ^X, DEL becomes ^?, bytes >= 128 get an M- prefix
    followed by the rendering of their low seven bits. A raw TAB or newline
    is left as is.
    """
    return b"".join(_NONPRINTING[b] for b in data)


def render_tabs(data: bytes) -> bytes:
    return data.replace(b"\t", b"^I")


def format_number(number: int) -> bytes:
    return f"{number:>{NUMBER_WIDTH}}\t".encode("ascii")


def is_plain(options: CatOptions) -> bool:
    """True when no rendering switch is set and bytes pass through unchanged."""
    return not (
        options.show_nonprinting
        or options.number_nonblank
        or options.show_ends
        or options.number
        or options.squeeze_blank
        or options.show_tabs
    )


def render_lines(lines: Iterable[Line], options: CatOptions) -> Iterator[bytes]:
    """
    Apply the cat rendering rules to a sequence of lines.

    Args:
        lines: Line records in stream order
        options: Rendering switches

    Yields:
        Each output line as bytes, terminator included when the input had one
    """
    number = 0
    previous_empty = False

    for line in lines:
        if options.squeeze_blank:
            if line.is_empty and previous_empty:
                continue
            previous_empty = line.is_empty

        prefix = b""
        if options.number_nonblank:
            if not line.is_empty:
                number += 1
                prefix = format_number(number)
        elif options.number:
            number += 1
            prefix = format_number(number)

        content = line.content
        if options.show_tabs:
            content = render_tabs(content)
        if options.show_nonprinting:
            content = render_nonprinting(content)

        if line.terminated:
            end = b"$\n" if options.show_ends else b"\n"
        else:
            end = b""

        yield prefix + content + end


def cat(source: InputSource, options: CatOptions, out: BinaryIO) -> None:
    """
    Copy a source to a binary output, rendered per the options.

    Args:
        source: Where to read from
        options: Rendering switches
        out: Binary stream to write to
    """
    with source.open() as stream:
        if is_plain(options):
            for chunk in read_chunks(stream, source.label):
                out.write(chunk)
        else:
            for chunk in render_lines(iter_lines(stream, source.label), options):
                out.write(chunk)
    out.flush()
