"""
Counting for wc.

Every counter is gathered in one pass over the source's lines; the options
only decide which of them are printed.
"""

from dataclasses import dataclass
from typing import BinaryIO, Iterable, Optional

from core.options import WcOptions
from .sources import InputSource, Line


FIELD_WIDTH = 7


@dataclass
class Counts:
    """Totals for one stream."""
    lines: int = 0
    words: int = 0
    chars: int = 0
    bytes: int = 0
    max_line_length: int = 0

    def add_line(self, line: Line) -> None:
        """Fold one line into the totals."""
        text = line.content.decode("utf-8", errors="replace")
        length = len(text)
        terminator = 1 if line.terminated else 0

        self.lines += terminator
        self.words += len(line.content.split())
        self.chars += length + terminator
        self.bytes += len(line.content) + terminator
        if length > self.max_line_length:
            self.max_line_length = length


def count_lines(lines: Iterable[Line]) -> Counts:
    counts = Counts()
    for line in lines:
        counts.add_line(line)
    return counts


def count_source(source: InputSource) -> Counts:
    """Count a whole source; its stream is closed afterwards."""
    return count_lines(source.lines())


def format_counts(counts: Counts, options: WcOptions, name: Optional[str] = None) -> str:
    """
    Render the selected counters in canonical order.

    Lines, words, chars, bytes, max line length, whatever order the flags
    were given in, followed by the source name when there is one.
    """
    fields = [f"{getattr(counts, counter):>{FIELD_WIDTH}}" for counter in options.counters]
    if name:
        fields.append(name)
    return " ".join(fields)


def wc(source: InputSource, options: WcOptions, out: BinaryIO) -> Counts:
    """
    Count a source and write the report line to a binary output.

    Returns:
        The full Counts, including counters that were not printed
    """
    counts = count_source(source)
    out.write((format_counts(counts, options, source.name) + "\n").encode("utf-8"))
    out.flush()
    return counts
