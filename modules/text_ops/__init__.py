"""
Text operations module for shellkit.

Stream rendering, counting and head selection over files or standard input.
"""

from .sources import InputSource, FileSource, StdinSource, Line, open_source, iter_lines, read_chunks
from .transform import cat, render_lines
from .counting import Counts, wc, count_source, format_counts
from .head import head, select_lines

__all__ = [
    'InputSource',
    'FileSource',
    'StdinSource',
    'Line',
    'open_source',
    'iter_lines',
    'read_chunks',
    'cat',
    'render_lines',
    'Counts',
    'wc',
    'count_source',
    'format_counts',
    'head',
    'select_lines',
]
