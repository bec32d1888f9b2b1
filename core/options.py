"""
Option parsing for shellkit commands.

Each command's grammar is a click Command: the flags it recognizes, the
flags that take a value and their long aliases. Operand counts are checked
here so the messages match the classic utilities. parse_options() runs a
raw token list through that grammar and builds the command's frozen option
dataclass, or raises InvalidArgumentError.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

import click

from .errors import InvalidArgumentError


def _flag(*decls: str, help: str) -> click.Option:
    return click.Option(list(decls), is_flag=True, help=help)


def _info_options() -> List[click.Option]:
    return [
        _flag("--help", help="Show this message and exit."),
        _flag("--version", help="Show the version and exit."),
    ]


def _operands(metavar: str) -> click.Argument:
    return click.Argument(["operands"], nargs=-1, metavar=metavar)


def _command(name: str, help: str, params: List[click.Parameter], metavar: str) -> click.Command:
    return click.Command(
        name,
        params=params + _info_options() + [_operands(metavar)],
        help=help,
        add_help_option=False,
    )


@dataclass(frozen=True)
class Grammar:
    """Argument grammar for one command."""
    command: click.Command
    min_operands: int = 0
    max_operands: int = 1


GRAMMARS: Dict[str, Grammar] = {
    "cat": Grammar(_command(
        "cat",
        "Print FILE, or standard input, to standard output.",
        [
            _flag("-A", "--show-all", help="Equivalent to -vET."),
            _flag("-b", "--number-nonblank", help="Number nonempty output lines, overrides -n."),
            _flag("-e", "nonprinting_ends", help="Equivalent to -vE."),
            _flag("-E", "--show-ends", help="Display $ at end of each line."),
            _flag("-n", "--number", help="Number all output lines."),
            _flag("-s", "--squeeze-blank", help="Suppress repeated empty output lines."),
            _flag("-t", "nonprinting_tabs", help="Equivalent to -vT."),
            _flag("-T", "--show-tabs", help="Display TAB characters as ^I."),
            _flag("-v", "--show-nonprinting", help="Use ^ and M- notation, except for LFD and TAB."),
        ],
        "[FILE]",
    )),
    "wc": Grammar(_command(
        "wc",
        "Print newline, word, and byte counts for FILE, or standard input.",
        [
            _flag("-c", "--bytes", help="Print the byte counts."),
            _flag("-m", "--chars", help="Print the character counts."),
            _flag("-n", "chars_alias", help="Same as -m."),
            _flag("-l", "--lines", help="Print the newline counts."),
            _flag("-w", "--words", help="Print the word counts."),
            _flag("-L", "--max-line-length", help="Print the maximum display width."),
        ],
        "[FILE]",
    )),
    "head": Grammar(_command(
        "head",
        "Print the first lines of FILE, or standard input, to standard output.",
        [
            click.Option(["-n", "--lines", "count"], metavar="NUM", help="Print the first NUM lines."),
            _flag("-v", "--verbose", help="Always print a header giving the file name."),
        ],
        "[FILE]",
    )),
    "cp": Grammar(_command(
        "cp",
        "Copy SOURCE to DEST, or into an existing DEST directory.",
        [
            _flag("-i", "--interactive", help="Prompt before overwrite."),
            _flag("-v", "--verbose", help="Explain what is being done."),
        ],
        "SOURCE DEST",
    ), min_operands=2, max_operands=2),
    "mv": Grammar(_command(
        "mv",
        "Rename SOURCE to DEST, or move SOURCE into an existing DEST directory.",
        [
            _flag("-i", "--interactive", help="Prompt before overwrite."),
            _flag("-v", "--verbose", help="Explain what is being done."),
        ],
        "SOURCE DEST",
    ), min_operands=2, max_operands=2),
    "ls": Grammar(_command(
        "ls",
        "List the entries of DIRECTORY, or the name of a FILE.",
        [],
        "PATH",
    ), min_operands=1, max_operands=1),
    "rm": Grammar(_command(
        "rm",
        "Remove FILE. Directories are not removed.",
        [],
        "FILE",
    ), min_operands=1, max_operands=1),
}

COMMANDS = tuple(GRAMMARS)

END_OF_OPTIONS = "--"

_INTEGER = re.compile(r"^[+-]?\d+$")


@dataclass(frozen=True)
class CatOptions:
    """Rendering switches for cat."""
    show_nonprinting: bool = False
    number_nonblank: bool = False
    show_ends: bool = False
    number: bool = False
    squeeze_blank: bool = False
    show_tabs: bool = False
    operand: Optional[str] = None


WC_COUNTERS = ("lines", "words", "chars", "bytes", "max_line_length")
WC_DEFAULT_COUNTERS = ("lines", "words", "bytes")


@dataclass(frozen=True)
class WcOptions:
    """Counter selection for wc."""
    bytes: bool = False
    chars: bool = False
    lines: bool = False
    words: bool = False
    max_line_length: bool = False
    operand: Optional[str] = None

    @property
    def counters(self) -> Tuple[str, ...]:
        """Selected counters in canonical output order."""
        selected = tuple(name for name in WC_COUNTERS if getattr(self, name))
        return selected or WC_DEFAULT_COUNTERS


@dataclass(frozen=True)
class HeadOptions:
    """Line budget and banner switch for head."""
    count: int = 10
    verbose: bool = False
    operand: Optional[str] = None


@dataclass(frozen=True)
class TransferOptions:
    """Switches and operands for cp and mv."""
    source: str
    destination: str
    verbose: bool = False
    interactive: bool = False


@dataclass(frozen=True)
class PathOptions:
    """Single path operand for ls and rm."""
    path: str


@dataclass(frozen=True)
class InfoOptions:
    """A --help or --version request; the command itself does not run."""
    command: str
    topic: str

    @property
    def wants_help(self) -> bool:
        return self.topic == "help"


OptionSet = Union[CatOptions, WcOptions, HeadOptions, TransferOptions, PathOptions, InfoOptions]


def usage(command: str) -> str:
    """Help text for one command, formatted by click."""
    grammar = GRAMMARS.get(command)
    if grammar is None:
        raise InvalidArgumentError(f"unknown command '{command}'")
    ctx = click.Context(grammar.command, info_name=command)
    return grammar.command.get_help(ctx)


def _takes_value(command: click.Command, option_name: str) -> bool:
    for param in command.params:
        if isinstance(param, click.Option) and option_name in param.opts:
            return not param.is_flag
    return False


def _usage_error(grammar: Grammar, error: click.UsageError) -> InvalidArgumentError:
    """Reword a click parse failure the way the classic utilities report it."""
    if isinstance(error, click.NoSuchOption):
        name = error.option_name
        if name.startswith("--"):
            return InvalidArgumentError(f"unrecognized option '{name}'")
        return InvalidArgumentError(f"invalid option -- '{name.lstrip('-')}'")

    if isinstance(error, click.BadOptionUsage):
        name = error.option_name
        if not _takes_value(grammar.command, name):
            return InvalidArgumentError(f"option '{name}' doesn't allow an argument")
        if name.startswith("--"):
            return InvalidArgumentError(f"option '{name}' requires an argument")
        return InvalidArgumentError(f"option requires an argument -- '{name.lstrip('-')}'")

    return InvalidArgumentError(error.format_message())


def _parse(grammar: Grammar, command: str, tokens: List[str]) -> Tuple[Dict[str, object], List[str]]:
    try:
        ctx = grammar.command.make_context(command, list(tokens))
    except click.UsageError as e:
        raise _usage_error(grammar, e) from e

    params = dict(ctx.params)
    operands = list(params.pop("operands") or ())

    if len(operands) < grammar.min_operands:
        if grammar.min_operands == 2 and len(operands) == 1:
            raise InvalidArgumentError(f"missing destination file operand after '{operands[0]}'")
        raise InvalidArgumentError("missing file operand")
    if len(operands) > grammar.max_operands:
        raise InvalidArgumentError(f"extra operand '{operands[grammar.max_operands]}'")

    return params, operands


def _info_request(command: str, tokens: List[str]) -> Optional[InfoOptions]:
    # --help and --version win over everything else before "--"
    head = tokens[:tokens.index(END_OF_OPTIONS)] if END_OF_OPTIONS in tokens else tokens
    if "--help" in head:
        return InfoOptions(command, "help")
    if "--version" in head:
        return InfoOptions(command, "version")
    return None


def parse_count(value: str) -> int:
    """
    Parse a line count.

    Raises:
        InvalidArgumentError: If the value is not an integer or is negative
    """
    text = value.strip()
    if not _INTEGER.match(text):
        raise InvalidArgumentError(f"invalid number of lines: '{value}'")
    count = int(text)
    if count < 0:
        raise InvalidArgumentError(f"invalid number of lines: '{value}' (must be >= 0)")
    return count


def _build_cat(params: Dict[str, object], operand: Optional[str]) -> CatOptions:
    show_all = bool(params["show_all"])
    ends = bool(params["nonprinting_ends"])
    tabs = bool(params["nonprinting_tabs"])
    return CatOptions(
        show_nonprinting=bool(params["show_nonprinting"]) or show_all or ends or tabs,
        number_nonblank=bool(params["number_nonblank"]),
        show_ends=bool(params["show_ends"]) or show_all or ends,
        number=bool(params["number"]),
        squeeze_blank=bool(params["squeeze_blank"]),
        show_tabs=bool(params["show_tabs"]) or show_all or tabs,
        operand=operand,
    )


def _build_wc(params: Dict[str, object], operand: Optional[str]) -> WcOptions:
    return WcOptions(
        bytes=bool(params["bytes"]),
        chars=bool(params["chars"] or params["chars_alias"]),
        lines=bool(params["lines"]),
        words=bool(params["words"]),
        max_line_length=bool(params["max_line_length"]),
        operand=operand,
    )


def parse_options(command: str, tokens: List[str], head_default: int = 10) -> OptionSet:
    """
    Parse the raw tokens that follow a command name.

    Args:
        command: One of COMMANDS
        tokens: Raw argument tokens
        head_default: Line count used by head when -n is absent

    Returns:
        The command's option dataclass, or InfoOptions for --help/--version

    Raises:
        InvalidArgumentError: On any grammar violation
    """
    grammar = GRAMMARS.get(command)
    if grammar is None:
        raise InvalidArgumentError(f"unknown command '{command}'")

    info = _info_request(command, list(tokens))
    if info is not None:
        return info

    params, operands = _parse(grammar, command, tokens)
    operand = operands[0] if operands else None

    if command == "cat":
        return _build_cat(params, operand)
    if command == "wc":
        return _build_wc(params, operand)
    if command == "head":
        count = head_default
        if params["count"] is not None:
            count = parse_count(params["count"])
        return HeadOptions(count=count, verbose=bool(params["verbose"]), operand=operand)
    if command in ("cp", "mv"):
        return TransferOptions(
            source=operands[0],
            destination=operands[1],
            verbose=bool(params["verbose"]),
            interactive=bool(params["interactive"]),
        )
    return PathOptions(path=operands[0])
