#!/usr/bin/env python3
"""
shellkit - simplified Unix file utilities

Main entry point for the shellkit CLI: one subcommand per utility plus an
interactive menu shell.
"""

import io
import shlex
import sys
from typing import BinaryIO, List, Optional, Tuple

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from core import ShellkitConfig, AuditLogger, ConsoleConfirmation, ShellkitError, parse_options, __version__
from core.errors import InvalidArgumentError, translate_os_error
from core.options import InfoOptions, usage
from core.logger import ActionType, ActionStatus
from modules.os_operator import FileOperator, TransferJob, TransferMode
from modules import text_ops


console = Console(soft_wrap=True)

MENU = [
    ("1", "ls"),
    ("2", "cat"),
    ("3", "cp"),
    ("4", "mv"),
    ("5", "rm"),
    ("6", "wc"),
    ("7", "head"),
]

READ_COMMANDS = ("cat", "wc", "head")

STDOUT_LABEL = "standard output"

PASSTHROUGH = {"ignore_unknown_options": True}

_ESCAPES = {
    "n": b"\n",
    "t": b"\t",
    "r": b"\r",
    "v": b"\x0b",
    "a": b"\x07",
    "\\": b"\\",
}
_HEX_DIGITS = "0123456789abcdefABCDEF"


def get_audit_logger(config: ShellkitConfig) -> AuditLogger:
    """Get a configured audit logger instance."""
    return AuditLogger(log_path=config.audit_log_path, enabled=config.audit_enabled)


def get_file_operator(config: ShellkitConfig, logger: AuditLogger) -> FileOperator:
    """Get a file operator that prompts on the console."""
    return FileOperator(
        confirmation=ConsoleConfirmation(console, accept=config.accept_answers),
        logger=logger,
    )


def unescape(text: str) -> bytes:
    """
    Expand backslash escapes the way ``echo -e`` does.

    Supports \\n \\t \\r \\v \\a \\\\ and \\xHH. Unknown escapes are kept
    verbatim.
    """
    out = bytearray()
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text):
            nxt = text[i + 1]
            if nxt in _ESCAPES:
                out += _ESCAPES[nxt]
                i += 2
                continue
            if nxt == "x":
                digits = text[i + 2:i + 4]
                if digits and all(c in _HEX_DIGITS for c in digits):
                    out.append(int(digits, 16))
                    i += 2 + len(digits)
                    continue
        out += ch.encode("utf-8")
        i += 1
    return bytes(out)


def find_pipe(line: str) -> int:
    """Index of the first '|' outside quotes, or -1."""
    quote = None
    for index, ch in enumerate(line):
        if quote:
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch == "|":
            return index
    return -1


def split_command_line(line: str, command: str) -> Tuple[List[str], Optional[bytes]]:
    """
    Split a shell argument line into tokens and optional piped input.

    ``echo TEXT | [command] ARGS`` feeds the unescaped TEXT plus a newline
    as standard input. A '|' inside quotes belongs to the text. A leading
    command name in ARGS is dropped.

    Raises:
        InvalidArgumentError: On unbalanced quotes or an unsupported pipeline
    """
    stdin_data = None
    pipe = find_pipe(line)
    if pipe >= 0:
        left, line = line[:pipe].strip(), line[pipe + 1:]
        if left != "echo" and not left.startswith("echo "):
            raise InvalidArgumentError("only 'echo TEXT | ...' pipelines are supported")
        text = left[len("echo"):].strip()
        if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
            text = text[1:-1]
        stdin_data = unescape(text) + b"\n"

    try:
        tokens = shlex.split(line)
    except ValueError as e:
        raise InvalidArgumentError(f"cannot parse arguments: {e}") from e

    if tokens and tokens[0] == command:
        tokens = tokens[1:]
    return tokens, stdin_data


def run_reader(command: str, options, source: text_ops.InputSource, out: BinaryIO) -> None:
    """
    Run cat, wc or head against one source.

    Raises:
        ShellkitError: On read failure, or IOFailureError when the output
            can't be written
    """
    try:
        if command == "cat":
            text_ops.cat(source, options, out)
        elif command == "wc":
            text_ops.wc(source, options, out)
        else:
            text_ops.head(source, options, out)
    except OSError as e:
        raise translate_os_error(e, STDOUT_LABEL, "write") from e


def show_info(options: InfoOptions) -> None:
    if options.wants_help:
        click.echo(usage(options.command))
    else:
        click.echo(f"{options.command} (shellkit) {__version__}")


def execute(
    command: str,
    tokens: List[str],
    config: ShellkitConfig,
    stdin: Optional[BinaryIO] = None,
    operator: Optional[FileOperator] = None
) -> int:
    """
    Parse and run one command.

    Args:
        command: Utility name
        tokens: Raw arguments after the command name
        config: Active configuration
        stdin: Stream used when a read command has no file operand
        operator: File operator to use (default: console-prompting one)

    Returns:
        Exit status: 0 on success or a declined overwrite, 1 on error
    """
    logger = operator.logger if operator is not None else get_audit_logger(config)
    operator = operator or get_file_operator(config, logger)
    out = sys.stdout.buffer

    try:
        options = parse_options(command, tokens, head_default=config.head_default_lines)

        if isinstance(options, InfoOptions):
            show_info(options)

        elif command in READ_COMMANDS:
            source = text_ops.open_source(options.operand, stdin)
            label = source.label
            try:
                run_reader(command, options, source, out)
            except ShellkitError as e:
                logger.log_action(
                    command=command,
                    action_type=ActionType.READ,
                    description=f"{command} {label}",
                    status=ActionStatus.FAILED,
                    result=str(e)
                )
                raise
            logger.log_action(
                command=command,
                action_type=ActionType.READ,
                description=f"{command} {label}",
                metadata={"arguments": tokens}
            )

        elif command in ("cp", "mv"):
            job = TransferJob(
                source=options.source,
                destination=options.destination,
                mode=TransferMode(command),
                verbose=options.verbose,
                confirm=options.interactive,
            )
            result = operator.transfer(job)
            if result.declined:
                console.print(f"[yellow]{command}: not overwritten[/yellow]")

        elif command == "ls":
            for name in operator.list_directory(options.path):
                click.echo(name)

        elif command == "rm":
            operator.delete_file(options.path)
            console.print(f"[dim]removed '{escape(options.path)}'[/dim]")

    except ShellkitError as e:
        console.print(f"[red]{command}: {escape(str(e))}[/red]")
        return 1

    return 0


@click.group()
@click.version_option(version=__version__, prog_name="shellkit")
@click.option(
    "--config",
    "config_path",
    envvar="SHELLKIT_CONFIG",
    default=None,
    type=click.Path(dir_okay=False),
    help="YAML settings file (default: config.yaml)."
)
@click.pass_context
def shellkit(ctx, config_path: Optional[str]):
    """
    shellkit - simplified Unix file utilities

    ls, cat, cp, mv, rm, wc and head, runnable one at a time or from an
    interactive menu.
    """
    ctx.obj = ShellkitConfig.load(config_path)


def _run(ctx, command: str, args) -> None:
    code = execute(command, list(args), ctx.obj, stdin=sys.stdin.buffer)
    ctx.exit(code)


@shellkit.command(context_settings=PASSTHROUGH, add_help_option=False)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def ls(ctx, args):
    """List the entries of a directory."""
    _run(ctx, "ls", args)


@shellkit.command(context_settings=PASSTHROUGH, add_help_option=False)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def cat(ctx, args):
    """Print a file or standard input (-A -b -e -E -n -s -t -T -v)."""
    _run(ctx, "cat", args)


@shellkit.command(context_settings=PASSTHROUGH, add_help_option=False)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def cp(ctx, args):
    """Copy a file (-v verbose, -i confirm overwrite)."""
    _run(ctx, "cp", args)


@shellkit.command(context_settings=PASSTHROUGH, add_help_option=False)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def mv(ctx, args):
    """Move or rename a file (-v verbose, -i confirm overwrite)."""
    _run(ctx, "mv", args)


@shellkit.command(context_settings=PASSTHROUGH, add_help_option=False)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def rm(ctx, args):
    """Delete a file."""
    _run(ctx, "rm", args)


@shellkit.command(context_settings=PASSTHROUGH, add_help_option=False)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def wc(ctx, args):
    """Count lines, words, chars, bytes (-l -w -m -c -L)."""
    _run(ctx, "wc", args)


@shellkit.command(context_settings=PASSTHROUGH, add_help_option=False)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def head(ctx, args):
    """Print the first lines of a file (-n COUNT, -v banner)."""
    _run(ctx, "head", args)


def resolve_choice(choice: str) -> Optional[str]:
    """Map a menu answer (number or name) to a command name."""
    for number, name in MENU:
        if choice in (number, name):
            return name
    return None


def show_menu() -> None:
    table = Table(show_header=False, box=None)
    table.add_column("Number", style="bold cyan")
    table.add_column("Command")
    for number, name in MENU:
        table.add_row(f"{number})", name)
    console.print(table)


@shellkit.command()
@click.pass_context
def shell(ctx):
    """Start the interactive command menu."""
    config = ctx.obj
    console.print(Panel.fit(
        "[bold blue]shellkit[/bold blue]\n"
        "[dim]Pick a utility by number or name; type 'quit' to leave[/dim]",
        title="Interactive Mode"
    ))

    while True:
        show_menu()
        try:
            choice = console.input("\n[bold green]Choice>[/bold green] ").strip()
        except (EOFError, KeyboardInterrupt):
            console.print("\n[dim]Goodbye![/dim]")
            break

        if not choice:
            continue

        if choice.lower() == "quit":
            console.print("[dim]Goodbye![/dim]")
            break

        command = resolve_choice(choice)
        if command is None:
            console.print(f"[red]Invalid option '{escape(choice)}', please try again.[/red]")
            continue

        try:
            line = console.input(f"[bold]{command}>[/bold] ")
        except (EOFError, KeyboardInterrupt):
            console.print("\n[dim]Goodbye![/dim]")
            break

        try:
            tokens, stdin_data = split_command_line(line, command)
        except InvalidArgumentError as e:
            console.print(f"[red]{command}: {escape(str(e))}[/red]")
            continue

        stdin = io.BytesIO(stdin_data) if stdin_data is not None else None
        try:
            execute(command, tokens, config, stdin=stdin)
        except KeyboardInterrupt:
            console.print(f"\n[yellow]{command}: interrupted[/yellow]")

        console.print()


@shellkit.command()
@click.option("--limit", default=20, show_default=True, help="Number of entries to show.")
@click.pass_context
def audit(ctx, limit: int):
    """View the audit log."""
    logger = get_audit_logger(ctx.obj)
    entries = logger.get_recent(limit=limit)

    if not entries:
        console.print("[dim]No audit entries found.[/dim]")
        return

    table = Table(title="Recent Audit Log")
    table.add_column("Time", style="dim")
    table.add_column("Command")
    table.add_column("Action")
    table.add_column("Status")

    for entry in entries:
        time_str = entry.timestamp.split("T")[1].split(".")[0] if "T" in entry.timestamp else entry.timestamp

        status_str = entry.status
        if entry.status == ActionStatus.EXECUTED.value:
            status_str = f"[green]{entry.status}[/green]"
        elif entry.status == ActionStatus.FAILED.value:
            status_str = f"[red]{entry.status}[/red]"
        elif entry.status == ActionStatus.DECLINED.value:
            status_str = f"[yellow]{entry.status}[/yellow]"

        description = entry.action_description
        if len(description) > 50:
            description = description[:50] + "..."

        table.add_row(time_str, entry.command, escape(description), status_str)

    console.print(table)


@shellkit.command("config")
@click.option("--init", "init_path", default=None, type=click.Path(dir_okay=False),
              help="Write the active settings to this YAML file.")
@click.pass_context
def show_config(ctx, init_path: Optional[str]):
    """Show the active settings."""
    config = ctx.obj

    console.print(f"\n[bold]Settings[/bold] [dim]({escape(config.source_path or 'defaults')})[/dim]")
    console.print(f"   Accepted answers: {', '.join(config.accept_answers)}")
    console.print(f"   head default lines: {config.head_default_lines}")
    console.print(f"   Audit log: {escape(config.audit_log_path)} "
                  f"({'enabled' if config.audit_enabled else 'disabled'})")

    if init_path:
        config.save(init_path)
        console.print(f"[green]Wrote settings to:[/green] {escape(init_path)}")


if __name__ == "__main__":
    shellkit()
