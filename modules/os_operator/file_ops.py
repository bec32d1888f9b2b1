"""
File operations module for shellkit OS Operator.

Provides copy and move with overwrite confirmation, plus directory listing
and file deletion. Every operation is written to the audit log.
"""

import os
import shutil
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

import click

from core.confirmation import ConfirmationProvider, ConsoleConfirmation
from core.errors import (
    InvalidArgumentError,
    IsDirectoryError,
    NotFoundError,
    PartialMoveError,
    translate_os_error,
)
from core.logger import AuditLogger, ActionType, ActionStatus


class TransferMode(Enum):
    """Kind of transfer."""
    COPY = "cp"
    MOVE = "mv"


class TransferStatus(Enum):
    """Terminal state of a transfer that did not raise."""
    COMPLETED = "completed"
    DECLINED = "declined"


@dataclass
class TransferJob:
    """A single copy or move request."""
    source: str
    destination: str
    mode: TransferMode = TransferMode.COPY
    verbose: bool = False
    confirm: bool = False


@dataclass
class TransferResult:
    """Outcome of a transfer."""
    status: TransferStatus
    source: str
    target: str
    mode: TransferMode
    bytes_copied: int = 0

    @property
    def declined(self) -> bool:
        return self.status == TransferStatus.DECLINED


class FileOperator:
    """Operations on files and directories with confirmation and auditing."""

    def __init__(
        self,
        confirmation: Optional[ConfirmationProvider] = None,
        logger: Optional[AuditLogger] = None,
        echo: Callable[[str], None] = click.echo
    ):
        """
        Initialize FileOperator.

        Args:
            confirmation: Provider asked before overwriting (default: console prompt)
            logger: Audit logger instance (default: disabled logger)
            echo: Where verbose messages go
        """
        self.confirmation = confirmation or ConsoleConfirmation()
        self.logger = logger or AuditLogger(enabled=False)
        self.echo = echo

    @staticmethod
    def resolve_target(source: str, destination: str) -> Path:
        """
        Work out the effective target of a transfer.

        An existing directory destination receives the source's base name;
        anything else is used as the target path itself.
        """
        dst_path = Path(destination)
        if dst_path.is_dir():
            return dst_path / Path(source).name
        return dst_path

    @staticmethod
    def _replace_with_copy(src_path: Path, target: Path, existed: bool) -> None:
        """
        Copy into a temporary file beside the target, then rename it over.

        A failed copy leaves the target as it was and removes the temporary.
        """
        fd, tmp_name = tempfile.mkstemp(dir=str(target.parent), prefix=f".{target.name}.")
        os.close(fd)
        try:
            shutil.copyfile(src_path, tmp_name)
            shutil.copymode(target if existed else src_path, tmp_name)
            os.replace(tmp_name, target)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def transfer(self, job: TransferJob) -> TransferResult:
        """
        Copy or move one file.

        Args:
            job: What to transfer and how

        Returns:
            TransferResult, COMPLETED or DECLINED

        Raises:
            NotFoundError: If the source doesn't exist
            IsDirectoryError: If the source (or the target) is a directory
            InvalidArgumentError: If source and target are the same file
            PermissionDeniedError: If access is denied
            IOFailureError: On write failure
            PartialMoveError: If a move copied but could not remove the source
        """
        command = job.mode.value
        src_path = Path(job.source)

        if not src_path.exists():
            raise NotFoundError(f"cannot stat '{job.source}': No such file or directory", job.source)
        if src_path.is_dir():
            raise IsDirectoryError(f"omitting directory '{job.source}': only regular files are supported", job.source)

        target = self.resolve_target(job.source, job.destination)
        description = f"{job.source} -> {target}"

        if target.exists():
            if target.is_dir():
                raise IsDirectoryError(f"cannot overwrite directory '{target}' with non-directory", str(target))
            if os.path.samefile(src_path, target):
                raise InvalidArgumentError(f"'{job.source}' and '{target}' are the same file", job.source)

            if job.confirm and not self.confirmation.confirm(f"{command}: overwrite '{target}'?"):
                self.logger.log_action(
                    command=command,
                    action_type=ActionType.WRITE,
                    description=description,
                    status=ActionStatus.DECLINED,
                    result="not overwritten"
                )
                return TransferResult(TransferStatus.DECLINED, job.source, str(target), job.mode)

        # Execute
        existed = target.exists()
        try:
            self._replace_with_copy(src_path, target, existed)
        except OSError as e:
            self.logger.log_action(
                command=command,
                action_type=ActionType.WRITE,
                description=description,
                status=ActionStatus.FAILED,
                result=f"Error: {e}"
            )
            failed_path = job.source if str(e.filename) == str(src_path) else str(target)
            raise translate_os_error(e, failed_path, "copy") from e

        size = target.stat().st_size

        if job.mode == TransferMode.MOVE:
            try:
                os.remove(src_path)
            except OSError as e:
                self.logger.log_action(
                    command=command,
                    action_type=ActionType.DELETE,
                    description=description,
                    status=ActionStatus.FAILED,
                    result=f"Copied but source kept: {e}"
                )
                raise PartialMoveError(
                    f"copied '{job.source}' to '{target}' but cannot remove '{job.source}': {e.strerror or e}",
                    job.source,
                    str(target)
                ) from e

        if job.verbose:
            prefix = "renamed " if job.mode == TransferMode.MOVE else ""
            self.echo(f"{prefix}'{job.source}' -> '{target}'")

        self.logger.log_action(
            command=command,
            action_type=ActionType.WRITE,
            description=description,
            status=ActionStatus.EXECUTED,
            result=f"{size} bytes",
            metadata={"source": job.source, "target": str(target), "size": size}
        )

        return TransferResult(TransferStatus.COMPLETED, job.source, str(target), job.mode, size)

    def copy_file(self, src: str, dst: str, verbose: bool = False, confirm: bool = False) -> TransferResult:
        """Copy ``src`` to ``dst``; see transfer()."""
        return self.transfer(TransferJob(src, dst, TransferMode.COPY, verbose, confirm))

    def move_file(self, src: str, dst: str, verbose: bool = False, confirm: bool = False) -> TransferResult:
        """Move ``src`` to ``dst``; see transfer()."""
        return self.transfer(TransferJob(src, dst, TransferMode.MOVE, verbose, confirm))

    def list_directory(self, path: str) -> List[str]:
        """
        List the entries of a directory.

        Args:
            path: Directory path; "." means the current directory

        Returns:
            Sorted entry names. A regular file lists as its own name.

        Raises:
            NotFoundError: If the path doesn't exist
            PermissionDeniedError: If the directory can't be read
        """
        path_obj = Path.cwd() if path == "." else Path(path).expanduser().resolve()

        if not path_obj.exists():
            raise NotFoundError(f"cannot access '{path}': No such file or directory", path)

        if not path_obj.is_dir():
            names = [path_obj.name]
        else:
            try:
                names = sorted(item.name for item in path_obj.iterdir())
            except OSError as e:
                raise translate_os_error(e, path, "open directory") from e

        self.logger.log_action(
            command="ls",
            action_type=ActionType.LIST,
            description=f"List {path_obj}",
            result=f"{len(names)} entries"
        )
        return names

    def delete_file(self, path: str) -> None:
        """
        Delete a file.

        Raises:
            NotFoundError: If the file doesn't exist
            IsDirectoryError: If the path is a directory
            PermissionDeniedError: If permission is denied
        """
        path_obj = Path(path)

        if not path_obj.exists() and not path_obj.is_symlink():
            raise NotFoundError(f"cannot remove '{path}': No such file or directory", path)
        if path_obj.is_dir() and not path_obj.is_symlink():
            raise IsDirectoryError(f"cannot remove '{path}': Is a directory", path)

        try:
            path_obj.unlink()
        except OSError as e:
            self.logger.log_action(
                command="rm",
                action_type=ActionType.DELETE,
                description=f"Delete {path}",
                status=ActionStatus.FAILED,
                result=f"Error: {e}"
            )
            raise translate_os_error(e, path, "remove") from e

        self.logger.log_action(
            command="rm",
            action_type=ActionType.DELETE,
            description=f"Delete {path}",
        )
