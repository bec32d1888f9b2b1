"""
Error taxonomy for shellkit.

Every engine failure is raised as a ShellkitError subclass so the dispatcher
can report it as a single message and return to the menu.
"""

import errno
from typing import Optional


class ShellkitError(Exception):
    """Base class for all recoverable command failures."""

    kind = "error"

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        return self.message


class InvalidArgumentError(ShellkitError):
    """Bad flag, bad operand shape or bad numeric value."""

    kind = "invalid_argument"


class NotFoundError(ShellkitError):
    """A named file or directory does not exist."""

    kind = "not_found"


class PermissionDeniedError(ShellkitError):
    """The OS refused access to a path."""

    kind = "permission_denied"


class IsDirectoryError(ShellkitError):
    """A directory was given where only regular files are supported."""

    kind = "is_a_directory"


class IOFailureError(ShellkitError):
    """Generic read, write or remove failure."""

    kind = "io_failure"


class PartialMoveError(IOFailureError):
    """
    The copy half of a move succeeded but the source could not be removed.

    The target holds a complete copy; the source is still in place.
    """

    kind = "partial_move"

    def __init__(self, message: str, path: Optional[str] = None, target: Optional[str] = None):
        super().__init__(message, path)
        self.target = target


def translate_os_error(exc: OSError, path: str, action: str = "access") -> ShellkitError:
    """
    Map an OSError onto the shellkit taxonomy.

    Args:
        exc: The original OS error
        path: Path the operation was working on
        action: Verb used in the message ("open", "copy", "remove", ...)

    Returns:
        The matching ShellkitError, with the OS reason in its message
    """
    reason = exc.strerror or str(exc)

    if isinstance(exc, FileNotFoundError) or exc.errno == errno.ENOENT:
        return NotFoundError(f"cannot {action} '{path}': No such file or directory", path)
    if isinstance(exc, PermissionError) or exc.errno in (errno.EACCES, errno.EPERM):
        return PermissionDeniedError(f"cannot {action} '{path}': Permission denied", path)
    if isinstance(exc, IsADirectoryError) or exc.errno == errno.EISDIR:
        return IsDirectoryError(f"cannot {action} '{path}': Is a directory", path)
    return IOFailureError(f"cannot {action} '{path}': {reason}", path)
