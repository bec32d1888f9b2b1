# shellkit - Core Module
"""
Core infrastructure for shellkit.
Configuration, option parsing, confirmation, errors and audit logging shared
by every command.
"""

from .config import ShellkitConfig
from .confirmation import ConfirmationProvider, ConsoleConfirmation, CallbackConfirmation, ScriptedConfirmation
from .errors import ShellkitError
from .logger import AuditLogger, AuditEntry
from .options import parse_options

__all__ = [
    "ShellkitConfig",
    "ConfirmationProvider",
    "ConsoleConfirmation",
    "CallbackConfirmation",
    "ScriptedConfirmation",
    "ShellkitError",
    "AuditLogger",
    "AuditEntry",
    "parse_options",
]

__version__ = "0.1.0"
