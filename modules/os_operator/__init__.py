"""
OS Operator module for shellkit.

Provides file copy, move, listing and deletion with overwrite confirmation.
"""

from .file_ops import FileOperator, TransferJob, TransferMode, TransferResult, TransferStatus

__all__ = ['FileOperator', 'TransferJob', 'TransferMode', 'TransferResult', 'TransferStatus']
