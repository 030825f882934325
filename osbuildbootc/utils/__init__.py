#!/usr/bin/env python3
"""
Shared utilities: error hierarchy, command building and execution, file helpers.
"""

from .utils import (
    OsbuildBootcError,
    PreconditionError,
    ConfigurationError,
    FileSystemError,
    SpawnError,
    CommandExecutionError,
    UsageError,
    handle_subprocess_error,
    handle_generic_error,
    CommandBuilder,
    QEMUCommandBuilder,
    info,
    warn,
    format_command,
    run_command,
    ensure_directory,
    write_file,
    remove_file,
)

__all__ = [
    'OsbuildBootcError',
    'PreconditionError',
    'ConfigurationError',
    'FileSystemError',
    'SpawnError',
    'CommandExecutionError',
    'UsageError',
    'handle_subprocess_error',
    'handle_generic_error',
    'CommandBuilder',
    'QEMUCommandBuilder',
    'info',
    'warn',
    'format_command',
    'run_command',
    'ensure_directory',
    'write_file',
    'remove_file',
]
