#!/usr/bin/env python3
"""
Utility functions shared across osbuildbootc.
Common functionality for command execution, file operations, and console output.
"""

import os
import sys
import subprocess
from pathlib import Path
from typing import List, Optional, Union


# -----------------------------------------------------------------------------
# Exception Hierarchy
# -----------------------------------------------------------------------------

class OsbuildBootcError(Exception):
    """
    Base exception class for all osbuildbootc errors.

    Every error carries the exit code the command-line tool should terminate
    with, so the top-level handler never has to inspect error types.
    """

    def __init__(self, message: str, error_code: int = 1, cause: Optional[Exception] = None):
        """
        Initialize osbuildbootc error.

        Args:
            message: Human-readable error message
            error_code: Exit code for the command-line tool (default: 1)
            cause: Original exception that caused this error (optional)
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message


class PreconditionError(OsbuildBootcError):
    """Raised when the host cannot run a build (e.g. no KVM)."""

    def __init__(self, message: str, requirement: Optional[str] = None, cause: Optional[Exception] = None):
        super().__init__(message, cause=cause)
        self.requirement = requirement


class ConfigurationError(OsbuildBootcError):
    """Raised when a build configuration document is invalid."""

    def __init__(self, message: str, config_key: Optional[str] = None, cause: Optional[Exception] = None):
        super().__init__(f"Configuration error: {message}", cause=cause)
        self.config_key = config_key


class FileSystemError(OsbuildBootcError):
    """Raised when file system operations fail."""

    def __init__(self, message: str, path: Optional[str] = None, cause: Optional[Exception] = None):
        super().__init__(message, cause=cause)
        self.path = path


class SpawnError(OsbuildBootcError):
    """Raised when a child process cannot be started at all."""

    def __init__(self, message: str, command: str, cause: Optional[Exception] = None):
        super().__init__(message, cause=cause)
        self.command = command


class CommandExecutionError(OsbuildBootcError):
    """
    Raised when an external command exits non-zero.

    The child's exit code becomes the error code, so the tool exits with
    whatever the failing child exited with.
    """

    def __init__(self, message: str, command: str, exit_code: int = 1,
                 cause: Optional[Exception] = None):
        super().__init__(message, error_code=exit_code, cause=cause)
        self.command = command
        self.exit_code = exit_code


class UsageError(OsbuildBootcError):
    """Raised for invalid command-line usage."""


def _exit_code_from_returncode(returncode: int) -> int:
    # subprocess reports death-by-signal as -N; shells report it as 128 + N
    if returncode < 0:
        return 128 - returncode
    return returncode


def handle_subprocess_error(e: subprocess.CalledProcessError, command_description: str) -> CommandExecutionError:
    """
    Convert subprocess.CalledProcessError to standardized CommandExecutionError.

    Args:
        e: The subprocess error
        command_description: Human-readable description of what command failed

    Returns:
        CommandExecutionError: Standardized error with context
    """
    exit_code = _exit_code_from_returncode(e.returncode)
    return CommandExecutionError(
        message=f"{command_description} (exit status {exit_code})",
        command=format_command(e.cmd),
        exit_code=exit_code,
        cause=e
    )


def handle_generic_error(e: Exception, operation_description: str,
                         error_type: type = OsbuildBootcError, **kwargs) -> OsbuildBootcError:
    """
    Convert generic exceptions to standardized osbuildbootc errors.

    Args:
        e: The original exception
        operation_description: Human-readable description of what operation failed
        error_type: Type of osbuildbootc error to create (default: OsbuildBootcError)
        **kwargs: Extra keyword arguments for the error type (e.g. path)

    Returns:
        OsbuildBootcError: Standardized error with context
    """
    return error_type(message=operation_description, cause=e, **kwargs)


# -----------------------------------------------------------------------------
# Command Builder Abstraction
# -----------------------------------------------------------------------------

class CommandBuilder:
    """
    A fluent interface for building argv lists safely and readably.

    Commands are never passed through a shell, so every part stays a
    separate argv element regardless of spaces or quotes.

    Examples:
        cmd = CommandBuilder("qemu-img", "create").param("f", "qcow2").arg("out.qcow2").build()
        # Result: ["qemu-img", "create", "-f", "qcow2", "out.qcow2"]
    """

    def __init__(self, *initial_args: str):
        self._parts: List[str] = list(initial_args)

    def arg(self, argument: Union[str, Path]) -> 'CommandBuilder':
        """Add a single argument to the command."""
        self._parts.append(str(argument))
        return self

    def args(self, *arguments: Union[str, Path]) -> 'CommandBuilder':
        """Add multiple arguments to the command."""
        self._parts.extend(str(a) for a in arguments)
        return self

    def flag(self, flag_name: str, prefix: str = "-") -> 'CommandBuilder':
        """
        Add a flag (e.g., --rm, -v).

        Single-letter flags get a single dash, longer ones a double dash.
        """
        if len(flag_name) == 1:
            self._parts.append(f"{prefix}{flag_name}")
        else:
            prefix = prefix + "-" if prefix == "-" else prefix
            self._parts.append(f"{prefix}{flag_name}")
        return self

    def param(self, key: str, value: Union[str, int, Path], prefix: str = "-") -> 'CommandBuilder':
        """Add a parameter with key-value pair (e.g., -f qcow2, --pid host)."""
        self.flag(key, prefix)
        self._parts.append(str(value))
        return self

    def build(self) -> List[str]:
        """
        Build the final argv list.

        Returns:
            List[str]: A copy of the accumulated command parts
        """
        return list(self._parts)


class QEMUCommandBuilder(CommandBuilder):
    """
    Specialized command builder for qemu-system invocations.

    QEMU options always take a single dash, whatever their length.
    """

    def __init__(self, qemu_binary: str):
        super().__init__(qemu_binary)

    def flag(self, flag_name: str, prefix: str = "-") -> 'QEMUCommandBuilder':
        self._parts.append(f"-{flag_name}")
        return self

    def param(self, key: str, value: Union[str, int, Path], prefix: str = "-") -> 'QEMUCommandBuilder':
        self._parts.extend([f"-{key}", str(value)])
        return self

    def memory(self, mib: Union[str, int]) -> 'QEMUCommandBuilder':
        """Add memory parameter (MiB)."""
        return self.param("m", mib)

    def smp(self, count: Union[str, int]) -> 'QEMUCommandBuilder':
        """Add SMP (CPU count) parameter."""
        return self.param("smp", count)

    def accel(self, accelerator: str) -> 'QEMUCommandBuilder':
        """Select the machine accelerator (kvm or tcg)."""
        return self.param("accel", accelerator)

    def virtio_disk(self, image_path: Union[str, Path], drive_id: str,
                    serial: Optional[str] = None) -> 'QEMUCommandBuilder':
        """
        Attach a qcow2 image as a virtio-blk device.

        With a serial the guest exposes the disk as /dev/disk/by-id/virtio-<serial>.
        """
        self.param("drive", f"file={image_path},format=qcow2,if=none,id={drive_id},cache=unsafe")
        device = f"virtio-blk-pci,drive={drive_id}"
        if serial:
            device += f",serial={serial}"
        return self.param("device", device)

    def kernel(self, kernel_path: Union[str, Path]) -> 'QEMUCommandBuilder':
        """Boot directly into a kernel image."""
        return self.param("kernel", kernel_path)

    def initrd(self, initrd_path: Union[str, Path]) -> 'QEMUCommandBuilder':
        """Add initrd for direct kernel boot."""
        return self.param("initrd", initrd_path)

    def append(self, cmdline: str) -> 'QEMUCommandBuilder':
        """Add kernel command line for direct kernel boot."""
        return self.param("append", cmdline)

    def nographic(self) -> 'QEMUCommandBuilder':
        """Route the serial console to stdio."""
        return self.flag("nographic")


# -----------------------------------------------------------------------------
# Console Output
# -----------------------------------------------------------------------------

COLOR_OFF = '\033[0m'
BBLUE = '\033[1;34m'
BYELLOW = '\033[1;33m'


def info(message: str) -> None:
    """Print an informational message."""
    if sys.stdout.isatty():
        print(f"{BBLUE}{message}{COLOR_OFF}", flush=True)
    else:
        print(message, flush=True)


def warn(message: str) -> None:
    """Print a warning message to stderr."""
    if sys.stderr.isatty():
        print(f"{BYELLOW}warning: {message}{COLOR_OFF}", file=sys.stderr, flush=True)
    else:
        print(f"warning: {message}", file=sys.stderr, flush=True)


# -----------------------------------------------------------------------------
# Command Execution Utilities
# -----------------------------------------------------------------------------

def format_command(cmd: Union[str, List[str]]) -> str:
    """Render a command for messages."""
    return cmd if isinstance(cmd, str) else ' '.join(str(c) for c in cmd)


def run_command(cmd: List[str], interactive: bool = False) -> subprocess.CompletedProcess:
    """
    Run a command synchronously with stdout/stderr inherited from this process.

    Args:
        cmd: Command argv to execute (never run through a shell)
        interactive: Also connect this process's stdin to the child; otherwise
            the child reads from /dev/null

    Returns:
        subprocess.CompletedProcess: Result of the command execution

    Raises:
        SpawnError: The command could not be started
        CommandExecutionError: The command exited non-zero
    """
    command_str = format_command(cmd)
    print(f"Running: {command_str}", flush=True)

    try:
        return subprocess.run(
            cmd,
            check=True,
            stdin=None if interactive else subprocess.DEVNULL
        )
    except subprocess.CalledProcessError as e:
        raise handle_subprocess_error(e, f"Failed to execute command: {command_str}")
    except OSError as e:
        raise SpawnError(f"Failed to start command: {command_str}", command=command_str, cause=e)


# -----------------------------------------------------------------------------
# Directory and File Operations
# -----------------------------------------------------------------------------

def ensure_directory(path: str, mode: int = 0o755) -> None:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to create
        mode: Permission bits for newly created directories

    Raises:
        FileSystemError: The directory could not be created
    """
    try:
        os.makedirs(path, mode=mode, exist_ok=True)
    except OSError as e:
        raise handle_generic_error(e, f"Failed to create directory {path}", FileSystemError, path=path)


def write_file(path: str, content: bytes, mode: int = 0o644) -> None:
    """
    Write content to a file, replacing anything that was there before.

    Args:
        path: File to write
        content: Raw bytes to store
        mode: Permission bits used when the file is created

    Raises:
        FileSystemError: The file could not be written
    """
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        with os.fdopen(fd, "wb") as f:
            f.write(content)
    except OSError as e:
        raise handle_generic_error(e, f"Failed to write {path}", FileSystemError, path=path)


def remove_file(path: str) -> bool:
    """
    Remove a file, best-effort.

    Args:
        path: File to remove

    Returns:
        bool: True if the file is gone afterwards
    """
    try:
        os.remove(path)
    except FileNotFoundError:
        return True
    except OSError as e:
        warn(f"Failed to remove {path}: {e}")
        return False
    return True
