#!/usr/bin/env python3
"""
File System Service Implementation.

This service wraps the file system utilities and provides them as injectable dependencies.
"""

from osbuildbootc.core.service_interfaces import IFileSystemService
from osbuildbootc.utils import (
    ensure_directory as util_ensure_directory,
    write_file as util_write_file,
    remove_file as util_remove_file
)


class FileSystemService(IFileSystemService):
    """Injectable file system service that wraps utility functions."""

    def ensure_directory(self, path: str, mode: int = 0o755) -> None:
        """
        Ensure that a directory exists, creating it if necessary.

        Args:
            path: Directory path to ensure exists
            mode: Permission bits for a newly created directory
        """
        util_ensure_directory(path, mode=mode)

    def write_file(self, path: str, content: bytes, mode: int = 0o644) -> None:
        """
        Replace the content of a file.

        Args:
            path: File to write
            content: Bytes to store
            mode: Permission bits used when the file is created
        """
        util_write_file(path, content, mode=mode)

    def remove_file(self, path: str) -> bool:
        """
        Remove a file, ignoring failures.

        Args:
            path: File to remove

        Returns:
            True if the file no longer exists
        """
        return util_remove_file(path)
