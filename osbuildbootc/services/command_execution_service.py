#!/usr/bin/env python3
"""
Command Execution Service Implementation.

This service wraps the command execution utility and provides it as an injectable dependency.
"""

from typing import List
from subprocess import CompletedProcess
from osbuildbootc.core.service_interfaces import ICommandExecutionService
from osbuildbootc.utils import run_command as util_run_command


class CommandExecutionService(ICommandExecutionService):
    """Injectable command execution service that wraps utility functions."""

    def run_command(self, cmd: List[str], interactive: bool = False) -> CompletedProcess:
        """
        Run a command in the foreground with stdout/stderr inherited.

        Args:
            cmd: Command argv to execute
            interactive: Whether the child also gets this process's stdin

        Returns:
            Result of the command execution
        """
        return util_run_command(cmd, interactive=interactive)
