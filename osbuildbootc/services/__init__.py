#!/usr/bin/env python3
"""
Injectable service implementations.
"""

from .configuration_service import ConfigurationService
from .command_execution_service import CommandExecutionService
from .filesystem_service import FileSystemService

__all__ = [
    'ConfigurationService',
    'CommandExecutionService',
    'FileSystemService',
]
