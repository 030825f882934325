#!/usr/bin/env python3
"""
Core build and VM operations.
"""

from .build_config import BuildConfig, CLIOptions, write_build_config, load_build_config
from .build_orchestrator import build_qcow2
from .preflight import ensure_virtualization_available
from .vm_manager import QemuExecOptions, vmshell, qemuexec
from .disk_installer import build_disk_impl

__all__ = [
    'BuildConfig',
    'CLIOptions',
    'write_build_config',
    'load_build_config',
    'build_qcow2',
    'ensure_virtualization_available',
    'QemuExecOptions',
    'vmshell',
    'qemuexec',
    'build_disk_impl',
]
