#!/usr/bin/env python3
"""
Service Interfaces for Dependency Injection.

This module defines the contracts (interfaces) that service implementations must follow.
Using protocols allows tests to swap in fakes while keeping type safety.
"""

from typing import Any, Protocol, List, runtime_checkable
from subprocess import CompletedProcess


@runtime_checkable
class IConfigurationService(Protocol):
    """Interface for configuration management services."""

    @property
    def work_dir(self) -> str: ...

    @property
    def config_path(self) -> str: ...

    @property
    def qcow2_script(self) -> str: ...

    @property
    def vmshell_script(self) -> str: ...

    @property
    def target_disk(self) -> str: ...

    @property
    def img_tool(self) -> str: ...

    @property
    def qemu_binary(self) -> str: ...

    @property
    def qemu_memory_mib(self) -> int: ...

    @property
    def qemu_smp(self) -> int: ...

    @property
    def target_serial(self) -> str: ...

    @property
    def kvm_bypassed(self) -> bool: ...

    @property
    def kvm_device(self) -> str: ...

    @property
    def no_kvm_var(self) -> str: ...

    @property
    def config(self) -> Any: ...


@runtime_checkable
class ICommandExecutionService(Protocol):
    """Interface for command execution services."""

    def run_command(self, cmd: List[str], interactive: bool = False) -> CompletedProcess: ...


@runtime_checkable
class IFileSystemService(Protocol):
    """Interface for file system operation services."""

    def ensure_directory(self, path: str, mode: int = 0o755) -> None: ...

    def write_file(self, path: str, content: bytes, mode: int = 0o644) -> None: ...

    def remove_file(self, path: str) -> bool: ...


@runtime_checkable
class IPreflightService(Protocol):
    """Interface for host capability checks."""

    def ensure_virtualization_available(self) -> None: ...

    def kvm_available(self) -> bool: ...


@runtime_checkable
class IBuildService(Protocol):
    """Interface for disk image build services."""

    def build_qcow2(self, options) -> None: ...


@runtime_checkable
class IVMService(Protocol):
    """Interface for VM management services."""

    def vmshell(self) -> None: ...

    def qemuexec(self, options) -> None: ...


@runtime_checkable
class IInstallService(Protocol):
    """Interface for the in-guest disk installer."""

    def build_disk_impl(self, config_path: str) -> None: ...
