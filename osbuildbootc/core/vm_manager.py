#!/usr/bin/env python3
"""
VM management functionality: interactive shell in the build VM and
direct QEMU launches.
"""

from dataclasses import dataclass, field
from typing import List, Optional
from osbuildbootc.core.service_interfaces import (
    IConfigurationService, ICommandExecutionService, IPreflightService, IVMService
)
from osbuildbootc.utils import CommandBuilder, QEMUCommandBuilder, UsageError


@dataclass
class QemuExecOptions:
    """Options of a qemuexec invocation; None means use the configured default."""

    memory_mib: Optional[int] = None
    smp: Optional[int] = None
    disks: List[str] = field(default_factory=list)
    target_disk: Optional[str] = None
    kernel: Optional[str] = None
    initrd: Optional[str] = None
    append: Optional[str] = None
    extra_args: List[str] = field(default_factory=list)


class QemuLauncher:
    """
    Builds and runs qemu-system command lines.
    """

    def __init__(self, config_service: IConfigurationService,
                 command_service: ICommandExecutionService,
                 preflight_service: IPreflightService):
        self._config = config_service
        self._command_service = command_service
        self._preflight = preflight_service

    def build_command(self, options: QemuExecOptions) -> List[str]:
        """
        Build the complete QEMU command for these options.

        Args:
            options: qemuexec options

        Returns:
            Command argv

        Raises:
            UsageError: --initrd or --append given without --kernel
        """
        if not options.kernel and (options.initrd or options.append):
            raise UsageError("--initrd and --append require --kernel")

        memory = options.memory_mib if options.memory_mib is not None else self._config.qemu_memory_mib
        smp = options.smp if options.smp is not None else self._config.qemu_smp
        accelerator = "kvm" if self._preflight.kvm_available() else "tcg"

        builder = (QEMUCommandBuilder(self._config.qemu_binary)
                   .accel(accelerator)
                   .memory(memory)
                   .smp(smp)
                   .nographic())

        for index, disk in enumerate(options.disks):
            builder.virtio_disk(disk, drive_id=f"disk{index}")

        if options.target_disk:
            builder.virtio_disk(options.target_disk, drive_id="target",
                                serial=self._config.target_serial)

        if options.kernel:
            builder.kernel(options.kernel)
            if options.initrd:
                builder.initrd(options.initrd)
            if options.append:
                builder.append(options.append)

        return builder.args(*options.extra_args).build()

    def launch(self, options: QemuExecOptions) -> None:
        """Run QEMU in the foreground with the terminal attached."""
        self._command_service.run_command(self.build_command(options), interactive=True)


class VMService(IVMService):
    """Injectable VM service that provides VM management operations."""

    def __init__(self, config_service: IConfigurationService,
                 command_service: ICommandExecutionService,
                 preflight_service: IPreflightService):
        self._launcher = QemuLauncher(config_service, command_service, preflight_service)
        self._config = config_service
        self._command_service = command_service

    def vmshell(self) -> None:
        """Run a shell in the build VM, attached to this terminal."""
        cmd = CommandBuilder(self._config.vmshell_script).build()
        self._command_service.run_command(cmd, interactive=True)

    def qemuexec(self, options: QemuExecOptions) -> None:
        """
        Launch QEMU directly.

        Args:
            options: qemuexec options
        """
        self._launcher.launch(options)


def vmshell() -> None:
    """
    Run a shell in the build VM using the global service container.
    """
    from osbuildbootc.core.service_factory import get_service_container
    container = get_service_container()
    container.resolve(IVMService).vmshell()


def qemuexec(options: QemuExecOptions) -> None:
    """
    Launch QEMU using the global service container.
    """
    from osbuildbootc.core.service_factory import get_service_container
    container = get_service_container()
    container.resolve(IVMService).qemuexec(options)
