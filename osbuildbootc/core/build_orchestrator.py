#!/usr/bin/env python3
"""
build-qcow2 orchestration.

The pipeline runs strictly in order: preflight, work directory, config
document, disk preallocation, helper script. Only a failure of the helper
script removes the output disk; earlier failures leave it untouched.
"""

from osbuildbootc.core.build_config import CLIOptions, write_build_config
from osbuildbootc.core.service_interfaces import (
    IBuildService, IConfigurationService, ICommandExecutionService,
    IFileSystemService, IPreflightService
)
from osbuildbootc.utils import CommandBuilder, OsbuildBootcError, info


def preallocate_disk(command_service: ICommandExecutionService, img_tool: str,
                     dest: str, size_mib: int) -> None:
    """
    Create an empty sparse qcow2 image of size_mib MiB at dest.

    A size of 0 is passed through; qemu-img decides what to make of it.

    Raises:
        CommandExecutionError: qemu-img exited non-zero
        SpawnError: qemu-img could not be started
    """
    cmd = (CommandBuilder(img_tool, "create")
           .param("f", "qcow2")
           .arg(dest)
           .arg(f"{size_mib}M")
           .build())
    command_service.run_command(cmd)


class BuildService(IBuildService):
    """Injectable service that turns a bootc container image into a qcow2 disk."""

    def __init__(self, config_service: IConfigurationService,
                 command_service: ICommandExecutionService,
                 fs_service: IFileSystemService,
                 preflight_service: IPreflightService):
        self._config = config_service
        self._command_service = command_service
        self._fs = fs_service
        self._preflight = preflight_service

    def build_qcow2(self, options: CLIOptions) -> None:
        """
        Build options.dest from options.source.

        Args:
            options: Parsed build-qcow2 options

        Raises:
            OsbuildBootcError: Any stage failed; a CommandExecutionError
                carries the exit code of the failing child
        """
        self._preflight.ensure_virtualization_available()

        self._fs.ensure_directory(self._config.work_dir, mode=0o755)
        config_path = write_build_config(options, self._config, self._fs)

        preallocate_disk(self._command_service, self._config.img_tool,
                         options.dest, options.size_mib)

        info(f"Generating image; source={options.source} target={options.effective_target_image}")
        cmd = CommandBuilder(self._config.qcow2_script).args(options.dest, config_path).build()
        try:
            self._command_service.run_command(cmd)
        except OsbuildBootcError:
            self._fs.remove_file(options.dest)
            raise


def build_qcow2(options: CLIOptions) -> None:
    """
    Build a qcow2 disk image using the global service container.

    Args:
        options: Parsed build-qcow2 options
    """
    from osbuildbootc.core.service_factory import get_service_container
    container = get_service_container()
    container.resolve(IBuildService).build_qcow2(options)

