#!/usr/bin/env python3
"""
In-guest half of the build: install the bootc image onto the target disk.

qcow2.sh boots the build VM with the output disk attached as
/dev/disk/by-id/virtio-target and runs `osbuildbootc build-disk-impl` there
with the config document written by build-qcow2.
"""

from typing import List
from osbuildbootc.core.build_config import BuildConfig, load_build_config
from osbuildbootc.core.service_interfaces import (
    IConfigurationService, ICommandExecutionService, IInstallService
)
from osbuildbootc.utils import CommandBuilder, info

# Prefixes that already name a containers-image transport
KNOWN_TRANSPORTS = (
    "docker://", "docker-archive:", "docker-daemon:", "containers-storage:",
    "oci:", "oci-archive:", "dir:",
)


def source_image_reference(build_config: BuildConfig) -> str:
    """
    The image reference handed to the container runtime.

    A Source that already starts with a transport is used as-is; otherwise
    SourceTransport is prepended.
    """
    if build_config.source.startswith(KNOWN_TRANSPORTS):
        return build_config.source
    return f"{build_config.source_transport}{build_config.source}"


class DiskInstaller(IInstallService):
    """Runs `bootc install to-disk` from the source image."""

    def __init__(self, config_service: IConfigurationService,
                 command_service: ICommandExecutionService):
        self._config = config_service
        self._command_service = command_service

    def build_command(self, build_config: BuildConfig) -> List[str]:
        installer = self._config.config.installer
        return (CommandBuilder(installer.container_runtime)
                .args(*installer.runtime_args)
                .arg(source_image_reference(build_config))
                .args(*installer.install_command)
                .args(*build_config.install_args)
                .arg(build_config.disk)
                .build())

    def build_disk_impl(self, config_path: str) -> None:
        """
        Install the configured image onto the configured disk.

        Args:
            config_path: Path of the build config document

        Raises:
            FileSystemError: The config cannot be read
            ConfigurationError: The config is invalid
            CommandExecutionError: The installer exited non-zero
        """
        build_config = load_build_config(config_path)
        info(f"Installing {build_config.source} to {build_config.disk}")
        self._command_service.run_command(self.build_command(build_config))


def build_disk_impl(config_path: str) -> None:
    """
    Run the in-guest installer using the global service container.
    """
    from osbuildbootc.core.service_factory import get_service_container
    container = get_service_container()
    container.resolve(IInstallService).build_disk_impl(config_path)
