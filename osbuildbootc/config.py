# config.py
"""
osbuildbootc Configuration Management

Provides type-safe, well-structured configuration for the disk image builder.
The paths and names here form the contract with the helper scripts shipped in
/usr/lib/osbuildbootc, so most of them are not meant to be tuned per build.
"""

import os
import platform
from dataclasses import dataclass, field
from typing import List


@dataclass
class DirectoryConfig:
    """Directory paths used throughout the build."""

    # Scratch directory, relative to the current working directory
    work: str = "tmp"
    # Where the helper scripts are installed
    libexec: str = "/usr/lib/osbuildbootc"


@dataclass
class BuildDefaults:
    """Defaults for build-qcow2 and the config document it writes."""

    source_transport: str = "docker://"
    size_mib: int = 10 * 1024
    config_name: str = "config.json"

    # Block device the build VM sees for the output disk
    target_disk: str = "/dev/disk/by-id/virtio-target"

    qcow2_script: str = "qcow2.sh"
    vmshell_script: str = "vmshell.sh"


def _default_qemu_binary() -> str:
    machine = platform.machine()
    if machine in ("arm64", "aarch64"):
        machine = "aarch64"
    elif machine in ("AMD64", "amd64"):
        machine = "x86_64"
    return f"qemu-system-{machine}"


@dataclass
class QEMUConfig:
    """QEMU-specific configuration."""

    img_tool: str = "qemu-img"
    system_binary: str = field(default_factory=_default_qemu_binary)
    memory_mib: int = 2048
    smp: int = 2
    # Serial given to the output disk; virtio exposes it as virtio-<serial>
    target_serial: str = "target"


@dataclass
class EnvironmentConfig:
    """Host environment probing."""

    no_kvm_var: str = "OSBUILD_NO_KVM"
    kvm_device: str = "/dev/kvm"


@dataclass
class InstallerConfig:
    """In-guest installer invocation used by build-disk-impl."""

    container_runtime: str = "podman"
    runtime_args: List[str] = field(default_factory=lambda: [
        "run", "--rm", "--privileged", "--pid=host",
        "--security-opt", "label=type:unconfined_t",
        "-v", "/dev:/dev",
        "-v", "/var/lib/containers:/var/lib/containers",
    ])
    install_command: List[str] = field(default_factory=lambda: [
        "bootc", "install", "to-disk",
    ])


class OsbuildBootcConfig:
    """
    Main configuration class that aggregates all configuration sections.

    Provides computed properties for the file paths derived from them.
    """

    def __init__(self):
        self.dirs = DirectoryConfig()
        self.build = BuildDefaults()
        self.qemu = QEMUConfig()
        self.env = EnvironmentConfig()
        self.installer = InstallerConfig()

    # ===================== Computed File Paths =====================

    @property
    def work_dir(self) -> str:
        """Scratch directory holding the build config."""
        return self.dirs.work

    @property
    def config_path(self) -> str:
        """Path of the build config document read by qcow2.sh."""
        return os.path.join(self.dirs.work, self.build.config_name)

    @property
    def qcow2_script(self) -> str:
        return os.path.join(self.dirs.libexec, self.build.qcow2_script)

    @property
    def vmshell_script(self) -> str:
        return os.path.join(self.dirs.libexec, self.build.vmshell_script)

    # ===================== Computed Parameters =====================

    @property
    def target_disk(self) -> str:
        return self.build.target_disk

    @property
    def kvm_bypassed(self) -> bool:
        """Whether the KVM check is disabled; any value, even empty, counts."""
        return self.env.no_kvm_var in os.environ


# Create the global configuration instance
config = OsbuildBootcConfig()
