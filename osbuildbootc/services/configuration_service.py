#!/usr/bin/env python3
"""
Configuration Service Implementation.

This service wraps OsbuildBootcConfig and provides it as an injectable dependency.
"""

from osbuildbootc.config import OsbuildBootcConfig
from osbuildbootc.core.service_interfaces import IConfigurationService


class ConfigurationService(IConfigurationService):
    """Injectable configuration service that wraps OsbuildBootcConfig."""

    def __init__(self, config: OsbuildBootcConfig):
        self._config = config

    # Directory and file path properties
    @property
    def work_dir(self) -> str:
        return self._config.work_dir

    @property
    def config_path(self) -> str:
        return self._config.config_path

    @property
    def qcow2_script(self) -> str:
        return self._config.qcow2_script

    @property
    def vmshell_script(self) -> str:
        return self._config.vmshell_script

    @property
    def target_disk(self) -> str:
        return self._config.target_disk

    # QEMU properties
    @property
    def img_tool(self) -> str:
        return self._config.qemu.img_tool

    @property
    def qemu_binary(self) -> str:
        return self._config.qemu.system_binary

    @property
    def qemu_memory_mib(self) -> int:
        return self._config.qemu.memory_mib

    @property
    def qemu_smp(self) -> int:
        return self._config.qemu.smp

    @property
    def target_serial(self) -> str:
        return self._config.qemu.target_serial

    # Host environment
    @property
    def kvm_bypassed(self) -> bool:
        return self._config.kvm_bypassed

    @property
    def kvm_device(self) -> str:
        return self._config.env.kvm_device

    @property
    def no_kvm_var(self) -> str:
        return self._config.env.no_kvm_var

    # Provide access to underlying config for complex operations
    @property
    def config(self) -> OsbuildBootcConfig:
        return self._config
