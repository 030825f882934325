#!/usr/bin/env python3
"""
Host preflight checks run before a build VM is started.
"""

import os
from osbuildbootc.core.service_interfaces import IConfigurationService, IPreflightService
from osbuildbootc.utils import PreconditionError


class PreflightService(IPreflightService):
    """Checks that the host can run the build VM with hardware acceleration."""

    def __init__(self, config_service: IConfigurationService):
        self._config = config_service

    def kvm_available(self) -> bool:
        """Whether KVM may be used: not bypassed and the device node exists."""
        if self._config.kvm_bypassed:
            return False
        return os.path.exists(self._config.kvm_device)

    def ensure_virtualization_available(self) -> None:
        """
        Fail unless /dev/kvm is accessible.

        Setting OSBUILD_NO_KVM (to anything, including an empty string)
        skips the check entirely.

        Raises:
            PreconditionError: The KVM device cannot be stat'ed
        """
        if self._config.kvm_bypassed:
            return
        device = self._config.kvm_device
        try:
            os.stat(device)
        except OSError as e:
            raise PreconditionError(
                f"failed to access {device}; you can set {self._config.no_kvm_var} "
                f"to bypass this at the cost of performance",
                requirement="kvm",
                cause=e
            )


def ensure_virtualization_available() -> None:
    """Run the KVM preflight check using the global service container."""
    from osbuildbootc.core.service_factory import get_service_container
    container = get_service_container()
    container.resolve(IPreflightService).ensure_virtualization_available()
