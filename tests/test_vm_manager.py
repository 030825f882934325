"""Tests for vmshell and qemuexec."""

import subprocess

import pytest

from osbuildbootc.config import config
from osbuildbootc.core.preflight import PreflightService
from osbuildbootc.core.vm_manager import QemuExecOptions, QemuLauncher, VMService
from osbuildbootc.services import CommandExecutionService, ConfigurationService
from osbuildbootc.utils import CommandExecutionError, UsageError


def _launcher():
    config_service = ConfigurationService(config)
    return QemuLauncher(config_service, CommandExecutionService(), PreflightService(config_service))


def _vm_service():
    config_service = ConfigurationService(config)
    return VMService(config_service, CommandExecutionService(), PreflightService(config_service))


class TestQemuCommand:
    def test_defaults_with_kvm(self, kvm):
        cmd = _launcher().build_command(QemuExecOptions())
        assert cmd == [
            config.qemu.system_binary,
            "-accel", "kvm",
            "-m", str(config.qemu.memory_mib),
            "-smp", str(config.qemu.smp),
            "-nographic",
        ]

    def test_tcg_without_kvm(self, no_kvm):
        cmd = _launcher().build_command(QemuExecOptions())
        assert cmd[1:3] == ["-accel", "tcg"]

    def test_tcg_when_bypassed(self, kvm, monkeypatch):
        monkeypatch.setenv("OSBUILD_NO_KVM", "")
        cmd = _launcher().build_command(QemuExecOptions())
        assert cmd[1:3] == ["-accel", "tcg"]

    def test_disks_and_target(self, kvm):
        cmd = _launcher().build_command(QemuExecOptions(
            memory_mib=4096, smp=4, disks=["a.qcow2"], target_disk="out.qcow2"))
        assert "4096" in cmd and "4" in cmd
        assert "file=a.qcow2,format=qcow2,if=none,id=disk0,cache=unsafe" in cmd
        assert "virtio-blk-pci,drive=disk0" in cmd
        assert "virtio-blk-pci,drive=target,serial=target" in cmd

    def test_direct_kernel_boot_and_extra_args(self, kvm):
        cmd = _launcher().build_command(QemuExecOptions(
            kernel="vmlinuz", initrd="initrd.img", append="console=ttyS0",
            extra_args=["-snapshot"]))
        assert cmd[-7:] == ["-kernel", "vmlinuz", "-initrd", "initrd.img",
                            "-append", "console=ttyS0", "-snapshot"]

    def test_initrd_requires_kernel(self, kvm):
        with pytest.raises(UsageError):
            _launcher().build_command(QemuExecOptions(initrd="initrd.img"))


def test_qemuexec_is_interactive(runner, kvm):
    _vm_service().qemuexec(QemuExecOptions())
    assert runner.calls[0].cmd[0] == config.qemu.system_binary
    assert runner.calls[0].stdin is None


def test_vmshell_inherits_stdin(runner):
    _vm_service().vmshell()
    assert runner.calls[0].cmd == ["/usr/lib/osbuildbootc/vmshell.sh"]
    assert runner.calls[0].stdin is None
    assert runner.calls[0].stdin is not subprocess.DEVNULL


def test_vmshell_needs_no_kvm(runner, no_kvm):
    _vm_service().vmshell()
    assert runner.programs == ["vmshell.sh"]


def test_vmshell_failure(runner):
    runner.exit_codes["vmshell.sh"] = 3
    with pytest.raises(CommandExecutionError) as exc:
        _vm_service().vmshell()
    assert exc.value.exit_code == 3
