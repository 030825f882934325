"""Tests for the build-qcow2 pipeline."""

import json

import pytest

from osbuildbootc.config import config
from osbuildbootc.core.build_config import CLIOptions
from osbuildbootc.core.build_orchestrator import BuildService, preallocate_disk
from osbuildbootc.core.preflight import PreflightService
from osbuildbootc.services import CommandExecutionService, ConfigurationService, FileSystemService
from osbuildbootc.utils import CommandExecutionError, PreconditionError, SpawnError


@pytest.fixture
def service():
    config_service = ConfigurationService(config)
    return BuildService(
        config_service,
        CommandExecutionService(),
        FileSystemService(),
        PreflightService(config_service),
    )


def _options(**kwargs):
    defaults = {"source": "docker://example/img:tag", "dest": "out.qcow2", "size_mib": 2048}
    defaults.update(kwargs)
    return CLIOptions(**defaults)


def test_preallocate_command(runner):
    preallocate_disk(CommandExecutionService(), "qemu-img", "disk.qcow2", 0)
    assert runner.calls[0].cmd == ["qemu-img", "create", "-f", "qcow2", "disk.qcow2", "0M"]


def test_happy_path(service, runner, workdir, kvm, capsys):
    service.build_qcow2(_options())

    assert runner.programs == ["qemu-img", "qcow2.sh"]
    assert runner.calls[0].cmd == ["qemu-img", "create", "-f", "qcow2", "out.qcow2", "2048M"]
    assert runner.calls[1].cmd == ["/usr/lib/osbuildbootc/qcow2.sh", "out.qcow2", "tmp/config.json"]
    assert (workdir / "out.qcow2").exists()

    data = json.loads((workdir / "tmp" / "config.json").read_text())
    assert data["InstallArgs"] == ["--target-imgref=docker://example/img:tag"]

    out = capsys.readouterr().out
    assert "Generating image; source=docker://example/img:tag target=docker://example/img:tag" in out


def test_config_written_before_any_child(service, runner, workdir, kvm, monkeypatch):
    seen = []

    def recording(cmd, **kwargs):
        seen.append((workdir / "tmp" / "config.json").exists())
        return runner(cmd, **kwargs)

    monkeypatch.setattr("osbuildbootc.utils.utils.subprocess.run", recording)
    service.build_qcow2(_options())
    assert seen == [True, True]
    assert runner.programs == ["qemu-img", "qcow2.sh"]


def test_preflight_failure_writes_nothing(service, runner, workdir, no_kvm):
    with pytest.raises(PreconditionError):
        service.build_qcow2(_options())
    assert runner.calls == []
    assert not (workdir / "tmp" / "config.json").exists()


def test_preallocation_failure_skips_helper(service, runner, workdir, kvm):
    runner.exit_codes["qemu-img"] = 1
    with pytest.raises(CommandExecutionError) as exc:
        service.build_qcow2(_options())
    assert exc.value.exit_code == 1
    assert runner.programs == ["qemu-img"]
    assert not (workdir / "out.qcow2").exists()


def test_preallocation_failure_keeps_existing_dest(service, runner, workdir, kvm):
    (workdir / "out.qcow2").write_bytes(b"previous")
    runner.exit_codes["qemu-img"] = 1
    with pytest.raises(CommandExecutionError):
        service.build_qcow2(_options())
    assert (workdir / "out.qcow2").read_bytes() == b"previous"


def test_helper_failure_removes_dest(service, runner, workdir, kvm):
    runner.exit_codes["qcow2.sh"] = 7
    with pytest.raises(CommandExecutionError) as exc:
        service.build_qcow2(_options())
    assert exc.value.exit_code == 7
    assert not (workdir / "out.qcow2").exists()
    # scratch state is left for diagnostics
    assert (workdir / "tmp" / "config.json").exists()


def test_helper_spawn_failure_removes_dest(service, runner, workdir, kvm):
    runner.missing.add("qcow2.sh")
    with pytest.raises(SpawnError):
        service.build_qcow2(_options())
    assert not (workdir / "out.qcow2").exists()


def test_zero_size_not_rejected(service, runner, workdir, kvm):
    service.build_qcow2(_options(size_mib=0))
    assert runner.calls[0].cmd[-1] == "0M"


def test_bypass_without_device(service, runner, workdir, no_kvm, monkeypatch):
    monkeypatch.setenv("OSBUILD_NO_KVM", "")
    service.build_qcow2(_options())
    assert runner.programs == ["qemu-img", "qcow2.sh"]


def test_dest_removal_error_keeps_helper_error(service, runner, workdir, kvm, monkeypatch, capsys):
    runner.exit_codes["qcow2.sh"] = 7

    def refuse(path):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr("osbuildbootc.utils.utils.os.remove", refuse)
    with pytest.raises(CommandExecutionError) as exc:
        service.build_qcow2(_options())
    assert exc.value.exit_code == 7
    assert (workdir / "out.qcow2").exists()
    assert "warning: Failed to remove out.qcow2" in capsys.readouterr().err
