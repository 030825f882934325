"""
Shared fixtures: a fake subprocess.run, a scratch working directory and KVM toggles.
"""

import os
import subprocess
from types import SimpleNamespace

import pytest

from osbuildbootc.config import config
from osbuildbootc.core.service_factory import reset_service_container


class FakeRunner:
    """
    Stands in for subprocess.run.

    Exit codes are configured per program basename; qemu-img create really
    creates the destination file so cleanup behaviour can be observed.
    """

    def __init__(self):
        self.calls = []
        self.exit_codes = {}
        self.missing = set()

    def __call__(self, cmd, check=False, stdin=None, **kwargs):
        cmd = list(cmd)
        self.calls.append(SimpleNamespace(cmd=cmd, stdin=stdin))
        program = os.path.basename(cmd[0])
        if program in self.missing:
            raise FileNotFoundError(2, "No such file or directory", cmd[0])
        code = self.exit_codes.get(program, 0)
        if program == "qemu-img" and cmd[1:2] == ["create"] and len(cmd) > 4 and code == 0:
            open(cmd[4], "wb").close()
        if check and code:
            raise subprocess.CalledProcessError(code, cmd)
        return subprocess.CompletedProcess(cmd, code)

    @property
    def programs(self):
        return [os.path.basename(call.cmd[0]) for call in self.calls]

    def call_for(self, program):
        for call in self.calls:
            if os.path.basename(call.cmd[0]) == program:
                return call
        raise AssertionError(f"{program} was not run; ran {self.programs}")


@pytest.fixture(autouse=True)
def fresh_container():
    reset_service_container()
    yield
    reset_service_container()


@pytest.fixture
def runner(monkeypatch):
    fake = FakeRunner()
    monkeypatch.setattr("osbuildbootc.utils.utils.subprocess.run", fake)
    return fake


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def kvm(tmp_path, monkeypatch):
    """A host with a usable /dev/kvm and no bypass variable."""
    device = tmp_path / "kvm"
    device.touch()
    monkeypatch.delenv(config.env.no_kvm_var, raising=False)
    monkeypatch.setattr(config.env, "kvm_device", str(device))
    return device


@pytest.fixture
def no_kvm(tmp_path, monkeypatch):
    """A host without /dev/kvm and no bypass variable."""
    monkeypatch.delenv(config.env.no_kvm_var, raising=False)
    monkeypatch.setattr(config.env, "kvm_device", str(tmp_path / "missing-kvm"))
