#!/usr/bin/env python3
"""
The build configuration document shared with the helper scripts.

build-qcow2 writes it to tmp/config.json; qcow2.sh hands it to the build VM,
where build-disk-impl reads it back. Field names and the Disk value are a
contract with those scripts and must not change.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List

from osbuildbootc.core.service_interfaces import IConfigurationService, IFileSystemService
from osbuildbootc.utils import ConfigurationError, FileSystemError, handle_generic_error

TARGET_DISK = "/dev/disk/by-id/virtio-target"

# Serialized key order
FIELDS = ("SourceTransport", "Source", "InstallArgs", "Disk")


@dataclass
class CLIOptions:
    """Options of a single build-qcow2 invocation."""

    source: str
    dest: str
    source_transport: str = "docker://"
    target_image: str = ""
    target_insecure: bool = False
    skip_fetch_check: bool = False
    size_mib: int = 10 * 1024

    @property
    def effective_target_image(self) -> str:
        """The target image reference, falling back to the source."""
        return self.target_image or self.source


@dataclass
class BuildConfig:
    """In-memory form of config.json."""

    source_transport: str
    source: str
    install_args: List[str] = field(default_factory=list)
    disk: str = TARGET_DISK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "SourceTransport": self.source_transport,
            "Source": self.source,
            "InstallArgs": list(self.install_args),
            "Disk": self.disk,
        }

    def to_json(self) -> bytes:
        """Compact UTF-8 JSON with a fixed key order."""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False).encode("utf-8")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuildConfig":
        """
        Validate and load a decoded config document.

        Raises:
            ConfigurationError: A field is missing, has the wrong type, or Source is empty
        """
        if not isinstance(data, dict):
            raise ConfigurationError("build config must be a JSON object")
        for key in FIELDS:
            if key not in data:
                raise ConfigurationError(f"missing field {key}", config_key=key)
        for key in ("SourceTransport", "Source", "Disk"):
            if not isinstance(data[key], str):
                raise ConfigurationError(f"{key} must be a string", config_key=key)
        install_args = data["InstallArgs"]
        if not isinstance(install_args, list) or not all(isinstance(a, str) for a in install_args):
            raise ConfigurationError("InstallArgs must be a list of strings", config_key="InstallArgs")
        if not data["Source"]:
            raise ConfigurationError("Source must not be empty", config_key="Source")
        return cls(
            source_transport=data["SourceTransport"],
            source=data["Source"],
            install_args=list(install_args),
            disk=data["Disk"],
        )


def build_install_args(options: CLIOptions) -> List[str]:
    """
    Assemble the arguments forwarded to `bootc install`.

    --target-imgref is always present and always last.
    """
    install_args = []
    if options.target_insecure:
        install_args.append("--target-no-signature-verification")
    if options.skip_fetch_check:
        install_args.append("--skip-fetch-check")
    install_args.append(f"--target-imgref={options.effective_target_image}")
    return install_args


def create_build_config(options: CLIOptions, disk: str = TARGET_DISK) -> BuildConfig:
    """Translate command-line options into a BuildConfig."""
    if not options.source:
        raise ConfigurationError("source image must not be empty", config_key="Source")
    return BuildConfig(
        source_transport=options.source_transport,
        source=options.source,
        install_args=build_install_args(options),
        disk=disk,
    )


def write_build_config(options: CLIOptions, config_service: IConfigurationService,
                       fs_service: IFileSystemService) -> str:
    """
    Write the build config for these options and return its path.

    Args:
        options: Parsed build-qcow2 options
        config_service: Supplies the work directory and config path
        fs_service: Performs the directory creation and file write

    Returns:
        str: Path of the written config, e.g. tmp/config.json

    Raises:
        FileSystemError: The work directory or the file could not be written
    """
    build_config = create_build_config(options, disk=config_service.target_disk)
    fs_service.ensure_directory(config_service.work_dir, mode=0o755)
    path = config_service.config_path
    fs_service.write_file(path, build_config.to_json(), mode=0o644)
    return path


def load_build_config(path: str) -> BuildConfig:
    """
    Read a config document written by write_build_config.

    Raises:
        FileSystemError: The file cannot be read
        ConfigurationError: The content is not a valid build config
    """
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except OSError as e:
        raise handle_generic_error(e, f"Failed to read {path}", FileSystemError, path=path)
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"{path} is not valid JSON", cause=e)
    return BuildConfig.from_dict(data)

