#!/usr/bin/env python3
"""
Command-line interface for osbuildbootc.

Parses arguments, dispatches to the core operations and maps errors to exit
codes: a failing child process's exit code is passed through unchanged, any
other error prints `error: <message>` and exits 1.
"""

import sys
import argparse
from typing import List, NoReturn, Optional
from osbuildbootc import __version__
from osbuildbootc.config import config
from osbuildbootc.core import CLIOptions, QemuExecOptions, build_qcow2, vmshell, qemuexec, build_disk_impl
from osbuildbootc.utils import CommandExecutionError, OsbuildBootcError, UsageError


EPILOG = """
examples:
  osbuildbootc build-qcow2 quay.io/centos-bootc/centos-bootc:stream9 disk.qcow2
  osbuildbootc build-qcow2 --size 20480 -t quay.io/exampleuser/someimg:latest \\
      containers-storage:localhost/someimg disk.qcow2
  osbuildbootc vmshell
  osbuildbootc qemuexec --target-disk disk.qcow2 -- -snapshot

Set OSBUILD_NO_KVM to build without /dev/kvm (much slower).
"""


class CLIArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting with status 2."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        raise UsageError(message)


def size_mib(value: str) -> int:
    """Parse an unsigned MiB count."""
    try:
        size = int(value, 10)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid size: {value!r}")
    if size < 0:
        raise argparse.ArgumentTypeError(f"size must not be negative: {value!r}")
    return size


def positive_int(value: str) -> int:
    try:
        number = int(value, 10)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value!r}")
    return number


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command-line argument parser with all subcommands.

    Returns:
        argparse.ArgumentParser: Configured argument parser
    """
    parser = CLIArgumentParser(
        prog="osbuildbootc",
        description="Build bootable disk images from bootc container images",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # build-qcow2
    build_parser = subparsers.add_parser(
        "build-qcow2",
        help="Generate a qcow2 from a bootc image",
        description="Generate a qcow2 from a bootc image",
        allow_abbrev=False
    )
    build_parser.add_argument("source", metavar="SRC", help="Source container image")
    build_parser.add_argument("dest", metavar="DEST", help="Output disk image path")
    build_parser.add_argument(
        "--transport",
        default=config.build.source_transport,
        help="Source image transport (default: %(default)s)"
    )
    build_parser.add_argument(
        "--size",
        type=size_mib,
        default=config.build.size_mib,
        metavar="MIB",
        help="Disk size in MiB (default: %(default)s)"
    )
    build_parser.add_argument(
        "-t", "--target",
        default="",
        help="Target image (e.g. quay.io/exampleuser/someimg:latest); defaults to SRC"
    )
    build_parser.add_argument(
        "-I", "--target-no-signature-verification",
        action="store_true",
        dest="target_insecure",
        help="Disable signature verification for target"
    )
    build_parser.add_argument(
        "-S", "--skip-fetch-check",
        action="store_true",
        help="Skip verification of target image"
    )

    # vmshell
    subparsers.add_parser(
        "vmshell",
        help="Run a shell in the build VM",
        description="Run a shell in the build VM",
        allow_abbrev=False
    )

    # qemuexec
    qemu_parser = subparsers.add_parser(
        "qemuexec",
        help="Directly execute qemu",
        description="Run qemu-system in the foreground; arguments after -- are passed to qemu",
        allow_abbrev=False
    )
    qemu_parser.add_argument(
        "-m", "--memory",
        type=positive_int,
        metavar="MIB",
        help=f"Memory in MiB (default: {config.qemu.memory_mib})"
    )
    qemu_parser.add_argument(
        "--smp",
        type=positive_int,
        help=f"Number of virtual CPUs (default: {config.qemu.smp})"
    )
    qemu_parser.add_argument(
        "-d", "--disk",
        action="append",
        default=[],
        dest="disks",
        metavar="PATH",
        help="Attach a qcow2 disk (may be repeated)"
    )
    qemu_parser.add_argument(
        "--target-disk",
        metavar="PATH",
        help="Attach a qcow2 disk visible in the guest as /dev/disk/by-id/virtio-target"
    )
    qemu_parser.add_argument("--kernel", metavar="PATH", help="Boot directly into this kernel")
    qemu_parser.add_argument("--initrd", metavar="PATH", help="Initrd for --kernel")
    qemu_parser.add_argument("--append", metavar="CMDLINE", help="Kernel command line for --kernel")
    qemu_parser.add_argument("qemu_args", nargs="*", metavar="QEMU_ARG", help="Extra qemu arguments")

    # build-disk-impl
    impl_parser = subparsers.add_parser(
        "build-disk-impl",
        help="Install to the target disk (runs inside the build VM)",
        description="Install the image described by CONFIG onto its target disk",
        allow_abbrev=False
    )
    impl_parser.add_argument("config_path", metavar="CONFIG", help="Build config written by build-qcow2")

    return parser


def options_from_args(args: argparse.Namespace) -> CLIOptions:
    """Translate parsed build-qcow2 arguments into CLIOptions."""
    return CLIOptions(
        source=args.source,
        dest=args.dest,
        source_transport=args.transport,
        target_image=args.target,
        target_insecure=args.target_insecure,
        skip_fetch_check=args.skip_fetch_check,
        size_mib=args.size,
    )


def qemu_options_from_args(args: argparse.Namespace) -> QemuExecOptions:
    """Translate parsed qemuexec arguments into QemuExecOptions."""
    return QemuExecOptions(
        memory_mib=args.memory,
        smp=args.smp,
        disks=list(args.disks),
        target_disk=args.target_disk,
        kernel=args.kernel,
        initrd=args.initrd,
        append=args.append,
        extra_args=list(args.qemu_args),
    )


def dispatch_command(args: argparse.Namespace) -> None:
    """
    Dispatch the appropriate command based on the parsed arguments.

    Raises:
        OsbuildBootcError: If command execution fails
    """
    if args.command == "build-qcow2":
        build_qcow2(options_from_args(args))
    elif args.command == "vmshell":
        vmshell()
    elif args.command == "qemuexec":
        qemuexec(qemu_options_from_args(args))
    elif args.command == "build-disk-impl":
        build_disk_impl(args.config_path)
    else:
        raise UsageError(f"unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> NoReturn:
    """
    Main entry point: parse arguments and dispatch commands with error handling.

    Note: This function never returns normally - it always exits via sys.exit()
    """
    parser = create_argument_parser()

    try:
        args = parser.parse_args(argv)
        if not args.command:
            parser.print_help()
            sys.exit(0)
        dispatch_command(args)

    except CommandExecutionError as e:
        # The child already reported its failure on the inherited stdio
        sys.exit(e.exit_code)

    except OsbuildBootcError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(e.error_code)

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        sys.exit(130)

    except Exception as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(0)
