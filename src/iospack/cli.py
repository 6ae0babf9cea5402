"""Command line entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .context import BuildContext, BuildOptions
from .pipeline import build_ios, select_device


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s" if verbose else "%(message)s",
    )


def _cmd_build(args: argparse.Namespace) -> int:
    options = BuildOptions(release=args.release, verbose=args.verbose)
    result = asyncio.run(build_ios(options, root=args.root))
    return 0 if result.ok else 1


def _cmd_devices(args: argparse.Namespace) -> int:
    ctx = BuildContext(root_path=Path(args.root).resolve())
    result = asyncio.run(select_device(ctx))
    if not result.ok:
        return 1
    device = result.context.device
    print(f"{device.name} ({device.version}) {device.id}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="iospack",
        description="Build a native iOS app from a JS bundle",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="enable debug logging",
    )

    p_build = sub.add_parser("build", parents=[common], help="build the iOS app")
    p_build.add_argument("--root", default=".", help="project root (default: current directory)")
    p_build.add_argument(
        "--release",
        action="store_true",
        help="copy build products to release/ios/<BuildVersion>",
    )
    p_build.set_defaults(func=_cmd_build)

    p_devices = sub.add_parser("devices", parents=[common], help="list devices and choose one")
    p_devices.add_argument("--root", default=".", help="project root (default: current directory)")
    p_devices.set_defaults(func=_cmd_devices)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
