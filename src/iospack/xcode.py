"""Inspection of the native iOS project tree and attached devices."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from . import process
from .context import Device, XcodeProject

logger = logging.getLogger(__name__)

PLATFORM_DIR = Path("platforms") / "ios"

_DEVICE_LINE = re.compile(r"^(?P<name>.+?) \((?P<version>[\d.]+)\) \((?P<id>[\w-]+)\)$")


def check_ios(root: str | Path) -> bool:
    """Return True if the iOS platform subtree exists under root."""
    return (Path(root) / PLATFORM_DIR).is_dir()


def find_xcode_project(search_dir: str | Path) -> XcodeProject | None:
    """Locate an Xcode workspace (preferred) or project in search_dir."""
    search_dir = Path(search_dir)
    if not search_dir.is_dir():
        return None

    names = sorted(p.name for p in search_dir.iterdir())
    for name in names:
        if name.endswith(".xcworkspace"):
            logger.debug("Found Xcode workspace '%s'", name)
            return XcodeProject(name=name, is_workspace=True)
    for name in names:
        if name.endswith(".xcodeproj"):
            logger.debug("Found Xcode project '%s'", name)
            return XcodeProject(name=name, is_workspace=False)
    return None


def _parse_project_info(raw: str) -> dict[str, Any]:
    """Normalize `xcodebuild -list -json` output to {"project": {"schemes": [...]}}."""
    data = json.loads(raw)
    info = data.get("project") or data.get("workspace") or {}
    return {"project": {**info, "schemes": list(info.get("schemes", []))}}


async def read_project_info(
    native_root: str | Path,
    xcode_project: XcodeProject | None = None,
) -> dict[str, Any]:
    """Read build-scheme metadata for the native project."""
    cmd = ["xcodebuild", "-list", "-json"]
    if xcode_project is not None:
        flag = "-workspace" if xcode_project.is_workspace else "-project"
        cmd += [flag, xcode_project.name]
    return _parse_project_info(await process.run(cmd, cwd=native_root))


def parse_devices(raw: str) -> list[Device]:
    """Parse `xcrun xctrace list devices` output.

    Lines without a version (e.g. the host Mac) are skipped.
    """
    devices: list[Device] = []
    is_simulator = False
    for line in raw.splitlines():
        line = line.strip()
        if line.startswith("=="):
            is_simulator = "Simulator" in line
            continue
        match = _DEVICE_LINE.match(line)
        if match is None:
            continue
        devices.append(
            Device(
                name=match.group("name"),
                version=match.group("version"),
                id=match.group("id"),
                is_simulator=is_simulator,
            )
        )
    return devices


async def list_devices() -> list[Device]:
    """Enumerate attached devices and available simulators."""
    devices = parse_devices(await process.run(["xcrun", "xctrace", "list", "devices"]))
    logger.debug("Found %d device(s)", len(devices))
    return devices
