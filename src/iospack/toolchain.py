"""External toolchain helpers: deployment helper install and bundle compile."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from . import process
from .errors import CommandError, ToolchainMissing

logger = logging.getLogger(__name__)

IOS_DEPLOY = "ios-deploy"


async def check_and_install_ios_deploy() -> None:
    """Ensure ios-deploy is on PATH, installing it through npm when missing."""
    if shutil.which(IOS_DEPLOY):
        logger.debug("%s already installed", IOS_DEPLOY)
        return

    logger.info("\n=> Install %s\n", IOS_DEPLOY)
    try:
        await process.run(["npm", "install", "-g", IOS_DEPLOY])
    except (CommandError, FileNotFoundError) as exc:
        raise ToolchainMissing(
            f"Unable to install {IOS_DEPLOY}: {exc}",
            hint=f"Install it manually with `npm install -g {IOS_DEPLOY}`",
        ) from exc


async def build_js(root: str | Path) -> None:
    """Compile the script bundle into <root>/dist."""
    logger.info("\n=> Build JSbundle\n")
    await process.run(["npm", "run", "build"], cwd=root)
