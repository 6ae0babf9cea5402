"""Async execution of external commands."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from .errors import CommandError

logger = logging.getLogger(__name__)


async def run(cmd: list[str], *, cwd: str | Path | None = None) -> str:
    """Run a command to completion and return its stdout.

    Raises CommandError on a non-zero exit; failures to spawn the process
    (e.g. FileNotFoundError) propagate unchanged.
    """
    logger.debug("Running %s (cwd=%s)", " ".join(cmd), cwd)
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd,
    )
    out, err = await proc.communicate()
    stdout = out.decode(errors="replace")
    stderr = err.decode(errors="replace")

    if proc.returncode != 0:
        logger.debug("%s exited with %d", cmd[0], proc.returncode)
        raise CommandError(cmd, proc.returncode, stdout, stderr)

    return stdout
