"""Best-effort filtered copy of build outputs between directories."""

from __future__ import annotations

import asyncio
import fnmatch
import logging
import shutil
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CopyOperation:
    """A single file copy from src to dest."""

    src: Path
    dest: Path


@dataclass
class CopyResult:
    """Outcome of a copy_tree call; failures never abort the whole copy."""

    copied: list[CopyOperation] = field(default_factory=list)
    failed: list[tuple[CopyOperation, Exception]] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.copied)


class CopyListener(Protocol):
    def on_start(self, op: CopyOperation) -> None: ...

    def on_complete(self, op: CopyOperation) -> None: ...

    def on_error(self, op: CopyOperation, error: Exception) -> None: ...


class LoggingListener:
    """Report per-file copy events to the log."""

    def on_start(self, op: CopyOperation) -> None:
        logger.info("Copying file %s...", op.src)

    def on_complete(self, op: CopyOperation) -> None:
        logger.info("Copied to %s", op.dest)

    def on_error(self, op: CopyOperation, error: Exception) -> None:
        logger.error("Unable to copy %s: %s", op.dest, error)


class FileFilter:
    """Glob include/exclude filter; patterns starting with '!' exclude.

    Patterns are matched against both the path relative to the source root
    and the bare file name.
    """

    def __init__(self, patterns: Iterable[str] | None = None) -> None:
        self.include: list[str] = []
        self.exclude: list[str] = []
        for pattern in patterns or []:
            if pattern.startswith("!"):
                self.exclude.append(pattern[1:])
            else:
                self.include.append(pattern)

    @staticmethod
    def _matches(rel: str, patterns: list[str]) -> bool:
        name = rel.rsplit("/", 1)[-1]
        return any(fnmatch.fnmatch(rel, p) or fnmatch.fnmatch(name, p) for p in patterns)

    def __call__(self, rel: str) -> bool:
        if self.include and not self._matches(rel, self.include):
            return False
        return not self._matches(rel, self.exclude)


def _walk(src: Path) -> Iterator[Path]:
    for path in sorted(src.rglob("*")):
        if path.is_file():
            yield path


def _copy_file(op: CopyOperation, overwrite: bool) -> None:
    if op.dest.exists() and not overwrite:
        raise FileExistsError(f"{op.dest} already exists")
    op.dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(op.src, op.dest)


async def copy_tree(
    src: str | Path,
    dest: str | Path,
    *,
    patterns: Iterable[str] | None = None,
    overwrite: bool = False,
    listener: CopyListener | None = None,
) -> CopyResult:
    """Copy files under src that pass the filter into dest, preserving layout.

    Files are copied concurrently. Per-file failures are reported to the
    listener and collected in the result; a missing src raises FileNotFoundError.
    """
    src = Path(src)
    dest = Path(dest)
    if not src.is_dir():
        raise FileNotFoundError(f"Source directory not found: {src}")

    listener = listener or LoggingListener()
    accept = FileFilter(patterns)

    ops = [
        CopyOperation(path, dest / path.relative_to(src))
        for path in _walk(src)
        if accept(path.relative_to(src).as_posix())
    ]
    logger.debug("Copying %d file(s) from %s to %s", len(ops), src, dest)

    result = CopyResult()

    async def _copy(op: CopyOperation) -> None:
        listener.on_start(op)
        try:
            await asyncio.to_thread(_copy_file, op, overwrite)
        except OSError as exc:
            listener.on_error(op, exc)
            result.failed.append((op, exc))
        else:
            listener.on_complete(op)
            result.copied.append(op)

    await asyncio.gather(*(_copy(op) for op in ops))
    return result
