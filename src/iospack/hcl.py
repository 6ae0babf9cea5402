"""Loading of platform config files written in HCL or JSON."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import hcl2
import jinja2

logger = logging.getLogger(__name__)

SUFFIXES = (".json", ".hcl")


def load(
    file: Path,
    *,
    context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Parse an HCL config file after rendering it as a Jinja2 template.

    Template variables come from context; an undefined one raises ValueError.
    """
    text = file.read_text()
    ctx = context if context is not None else {}
    env = jinja2.Environment(
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )
    try:
        template = env.from_string(text)
        text = template.render(ctx)
    except jinja2.TemplateError as exc:
        raise ValueError(f"{file}: {exc}") from exc
    return hcl2.loads(text)


def load_json(file: Path) -> dict[str, Any]:
    """Load a JSON config file; the top level must be an object."""
    try:
        data = json.loads(file.read_text())
    except json.JSONDecodeError as exc:
        raise ValueError(f"{file}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"{file}: expected a JSON object")
    return data


def load_file(
    file: Path,
    *,
    context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Load a config file, dispatching on its suffix."""
    logger.debug("Loading config file %s", file)
    if file.suffix == ".hcl":
        return load(file, context=context)
    return load_json(file)


def scan(
    paths: list[Path],
    stem: str,
    *,
    context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Merge every `<stem>.json` / `<stem>.hcl` found in paths, in order.

    Keys from later files override earlier ones. Returns an empty dict when
    no file is found.
    """
    merged: dict[str, Any] = {}
    for path in paths:
        for suffix in SUFFIXES:
            file = path / f"{stem}{suffix}"
            if file.is_file():
                merged.update(load_file(file, context=context))
    return merged
