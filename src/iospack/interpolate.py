"""Expansion of ${...} references in loaded config values."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)

_REF_PATTERN = re.compile(r"\$\$\{|\$\{([^{}]+)\}")
_WHOLE_REF = re.compile(r"\$\{([^{}]+)\}")


class Interpolator:
    """Expand ${name} and ${env.NAME} references against a variable mapping.

    Unset environment variables expand to an empty string with a warning;
    any other unknown name raises ValueError. Use $${...} for a literal ${...}.
    """

    def __init__(
        self,
        variables: Mapping[str, Any] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._variables = dict(variables or {})
        self._environ = environ if environ is not None else os.environ

    def lookup(self, ref: str) -> Any:
        ref = ref.strip()
        if ref.startswith("env."):
            name = ref[4:]
            if name not in self._environ:
                logger.warning("Environment variable '%s' is not set", name)
            return self._environ.get(name, "")
        if ref not in self._variables:
            raise ValueError(f"undefined variable '{ref}'")
        return self._variables[ref]

    def expand(self, value: str) -> Any:
        """Expand one string; a lone ${ref} keeps the referenced value's type."""
        if "${" not in value:
            return value

        whole = _WHOLE_REF.fullmatch(value)
        if whole:
            return self.lookup(whole.group(1))

        def _sub(m: re.Match) -> str:  # type: ignore[type-arg]
            if m.group(1) is None:
                return "${"
            return str(self.lookup(m.group(1)))

        return _REF_PATTERN.sub(_sub, value)

    def __call__(self, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: self(v) for k, v in data.items()}
        if isinstance(data, list):
            return [self(item) for item in data]
        if isinstance(data, str):
            return self.expand(data)
        return data
