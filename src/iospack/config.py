"""Platform configuration loading and per-platform normalization."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, field_validator

from . import hcl
from .interpolate import Interpolator

logger = logging.getLogger(__name__)

CONFIG_DIR = "config"


class Platform(StrEnum):
    IOS = "ios"


class IOSBuildConfig(BaseModel):
    """Build settings read from ios.config.json / ios.config.hcl."""

    model_config = {"extra": "allow"}

    AppName: str = "WeexApp"
    AppId: str = ""
    Version: str = "1.0.0"
    BuildVersion: str = "1.0.0"
    CodeSign: str = ""
    Profile: str = ""
    WeexBundle: str = "index.js"

    @field_validator("Version", "BuildVersion", mode="before")
    @classmethod
    def _stringify_version(cls, value: Any) -> Any:
        if isinstance(value, int | float):
            return str(value)
        return value


class ConfigResolver(ABC):
    """Platform-specific config strategy."""

    platform: Platform

    @property
    def config_name(self) -> str:
        """File stem of the platform's config files."""
        return f"{self.platform}.config"

    @abstractmethod
    def resolve(self, configs: dict[str, Any]) -> None:
        """Normalize configs in place."""


class IOSConfigResolver(ConfigResolver):
    platform = Platform.IOS

    def resolve(self, configs: dict[str, Any]) -> None:
        """Merge defaults into configs and validate them.

        An empty map is left empty so that a missing config can be detected
        by later stages.
        """
        if not configs:
            logger.debug("No iOS config to resolve")
            return
        resolved = IOSBuildConfig.model_validate(configs)
        configs.clear()
        configs.update(resolved.model_dump())
        logger.debug("Resolved iOS config: %s", sorted(configs))


class PlatformConfig:
    """Loads the config files of one platform under a project root."""

    def __init__(
        self,
        resolver: ConfigResolver,
        root_path: str | Path,
        platform: Platform,
        extras: dict[str, Any] | None = None,
    ) -> None:
        self.resolver = resolver
        self.root_path = Path(root_path)
        self.platform = platform
        self.extras = extras or {}

    @property
    def search_paths(self) -> list[Path]:
        return [self.root_path / CONFIG_DIR, self.root_path]

    @property
    def variables(self) -> dict[str, Any]:
        return {
            "root": str(self.root_path),
            "platform": str(self.platform),
            **self.extras,
        }

    def load(self) -> dict[str, Any]:
        """Read and interpolate the config files; {} when none exist."""
        variables = self.variables
        raw = hcl.scan(self.search_paths, self.resolver.config_name, context=variables)
        if not raw:
            logger.debug("No %s files under %s", self.resolver.config_name, self.root_path)
            return {}
        return Interpolator(variables)(raw)

    async def get_config(self) -> dict[str, Any]:
        return await asyncio.to_thread(self.load)
