"""Shared fixtures for iospack tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from iospack import process
from iospack.errors import CommandError

SCHEMES_JSON = json.dumps({"workspace": {"name": "App", "schemes": ["App", "AppTests"]}})


class FakeRunner:
    """Stand-in for process.run that records commands and replays canned output."""

    def __init__(self) -> None:
        self.calls: list[tuple[list[str], Path | None]] = []
        self.outputs: dict[str, str] = {"xcodebuild -list": SCHEMES_JSON}
        self.failures: dict[str, Exception] = {}

    @staticmethod
    def _key(cmd: list[str]) -> str:
        return " ".join(cmd[:2])

    def fail(self, prefix: str, returncode: int = 1, stderr: str = "boom") -> None:
        self.failures[prefix] = CommandError(prefix.split(), returncode, "", stderr)

    def commands(self) -> list[str]:
        return [" ".join(cmd) for cmd, _ in self.calls]

    async def __call__(self, cmd: list[str], *, cwd=None) -> str:
        self.calls.append((list(cmd), Path(cwd) if cwd is not None else None))
        key = self._key(cmd)
        if key in self.failures:
            raise self.failures[key]
        return self.outputs.get(key, "")


@pytest.fixture
def runner(monkeypatch) -> FakeRunner:
    fake = FakeRunner()
    monkeypatch.setattr(process, "run", fake)
    return fake


@pytest.fixture
def project_root(tmp_path) -> Path:
    """A project with a built bundle, an iOS subtree and an Xcode workspace."""
    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "index.js").write_text("// index")
    (dist / "index.web.js").write_text("// web")
    (dist / "style.css").write_text("body {}")

    ios = tmp_path / "platforms" / "ios"
    (ios / "App.xcworkspace").mkdir(parents=True)
    (ios / "App.xcodeproj").mkdir()

    (tmp_path / "ios.config.json").write_text(
        json.dumps({"AppName": "Demo", "BuildVersion": "2.1.0", "CodeSign": "Dev"})
    )
    return tmp_path
