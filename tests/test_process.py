"""Tests for iospack.process."""

from __future__ import annotations

import asyncio
import sys

import pytest

from iospack.errors import CommandError
from iospack.process import run


class TestRun:
    def test_returns_stdout(self):
        out = asyncio.run(run([sys.executable, "-c", "print('hello')"]))
        assert out.strip() == "hello"

    def test_runs_in_cwd(self, tmp_path):
        out = asyncio.run(run([sys.executable, "-c", "import os; print(os.getcwd())"], cwd=tmp_path))
        assert out.strip() == str(tmp_path.resolve())

    def test_nonzero_exit_raises(self):
        cmd = [sys.executable, "-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"]
        with pytest.raises(CommandError) as exc_info:
            asyncio.run(run(cmd))
        err = exc_info.value
        assert err.returncode == 3
        assert err.stderr == "bad"
        assert err.command == cmd
        assert "exit status 3" in str(err)

    def test_missing_executable_raises(self):
        with pytest.raises(FileNotFoundError):
            asyncio.run(run(["iospack-no-such-tool"]))
