"""Errors raised by build stages and their collaborators."""

from __future__ import annotations


class IOSPackError(Exception):
    """Base class for pipeline failures, optionally carrying a remediation hint."""

    hint: str | None = None

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if hint is not None:
            self.hint = hint

    def __str__(self) -> str:
        return self.message


class PlatformNotFound(IOSPackError):
    hint = "You should run `weex create` or `weex platform add ios` first"


class ProjectNotFound(IOSPackError):
    hint = "Please make sure you have installed iOS Develop Environment and CocoaPods"


class ToolchainMissing(IOSPackError):
    pass


class ConfigNotDetected(IOSPackError):
    pass


class NoDevicesFound(IOSPackError):
    pass


class StageRejected(IOSPackError):
    pass


class CommandError(IOSPackError):
    """An external command exited with a non-zero status."""

    def __init__(
        self,
        command: list[str],
        returncode: int,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        cmdline = " ".join(command)
        super().__init__(f"Command '{cmdline}' failed with exit status {returncode}")
