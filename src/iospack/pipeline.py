"""Pipeline driver: run stages in order, stop at the first rejection."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from pydantic import BaseModel, Field

from . import stages
from .chooser import Chooser
from .context import BuildContext, BuildOptions
from .errors import CommandError, ConfigNotDetected, IOSPackError, StageRejected
from .stages import Stage

logger = logging.getLogger(__name__)

BUILD_HINT = (
    "You should config `CodeSign` and `Profile` in the `ios.config.json`\n\n"
    "    We suggest that you open the `platform/ios` directory.\n\n"
    "    Package your project as a normal ios project!"
)


class PipelineResult(BaseModel):
    """Outcome of a pipeline run: the last good context and the first error."""

    model_config = {"arbitrary_types_allowed": True}

    ok: bool
    context: BuildContext
    error: BaseException | None = None
    stage: str | None = None


class Pipeline(BaseModel):
    """An ordered list of stages sharing one BuildContext."""

    model_config = {"arbitrary_types_allowed": True}

    name: str
    stages: list[Stage] = Field(default_factory=list)

    def __iter__(self) -> Iterator[Stage]:
        return iter(self.stages)

    async def run(self, ctx: BuildContext) -> PipelineResult:
        """Run each stage on its predecessor's output; never raises."""
        logger.debug("Running pipeline '%s'", self.name)
        for st in self.stages:
            logger.debug("Entering stage '%s'", st.name)
            try:
                out = await st(ctx)
                if out is None:
                    raise StageRejected(f"Stage '{st.name}' rejected the build")
                if not out.extends(ctx):
                    raise StageRejected(f"Stage '{st.name}' dropped context fields")
            except Exception as exc:
                logger.debug("Stage '%s' failed: %r", st.name, exc)
                return PipelineResult(ok=False, context=ctx, error=exc, stage=st.name)
            ctx = out
        return PipelineResult(ok=True, context=ctx)


def hint_for(error: BaseException | None, default: str | None = None) -> str | None:
    """Return the remediation hint to print for a failure, if any.

    Errors without a hint of their own fall back to default, except for
    IOSPackError kinds other than CommandError and ConfigNotDetected.
    """
    if error is None:
        return None
    hint = getattr(error, "hint", None)
    if hint:
        return hint
    if isinstance(error, CommandError | ConfigNotDetected) or not isinstance(error, IOSPackError):
        return default
    return None


def report_failure(result: PipelineResult, *, default_hint: str | None = None) -> None:
    """Terminal handler: log the failure and any remediation hint."""
    error = result.error
    logger.error("Stage '%s' failed: %s", result.stage, error)
    if isinstance(error, CommandError) and error.stderr:
        logger.error("%s", error.stderr.rstrip())
    hint = hint_for(error, default_hint)
    if hint:
        logger.info("\n=>  %s", hint)


def build_pipeline(options: BuildOptions) -> Pipeline:
    """Compose the iOS build stages for the given options."""
    steps: list[Stage] = [
        stages.check_toolchain,
        stages.compile_bundle,
        stages.copy_bundle_assets,
        stages.seed_options(options),
        stages.prepare_ios,
        stages.install_dependencies,
        stages.resolve_config,
        stages.build_app,
    ]
    if options.release:
        steps.append(stages.copy_release_assets)
    return Pipeline(name="build-ios", stages=steps)


async def build_ios(
    options: BuildOptions | None = None,
    *,
    root: str | Path | None = None,
) -> PipelineResult:
    """Build the iOS app for the project at root (default: the current directory)."""
    options = options or BuildOptions()
    root_path = Path(root if root is not None else os.getcwd()).resolve()
    result = await build_pipeline(options).run(BuildContext(root_path=root_path))
    if not result.ok:
        report_failure(result, default_hint=BUILD_HINT)
    return result


async def select_device(
    ctx: BuildContext,
    chooser: Chooser | None = None,
) -> PipelineResult:
    """Enumerate devices (unless ctx already lists them) and choose one."""
    pipeline = Pipeline(
        name="select-device",
        stages=[stages.list_devices, stages.DeviceSelector(chooser)],
    )
    result = await pipeline.run(ctx)
    if not result.ok:
        report_failure(result)
    return result
