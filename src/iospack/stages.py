"""Build stages: async BuildContext -> BuildContext transformations."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeAlias

from . import process, staging, toolchain, xcode
from .chooser import Chooser, PromptChooser
from .config import IOSConfigResolver, Platform, PlatformConfig
from .context import BuildContext, BuildOptions, Device
from .errors import ConfigNotDetected, NoDevicesFound, PlatformNotFound, ProjectNotFound

logger = logging.getLogger(__name__)

StageFn: TypeAlias = Callable[[BuildContext], Awaitable[BuildContext | None]]

BUNDLE_SRC = "dist"
BUNDLE_DEST = Path("bundlejs")
BUNDLE_FILTER = ["*.js", "!*.web.js"]

BUILD_CONFIGURATION = "PROD"
BUILD_SDK = "iphoneos"
DERIVED_DATA = "build"
PRODUCTS_DIR = Path(DERIVED_DATA) / "Build" / "Products" / f"{BUILD_CONFIGURATION}-{BUILD_SDK}"
RELEASE_DIR = Path("release") / "ios"
RELEASE_FILTER = ["*.ipa", "*.app/*"]


class Stage:
    """A named pipeline step."""

    def __init__(self, name: str, fn: StageFn) -> None:
        self.name = name
        self.fn = fn

    async def __call__(self, ctx: BuildContext) -> BuildContext | None:
        return await self.fn(ctx)

    def __repr__(self) -> str:
        return f"Stage({self.name!r})"


def stage(name: str):
    """Wrap an async function as a named Stage."""

    def decorator(fn: StageFn) -> Stage:
        return Stage(name, fn)

    return decorator


def _require_root(ctx: BuildContext) -> Path:
    if ctx.root_path is None:
        raise ValueError("BuildContext has no root_path")
    return ctx.root_path


@stage("check-toolchain")
async def check_toolchain(ctx: BuildContext) -> BuildContext:
    await toolchain.check_and_install_ios_deploy()
    return ctx


@stage("compile-bundle")
async def compile_bundle(ctx: BuildContext) -> BuildContext:
    await toolchain.build_js(_require_root(ctx))
    return ctx


@stage("copy-bundle-assets")
async def copy_bundle_assets(ctx: BuildContext) -> BuildContext:
    root = _require_root(ctx)
    logger.info("\n=> Move JSbundle to dist\n")
    if not xcode.check_ios(root):
        logger.warning("Skipping bundle copy; %s does not exist", xcode.PLATFORM_DIR)
        return ctx
    result = await staging.copy_tree(
        root / BUNDLE_SRC,
        root / xcode.PLATFORM_DIR / BUNDLE_DEST,
        patterns=BUNDLE_FILTER,
        overwrite=True,
    )
    logger.info("Move %d files.", result.count)
    return ctx


def seed_options(options: BuildOptions) -> Stage:
    """Return a stage that packs the caller's options into the context."""

    async def _seed(ctx: BuildContext) -> BuildContext:
        return ctx.enrich(options=options)

    return Stage("seed-options", _seed)


@stage("prepare")
async def prepare_ios(ctx: BuildContext) -> BuildContext:
    """Validate the iOS subtree and locate its Xcode project."""
    root = _require_root(ctx)
    if not xcode.check_ios(root):
        raise PlatformNotFound("iOS project not found !")

    native_root = root / xcode.PLATFORM_DIR
    xcode_project = xcode.find_xcode_project(native_root)
    if xcode_project is None:
        raise ProjectNotFound("Could not find Xcode project files in ios folder")

    logger.info("\n=> start iOS app\n")
    return ctx.enrich(native_root=native_root, xcode_project=xcode_project)


@stage("install-deps")
async def install_dependencies(ctx: BuildContext) -> BuildContext:
    logger.info("\n=> pod update\n")
    await process.run(["pod", "update"], cwd=ctx.native_root)
    return ctx


@stage("resolve-config")
async def resolve_config(ctx: BuildContext) -> BuildContext:
    resolver = IOSConfigResolver()
    ios_config = PlatformConfig(resolver, _require_root(ctx), Platform.IOS, {"Ws": ""})
    configs = await ios_config.get_config()
    resolver.resolve(configs)
    return ctx.enrich(configs=configs)


@stage("build-app")
async def build_app(ctx: BuildContext) -> BuildContext:
    """Run xcodebuild for the first scheme of the located project.

    An empty config is reported ahead of any metadata read failure.
    """
    project_info = None
    read_error: Exception | None = None
    try:
        project_info = await xcode.read_project_info(ctx.native_root, ctx.xcode_project)
    except Exception as exc:
        read_error = exc

    logger.info("\n=> Building project...\n")
    if not ctx.configs:
        raise ConfigNotDetected("iOS config dir not detected.")
    if read_error is not None:
        raise read_error
    if ctx.xcode_project is None:
        raise ProjectNotFound("Could not find Xcode project files in ios folder")

    schemes = project_info["project"]["schemes"] if project_info else []
    if not schemes:
        raise ProjectNotFound(f"No build schemes found in {ctx.xcode_project.name}")
    scheme = schemes[0]

    kind = "-workspace" if ctx.xcode_project.is_workspace else "-project"
    await process.run(
        [
            "xcodebuild",
            kind,
            ctx.xcode_project.name,
            "-scheme",
            scheme,
            "-configuration",
            BUILD_CONFIGURATION,
            "-sdk",
            BUILD_SDK,
            "-derivedDataPath",
            DERIVED_DATA,
            "clean",
            "build",
        ],
        cwd=ctx.native_root,
    )
    return ctx.enrich(scheme=scheme)


@stage("copy-release-assets")
async def copy_release_assets(ctx: BuildContext) -> BuildContext:
    root = _require_root(ctx)
    if not ctx.configs:
        raise ConfigNotDetected("iOS config dir not detected.")
    native_root = ctx.native_root or root / xcode.PLATFORM_DIR
    dest = root / RELEASE_DIR / str(ctx.configs["BuildVersion"])

    logger.info("\n=> Move Release File to `%s`\n", dest.relative_to(root))
    result = await staging.copy_tree(
        native_root / PRODUCTS_DIR,
        dest,
        patterns=RELEASE_FILTER,
        overwrite=True,
    )
    logger.info("Move %d files. SUCCESSFUL", result.count)
    return ctx


@stage("list-devices")
async def list_devices(ctx: BuildContext) -> BuildContext:
    if ctx.is_set("devices"):
        return ctx
    return ctx.enrich(devices=await xcode.list_devices())


class DeviceSelector(Stage):
    """Prompt for one of the context's devices.

    Moves the context from having no device to having exactly one; an empty
    candidate list is rejected without prompting.
    """

    message = "Choose one of the following devices"
    section = " = devices = "

    def __init__(self, chooser: Chooser | None = None) -> None:
        super().__init__("choose-device", self._select)
        self.chooser = chooser or PromptChooser()

    @staticmethod
    def label(device: Device) -> str:
        return f"{device.name} ios: {device.version}"

    async def _select(self, ctx: BuildContext) -> BuildContext:
        devices = ctx.devices or []
        if not devices:
            raise NoDevicesFound("No ios devices found.")

        idx = await self.chooser.choose(
            self.message, self.section, [self.label(d) for d in devices]
        )
        device = devices[idx]
        logger.debug("Selected device '%s' (%s)", device.name, device.id)
        return ctx.enrich(device=device)
