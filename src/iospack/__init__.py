"""iospack - build a native iOS app bundle from a pre-built JS bundle."""

from .chooser import Chooser as Chooser
from .chooser import PromptChooser as PromptChooser
from .config import IOSConfigResolver as IOSConfigResolver
from .config import Platform as Platform
from .config import PlatformConfig as PlatformConfig
from .context import BuildContext as BuildContext
from .context import BuildOptions as BuildOptions
from .context import Device as Device
from .context import XcodeProject as XcodeProject
from .pipeline import Pipeline as Pipeline
from .pipeline import PipelineResult as PipelineResult
from .pipeline import build_ios as build_ios
from .pipeline import select_device as select_device
from .stages import DeviceSelector as DeviceSelector
from .stages import Stage as Stage
from .stages import stage as stage
