"""Model package for inilaunch."""

from inilaunch.models.launch_config import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_SPLASH_MIN_SECONDS,
    LaunchConfig,
    RunFirst,
    SeedFile,
    WaitPolicy,
)
from inilaunch.models.results import RegistryImportResult, SequenceReport
from inilaunch.models.splash_style import SplashStyle

__all__ = [
    "DEFAULT_POLL_INTERVAL",
    "DEFAULT_SPLASH_MIN_SECONDS",
    "LaunchConfig",
    "RegistryImportResult",
    "RunFirst",
    "SeedFile",
    "SequenceReport",
    "SplashStyle",
    "WaitPolicy",
]
