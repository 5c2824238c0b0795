"""Validated launch configuration."""

from pydantic import BaseModel, ConfigDict, Field

from inilaunch.models.splash_style import SplashStyle

DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_SPLASH_MIN_SECONDS = 5.0


class RunFirst(BaseModel):
    """A program started before the main target."""

    model_config = ConfigDict(frozen=True)

    exe_path: str
    args: str | None = None
    wait_for_exit: bool = False


class SeedFile(BaseModel):
    """Template copied to ``destination`` when that file does not exist yet."""

    model_config = ConfigDict(frozen=True)

    source: str
    destination: str


class WaitPolicy(BaseModel):
    """Bounds for the blocking waits. ``timeout=None`` waits forever."""

    model_config = ConfigDict(frozen=True)

    timeout: float | None = Field(default=None, gt=0)
    poll_interval: float = Field(default=DEFAULT_POLL_INTERVAL, gt=0)
    splash_min_seconds: float = Field(default=DEFAULT_SPLASH_MIN_SECONDS, ge=0)


class LaunchConfig(BaseModel):
    """Everything needed to drive one launch. Built once, never mutated."""

    model_config = ConfigDict(frozen=True)

    command_path: str
    command_args: str | None = None
    wait_for_process: str | None = None
    run_first: RunFirst | None = None
    import_registry_file: str | None = None
    region: str | None = None
    seed_file: SeedFile | None = None
    style: SplashStyle = SplashStyle()
    wait: WaitPolicy = WaitPolicy()
    variant: str = "generic"
