"""Turn a parsed INI document into a validated LaunchConfig.

Every check here runs before the launcher touches a process, the registry
or the splash window.
"""

import logging
import math
import os
import re
import shlex
from collections.abc import Mapping

from inilaunch.errors import (
    InvalidValue,
    MissingRequiredField,
    OptionalGroupIncomplete,
    ReferencedPathNotFound,
)
from inilaunch.ini import is_comment_key
from inilaunch.models import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_SPLASH_MIN_SECONDS,
    LaunchConfig,
    RunFirst,
    SplashStyle,
    WaitPolicy,
)

log = logging.getLogger(__name__)

CONFIG = "CONFIG"
LAUNCH = "LAUNCH"

UNSET_SENTINEL = "0"
TRUE_VALUES = {"1", "true", "yes"}
FALSE_VALUES = {"0", "false", "no"}

WINDOWS_VAR_RE = re.compile(r"%([^%]+)%")
COLOR_RE = re.compile(r"^(#[0-9A-Fa-f]{3}|#[0-9A-Fa-f]{6}|[A-Za-z][A-Za-z0-9 ]*)$")

STYLE_KEYS = {
    "title_text": "TitleLabel",
    "loading_text": "LoadingLabel",
    "title_color": "TitleForeground",
    "loading_color": "LoadingForeground",
    "background_color": "BackgroundColor",
}
COLOR_FIELDS = ("title_color", "loading_color", "background_color")


class Settings:
    """Case-insensitive, read-only view of an INI document."""

    def __init__(self, document: Mapping[str, Mapping[str, str]]) -> None:
        self._sections: dict[str, dict[str, str]] = {}
        for section, values in document.items():
            folded = self._sections.setdefault(section.casefold(), {})
            for key, value in values.items():
                if is_comment_key(key):
                    continue
                folded[key.casefold()] = value

    def get(self, section: str, key: str) -> str | None:
        """Return the stripped value, or None when absent or blank."""
        value = self._sections.get(section.casefold(), {}).get(key.casefold())
        if value is None:
            return None
        value = value.strip()
        return value or None

    def has(self, section: str, key: str) -> bool:
        return self.get(section, key) is not None


def expand_env(value: str) -> str:
    """Expand ``%VAR%`` and ``$VAR`` references, leaving unknown names alone."""

    def _sub(match: re.Match) -> str:
        return os.environ.get(match.group(1), match.group(0))

    return os.path.expandvars(WINDOWS_VAR_RE.sub(_sub, value))


def is_unset(value: str | None) -> bool:
    """Return whether an optional value is absent or the ``0`` sentinel."""
    return value is None or value.strip() in ("", UNSET_SENTINEL)


def quote_arg(value: str) -> str:
    if " " in value and not (value.startswith('"') and value.endswith('"')):
        return f'"{value}"'
    return value


def append_arg(parts: list[str], key: str, value: str | None) -> None:
    """Append ``key=value`` unless the value is unset."""
    if is_unset(value):
        return
    parts.append(f"{key}={quote_arg(value.strip())}")


def join_args(parts: list[str]) -> str | None:
    return ", ".join(parts) if parts else None


def read_flag(settings: Settings, section: str, key: str) -> bool:
    value = settings.get(section, key)
    if value is None:
        return False
    lowered = value.lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise InvalidValue(f"{section}.{key}", value, "0 or 1")


def read_seconds(settings: Settings, key: str, default: float | None) -> float | None:
    value = settings.get(CONFIG, key)
    if value is None:
        return default
    try:
        seconds = float(value)
    except ValueError:
        raise InvalidValue(f"{CONFIG}.{key}", value, "a number of seconds") from None
    if not math.isfinite(seconds) or seconds < 0:
        raise InvalidValue(f"{CONFIG}.{key}", value, "a non-negative number of seconds")
    return seconds


def check_args(key: str, args: str | None) -> str | None:
    """Reject argument strings that cannot be split into argv on this platform."""
    if args is not None and os.name != "nt":
        try:
            shlex.split(args)
        except ValueError as e:
            raise InvalidValue(key, args, f"a shell-quotable argument string ({e})") from None
    return args


def read_args(settings: Settings, key: str) -> str | None:
    args = settings.get(LAUNCH, key)
    return check_args(f"{LAUNCH}.{key}", None if is_unset(args) else args)


def require(settings: Settings, section: str, *keys: str) -> str:
    """Return the first present of ``keys`` (aliases) or raise MissingRequiredField."""
    for key in keys:
        value = settings.get(section, key)
        if value is not None:
            return value
    raise MissingRequiredField(f"{section}.{keys[0]}")


def require_file(key: str, path: str) -> str:
    if not os.path.isfile(path):
        raise ReferencedPathNotFound(key, path)
    return path


def read_style(settings: Settings) -> SplashStyle:
    overrides = {
        field: value
        for field, key in STYLE_KEYS.items()
        if (value := settings.get(CONFIG, key)) is not None
    }
    for field in COLOR_FIELDS:
        value = overrides.get(field)
        if value is not None and not COLOR_RE.match(value):
            key = f"{CONFIG}.{STYLE_KEYS[field]}"
            raise InvalidValue(key, value, "a colour name, #RGB or #RRGGBB")
    return SplashStyle(**overrides)


def read_wait_policy(settings: Settings) -> WaitPolicy:
    timeout = read_seconds(settings, "WaitTimeoutSeconds", None)
    poll_interval = read_seconds(settings, "PollIntervalSeconds", DEFAULT_POLL_INTERVAL)
    if not poll_interval:
        raise InvalidValue(f"{CONFIG}.PollIntervalSeconds", "0", "a positive number of seconds")
    return WaitPolicy(
        timeout=timeout or None,
        poll_interval=poll_interval,
        splash_min_seconds=read_seconds(
            settings, "SplashMinimumSeconds", DEFAULT_SPLASH_MIN_SECONDS
        ),
    )


def read_wait_for_process(settings: Settings) -> str | None:
    """Return the process name the gate waits on, or None when the gate is off."""
    name = settings.get(CONFIG, "WaitForProcess")
    if name is None:
        name = settings.get(CONFIG, "WaitForLogonProcess")
    if settings.has(CONFIG, "WaitForLogonScript"):
        if not read_flag(settings, CONFIG, "WaitForLogonScript"):
            return None
        if name is None:
            raise OptionalGroupIncomplete(
                f"{CONFIG}.WaitForLogonScript", f"{CONFIG}.WaitForProcess"
            )
    return name


def read_run_first(settings: Settings) -> RunFirst | None:
    if not read_flag(settings, LAUNCH, "AppRunFirst"):
        return None
    exe = settings.get(LAUNCH, "AppRunFirstEXE")
    if exe is None:
        raise OptionalGroupIncomplete(f"{LAUNCH}.AppRunFirst", f"{LAUNCH}.AppRunFirstEXE")
    exe = require_file(f"{LAUNCH}.AppRunFirstEXE", expand_env(exe))
    args = read_args(settings, "AppRunFirstCommandLineArgs")
    return RunFirst(
        exe_path=exe,
        args=args,
        wait_for_exit=read_flag(settings, CONFIG, "WaitForAppRunFirstEXE"),
    )


def read_registry_file(settings: Settings, flag_key: str, file_key: str) -> str | None:
    if not read_flag(settings, LAUNCH, flag_key):
        return None
    path = settings.get(LAUNCH, file_key)
    if path is None:
        raise OptionalGroupIncomplete(f"{LAUNCH}.{flag_key}", f"{LAUNCH}.{file_key}")
    return require_file(f"{LAUNCH}.{file_key}", expand_env(path))


def read_command_path(settings: Settings) -> str:
    path = expand_env(require(settings, LAUNCH, "AppEXEPath", "AppCommandLine"))
    return require_file(f"{LAUNCH}.AppEXEPath", path)


def read_common(settings: Settings) -> dict:
    """Settings shared by every launch variant, as LaunchConfig keyword arguments."""
    return {
        "command_path": read_command_path(settings),
        "wait_for_process": read_wait_for_process(settings),
        "run_first": read_run_first(settings),
        "style": read_style(settings),
        "wait": read_wait_policy(settings),
    }


def build_generic_config(settings: Settings) -> LaunchConfig:
    """Validate a plain ``AppEXEPath`` + ``AppCommandLineArgs`` launch."""
    common = read_common(settings)
    config = LaunchConfig(
        **common,
        command_args=read_args(settings, "AppCommandLineArgs"),
        import_registry_file=read_registry_file(settings, "AppImportRegFile", "AppRegFile"),
        variant="generic",
    )
    log.debug("generic config: %s", config)
    return config
