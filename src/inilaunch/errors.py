"""Exception hierarchy for inilaunch."""


class LaunchError(Exception):
    """Base class for every error the launcher reports to the user."""


class ConfigError(LaunchError):
    """The configuration file could not be loaded."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"{detail}: {path}")
        self.path = path


class ConfigNotFound(ConfigError):
    def __init__(self, path: str) -> None:
        super().__init__(path, "Configuration file not found")


class ConfigUnreadable(ConfigError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(path, f"Configuration file could not be read ({reason})")


class ConfigMalformed(ConfigError):
    """Reserved: the line-oriented reader skips lines it does not understand."""


class ValidationError(LaunchError):
    """A configuration value is missing or unusable. ``key`` names it."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(message)
        self.key = key


class MissingRequiredField(ValidationError):
    def __init__(self, key: str) -> None:
        super().__init__(key, f"Required setting {key} is missing")


class ReferencedPathNotFound(ValidationError):
    def __init__(self, key: str, path: str) -> None:
        super().__init__(key, f"File named by {key} does not exist: {path}")
        self.path = path


class OptionalGroupIncomplete(ValidationError):
    def __init__(self, key: str, missing: str) -> None:
        super().__init__(key, f"{key} is enabled but {missing} is not set")
        self.missing = missing


class InvalidValue(ValidationError):
    def __init__(self, key: str, value: str, expected: str) -> None:
        super().__init__(key, f"{key}={value!r} is not valid; expected {expected}")
        self.value = value


class WaitError(LaunchError):
    """A blocking wait ended without the awaited condition."""


class WaitTimeout(WaitError):
    def __init__(self, what: str, timeout: float) -> None:
        super().__init__(f"Gave up waiting for {what} after {timeout:g} seconds")
        self.timeout = timeout


class WaitCancelled(WaitError):
    def __init__(self, what: str) -> None:
        super().__init__(f"Wait for {what} was cancelled")


class ProcessStartError(LaunchError):
    """A program could not be started after validation passed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Could not start {path}: {reason}")
        self.path = path
