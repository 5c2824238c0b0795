"""Result records produced while a launch runs."""

from dataclasses import dataclass, field


@dataclass
class RegistryImportResult:
    """Outcome of one registry action. Failures are reported, not raised."""

    target: str
    ok: bool
    detail: str = ""

    def as_warning(self) -> str:
        return f"Registry update for {self.target} failed: {self.detail}"


@dataclass
class SequenceReport:
    """What a finished launch sequence did."""

    pid: int | None = None
    states: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
