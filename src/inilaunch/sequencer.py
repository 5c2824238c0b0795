"""The launch sequence: validate, announce, prepare, dismiss, launch.

States move strictly forward::

    CREATED -> VALIDATED -> [RUN_FIRST] -> [WAIT_GATE] -> [REGISTRY_IMPORT]
            -> DISMISSED -> LAUNCHED -> TERMINATED

Bracketed states are entered only when configured. Any error moves the
sequencer to FAILED. Nothing done before the failure is undone.
"""

import logging
import os
import shutil
import threading
from collections.abc import Mapping
from enum import Enum
from typing import Callable, ContextManager

from inilaunch.config import Settings, build_generic_config
from inilaunch.errors import LaunchError
from inilaunch.models import LaunchConfig, SequenceReport, SplashStyle
from inilaunch.navision import build_navision_config, is_navision
from inilaunch.processes import ProcessRunner
from inilaunch.registry import RegistryEditor
from inilaunch.splash import SplashScreen

log = logging.getLogger(__name__)

SplashFactory = Callable[[SplashStyle, float], ContextManager]


class State(str, Enum):
    CREATED = "created"
    VALIDATED = "validated"
    RUN_FIRST = "run_first"
    WAIT_GATE = "wait_gate"
    REGISTRY_IMPORT = "registry_import"
    DISMISSED = "dismissed"
    LAUNCHED = "launched"
    TERMINATED = "terminated"
    FAILED = "failed"


def build_launch_config(document: Mapping[str, Mapping[str, str]]) -> LaunchConfig:
    """Validate ``document`` with the variant its keys call for."""
    settings = Settings(document)
    if is_navision(settings):
        return build_navision_config(settings)
    return build_generic_config(settings)


class LaunchSequencer:
    """Drive one launch from a parsed INI document."""

    def __init__(
        self,
        document: Mapping[str, Mapping[str, str]],
        *,
        runner: ProcessRunner | None = None,
        registry: RegistryEditor | None = None,
        splash_factory: SplashFactory | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        self._document = document
        self.runner = runner if runner is not None else ProcessRunner()
        self.registry = registry if registry is not None else RegistryEditor()
        self._splash_factory = splash_factory if splash_factory is not None else SplashScreen
        self.cancel_event = cancel if cancel is not None else threading.Event()
        self.config: LaunchConfig | None = None
        self.state = State.CREATED
        self.history: list[State] = [State.CREATED]

    def cancel(self) -> None:
        """Abort whichever wait is in progress."""
        self.cancel_event.set()

    def validate(self) -> LaunchConfig:
        if self.config is not None:
            return self.config
        try:
            self.config = build_launch_config(self._document)
        except LaunchError:
            self._enter(State.FAILED)
            raise
        self._enter(State.VALIDATED)
        return self.config

    def run(self) -> SequenceReport:
        """Run every configured step in order and hand off to the target."""
        config = self.validate()
        report = SequenceReport()
        try:
            with self._splash_factory(config.style, config.wait.splash_min_seconds) as splash:
                self._run_first(config)
                self._wait_gate(config)
                report.warnings.extend(self._update_registry(config))
                splash.close()
                self._enter(State.DISMISSED)
            report.pid = self._launch(config)
        except (LaunchError, KeyboardInterrupt):
            self._enter(State.FAILED)
            raise
        self._enter(State.TERMINATED)
        report.states = [state.value for state in self.history]
        return report

    def _enter(self, state: State) -> None:
        log.debug("%s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def _run_first(self, config: LaunchConfig) -> None:
        run_first = config.run_first
        if run_first is None:
            return
        self._enter(State.RUN_FIRST)
        proc = self.runner.start(run_first.exe_path, run_first.args)
        if run_first.wait_for_exit:
            self.runner.wait_for_exit(
                proc,
                what=run_first.exe_path,
                timeout=config.wait.timeout,
                poll_interval=config.wait.poll_interval,
                cancel=self.cancel_event,
            )

    def _wait_gate(self, config: LaunchConfig) -> None:
        if config.wait_for_process is None:
            return
        self._enter(State.WAIT_GATE)
        self.runner.wait_for_process_exit(
            config.wait_for_process,
            timeout=config.wait.timeout,
            poll_interval=config.wait.poll_interval,
            cancel=self.cancel_event,
        )

    def _update_registry(self, config: LaunchConfig) -> list[str]:
        if config.region is None and config.import_registry_file is None:
            return []
        self._enter(State.REGISTRY_IMPORT)
        results = []
        if config.region is not None:
            results.append(self.registry.set_region(config.region))
        if config.import_registry_file is not None:
            results.append(self.registry.import_file(config.import_registry_file))

        warnings = []
        for result in results:
            if not result.ok:
                log.warning("%s", result.as_warning())
                warnings.append(result.as_warning())
        return warnings

    def _launch(self, config: LaunchConfig) -> int:
        seed = config.seed_file
        if seed is not None and not os.path.exists(seed.destination):
            log.debug("seeding %s from %s", seed.destination, seed.source)
            try:
                os.makedirs(os.path.dirname(seed.destination) or ".", exist_ok=True)
                shutil.copyfile(seed.source, seed.destination)
            except OSError as e:
                raise LaunchError(
                    f"Could not copy {seed.source} to {seed.destination}: {e}"
                ) from e

        proc = self.runner.start(config.command_path, config.command_args)
        self._enter(State.LAUNCHED)
        return proc.pid
