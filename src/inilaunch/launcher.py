"""Core logic for inilaunch."""

import logging
import threading
from functools import partial

from inilaunch.ini import load_ini
from inilaunch.models import SequenceReport
from inilaunch.sequencer import LaunchSequencer
from inilaunch.splash import SplashScreen

log = logging.getLogger("inilaunch")


def launch(
    config_path: str,
    *,
    show_splash: bool = True,
    cancel: threading.Event | None = None,
) -> SequenceReport:
    """Load ``config_path``, validate it and run the launch sequence."""
    document = load_ini(config_path)
    splash_factory = SplashScreen if show_splash else partial(SplashScreen, enabled=False)
    sequencer = LaunchSequencer(document, splash_factory=splash_factory, cancel=cancel)
    report = sequencer.run()
    log.debug("launched pid %s via %s", report.pid, " -> ".join(report.states))
    return report
