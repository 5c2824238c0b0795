"""Unit tests for inilaunch.sequencer."""

import pytest

from inilaunch.errors import MissingRequiredField, WaitTimeout
from inilaunch.ini import parse_ini
from inilaunch.models import RegistryImportResult
from inilaunch.sequencer import LaunchSequencer, State


class _Proc:
    def __init__(self, pid: int) -> None:
        self.pid = pid


class _Runner:
    def __init__(self, events: list, gate_error: Exception | None = None) -> None:
        self.events = events
        self.gate_error = gate_error
        self.cancel_seen = None

    def start(self, path, args=None):
        self.events.append(("start", path, args))
        return _Proc(1000 + len(self.events))

    def wait_for_exit(self, proc, *, what, timeout, poll_interval, cancel):
        self.events.append(("wait_for_exit", what))
        self.cancel_seen = cancel
        return 0

    def wait_for_process_exit(self, name, *, timeout, poll_interval, cancel):
        self.events.append(("wait_gate", name, timeout))
        self.cancel_seen = cancel
        if self.gate_error is not None:
            raise self.gate_error
        return 1


class _Registry:
    def __init__(self, events: list, ok: bool = True) -> None:
        self.events = events
        self.ok = ok

    def set_region(self, locale):
        self.events.append(("set_region", locale))
        return RegistryImportResult("region", self.ok, "" if self.ok else "denied")

    def import_file(self, path):
        self.events.append(("import_file", path))
        return RegistryImportResult(path, self.ok, "" if self.ok else "access denied")


class _Splash:
    def __init__(self, events: list, style, min_seconds) -> None:
        self.events = events
        self.style = style
        self.min_seconds = min_seconds
        self.closed = False

    def close(self):
        if not self.closed:
            self.closed = True
            self.events.append(("splash_close",))

    def __enter__(self):
        self.events.append(("splash_show",))
        return self

    def __exit__(self, *exc_info):
        self.close()


def _sequencer(text: str, events: list, *, registry_ok=True, gate_error=None):
    splashes: list[_Splash] = []

    def splash_factory(style, min_seconds):
        splash = _Splash(events, style, min_seconds)
        splashes.append(splash)
        return splash

    sequencer = LaunchSequencer(
        parse_ini(text),
        runner=_Runner(events, gate_error=gate_error),
        registry=_Registry(events, ok=registry_ok),
        splash_factory=splash_factory,
    )
    return sequencer, splashes


def _full_config(exe: str, reg: str) -> str:
    return (
        "[CONFIG]\n"
        "WaitForLogonScript=1\n"
        "WaitForProcess=wscript\n"
        "WaitForAppRunFirstEXE=1\n"
        "WaitTimeoutSeconds=120\n"
        "[LAUNCH]\n"
        f"AppEXEPath={exe}\n"
        "AppCommandLineArgs=-profile main\n"
        "AppRunFirst=1\n"
        f"AppRunFirstEXE={exe}\n"
        "AppRunFirstCommandLineArgs=/prepare\n"
        "AppImportRegFile=1\n"
        f"AppRegFile={reg}\n"
    )


@pytest.fixture
def reg(tmp_path) -> str:
    path = tmp_path / "settings.reg"
    path.write_text("")
    return str(path)


class TestMinimalLaunch:
    def test_launches_exe_without_args_and_nothing_else(self, exe):
        events: list = []
        sequencer, splashes = _sequencer(
            f"[LAUNCH]\nAppEXEPath={exe}\nAppCommandLineArgs=0\n", events
        )

        report = sequencer.run()

        assert events == [("splash_show",), ("splash_close",), ("start", exe, None)]
        assert report.pid is not None
        assert report.warnings == []
        assert report.states == ["created", "validated", "dismissed", "launched", "terminated"]
        assert sequencer.state is State.TERMINATED
        assert splashes[0].min_seconds == 5.0

    def test_args_passed_verbatim(self, exe):
        events: list = []
        sequencer, _ = _sequencer(f"[LAUNCH]\nAppEXEPath={exe}\nAppCommandLineArgs=/a /b\n", events)
        sequencer.run()
        assert events[-1] == ("start", exe, "/a /b")


class TestValidationFailure:
    def test_missing_key_spawns_nothing(self):
        events: list = []
        sequencer, splashes = _sequencer("[LAUNCH]\nAppCommandLineArgs=0\n", events)

        with pytest.raises(MissingRequiredField):
            sequencer.run()

        assert events == []
        assert splashes == []
        assert sequencer.history == [State.CREATED, State.FAILED]

    def test_validate_is_cached(self, exe):
        sequencer, _ = _sequencer(f"[LAUNCH]\nAppEXEPath={exe}\n", [])
        first = sequencer.validate()
        assert sequencer.validate() is first
        assert sequencer.history == [State.CREATED, State.VALIDATED]


class TestOrdering:
    def test_all_steps_run_in_order(self, exe, reg):
        events: list = []
        sequencer, _ = _sequencer(_full_config(exe, reg), events)

        report = sequencer.run()

        assert events == [
            ("splash_show",),
            ("start", exe, "/prepare"),
            ("wait_for_exit", exe),
            ("wait_gate", "wscript", 120.0),
            ("import_file", reg),
            ("splash_close",),
            ("start", exe, "-profile main"),
        ]
        assert report.states == [
            "created",
            "validated",
            "run_first",
            "wait_gate",
            "registry_import",
            "dismissed",
            "launched",
            "terminated",
        ]

    def test_run_first_without_wait_does_not_block(self, exe):
        events: list = []
        text = f"[LAUNCH]\nAppEXEPath={exe}\nAppRunFirst=1\nAppRunFirstEXE={exe}\n"
        sequencer, _ = _sequencer(text, events)

        sequencer.run()

        assert ("wait_for_exit", exe) not in events
        assert [e[0] for e in events] == ["splash_show", "start", "splash_close", "start"]

    def test_waits_receive_cancel_token(self, exe, reg):
        sequencer, _ = _sequencer(_full_config(exe, reg), [])
        sequencer.run()
        assert sequencer.runner.cancel_seen is sequencer.cancel_event

    def test_cancel_sets_token(self, exe):
        sequencer, _ = _sequencer(f"[LAUNCH]\nAppEXEPath={exe}\n", [])
        sequencer.cancel()
        assert sequencer.cancel_event.is_set()


class TestRegistryStep:
    def test_failed_import_becomes_warning_and_launch_continues(self, exe, reg):
        events: list = []
        text = f"[LAUNCH]\nAppEXEPath={exe}\nAppImportRegFile=1\nAppRegFile={reg}\n"
        sequencer, _ = _sequencer(text, events, registry_ok=False)

        report = sequencer.run()

        assert len(report.warnings) == 1
        assert "access denied" in report.warnings[0]
        assert events[-1] == ("start", exe, None)

    def test_zero_flag_skips_registry(self, exe, reg):
        events: list = []
        text = f"[LAUNCH]\nAppEXEPath={exe}\nAppImportRegFile=0\nAppRegFile={reg}\n"
        sequencer, _ = _sequencer(text, events)

        report = sequencer.run()

        assert not any(e[0] == "import_file" for e in events)
        assert "registry_import" not in report.states

    def test_region_is_set_before_import(self, exe, reg):
        events: list = []
        text = (
            f"[LAUNCH]\nAppEXEPath={exe}\nNAV_ServerName=SQL01\nNAV_Database=NAV\n"
            f"NAV_ZUPPath=C:\\fin.zup\nNAV_SetRegion=1\nNAV_Region=da-DK\n"
            f"NAV_ImportRegFile=1\nNAV_RegFile={reg}\n"
        )
        sequencer, _ = _sequencer(text, events)

        sequencer.run()

        assert events[1:3] == [("set_region", "da-DK"), ("import_file", reg)]


class TestFailureAfterValidation:
    def test_wait_timeout_closes_splash_and_skips_launch(self, exe):
        events: list = []
        text = f"[CONFIG]\nWaitForProcess=wscript\n[LAUNCH]\nAppEXEPath={exe}\n"
        sequencer, splashes = _sequencer(text, events, gate_error=WaitTimeout("wscript", 1))

        with pytest.raises(WaitTimeout):
            sequencer.run()

        assert splashes[0].closed is True
        assert not any(e[0] == "start" for e in events)
        assert sequencer.state is State.FAILED


class TestSeedFile:
    def _nav(self, exe: str, template: str, zup: str) -> str:
        return (
            f"[LAUNCH]\nAppEXEPath={exe}\nNAV_ServerName=SQL01\nNAV_Database=NAV\n"
            f"NAV_ZUPPath={zup}\nNAV_UseGenericZUP=1\nNAV_GenericZUP={template}\n"
        )

    def test_copies_template_when_zup_missing(self, exe, tmp_path):
        template = tmp_path / "generic.zup"
        template.write_bytes(b"template")
        zup = tmp_path / "profile" / "fin.zup"
        sequencer, _ = _sequencer(self._nav(exe, str(template), str(zup)), [])

        sequencer.run()

        assert zup.read_bytes() == b"template"

    def test_keeps_existing_zup(self, exe, tmp_path):
        template = tmp_path / "generic.zup"
        template.write_bytes(b"template")
        zup = tmp_path / "fin.zup"
        zup.write_bytes(b"mine")
        sequencer, _ = _sequencer(self._nav(exe, str(template), str(zup)), [])

        sequencer.run()

        assert zup.read_bytes() == b"mine"
