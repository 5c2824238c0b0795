"""Starting programs and waiting on them."""

import logging
import os
import shlex
import subprocess
import threading
import time

import psutil

from inilaunch.errors import ProcessStartError, WaitCancelled, WaitTimeout

log = logging.getLogger(__name__)


def build_command(path: str, args: str | None = None) -> list[str] | str:
    """Return the command for ``path`` with ``args`` appended verbatim.

    Windows receives a single command line so the argument string reaches the
    program exactly as configured. POSIX has no such thing, so the string is
    split with shell rules.
    """
    if os.name == "nt":
        command_line = subprocess.list2cmdline([path])
        return f"{command_line} {args}" if args else command_line
    return [path, *shlex.split(args)] if args else [path]


def _normalize_name(name: str) -> str:
    base = os.path.basename(name.strip()).casefold()
    return base[:-4] if base.endswith(".exe") else base


def _deadline(timeout: float | None) -> float | None:
    return None if timeout is None else time.monotonic() + timeout


def _slice(interval: float, deadline: float | None) -> float:
    if deadline is None:
        return interval
    return max(min(interval, deadline - time.monotonic()), 0)


class ProcessRunner:
    """OS process operations used by the launch sequence."""

    def start(self, path: str, args: str | None = None) -> subprocess.Popen:
        """Start ``path`` detached from this process and return immediately."""
        try:
            command = build_command(path, args)
        except ValueError as e:
            raise ProcessStartError(path, f"bad argument string {args!r}: {e}") from e
        kwargs: dict = {"cwd": os.path.dirname(path) or None, "close_fds": True}
        if os.name == "nt":
            kwargs["creationflags"] = (
                subprocess.DETACHED_PROCESS | subprocess.CREATE_NEW_PROCESS_GROUP
            )
        else:
            kwargs["start_new_session"] = True
        log.debug("starting %r", command)
        try:
            proc = subprocess.Popen(command, **kwargs)
        except OSError as e:
            raise ProcessStartError(path, e.strerror or str(e)) from e
        log.debug("started pid %d", proc.pid)
        return proc

    def wait_for_exit(
        self,
        proc: subprocess.Popen,
        *,
        what: str,
        timeout: float | None = None,
        poll_interval: float = 1.0,
        cancel: threading.Event | None = None,
    ) -> int:
        """Block until ``proc`` exits and return its exit code."""
        deadline = _deadline(timeout)
        while True:
            try:
                code = proc.wait(timeout=_slice(poll_interval, deadline))
            except subprocess.TimeoutExpired:
                pass
            else:
                log.debug("%s exited with %d", what, code)
                return code
            if cancel is not None and cancel.is_set():
                raise WaitCancelled(what)
            if deadline is not None and time.monotonic() >= deadline:
                raise WaitTimeout(what, timeout)

    def find_processes(self, name: str) -> list[psutil.Process]:
        """Return running processes whose name matches ``name``."""
        target = _normalize_name(name)
        matches = []
        for proc in psutil.process_iter(["name"]):
            proc_name = proc.info.get("name")
            if proc_name and _normalize_name(proc_name) == target:
                matches.append(proc)
        return matches

    def wait_for_process_exit(
        self,
        name: str,
        *,
        timeout: float | None = None,
        poll_interval: float = 1.0,
        cancel: threading.Event | None = None,
    ) -> int:
        """Poll until no process called ``name`` is running. Return the poll count."""
        cancel = cancel if cancel is not None else threading.Event()
        deadline = _deadline(timeout)
        polls = 0
        while True:
            polls += 1
            running = self.find_processes(name)
            if not running:
                log.debug("no %s process left after %d poll(s)", name, polls)
                return polls
            log.debug("poll %d: %d %s process(es) running", polls, len(running), name)
            if deadline is not None and time.monotonic() >= deadline:
                raise WaitTimeout(f"process {name}", timeout)
            if cancel.wait(_slice(poll_interval, deadline)):
                raise WaitCancelled(f"process {name}")
