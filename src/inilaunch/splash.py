"""Splash screen shown while the launch is prepared, plus the error dialog.

The window lives on its own thread with its own Tk interpreter. The
sequencer hands it an immutable SplashStyle when it is created and talks to
it afterwards only through a one-shot close event.
"""

import logging
import threading
import time
from typing import Callable, Protocol

from inilaunch.models import SplashStyle

log = logging.getLogger(__name__)

SPLASH_WIDTH = 420
SPLASH_HEIGHT = 180
PUMP_INTERVAL_SECONDS = 0.05
READY_TIMEOUT_SECONDS = 10.0
JOIN_TIMEOUT_SECONDS = 5.0
FONT_FAMILY = "Segoe UI"


class SplashUnavailable(RuntimeError):
    """No window could be created or kept alive (no display, no Tk)."""


class SplashWindow(Protocol):
    def pump(self) -> None: ...

    def destroy(self) -> None: ...


class TkSplashWindow:
    """Borderless, centred Tk window with a title, a status line and a busy bar."""

    def __init__(self, style: SplashStyle) -> None:
        try:
            import tkinter as tk
            from tkinter import ttk
        except ImportError as e:
            raise SplashUnavailable(f"tkinter is not available: {e}") from e

        self._tcl_error = tk.TclError
        try:
            root = tk.Tk()
        except tk.TclError as e:
            raise SplashUnavailable(str(e)) from e

        try:
            self._layout(root, style, tk, ttk)
        except tk.TclError as e:
            root.destroy()
            raise SplashUnavailable(str(e)) from e
        self._root = root

    @staticmethod
    def _layout(root, style: SplashStyle, tk, ttk) -> None:
        root.overrideredirect(True)
        root.attributes("-topmost", True)
        x = (root.winfo_screenwidth() - SPLASH_WIDTH) // 2
        y = (root.winfo_screenheight() - SPLASH_HEIGHT) // 2
        root.geometry(f"{SPLASH_WIDTH}x{SPLASH_HEIGHT}+{x}+{y}")

        frame = tk.Frame(root, borderwidth=2, relief=tk.RIDGE, bg=style.background_color)
        frame.pack(fill=tk.BOTH, expand=True)
        tk.Label(
            frame,
            text=style.title_text,
            font=(FONT_FAMILY, 18, "bold"),
            bg=style.background_color,
            fg=style.title_color,
        ).pack(pady=(30, 5))
        tk.Label(
            frame,
            text=style.loading_text,
            font=(FONT_FAMILY, 10),
            bg=style.background_color,
            fg=style.loading_color,
        ).pack(pady=5)
        progress = ttk.Progressbar(frame, orient=tk.HORIZONTAL, length=300, mode="indeterminate")
        progress.pack(pady=20)
        progress.start(10)

        root.update()

    def pump(self) -> None:
        try:
            self._root.update()
        except self._tcl_error as e:
            raise SplashUnavailable(str(e)) from e

    def destroy(self) -> None:
        try:
            self._root.destroy()
        except self._tcl_error:
            pass


class SplashScreen:
    """Show a splash window in the background for the duration of a ``with`` block.

    ``close()`` keeps the window up for at least ``min_seconds`` after it
    first appeared, then signals the window thread and joins it.
    """

    def __init__(
        self,
        style: SplashStyle,
        min_seconds: float = 5.0,
        *,
        enabled: bool = True,
        window_factory: Callable[[SplashStyle], SplashWindow] = TkSplashWindow,
        interval: float = PUMP_INTERVAL_SECONDS,
    ) -> None:
        self._style = style
        self._min_seconds = min_seconds
        self._enabled = enabled
        self._window_factory = window_factory
        self._interval = interval
        self._ready = threading.Event()
        self._close_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._shown_at: float | None = None

    @property
    def visible(self) -> bool:
        return self._shown_at is not None and not self._close_event.is_set()

    def start(self) -> None:
        if not self._enabled or self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, daemon=True, name="inilaunch-splash")
        self._thread.start()

    def close(self) -> None:
        if self._thread is None:
            return
        # The window must finish initialising before it can be torn down.
        self._ready.wait(timeout=READY_TIMEOUT_SECONDS)
        if self._shown_at is not None and not self._close_event.is_set():
            remaining = self._min_seconds - (time.monotonic() - self._shown_at)
            if remaining > 0:
                log.debug("holding splash for another %.2fs", remaining)
                time.sleep(remaining)
        self._close_event.set()
        self._thread.join(timeout=JOIN_TIMEOUT_SECONDS)
        if self._thread.is_alive():
            log.warning("splash thread did not stop within %ss", JOIN_TIMEOUT_SECONDS)

    def __enter__(self) -> "SplashScreen":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _run(self) -> None:
        try:
            window = self._window_factory(self._style)
        except SplashUnavailable as e:
            log.debug("splash unavailable: %s", e)
            return
        except Exception as e:
            # Without a window the launch continues unannounced.
            log.warning("splash window could not be created: %s", e)
            return
        else:
            self._shown_at = time.monotonic()
        finally:
            self._ready.set()

        try:
            while not self._close_event.is_set():
                window.pump()
                self._close_event.wait(self._interval)
        except SplashUnavailable as e:
            log.debug("splash window lost: %s", e)
        except Exception as e:
            log.warning("splash window failed: %s", e)
        finally:
            window.destroy()


def show_error_dialog(message: str, title: str = "inilaunch") -> bool:
    """Show a modal error box. Return False when no dialog could be shown."""
    try:
        import tkinter as tk
        from tkinter import messagebox
    except ImportError:
        return False

    try:
        root = tk.Tk()
        root.withdraw()
        messagebox.showerror(title, message, parent=root)
        root.destroy()
    except tk.TclError as e:
        log.debug("error dialog unavailable: %s", e)
        return False
    return True
