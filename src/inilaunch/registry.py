"""Windows registry updates applied before launch.

Nothing here raises on failure: callers get a RegistryImportResult and
decide whether to carry on. On platforms without a registry every action
reports itself as skipped.
"""

import logging
import os
import subprocess

from inilaunch.models import RegistryImportResult

log = logging.getLogger(__name__)

REG_EXE = "reg"
REG_TIMEOUT_SECONDS = 60
INTERNATIONAL_KEY = r"Control Panel\International"
LOCALE_VALUE = "LocaleName"
UNSUPPORTED = "no Windows registry on this platform"


def registry_available() -> bool:
    return os.name == "nt"


class RegistryEditor:
    """Merges .reg files and sets the user's locale."""

    def import_file(self, path: str) -> RegistryImportResult:
        """Merge ``path`` into the registry with ``reg import``."""
        if not registry_available():
            return RegistryImportResult(path, False, UNSUPPORTED)
        try:
            result = subprocess.run(
                [REG_EXE, "import", path],
                capture_output=True,
                text=True,
                timeout=REG_TIMEOUT_SECONDS,
            )
        except (subprocess.TimeoutExpired, OSError) as e:
            log.debug("reg import %s failed: %s", path, e)
            return RegistryImportResult(path, False, str(e))

        if result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip()
            detail = detail or f"reg exited with status {result.returncode}"
            log.debug("reg import %s returned %d: %s", path, result.returncode, detail)
            return RegistryImportResult(path, False, detail)

        log.debug("imported %s", path)
        return RegistryImportResult(path, True)

    def set_region(self, locale: str) -> RegistryImportResult:
        """Write ``locale`` as the current user's LocaleName."""
        target = f"HKCU\\{INTERNATIONAL_KEY}\\{LOCALE_VALUE}"
        if not registry_available():
            return RegistryImportResult(target, False, UNSUPPORTED)

        import winreg

        try:
            with winreg.OpenKey(
                winreg.HKEY_CURRENT_USER, INTERNATIONAL_KEY, 0, winreg.KEY_SET_VALUE
            ) as key:
                winreg.SetValueEx(key, LOCALE_VALUE, 0, winreg.REG_SZ, locale)
        except OSError as e:
            log.debug("setting %s failed: %s", target, e)
            return RegistryImportResult(target, False, str(e))

        log.debug("set %s=%s", target, locale)
        return RegistryImportResult(target, True)
