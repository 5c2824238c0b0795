"""Launch settings for the Dynamics NAV classic client (finsql.exe).

The client takes a single comma-separated argument string::

    servername=SQL01, database=NAV, id=C:\\Users\\me\\fin.zup, ntauthentication=yes

Optional segments (company, temp path) are only emitted when configured.
"""

import logging

from inilaunch.config import (
    LAUNCH,
    Settings,
    append_arg,
    expand_env,
    join_args,
    read_common,
    read_flag,
    read_registry_file,
    require,
    require_file,
)
from inilaunch.errors import OptionalGroupIncomplete
from inilaunch.models import LaunchConfig, SeedFile

log = logging.getLogger(__name__)

MARKER_KEYS = ("NAV_ServerName", "NAV_Database", "NAV_ZUPPath")


def is_navision(settings: Settings) -> bool:
    """Return whether the document describes a NAV launch."""
    return any(settings.has(LAUNCH, key) for key in MARKER_KEYS)


def read_zup(settings: Settings) -> tuple[str, SeedFile | None]:
    zup_path = expand_env(require(settings, LAUNCH, "NAV_ZUPPath"))
    if not read_flag(settings, LAUNCH, "NAV_UseGenericZUP"):
        return zup_path, None

    generic = settings.get(LAUNCH, "NAV_GenericZUP")
    if generic is None:
        raise OptionalGroupIncomplete(f"{LAUNCH}.NAV_UseGenericZUP", f"{LAUNCH}.NAV_GenericZUP")
    generic = require_file(f"{LAUNCH}.NAV_GenericZUP", expand_env(generic))
    return zup_path, SeedFile(source=generic, destination=zup_path)


def read_region(settings: Settings) -> str | None:
    if not read_flag(settings, LAUNCH, "NAV_SetRegion"):
        return None
    region = settings.get(LAUNCH, "NAV_Region")
    if region is None:
        raise OptionalGroupIncomplete(f"{LAUNCH}.NAV_SetRegion", f"{LAUNCH}.NAV_Region")
    return region


def build_arguments(settings: Settings, zup_path: str) -> str | None:
    server = require(settings, LAUNCH, "NAV_ServerName")
    database = require(settings, LAUNCH, "NAV_Database")

    parts: list[str] = []
    append_arg(parts, "servername", server)
    append_arg(parts, "database", database)
    append_arg(parts, "id", zup_path)
    if read_flag(settings, LAUNCH, "NAV_NTAUT"):
        append_arg(parts, "ntauthentication", "yes")
    append_arg(parts, "company", settings.get(LAUNCH, "NAV_Company"))
    append_arg(parts, "temppath", expand_env(settings.get(LAUNCH, "NAV_Temp") or ""))
    return join_args(parts)


def build_navision_config(settings: Settings) -> LaunchConfig:
    """Validate NAV_* keys and synthesize the finsql argument string."""
    common = read_common(settings)
    zup_path, seed = read_zup(settings)
    config = LaunchConfig(
        **common,
        command_args=build_arguments(settings, zup_path),
        import_registry_file=read_registry_file(settings, "NAV_ImportRegFile", "NAV_RegFile"),
        region=read_region(settings),
        seed_file=seed,
        variant="navision",
    )
    log.debug("navision config: %s", config)
    return config
