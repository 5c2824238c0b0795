"""Line-oriented INI reader.

Sections map to dicts of string values. Comment lines are kept under
synthetic ``CommentN`` keys so a section round-trips with its comments.
"""

import logging
import os
import re

from inilaunch.errors import ConfigNotFound, ConfigUnreadable

log = logging.getLogger(__name__)

NO_SECTION = "NO_SECTION"
COMMENT_PREFIX = "Comment"

SECTION_RE = re.compile(r"^\[(.+)\]$")
COMMENT_RE = re.compile(r"^;(.*)$")
KEY_VALUE_RE = re.compile(r"^([^=]+?)\s*=(.*)$")

IniDocument = dict[str, dict[str, str]]


def parse_ini(text: str) -> IniDocument:
    """Parse INI text into ``{section: {key: value}}``."""
    document: IniDocument = {}
    section = NO_SECTION
    comment_counts: dict[str, int] = {}

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue

        match = SECTION_RE.match(line)
        if match:
            section = match.group(1).strip()
            document.setdefault(section, {})
            continue

        match = COMMENT_RE.match(line)
        if match:
            count = comment_counts.get(section, 0) + 1
            comment_counts[section] = count
            document.setdefault(section, {})[f"{COMMENT_PREFIX}{count}"] = match.group(1)
            continue

        match = KEY_VALUE_RE.match(line)
        if match:
            key = match.group(1).strip()
            document.setdefault(section, {})[key] = match.group(2).strip()
            continue

        log.debug("skipping unrecognised line %d: %r", lineno, raw)

    return document


def load_ini(path: str) -> IniDocument:
    """Read and parse the INI file at ``path``."""
    if not os.path.isfile(path):
        raise ConfigNotFound(path)
    try:
        with open(path, encoding="utf-8-sig") as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise ConfigUnreadable(path, f"not UTF-8 text: {e.reason}") from e
    except OSError as e:
        raise ConfigUnreadable(path, e.strerror or str(e)) from e

    document = parse_ini(text)
    log.debug("loaded %s: sections=%s", path, list(document))
    return document


def is_comment_key(key: str) -> bool:
    """Return whether ``key`` is a synthetic comment entry."""
    return key.startswith(COMMENT_PREFIX) and key[len(COMMENT_PREFIX):].isdigit()
