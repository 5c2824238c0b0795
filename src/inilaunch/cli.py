"""Command-line interface for inilaunch."""

import argparse
import logging
import sys

from inilaunch import __version__
from inilaunch.errors import LaunchError
from inilaunch.launcher import launch
from inilaunch.splash import show_error_dialog

log = logging.getLogger("inilaunch")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inilaunch",
        description="Start an application as described by an INI file",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--no-splash",
        action="store_true",
        help="Do not show the splash window or error dialogs",
    )
    parser.add_argument("config", nargs="?", help="Path to the launch INI file")
    return parser


def report_error(message: str, dialog: bool) -> None:
    print(f"Error: {message}", file=sys.stderr)
    if dialog:
        show_error_dialog(message)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(name)s %(levelname)s: %(message)s",
    )
    dialog = not args.no_splash

    if not args.config:
        report_error("No configuration file given", dialog)
        return EXIT_FAILURE

    try:
        report = launch(args.config, show_splash=dialog)
    except LaunchError as e:
        log.debug("launch failed", exc_info=True)
        report_error(str(e), dialog)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return EXIT_INTERRUPTED

    for warning in report.warnings:
        print(f"Warning: {warning}", file=sys.stderr)
    return EXIT_OK


def entrypoint() -> None:
    raise SystemExit(main())
