"""pylon dispatcher.

A single entry point (``pylon``) that forwards to the per-service CLIs by
name, e.g. ``pylon cal feed list`` or ``pylon discord read --count 5``.
"""

from __future__ import annotations

import sys
from importlib import import_module
from typing import Callable, Dict, List

from . import __version__

# Map service names to their CLI modules (each exposes a main() entry).
APP_MODULES: Dict[str, str] = {
    "cal": "cal.cli",
    "discord": "discord_chat.cli",
    "config": "core.config_cli",
}

USAGE = """\
pylon - interact with deployed infrastructure

Usage:
  pylon <service> <command> [flags]

Services:
  cal         Calendar subscription service
  discord     Discord messaging and channel access
  config      Show resolved configuration

Other:
  version     Show version
  help        Show this help

Configuration:
  ~/.pylonrc            INI-style config file (optional, see $PYLON_CONFIG)
  PYLON_* env vars      Override config file values

Run 'pylon <service> --help' for service-specific commands.
"""


def _load_app_main(app: str) -> Callable[[List[str]], int]:
    module_path = APP_MODULES.get(app)
    if not module_path:
        raise KeyError(app)
    try:
        module = import_module(module_path)
    except ImportError as exc:  # pragma: no cover - surfaced to caller
        raise RuntimeError(f"Failed to load '{app}': {exc}") from exc
    main = getattr(module, "main", None)
    if not callable(main):
        raise RuntimeError(f"'{app}' missing main()")
    return main


def main(argv: List[str] | None = None) -> int:
    args = list(argv) if argv is not None else sys.argv[1:]
    if not args or args[0] in {"help", "-h", "--help"}:
        out = sys.stdout if args else sys.stderr
        print(USAGE, end="", file=out)
        return 0 if args else 2
    if args[0] in {"version", "--version"}:
        print(f"pylon {__version__}")
        return 0

    app, app_args = args[0], args[1:]
    try:
        app_main = _load_app_main(app)
    except KeyError:
        print(f"unknown command: {app}\n", file=sys.stderr)
        print(USAGE, end="", file=sys.stderr)
        return 2
    except RuntimeError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    return int(app_main(app_args))


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
