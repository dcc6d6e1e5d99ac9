"""Declarative argparse wrapper shared by the pylon service CLIs.

Commands are plain functions registered with decorators. Each one receives the
parsed namespace, with an :class:`OutputWriter` on ``args._output``, and
returns an exit code. A CLIError raised by a command becomes a one-line
message on stderr plus that error's exit code.

Example::

    app = CLIApp("pylon cal", "Calendar service commands")
    feed = app.group("feed", help="Manage feeds")

    @feed.command("list", help="List feeds", aliases=["ls"])
    @feed.argument("--limit", type=int)
    def cmd_feed_list(args):
        ...
        return 0
"""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from .cli_errors import ExitCode, handle_error
from .cli_output import OutputConfig, OutputFormat, OutputWriter

Handler = Callable[[argparse.Namespace], int]

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class Option:
    """One ``add_argument`` call, recorded until the parser is built."""
    flags: tuple
    kwargs: Dict[str, Any] = field(default_factory=dict)

    def add_to(self, parser: argparse.ArgumentParser, suppress: bool = False) -> None:
        kwargs = dict(self.kwargs)
        if suppress:
            kwargs["default"] = argparse.SUPPRESS
        parser.add_argument(*self.flags, **kwargs)


@dataclass
class Command:
    name: str
    handler: Handler
    help: str = ""
    aliases: List[str] = field(default_factory=list)
    options: List[Option] = field(default_factory=list)


COMMON_OPTIONS = [
    Option(("--config",), {"help": "Path to config file (default: ~/.pylonrc or $PYLON_CONFIG)"}),
    Option(("--verbose", "-v"), {"action": "store_true", "help": "Log HTTP requests to stderr"}),
    Option(("--quiet", "-q"), {"action": "store_true", "help": "Suppress non-essential output"}),
    Option(
        ("--output", "-o"),
        {
            "choices": [f.value for f in OutputFormat],
            "default": OutputFormat.TEXT.value,
            "help": "Output format (default: text)",
        },
    ),
]


def configure_logging(verbose: bool) -> None:
    """Send DEBUG logs to stderr when verbose, otherwise warnings only."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


class CommandGroup:
    """A named set of subcommands, e.g. ``feed`` in ``pylon cal feed list``."""

    def __init__(self, app: "CLIApp", name: str, help: str = ""):
        self.app = app
        self.name = name
        self.help = help
        self.commands: Dict[str, Command] = {}

    def command(self, name: str, *, help: str = "", aliases: Optional[List[str]] = None):
        return self.app._register(self.commands, name, help, aliases)

    def argument(self, *flags: str, **kwargs: Any):
        return self.app.argument(*flags, **kwargs)


class CLIApp:
    """A service CLI: top-level commands, command groups and shared flags.

    Every parser level accepts the common flags (``--config``, ``--verbose``,
    ``--quiet``, ``--output``) and any :meth:`global_argument`, so they work
    before or after the subcommand name.
    """

    def __init__(self, name: str, description: str = "", *, epilog: Optional[str] = None):
        self.name = name
        self.description = description
        self.epilog = epilog
        self.commands: Dict[str, Command] = {}
        self.groups: Dict[str, CommandGroup] = {}
        self.global_options: List[Option] = []
        self._pending: List[Option] = []

    def command(self, name: str, *, help: str = "", aliases: Optional[List[str]] = None):
        """Register a top-level command; put @argument decorators below it."""
        return self._register(self.commands, name, help, aliases)

    def argument(self, *flags: str, **kwargs: Any):
        """Add an option to the command registered just above this decorator."""
        def decorator(func: Handler) -> Handler:
            self._pending.append(Option(flags, kwargs))
            return func
        return decorator

    def global_argument(self, *flags: str, **kwargs: Any) -> None:
        """Add an option accepted by every command, e.g. ``--url``."""
        self.global_options.append(Option(flags, kwargs))

    def group(self, name: str, *, help: str = "") -> CommandGroup:
        if name not in self.groups:
            self.groups[name] = CommandGroup(self, name, help=help)
        return self.groups[name]

    def _register(self, table: Dict[str, Command], name: str, help: str, aliases: Optional[List[str]]):
        def decorator(func: Handler) -> Handler:
            # argument decorators ran first, innermost (last listed) first
            options = self._pending[::-1]
            self._pending = []
            table[name] = Command(name, func, help, list(aliases or []), options)
            return func
        return decorator

    def _add_shared(self, parser: argparse.ArgumentParser, suppress: bool) -> None:
        # Subparsers suppress defaults so they never reset a flag given earlier
        for opt in COMMON_OPTIONS + self.global_options:
            opt.add_to(parser, suppress=suppress)

    def _add_command(self, subparsers, cmd: Command) -> None:
        parser = subparsers.add_parser(cmd.name, help=cmd.help, description=cmd.help, aliases=cmd.aliases)
        self._add_shared(parser, suppress=True)
        for opt in cmd.options:
            opt.add_to(parser)
        parser.set_defaults(_handler=cmd.handler)

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog=self.name,
            description=self.description,
            epilog=self.epilog,
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self._add_shared(parser, suppress=False)
        subparsers = parser.add_subparsers(dest="command", metavar="<command>")
        for group in self.groups.values():
            group_parser = subparsers.add_parser(group.name, help=group.help, description=group.help)
            self._add_shared(group_parser, suppress=True)
            group_subparsers = group_parser.add_subparsers(dest=f"{group.name}_cmd", metavar="<subcommand>")
            for cmd in group.commands.values():
                self._add_command(group_subparsers, cmd)
        for cmd in self.commands.values():
            self._add_command(subparsers, cmd)
        return parser

    def run(self, argv: Optional[Sequence[str]] = None) -> int:
        """Parse ``argv``, run the selected command and return its exit code.

        Returns USAGE (after printing help) when no command was selected.
        Argument errors exit through argparse with status 2.
        """
        parser = self.build_parser()
        args = parser.parse_args(argv)
        configure_logging(args.verbose)
        args._output = OutputWriter(
            OutputConfig(format=OutputFormat(args.output), verbose=args.verbose, quiet=args.quiet)
        )

        handler = getattr(args, "_handler", None)
        if handler is None:
            parser.print_help(sys.stderr)
            return ExitCode.USAGE
        try:
            return int(handler(args))
        except (Exception, KeyboardInterrupt) as exc:
            return handle_error(exc, verbose=args.verbose)
