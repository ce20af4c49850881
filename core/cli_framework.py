"""CLI application framework.

Provides a declarative way to build CLI applications with:
- Command registration via decorators
- Automatic argument parsing
- Consistent error handling and exit codes
- Output formatting
- Common arguments (--verbose, --quiet, --output, --config, --log)
"""
from __future__ import annotations

import argparse
import logging
import sys
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from .applog import AppLogger
from .cli_errors import CLIError, ExitCode, handle_error
from .cli_output import OutputConfig, OutputFormat, OutputWriter

CommandFunc = Callable[[argparse.Namespace], int]

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class Argument:
    """Definition of a CLI argument."""
    name_or_flags: tuple
    kwargs: Dict[str, Any] = field(default_factory=dict)


@dataclass
class CommandDef:
    """Definition of a CLI command."""
    name: str
    func: CommandFunc
    help: str = ""
    description: str = ""
    arguments: List[Argument] = field(default_factory=list)
    aliases: List[str] = field(default_factory=list)


def configure_logging(verbose: bool = False) -> None:
    """Send DEBUG logs to stderr when verbose, else only warnings."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )


class CLIApp:
    """CLI application built from decorated command functions.

    Example usage:
        app = CLIApp("reading-list", "Reading list scheduler")

        @app.command("next", help="Show next occurrences")
        @app.argument("--from", dest="from_date", help="Reference date")
        def cmd_next(args):
            ...
            return 0

        if __name__ == "__main__":
            app.main()
    """

    def __init__(
        self,
        name: str,
        description: str = "",
        *,
        version: Optional[str] = None,
        epilog: Optional[str] = None,
        add_common_args: bool = True,
    ):
        self.name = name
        self.description = description
        self.version = version
        self.epilog = epilog
        self.add_common_args = add_common_args

        self._commands: Dict[str, CommandDef] = {}
        self._parser: Optional[argparse.ArgumentParser] = None
        self._pending_arguments: List[Argument] = []

    def command(
        self,
        name: str,
        *,
        help: str = "",
        description: str = "",
        aliases: Optional[List[str]] = None,
    ) -> Callable[[CommandFunc], CommandFunc]:
        """Decorator to register a command.

        Args:
            name: Command name.
            help: Short help text for the command.
            description: Longer description for command help.
            aliases: Alternative names for the command.
        """
        def decorator(func: CommandFunc) -> CommandFunc:
            # @argument decorators run first (bottom-up), so they are pending here
            arguments = list(reversed(self._pending_arguments))
            self._pending_arguments.clear()
            self._commands[name] = CommandDef(
                name=name,
                func=func,
                help=help,
                description=description or help,
                arguments=arguments,
                aliases=aliases or [],
            )
            return func
        return decorator

    def argument(self, *name_or_flags: str, **kwargs: Any) -> Callable[[CommandFunc], CommandFunc]:
        """Decorator to add an argument to the next command.

        Must be used BELOW the @command decorator (decorators apply bottom-up).
        """
        def decorator(func: CommandFunc) -> CommandFunc:
            self._pending_arguments.append(Argument(name_or_flags, kwargs))
            return func
        return decorator

    @property
    def commands(self) -> Dict[str, CommandDef]:
        return dict(self._commands)

    def build_parser(self) -> argparse.ArgumentParser:
        """Build the argument parser."""
        parser = argparse.ArgumentParser(
            prog=self.name,
            description=self.description,
            epilog=self.epilog,
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        if self.version:
            parser.add_argument(
                "--version", "-V",
                action="version",
                version=f"%(prog)s {self.version}",
            )

        if self.add_common_args:
            self._add_common_arguments(parser)

        if self._commands:
            subparsers = parser.add_subparsers(dest="command", metavar="<command>")
            for cmd_def in self._commands.values():
                cmd_parser = subparsers.add_parser(
                    cmd_def.name,
                    help=cmd_def.help,
                    description=cmd_def.description,
                    aliases=cmd_def.aliases,
                )
                for arg in cmd_def.arguments:
                    cmd_parser.add_argument(*arg.name_or_flags, **arg.kwargs)
                cmd_parser.set_defaults(_cmd_func=cmd_def.func)

        self._parser = parser
        return parser

    def _add_common_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Enable verbose output and debug logging",
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output",
        )
        parser.add_argument(
            "--output", "-o",
            choices=[f.value for f in OutputFormat],
            default="text",
            help="Output format (default: text)",
        )
        parser.add_argument(
            "--config",
            help="Config YAML path (default: search standard locations)",
        )
        parser.add_argument(
            "--log",
            dest="log_path",
            help="Append JSON-lines command log to this file",
        )

    def run(self, argv: Optional[Sequence[str]] = None) -> int:
        """Run the CLI application.

        Args:
            argv: Command-line arguments (defaults to sys.argv[1:]).

        Returns:
            Exit code.
        """
        parser = self._parser or self.build_parser()
        args = parser.parse_args(argv)

        verbose = bool(getattr(args, "verbose", False))
        configure_logging(verbose)
        args._output = OutputWriter(OutputConfig(
            format=OutputFormat(getattr(args, "output", "text")),
            verbose=verbose,
            quiet=bool(getattr(args, "quiet", False)),
        ))

        cmd_func = getattr(args, "_cmd_func", None)
        if cmd_func is None:
            parser.print_help()
            return int(ExitCode.USAGE)

        applog = AppLogger(args.log_path) if getattr(args, "log_path", None) else None
        session = applog.start(getattr(args, "command", "") or "", list(argv) if argv is not None else sys.argv[1:]) if applog else None
        started = time.monotonic()
        status, error = "ok", None
        try:
            code = int(cmd_func(args))
            if code != 0:
                status = "error"
            return code
        except CLIError as e:
            status, error = "error", str(e)
            return handle_error(e, verbose=verbose)
        except KeyboardInterrupt as e:
            status = "interrupted"
            return handle_error(e, verbose=verbose)
        except Exception as e:
            status, error = "error", str(e)
            return handle_error(e, verbose=verbose)
        finally:
            if applog and session:
                elapsed = int((time.monotonic() - started) * 1000)
                applog.end(session, status=status, duration_ms=elapsed, error=error)

    def main(self, argv: Optional[Sequence[str]] = None) -> None:
        """Run the CLI and exit with the return code."""
        sys.exit(self.run(argv))
