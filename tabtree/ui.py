import sys
from collections.abc import Sequence
from contextlib import redirect_stderr
from typing import TYPE_CHECKING

from .__version__ import __version__
from .exceptions import TabTreeException
from .io import TabTreeIO, guess_ansi_support

if TYPE_CHECKING:
    from argparse import ArgumentParser, Namespace


STDOUT_ANSI_SUPPORT = guess_ansi_support(sys.stdout)


class TabTreeUi:
    args: "Namespace"

    def __init__(self, io: TabTreeIO, program_name: str = "tabtree"):
        self.io = io
        self.program_name = program_name

    def __getitem__(self, key: str):
        """Provide easy access to arguments"""
        return getattr(self.args, key, None)

    def build_parser(self) -> "ArgumentParser":
        import argparse

        parser = argparse.ArgumentParser(
            prog=self.program_name,
            description="TabTree: shell tab completion from a stored command tree",
            add_help=False,
            allow_abbrev=False,
        )

        parser.add_argument(
            "-h",
            "--help",
            dest="help",
            action="store_true",
            default=False,
            help="Show this help page and exit",
        )

        parser.add_argument(
            "--version",
            dest="version",
            action="store_true",
            default=False,
            help="Print the version and exit",
        )

        parser.add_argument(
            "-v",
            "--verbose",
            dest="increase_verbosity",
            action="count",
            default=0,
            help="Increase output (repeatable)",
        )

        parser.add_argument(
            "-q",
            "--quiet",
            dest="decrease_verbosity",
            action="count",
            default=0,
            help="Decrease output (repeatable)",
        )

        parser.add_argument(
            "-c",
            "--config",
            dest="config_path",
            metavar="PATH",
            type=str,
            default=None,
            help="Load settings from the given config file",
        )

        parser.add_argument(
            "--db",
            dest="database",
            metavar="PATH",
            type=str,
            default=None,
            help="Use the command database at the given path",
        )

        action_group = parser.add_mutually_exclusive_group()
        action_group.add_argument(
            "--import",
            dest="import_",
            action="store_true",
            default=False,
            help="Import commands from --filename or --url",
        )
        action_group.add_argument(
            "--export",
            dest="export",
            metavar="COMMAND",
            type=str,
            default=None,
            help="Export a command to --filename",
        )
        action_group.add_argument(
            "--list",
            dest="list",
            action="store_true",
            default=False,
            help="List the stored commands",
        )
        action_group.add_argument(
            "--show",
            dest="show",
            metavar="COMMAND",
            type=str,
            default=None,
            help="Print the stored tree for a command",
        )
        action_group.add_argument(
            "--delete",
            dest="delete",
            metavar="COMMAND",
            type=str,
            default=None,
            help="Delete a command and everything beneath it",
        )

        parser.add_argument(
            "--format",
            dest="format",
            choices=("sqlite", "json", "yaml", "toml"),
            default="sqlite",
            help="File format for import and export (default: sqlite)",
        )

        parser.add_argument(
            "--filename",
            dest="filename",
            metavar="PATH",
            type=str,
            default=None,
            help="File to import from or export to",
        )

        parser.add_argument(
            "--url",
            dest="url",
            metavar="URL",
            type=str,
            default=None,
            help="URL of a document to import",
        )

        ansi_group = parser.add_mutually_exclusive_group()
        ansi_group.add_argument(
            "--ansi",
            dest="ansi",
            action="store_true",
            default=STDOUT_ANSI_SUPPORT,
            help="Force enable ANSI output",
        )
        ansi_group.add_argument(
            "--no-ansi",
            dest="ansi",
            action="store_false",
            default=STDOUT_ANSI_SUPPORT,
            help="Force disable ANSI output",
        )

        return parser

    def parse_args(self, cli_args: Sequence[str]):
        self.parser = self.build_parser()

        # argparse reports usage errors on stderr before exiting
        with redirect_stderr(self.io.error_output):
            self.args = self.parser.parse_args(cli_args)

        self.io.configure(
            ansi_enabled=self.args.ansi,
            offset=self.args.increase_verbosity - self.args.decrease_verbosity,
        )

    def print_help(
        self,
        commands: Sequence[str] | None = None,
        info: str | None = None,
        error: TabTreeException | None = None,
    ):
        """
        Print the help page. At reduced verbosity only the result, any error and the
        stored commands remain.
        """
        verbosity = 0 if self["help"] else self.io.verbosity
        full = verbosity >= 0

        sections: list[str] = []
        if full:
            sections.append(f"<h2>TabTree</h2> (version <em>{__version__}</em>)")
        if info and verbosity >= -2:
            sections.append(f"<em2>Result: {info}</em2>")
        if error and verbosity >= -2:
            sections.append("\n".join(self._format_tabtree_error(error)))
        if full:
            sections.append(self._usage_section())
            sections.append(self._options_section())
        if commands is not None and verbosity >= -1:
            sections.append(self._commands_section(commands))
        if error and self.io.is_debug_enabled():
            sections.append(_format_traceback(error))

        self.io.print(
            "\n\n".join(sections) + ("\n" if full else ""), message_verbosity=-2
        )

    def _usage_section(self) -> str:
        program = f"<u>{self.program_name}</u>"
        return "\n".join(
            (
                "<h2>Usage:</h2>",
                f"  {program} [options]",
                f"  {program} _complete",
                f"  {program} _bash_completion [command ...]",
            )
        )

    def _options_section(self) -> str:
        # Reuse argparse's formatting for the option listing only
        formatter = self.parser.formatter_class(prog=self.parser.prog)
        options = self.parser._action_groups[1]
        formatter.start_section(options.title)
        formatter.add_arguments(options._group_actions)
        formatter.end_section()
        listing = formatter.format_help().split("\n")[1:]
        return "\n".join(("<h2>Options:</h2>", *listing)).rstrip("\n")

    @staticmethod
    def _commands_section(commands: Sequence[str]) -> str:
        if not commands:
            return "<h2-dim>NO COMMANDS STORED</h2-dim>"
        return "\n".join(
            ("<h2>Stored commands:</h2>", *(f"  <em>{name}</em>" for name in commands))
        )

    def _format_tabtree_error(self, error: TabTreeException) -> list[str]:
        lines = [error.context] if error.context else []
        lines.extend(error.msg.split("\n"))
        if error.cause:
            lines.append(f"From: {error.cause}")
        elif error.__cause__ is not None:
            lines.append(f"From: {error.__cause__!r}")

        first, *rest = lines
        return [
            f"<error>Error: {first}</error>",
            *(f"<error>     | {line}</error>" for line in rest),
        ]

    def print_error(self, error: TabTreeException):
        for line in self._format_tabtree_error(error):
            self.io.print_error(line)
        self.io.print_debug(_format_traceback(error))

    def print_version(self):
        if self.io.verbosity >= 0:
            self.io.print(
                f"TabTree - version: <em>{__version__}</em>\n", message_verbosity=-2
            )
        else:
            self.io.print(f"{__version__}\n", message_verbosity=-2)


def _format_traceback(error: BaseException) -> str:
    import traceback

    return "".join(
        traceback.format_exception(type(error), error, error.__traceback__)
    ).strip()
