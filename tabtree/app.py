from __future__ import annotations

import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any

from .exceptions import TabTreeException

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, Sequence

    from .completion.input import CompletionInput
    from .completion.recommend import Recommendations
    from .config import TabTreeConfig
    from .io import TabTreeIO
    from .store import CommandStore
    from .ui import TabTreeUi


class TabTree:
    """
    :param config:
        Either a dictionary of settings, or a
        `TabTreeConfig <tabtree/config/config.py>`_ object to use instead of, or in
        addition to, loading settings from a config file.
    :type config: dict | TabTreeConfig, optional

    :param output:
        A stream for the application to write its own output to, defaults to
        sys.stdout
    :type output: IO, optional

    :param program_name:
        The name of the program that is being run. This is used in help messages and
        in generated completion scripts, defaults to "tabtree"
    :type program_name: str, optional

    :param env:
        Optionally provide an alternative environment to read the completion request
        and settings overrides from. If no mapping is provided then ``os.environ`` is
        used.
    :type env: dict, optional
    """

    ui: TabTreeUi
    config: TabTreeConfig

    def __init__(
        self,
        config: Mapping[str, Any] | TabTreeConfig | None = None,
        output: TabTreeIO | IO = sys.stdout,
        program_name: str = "tabtree",
        env: Mapping[str, str] | None = None,
    ):
        from .config import TabTreeConfig
        from .io import TabTreeIO
        from .ui import TabTreeUi

        self._env = env if env is not None else os.environ

        self.io = (
            TabTreeIO(parent=output, make_default=True)
            if isinstance(output, TabTreeIO)
            else TabTreeIO(output=output, error=output, make_default=True)
        )

        if isinstance(config, TabTreeConfig):
            self.config = config
            self.config._io = self.io
        else:
            self.config = TabTreeConfig(table=config, env=self._env, io=self.io)
        self.io.configure(baseline=self.config.verbosity)

        self.ui = TabTreeUi(io=self.io, program_name=program_name)
        self.program_name = program_name

    def __call__(self, cli_args: Sequence[str]) -> int:
        """
        :param cli_args:
            A sequence of command line arguments (i.e. sys.argv[1:])
        """

        self.ui.parse_args(cli_args)

        if self.ui["version"]:
            self.ui.print_version()
            return 0

        try:
            self.load_config(self.ui["config_path"])
            if self.ui["database"]:
                self.config.set_database(self.ui["database"])
        except TabTreeException as error:
            if self.ui["help"]:
                self.print_help()
                return 0
            self.print_help(error=error)
            return 1

        if self.ui["help"]:
            self.print_help()
            return 0

        try:
            return self._run_action()
        except TabTreeException as error:
            self.ui.print_error(error)
            return 1

    def load_config(self, target_path: str | None = None):
        # An explicitly requested config file must exist
        self.config.load(target_path, strict=target_path is not None)
        self.io.configure(baseline=self.config.verbosity)

    def _run_action(self) -> int:
        if self.ui["import_"]:
            return self._import()
        if self.ui["export"]:
            return self._export(self.ui["export"])
        if self.ui["list"]:
            for name in self.list_commands():
                self.io.print(name, message_verbosity=-1)
            return 0
        if self.ui["show"]:
            from .transfer import load_command

            with self.open_store() as store:
                command = load_command(store, self.ui["show"])
            self.io.print(command.pretty(), message_verbosity=-1)
            return 0
        if self.ui["delete"]:
            return self._delete(self.ui["delete"])

        self.print_help(info="No action specified.")
        return 1

    def _import(self) -> int:
        from .transfer import import_document, import_sqlite, import_url

        filename, url, fmt = self.ui["filename"], self.ui["url"], self.ui["format"]
        if not filename and not url:
            raise TabTreeException(
                "Import requires a value for either --filename or --url"
            )

        with self.open_store() as store:
            if filename:
                path = Path(filename)
                if fmt == "sqlite":
                    commands = import_sqlite(store, path, io=self.io)
                else:
                    commands = [import_document(store, path)]
            else:
                if fmt == "sqlite":
                    raise TabTreeException(
                        "Import from url requires --format json, yaml or toml"
                    )
                commands = [import_url(store, url, fmt)]

        for command in commands:
            self.io.print(f"Imported command <em>{command.name}</em>")
        return 0

    def _export(self, command_name: str) -> int:
        from .transfer import export_document, export_sqlite

        filename, fmt = self.ui["filename"], self.ui["format"]
        if not filename:
            raise TabTreeException("Export requires a value for --filename")

        with self.open_store() as store:
            if fmt == "sqlite":
                export_sqlite(store, command_name, Path(filename), io=self.io)
            else:
                export_document(store, command_name, Path(filename), fmt)

        self.io.print(f"Exported command <em>{command_name}</em> to {filename}")
        return 0

    def _delete(self, command_name: str) -> int:
        with self.open_store() as store, store.transaction():
            if not store.delete_command(command_name):
                raise TabTreeException(f"Unrecognised command {command_name!r}")
        self.io.print(f"Deleted command <em>{command_name}</em>")
        return 0

    @contextmanager
    def open_store(self) -> Iterator[CommandStore]:
        from .store import CommandStore

        with CommandStore(self.config.database_path, io=self.io) as store:
            store.ensure_schema()
            yield store

    def list_commands(self) -> list[str]:
        with self.open_store() as store:
            return store.query_root_command_names()

    def run_completion(self) -> int:
        """
        Answer a bash completion request described by COMP_LINE and COMP_POINT,
        printing one candidate per line.
        """
        from .completion.input import CompletionInput

        try:
            self.load_config()
            completion_input = CompletionInput.from_env(
                self._env, self.config.max_line_size
            )
            recommendations = self.complete_input(completion_input)
        except TabTreeException as error:
            self.ui.print_error(error)
            return 1

        self.io.write_candidates(recommendations.candidates)
        return 0

    def complete(self, line: str, cursor_position: int) -> Recommendations:
        from .completion.input import CompletionInput

        return self.complete_input(
            CompletionInput.from_line(
                line, cursor_position, self.config.max_line_size
            )
        )

    def complete_input(self, completion_input: CompletionInput) -> Recommendations:
        from .completion.prune import prune
        from .completion.recommend import recommend

        command_name = completion_input.command_name
        if command_name is None:
            raise TabTreeException("No command in input")

        self.io.print_debug("input: %r", completion_input.line)
        self.io.print_debug("command: %r", command_name)
        self.io.print_debug("current word: %r", completion_input.current_word)
        self.io.print_debug("previous word: %r", completion_input.previous_word)

        with self.open_store() as store:
            tree = store.query_command(command_name)
        if tree is None:
            raise TabTreeException(f"Unrecognised command {command_name!r}")

        self.io.print_debug("Command tree (stored)\n%s", tree.pretty())
        prune(tree, completion_input.words)
        self.io.print_debug("Command tree (pruned)\n%s", tree.pretty())

        recommendations = recommend(tree, completion_input.current_word)
        self.io.print_debug(
            "Recommendations (%s)",
            "required" if recommendations.required else "optional",
        )
        return recommendations

    def print_help(
        self,
        info: str | None = None,
        error: str | TabTreeException | None = None,
    ):
        if isinstance(error, str):
            error = TabTreeException(error)

        commands = None
        if self.config.database_path.exists():
            try:
                commands = self.list_commands()
            except TabTreeException as list_error:
                self.io.print_debug("Couldn't list stored commands: %s", list_error.msg)

        self.ui.print_help(commands=commands, info=info, error=error)
