from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from ..exceptions import SchemaVersionError, StoreError
from ..model import ArgType, Command, CommandAlias, CommandArg, CommandOpt
from . import schema

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ..io import TabTreeIO


class CommandStore:
    """
    sqlite persistence for command trees.

    Usable as a context manager which opens the connection on entry and closes it on
    exit. Writes should be grouped with transaction().
    """

    path: Path
    _conn: sqlite3.Connection | None = None

    def __init__(self, path: Path | str, io: TabTreeIO | None = None):
        self.path = Path(path)
        if io:
            self._io = io
        else:
            from ..io import TabTreeIO

            self._io = TabTreeIO.get_default_io()

    def __enter__(self) -> CommandStore:
        self.open()
        return self

    def __exit__(self, *exc_info):
        self.close()

    def open(self):
        self._io.print_debug("Opening command store at %s", self.path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.path, isolation_level=None)
        except (OSError, sqlite3.Error) as error:
            raise StoreError(f"Couldn't open database at {self.path}", error) from error
        try:
            conn.execute("PRAGMA journal_mode = WAL;")
            conn.execute("PRAGMA foreign_keys = 1;")
        except sqlite3.Error as error:
            conn.close()
            raise StoreError(
                f"Couldn't configure database at {self.path}", error
            ) from error
        self._conn = conn

    def close(self):
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreError(f"Database at {self.path} is not open")
        return self._conn

    @contextmanager
    def transaction(self) -> Iterator[CommandStore]:
        conn = self.conn
        conn.execute("BEGIN")
        try:
            yield self
        except BaseException:
            conn.execute("ROLLBACK")
            raise
        with self._wrap_errors(f"Couldn't commit changes to {self.path}"):
            try:
                conn.execute("COMMIT")
            except sqlite3.Error:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise

    @property
    def schema_version(self) -> int:
        with self._wrap_errors("Couldn't read schema version"):
            return self.conn.execute("PRAGMA user_version;").fetchone()[0]

    def create_schema(self):
        with self._wrap_errors("Couldn't create database schema"):
            for statements in (
                schema.CREATE_COMMAND,
                schema.CREATE_COMMAND_ALIAS,
                schema.CREATE_COMMAND_ARG,
                schema.CREATE_COMMAND_OPT,
            ):
                self.conn.executescript(statements)
            self.conn.execute(f"PRAGMA user_version = {schema.SCHEMA_VERSION};")

    def ensure_schema(self, create: bool = True):
        """
        Create the schema for a new database, and refuse to work with a database
        created for a different schema version.
        """
        version = self.schema_version
        if version == 0 and create:
            self._io.print_debug("Creating schema in %s", self.path)
            self.create_schema()
            version = self.schema_version
        if version != schema.SCHEMA_VERSION:
            raise SchemaVersionError(
                f"Schema version mismatch for database at {self.path}: found "
                f"{version}, expected {schema.SCHEMA_VERSION}"
            )

    def query_command(self, name: str) -> Command | None:
        """
        Load the root command with the given name or alias, along with all of its
        descendants.
        """
        with self._wrap_errors(f"Couldn't load command {name!r}"):
            row = self.conn.execute(schema.READ_ROOT_COMMAND, (name,)).fetchone()
            if row is None:
                return None
            return self._load_command(*row)

    def query_root_command_names(self) -> list[str]:
        with self._wrap_errors("Couldn't list commands"):
            return [
                row[0] for row in self.conn.execute(schema.READ_ROOT_COMMAND_NAMES)
            ]

    def insert_command(self, command: Command):
        with self._wrap_errors(f"Couldn't store command {command.name!r}"):
            self._insert_command(command)

    def delete_command(self, name: str) -> bool:
        """
        Delete a root command and, by cascade, everything beneath it. Returns
        whether there was anything to delete.
        """
        with self._wrap_errors(f"Couldn't delete command {name!r}"):
            cursor = self.conn.execute(schema.DELETE_ROOT_COMMAND, (name,))
            return cursor.rowcount > 0

    def _load_command(self, uuid: str, name: str, parent_uuid: str | None) -> Command:
        conn = self.conn
        return Command(
            uuid=uuid,
            name=name,
            parent_uuid=parent_uuid,
            aliases=[
                CommandAlias(*row) for row in conn.execute(schema.READ_ALIASES, (uuid,))
            ],
            sub_commands=[
                self._load_command(*row)
                for row in conn.execute(schema.READ_SUB_COMMANDS, (uuid,)).fetchall()
            ],
            args=[
                self._load_arg(*row)
                for row in conn.execute(schema.READ_ARGS, (uuid,)).fetchall()
            ],
        )

    def _load_arg(
        self,
        uuid: str,
        cmd_uuid: str,
        arg_type: str,
        description: str,
        long_name: str | None,
        short_name: str | None,
    ) -> CommandArg:
        return CommandArg(
            uuid=uuid,
            cmd_uuid=cmd_uuid,
            arg_type=ArgType.parse(arg_type),
            description=description,
            long_name=long_name or "",
            short_name=short_name or "",
            opts=[
                CommandOpt(*row) for row in self.conn.execute(schema.READ_OPTS, (uuid,))
            ],
        )

    def _insert_command(self, command: Command):
        conn = self.conn
        conn.execute(
            schema.WRITE_COMMAND, (command.uuid, command.name, command.parent_uuid)
        )
        for alias in command.aliases:
            conn.execute(schema.WRITE_ALIAS, (alias.uuid, command.uuid, alias.name))
        for arg in command.args:
            conn.execute(
                schema.WRITE_ARG,
                (
                    arg.uuid,
                    command.uuid,
                    arg.arg_type.value,
                    arg.description,
                    arg.long_name or None,
                    arg.short_name or None,
                ),
            )
            for opt in arg.opts:
                conn.execute(schema.WRITE_OPT, (opt.uuid, arg.uuid, opt.name))
        for sub_command in command.sub_commands:
            self._insert_command(sub_command)

    @contextmanager
    def _wrap_errors(self, message: str):
        try:
            yield
        except sqlite3.Error as error:
            raise StoreError(message, error) from error
