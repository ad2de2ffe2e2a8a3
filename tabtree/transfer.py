"""
Moving command trees in and out of the store, either as interchange documents of the
form {"command": {...}} or by copying between sqlite databases.

Importing a command always replaces any stored root command with the same name.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from .config.file import read_document
from .exceptions import CommandDefinitionError, TabTreeException
from .model import Command
from .store import CommandStore

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .io import TabTreeIO

DOCUMENT_FORMATS = {"json": ".json", "yaml": ".yaml", "toml": ".toml"}
EXPORT_FORMATS = ("sqlite", "json", "yaml")

# seconds
DOWNLOAD_TIMEOUT = 30


def import_document(store: CommandStore, path: Path) -> Command:
    content = read_document(path)
    data = content.get("command")
    if not isinstance(data, Mapping):
        raise CommandDefinitionError(
            "Expected a 'command' table at the top level", filename=str(path)
        )
    try:
        command = Command.from_dict(data)
    except CommandDefinitionError as error:
        error.filename = str(path)
        raise

    replace_commands(store, [command])
    return command


def import_url(
    store: CommandStore, url: str, fmt: str = "json", timeout: float = DOWNLOAD_TIMEOUT
) -> Command:
    """
    Download a document and import it. The format can't be inferred from a url so it
    must be given.
    """
    import tempfile
    from urllib.request import urlopen

    if fmt not in DOCUMENT_FORMATS:
        raise TabTreeException(
            "Import from url must use a document format: "
            + ", ".join(DOCUMENT_FORMATS)
        )

    with tempfile.TemporaryDirectory() as temp_dir:
        download_path = Path(temp_dir, "command" + DOCUMENT_FORMATS[fmt])
        try:
            with urlopen(url, timeout=timeout) as response:
                download_path.write_bytes(response.read())
        except (OSError, ValueError) as error:
            raise TabTreeException(f"Couldn't download {url}", error) from error

        return import_document(store, download_path)


def import_sqlite(
    store: CommandStore, path: Path, io: TabTreeIO | None = None
) -> list[Command]:
    """
    Copy every root command from another tabtree database.
    """
    if not path.is_file():
        raise TabTreeException(f"No database found at {path}")

    with CommandStore(path, io=io) as source:
        source.ensure_schema(create=False)
        commands = []
        for name in source.query_root_command_names():
            command = source.query_command(name)
            if command is not None:
                commands.append(command)

    replace_commands(store, commands)
    return commands


def replace_commands(store: CommandStore, commands: Sequence[Command]):
    with store.transaction():
        for command in commands:
            store.delete_command(command.name)
            store.insert_command(command)


def export_document(store: CommandStore, name: str, path: Path, fmt: str = "json"):
    if fmt not in EXPORT_FORMATS or fmt == "sqlite":
        raise TabTreeException(
            f"Unsupported document format {fmt!r} for export, expected json or yaml"
        )

    document = {"command": load_command(store, name).to_dict()}

    try:
        with path.open("w", encoding="utf-8") as file:
            if fmt == "json":
                import json

                json.dump(document, file, indent=2)
                file.write("\n")
            else:
                import yaml

                yaml.safe_dump(document, file, sort_keys=False)
    except OSError as error:
        raise TabTreeException(f"Couldn't write file at {path}", error) from error


def export_sqlite(
    store: CommandStore, name: str, path: Path, io: TabTreeIO | None = None
):
    """
    Write the named command tree to a new database, replacing any existing file.
    """
    if path.resolve() == store.path.resolve():
        raise TabTreeException(f"Can't export into the database in use at {path}")
    command = load_command(store, name)

    if path.exists():
        path.unlink()

    with CommandStore(path, io=io) as destination:
        destination.create_schema()
        with destination.transaction():
            destination.insert_command(command)


def load_command(store: CommandStore, name: str) -> Command:
    command = store.query_command(name)
    if command is None:
        raise TabTreeException(f"Unrecognised command {name!r}")
    return command
