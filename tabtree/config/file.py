from collections.abc import Callable, Iterator, Mapping, Sequence
from pathlib import Path
from typing import IO, Any

from ..exceptions import TabTreeException

DOCUMENT_SUFFIXES = (".toml", ".json", ".yaml", ".yml")


def _parse_json(file: IO[bytes]) -> Any:
    import json

    return json.load(file)


def _parse_yaml(file: IO[bytes]) -> Any:
    import yaml

    return yaml.safe_load(file)


def _parse_toml(file: IO[bytes]) -> Any:
    try:
        import tomllib as tomli
    except ImportError:
        import tomli  # type: ignore[no-redef]

    return tomli.load(file)


def _parse_errors(kind: str) -> tuple[type[Exception], ...]:
    if kind == "json":
        import json

        return (json.JSONDecodeError, UnicodeDecodeError)
    if kind == "yaml":
        import yaml

        return (yaml.YAMLError,)

    try:
        import tomllib as tomli
    except ImportError:
        import tomli  # type: ignore[no-redef]

    return (tomli.TOMLDecodeError, UnicodeDecodeError)


_PARSERS: dict[str, tuple[str, Callable[[IO[bytes]], Any]]] = {
    ".json": ("json", _parse_json),
    ".yaml": ("yaml", _parse_yaml),
    ".yml": ("yaml", _parse_yaml),
    ".toml": ("toml", _parse_toml),
}


def read_document(path: Path) -> Mapping[str, Any]:
    """
    Parse a toml, json or yaml file, chosen by the file suffix. The top level must
    be a table.
    """
    if path.suffix not in _PARSERS:
        raise TabTreeException(
            f"Unsupported file type {path.suffix!r} for {path}, expected one of: "
            + ", ".join(DOCUMENT_SUFFIXES)
        )
    kind, parse = _PARSERS[path.suffix]

    try:
        with path.open("rb") as file:
            content = parse(file)
    except _parse_errors(kind) as error:
        raise TabTreeException(
            f"Couldn't parse {kind} file from {path}", error
        ) from error
    except OSError as error:
        raise TabTreeException(f"Couldn't open file at {path}", error) from error

    if not isinstance(content, Mapping):
        raise TabTreeException(f"Expected a table at the top level of {path}")
    return content


class TabTreeConfigFile:
    """
    A config file that is read lazily. Settings may sit at the top level or under a
    [tabtree] table.
    """

    path: Path
    _content: Mapping[str, Any] | None = None
    _error: TabTreeException | None = None

    def __init__(self, path: Path):
        self.path = path

    @property
    def content(self) -> Mapping[str, Any] | None:
        return self._content

    @property
    def is_valid(self) -> bool:
        return self._content is not None

    @property
    def error(self) -> TabTreeException | None:
        return self._error

    def load(self, force: bool = False) -> Mapping[str, Any] | None:
        if self._content is not None and not force:
            return self._content

        try:
            document = read_document(self.path)
        except TabTreeException as error:
            self._error = error
            return None

        self._error = None
        self._content = document.get("tabtree", document)
        return self._content

    @classmethod
    def find_config_files(
        cls, target_path: Path, filenames: Sequence[str]
    ) -> Iterator["TabTreeConfigFile"]:
        """
        Yield candidate config files at target_path, best first.

        A directory is searched for the given filenames. A file is accepted under any
        name with a supported suffix.
        """
        target_path = target_path.expanduser().resolve()

        if target_path.is_file():
            if target_path.suffix in DOCUMENT_SUFFIXES:
                yield cls(target_path)
            return

        if target_path.is_dir():
            for candidate in (target_path / filename for filename in filenames):
                if candidate.is_file():
                    yield cls(candidate)
