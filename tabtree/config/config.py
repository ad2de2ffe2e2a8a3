from collections.abc import Mapping
from os import environ
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from ..exceptions import ConfigValidationError, TabTreeException
from .file import TabTreeConfigFile

if TYPE_CHECKING:
    from ..io import TabTreeIO

APP_NAME = "tabtree"
DEFAULT_DATABASE_NAME = "completion.db"


class TabTreeConfig:
    """
    Settings for tabtree, layered from lowest to highest precedence as: defaults, a
    config file, environment variables, then explicit overrides (e.g. from the CLI).
    """

    """
    The filenames to look for in the config directory
    """
    _config_filenames: tuple[str, ...] = (
        "tabtree.toml",
        "tabtree.yaml",
        "tabtree.json",
    )
    """
    Supported options and their types
    """
    _options: dict[str, type] = {
        "database": str,
        "verbosity": int,
        "max_line_size": int,
    }

    _table: dict[str, Any]
    _overrides: dict[str, Any]
    _config_file: TabTreeConfigFile | None = None
    _database_override: str | None = None

    def __init__(
        self,
        table: Mapping[str, Any] | None = None,
        env: Mapping[str, str] | None = None,
        io: Optional["TabTreeIO"] = None,
    ):
        self._env = env if env is not None else environ
        self._table = {}
        self._overrides = dict(table or {})
        if table:
            self._validate(table)
            self._table.update(table)

        if io:
            self._io = io
        else:
            from ..io import TabTreeIO

            self._io = TabTreeIO.get_default_io()

    def load(self, target_path: Path | str | None = None, strict: bool = True):
        """
        Load settings from the first config file found at the target_path, which may
        be a file or a directory, or otherwise from TABTREE_CONFIG or the user config
        directory. Values given to the constructor take precedence.
        """
        if target_path is None:
            target_path = self._env.get("TABTREE_CONFIG") or self.default_config_dir()
        target_path = Path(target_path)

        config_file = next(
            TabTreeConfigFile.find_config_files(target_path, self._config_filenames),
            None,
        )
        if config_file is None:
            if strict and target_path.suffix:
                raise TabTreeException(f"No config file found at {target_path}")
            self._io.print_debug("No config file found at %s", target_path)
            return

        content = config_file.load()
        if content is None:
            if strict:
                raise TabTreeException(
                    f"Couldn't load config file at {config_file.path}",
                    config_file.error,
                )
            return

        self._validate(content, filename=str(config_file.path))
        self._io.print_debug("Loaded config from %s", config_file.path)
        self._config_file = config_file
        self._table = {**content, **self._table}

    def set_database(self, path: str | None):
        self._database_override = path

    @property
    def config_path(self) -> Path | None:
        return self._config_file.path if self._config_file else None

    @property
    def database_path(self) -> Path:
        """
        A relative path from the config file is taken relative to that file. One from
        the command line, environment or constructor is taken relative to the cwd.
        """
        explicit = (
            self._database_override
            or self._env.get("TABTREE_DB")
            or self._overrides.get("database")
        )
        if explicit:
            return Path(explicit).expanduser().absolute()
        from_file = self._table.get("database")
        if from_file:
            path = Path(from_file).expanduser()
            if not path.is_absolute() and self.config_path:
                path = self.config_path.parent / path
            return path
        return self.default_data_dir() / DEFAULT_DATABASE_NAME

    @property
    def verbosity(self) -> int:
        return self._table.get("verbosity", 0)

    @property
    def max_line_size(self) -> int:
        from ..completion.input import MAX_LINE_SIZE

        return self._table.get("max_line_size", MAX_LINE_SIZE)

    @staticmethod
    def default_config_dir() -> Path:
        from platformdirs import user_config_dir

        return Path(user_config_dir(APP_NAME))

    @staticmethod
    def default_data_dir() -> Path:
        from platformdirs import user_data_dir

        return Path(user_data_dir(APP_NAME))

    def _validate(self, table: Mapping[str, Any], filename: str | None = None):
        for key, value in table.items():
            if key not in self._options:
                raise ConfigValidationError(
                    f"Unrecognised option {key!r}", option=key, filename=filename
                )
            expected_type = self._options[key]
            # bool is an int subclass but never a sensible value here
            if not isinstance(value, expected_type) or isinstance(value, bool):
                raise ConfigValidationError(
                    f"Option {key!r} should have a value of type "
                    f"{expected_type.__name__}, got {value!r}",
                    option=key,
                    filename=filename,
                )
        if table.get("max_line_size", 1) < 1:
            raise ConfigValidationError(
                "Option 'max_line_size' must be a positive integer",
                option="max_line_size",
                filename=filename,
            )
        if not -2 <= table.get("verbosity", 0) <= 3:
            raise ConfigValidationError(
                "Option 'verbosity' must be between -2 and 3",
                option="verbosity",
                filename=filename,
            )
