import sys
from collections.abc import Mapping
from io import StringIO
from pathlib import Path
from typing import Any, NamedTuple, Optional

import pytest

from tabtree.app import TabTree
from tabtree.io import TabTreeIO
from tabtree.model import Command
from tabtree.store import CommandStore

PROJECT_ROOT = Path(__file__).resolve().parent.parent
FIXTURES_PATH = PROJECT_ROOT / "tests" / "fixtures"

DEPLOY_DOCUMENT = {
    "name": "deploy",
    "aliases": [{"name": "d"}],
    "args": [
        {
            "arg_type": "NONE",
            "description": "Skip confirmation",
            "long_name": "--force",
            "short_name": "-f",
        }
    ],
    "sub_commands": [
        {
            "name": "service",
            "args": [
                {
                    "arg_type": "OPTION",
                    "description": "Target environment",
                    "long_name": "--env",
                    "opts": [{"name": "dev"}, {"name": "staging"}, {"name": "prod"}],
                }
            ],
        }
    ],
}

TOOL_DOCUMENT = {
    "name": "tool",
    "args": [
        {"arg_type": "NONE", "long_name": "--verbose", "short_name": "-v"},
        {
            "arg_type": "OPTION",
            "long_name": "--output",
            "short_name": "-o",
            "opts": [{"name": "json"}, {"name": "text"}],
        },
    ],
    "sub_commands": [
        {
            "name": "remote",
            "aliases": [{"name": "rem"}, {"name": "r"}],
            "args": [{"arg_type": "TEXT", "long_name": "--name"}],
            "sub_commands": [
                {
                    "name": "add",
                    "args": [{"arg_type": "TEXT", "long_name": "--url"}],
                },
                {"name": "remove", "aliases": [{"name": "rm"}]},
            ],
        },
        {
            "name": "status",
            "args": [{"arg_type": "NONE", "long_name": "--short", "short_name": "-s"}],
        },
        {"name": "sync"},
    ],
}


@pytest.fixture(scope="session")
def fixtures_path():
    return FIXTURES_PATH


@pytest.fixture
def deploy_document():
    return DEPLOY_DOCUMENT


@pytest.fixture
def tool_document():
    return TOOL_DOCUMENT


@pytest.fixture
def deploy_tree():
    """
    A fresh copy of the deploy command tree, since pruning mutates it
    """
    return Command.from_dict(DEPLOY_DOCUMENT)


@pytest.fixture
def tool_tree():
    return Command.from_dict(TOOL_DOCUMENT)


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "data" / "completion.db"


@pytest.fixture(autouse=True)
def reset_default_io():
    """
    Each app registers its IO as the default, so clear it between tests
    """
    TabTreeIO._default_io = None
    yield
    TabTreeIO._default_io = None


def quiet_io():
    return TabTreeIO(
        output=StringIO(), error=StringIO(), ansi=False, make_default=False
    )


@pytest.fixture
def store(db_path):
    with CommandStore(db_path, io=quiet_io()) as store:
        store.ensure_schema()
        yield store


@pytest.fixture
def populated_db(db_path):
    with CommandStore(db_path, io=quiet_io()) as store:
        store.ensure_schema()
        with store.transaction():
            store.insert_command(Command.from_dict(DEPLOY_DOCUMENT))
            store.insert_command(Command.from_dict(TOOL_DOCUMENT))
    return db_path


class TabTreeRunResult(NamedTuple):
    code: int
    capture: str
    stdout: str
    stderr: str

    def __str__(self):
        return (
            "TabTreeRunResult(\n"
            f"  code={self.code!r},\n"
            f"  capture=`{self.capture}`,\n"
            f"  stdout=`{self.stdout}`,\n"
            f"  stderr=`{self.stderr}`,\n"
            ")"
        )


@pytest.fixture
def isolated_env(tmp_path):
    """
    An environment that points config lookup at an empty directory
    """
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return {"TABTREE_CONFIG": str(config_dir)}


@pytest.fixture
def run_tabtree(capsys, db_path, isolated_env):
    def run_tabtree(
        *run_args: str,
        config: Optional[Mapping[str, Any]] = None,
        env: Optional[Mapping[str, str]] = None,
        program_name: str = "tabtree",
    ) -> TabTreeRunResult:
        output_capture = StringIO()
        app = TabTree(
            config={"database": str(db_path), **(config or {})},
            output=output_capture,
            program_name=program_name,
            env={**isolated_env, **(env or {})},
        )
        result = app(run_args)
        output_capture.seek(0)
        run_result = TabTreeRunResult(
            result, output_capture.read(), *capsys.readouterr()
        )
        print(run_result)  # when a test fails this is usually useful to debug
        return run_result

    return run_tabtree


@pytest.fixture
def run_tabtree_main(capsys, monkeypatch, db_path, isolated_env):
    def run_tabtree_main(
        *cli_args: str, env: Optional[Mapping[str, str]] = None
    ) -> TabTreeRunResult:
        from tabtree import main

        for key, value in {
            **isolated_env,
            "TABTREE_DB": str(db_path),
            **(env or {}),
        }.items():
            monkeypatch.setenv(key, value)
        monkeypatch.setattr(sys, "argv", ["tabtree", *cli_args])

        try:
            main()
            code = 0
        except SystemExit as exit_:
            code = exit_.code
        return TabTreeRunResult(code, "", *capsys.readouterr())

    return run_tabtree_main
