import pytest

from tabtree.exceptions import CommandDefinitionError
from tabtree.model import ArgType, Command, CommandArg


def test_from_dict_builds_tree(deploy_tree):
    assert deploy_tree.name == "deploy"
    assert deploy_tree.parent_uuid is None
    assert [alias.name for alias in deploy_tree.aliases] == ["d"]
    assert deploy_tree.aliases[0].cmd_uuid == deploy_tree.uuid

    (force,) = deploy_tree.args
    assert force.arg_type == ArgType.NONE
    assert force.description == "Skip confirmation"
    assert force.cmd_uuid == deploy_tree.uuid

    (service,) = deploy_tree.sub_commands
    assert service.parent_uuid == deploy_tree.uuid
    (env,) = service.args
    assert env.description == "Target environment"
    assert env.short_name == ""
    assert [opt.name for opt in env.opts] == ["dev", "staging", "prod"]
    assert all(opt.arg_uuid == env.uuid for opt in env.opts)


def test_from_dict_generates_distinct_uuids(deploy_tree):
    uuids = [
        deploy_tree.uuid,
        deploy_tree.aliases[0].uuid,
        deploy_tree.args[0].uuid,
        deploy_tree.sub_commands[0].uuid,
        deploy_tree.sub_commands[0].args[0].uuid,
        *(opt.uuid for opt in deploy_tree.sub_commands[0].args[0].opts),
    ]
    assert len(set(uuids)) == len(uuids)


def test_from_dict_keeps_given_uuids():
    command = Command.from_dict(
        {
            "uuid": "root-uuid",
            "name": "tool",
            "args": [{"uuid": "arg-uuid", "arg_type": "text", "short_name": "-n"}],
        }
    )
    assert command.uuid == "root-uuid"
    assert command.args[0].uuid == "arg-uuid"
    assert command.args[0].arg_type == ArgType.TEXT


def test_to_dict_round_trips(deploy_tree):
    assert Command.from_dict(deploy_tree.to_dict()) == deploy_tree


def test_to_dict_shape(deploy_tree):
    data = deploy_tree.to_dict()
    assert list(data) == ["uuid", "name", "aliases", "sub_commands", "args"]
    assert data["args"][0] == {
        "uuid": deploy_tree.args[0].uuid,
        "arg_type": "NONE",
        "description": "Skip confirmation",
        "long_name": "--force",
        "short_name": "-f",
        "opts": [],
    }


@pytest.mark.parametrize(
    ("data", "message", "command_name"),
    [
        ({}, "command.name is a required attribute", None),
        ({"name": ""}, "command.name is a required attribute", None),
        (
            {"name": "tool", "aliases": [{}]},
            "alias.name is a required attribute",
            "tool",
        ),
        (
            {"name": "tool", "args": [{"long_name": "--x"}]},
            "arg.arg_type is a required attribute",
            "tool",
        ),
        (
            {"name": "tool", "args": [{"arg_type": "NONE"}]},
            "arg requires at least one of long_name or short_name",
            "tool",
        ),
        (
            {"name": "tool", "args": "--x"},
            "command.args must be a list of tables",
            "tool",
        ),
        (
            {"name": "tool", "sub_commands": [{"name": "inner", "aliases": [{}]}]},
            "alias.name is a required attribute",
            "inner",
        ),
    ],
)
def test_from_dict_validation(data, message, command_name):
    with pytest.raises(CommandDefinitionError) as excinfo:
        Command.from_dict(data)
    assert excinfo.value.msg == message
    assert excinfo.value.command_name == command_name


def test_arg_type_parse():
    assert ArgType.parse("option") == ArgType.OPTION
    assert ArgType.parse(ArgType.FILE) == ArgType.FILE
    with pytest.raises(CommandDefinitionError) as excinfo:
        ArgType.parse("MAYBE")
    assert excinfo.value.msg == (
        "Invalid arg_type 'MAYBE', expected one of: NONE, OPTION, FILE, TEXT"
    )


def test_arg_matching():
    arg = CommandArg(
        uuid="a1",
        cmd_uuid="c1",
        arg_type=ArgType.NONE,
        long_name="--all",
        short_name="-a",
    )
    assert arg.matches({"tool", "-a"})
    assert arg.matches({"--all"})
    assert not arg.matches({"tool", "all"})
    assert arg.is_named("-a")
    assert not arg.is_named(None)
    assert not arg.is_named("")

    short_only = CommandArg(
        uuid="a2", cmd_uuid="c1", arg_type=ArgType.NONE, short_name="-q"
    )
    assert not short_only.matches({""})
    assert not short_only.is_named("")
    assert short_only.label == "-q"


def test_pretty(deploy_tree):
    assert deploy_tree.pretty() == "\n".join(
        [
            "command: deploy",
            "  aliases: d",
            "  arg: --force (-f): NONE",
            "  command: service",
            "    arg: --env (): OPTION",
            "      opt: dev",
            "      opt: staging",
            "      opt: prod",
        ]
    )
