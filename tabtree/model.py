"""
The command tree: a command, its aliases, sub-commands and arguments, and the
permitted values (opts) of enumerable arguments.

A tree is loaded fresh for each completion request, mutated in place by the pruner
and then discarded, so the present_on_line flags are only meaningful after pruning.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from .exceptions import CommandDefinitionError

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping


class ArgType(Enum):
    # Boolean flag, takes no value
    NONE = "NONE"
    # Value drawn from the enumerated opts
    OPTION = "OPTION"
    FILE = "FILE"
    TEXT = "TEXT"

    @classmethod
    def parse(cls, value: Any) -> ArgType:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise CommandDefinitionError(
                f"Invalid arg_type {value!r}, expected one of: "
                + ", ".join(member.value for member in cls)
            ) from None


def _new_uuid() -> str:
    return str(uuid4())


def _require_str(data: Mapping[str, Any], key: str, element: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise CommandDefinitionError(
            f"{element}.{key} is a required attribute", element=element
        )
    return value


def _optional_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def _items(data: Mapping[str, Any], key: str, element: str) -> list[Mapping]:
    value = data.get(key) or []
    if not isinstance(value, list) or not all(isinstance(i, dict) for i in value):
        raise CommandDefinitionError(
            f"{element}.{key} must be a list of tables", element=element
        )
    return value


@dataclass
class CommandAlias:
    uuid: str
    cmd_uuid: str
    name: str

    @classmethod
    def from_dict(cls, cmd_uuid: str, data: Mapping[str, Any]) -> CommandAlias:
        return cls(
            uuid=data.get("uuid") or _new_uuid(),
            cmd_uuid=cmd_uuid,
            name=_require_str(data, "name", "alias"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"uuid": self.uuid, "name": self.name}


@dataclass
class CommandOpt:
    uuid: str
    arg_uuid: str
    name: str

    @classmethod
    def from_dict(cls, arg_uuid: str, data: Mapping[str, Any]) -> CommandOpt:
        return cls(
            uuid=data.get("uuid") or _new_uuid(),
            arg_uuid=arg_uuid,
            name=_require_str(data, "name", "opt"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"uuid": self.uuid, "name": self.name}


@dataclass
class CommandArg:
    uuid: str
    cmd_uuid: str
    arg_type: ArgType
    description: str = ""
    long_name: str = ""
    short_name: str = ""
    opts: list[CommandOpt] = field(default_factory=list)
    present_on_line: bool = False

    @property
    def label(self) -> str:
        return self.long_name or self.short_name

    @property
    def recommendation(self) -> str:
        """
        The long name with the short name in parentheses, or whichever of the two
        exists.
        """
        if self.long_name:
            if self.short_name:
                return f"{self.long_name} ({self.short_name})"
            return self.long_name
        return self.short_name

    def is_named(self, word: str | None) -> bool:
        return bool(word) and word in (self.long_name, self.short_name)

    def matches(self, words: Collection[str]) -> bool:
        return bool(
            (self.long_name and self.long_name in words)
            or (self.short_name and self.short_name in words)
        )

    def has_supplied_opt(self, words: Collection[str]) -> bool:
        return any(opt.name in words for opt in self.opts)

    @classmethod
    def from_dict(cls, cmd_uuid: str, data: Mapping[str, Any]) -> CommandArg:
        if "arg_type" not in data:
            raise CommandDefinitionError(
                "arg.arg_type is a required attribute", element="arg"
            )
        arg_uuid = data.get("uuid") or _new_uuid()
        arg = cls(
            uuid=arg_uuid,
            cmd_uuid=cmd_uuid,
            arg_type=ArgType.parse(data["arg_type"]),
            description=_optional_str(data, "description"),
            long_name=_optional_str(data, "long_name"),
            short_name=_optional_str(data, "short_name"),
            opts=[
                CommandOpt.from_dict(arg_uuid, item)
                for item in _items(data, "opts", "arg")
            ],
        )
        if not arg.label:
            raise CommandDefinitionError(
                "arg requires at least one of long_name or short_name", element="arg"
            )
        return arg

    def to_dict(self) -> dict[str, Any]:
        return {
            "uuid": self.uuid,
            "arg_type": self.arg_type.value,
            "description": self.description,
            "long_name": self.long_name,
            "short_name": self.short_name,
            "opts": [opt.to_dict() for opt in self.opts],
        }


@dataclass
class Command:
    uuid: str
    name: str
    parent_uuid: str | None = None
    aliases: list[CommandAlias] = field(default_factory=list)
    sub_commands: list[Command] = field(default_factory=list)
    args: list[CommandArg] = field(default_factory=list)
    present_on_line: bool = False

    @property
    def shortest_alias(self) -> str | None:
        if not self.aliases:
            return None
        # min keeps the leftmost of equally short aliases
        return min((alias.name for alias in self.aliases), key=len)

    @property
    def recommendation(self) -> str:
        shortest_alias = self.shortest_alias
        if shortest_alias is None:
            return self.name
        return f"{self.name} ({shortest_alias})"

    def matches(self, words: Collection[str]) -> bool:
        return self.name in words or any(alias.name in words for alias in self.aliases)

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], parent_uuid: str | None = None
    ) -> Command:
        """
        Build a command tree from an interchange document mapping, generating any
        missing identifiers.
        """
        name = _require_str(data, "name", "command")
        cmd_uuid = data.get("uuid") or _new_uuid()
        try:
            return cls(
                uuid=cmd_uuid,
                name=name,
                parent_uuid=parent_uuid,
                aliases=[
                    CommandAlias.from_dict(cmd_uuid, item)
                    for item in _items(data, "aliases", "command")
                ],
                args=[
                    CommandArg.from_dict(cmd_uuid, item)
                    for item in _items(data, "args", "command")
                ],
                sub_commands=[
                    cls.from_dict(item, parent_uuid=cmd_uuid)
                    for item in _items(data, "sub_commands", "command")
                ],
            )
        except CommandDefinitionError as error:
            if error.command_name is None:
                error.command_name = name
            raise

    def to_dict(self) -> dict[str, Any]:
        return {
            "uuid": self.uuid,
            "name": self.name,
            "aliases": [alias.to_dict() for alias in self.aliases],
            "sub_commands": [sub_command.to_dict() for sub_command in self.sub_commands],
            "args": [arg.to_dict() for arg in self.args],
        }

    def pretty(self, indent: int = 0, increment: int = 2) -> str:
        pad = " " * indent
        lines = [f"{pad}command: {self.name}"]
        if self.aliases:
            lines.append(
                f"{pad}  aliases: " + " ".join(alias.name for alias in self.aliases)
            )
        for arg in self.args:
            lines.append(
                f"{pad}  arg: {arg.long_name} ({arg.short_name}): {arg.arg_type.value}"
            )
            lines.extend(f"{pad}    opt: {opt.name}" for opt in arg.opts)
        lines.extend(
            sub_command.pretty(indent + increment, increment)
            for sub_command in self.sub_commands
        )
        return "\n".join(lines)
