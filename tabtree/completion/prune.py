"""
Reduce a loaded command tree, in place, to the part still relevant for completing
the given line.

Presence is resolved against the whole line: a sub-command is present if its name or
an alias was typed, an argument if its long or short name was typed. Along the way
satisfied arguments, unchosen siblings and fully consumed sub-commands are removed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..io import TabTreeIO

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable

    from ..model import Command, CommandArg


def prune(tree: Command, words: Iterable[str]):
    word_set = frozenset(words)
    prune_arguments(tree, word_set)
    prune_sub_commands(tree, word_set)


def prune_arguments(command: Command, words: Collection[str]):
    """
    Mark the arguments of this command that appear on the line, and drop those that
    have nothing left to complete: either they take no enumerable value, or one of
    their opts has already been supplied.
    """
    remove_indices = []
    for index, arg in enumerate(command.args):
        if not arg.matches(words):
            continue
        arg.present_on_line = True
        if not arg.opts or arg.has_supplied_opt(words):
            remove_indices.append(index)

    _remove(command.args, remove_indices, _describe_arg)


def prune_sub_commands(command: Command, words: Collection[str]):
    # At most one sub-command per level can be the one invoked
    invoked = None
    for sub_command in command.sub_commands:
        sub_command.present_on_line = sub_command.matches(words)
        if sub_command.present_on_line:
            invoked = sub_command
            break

    if invoked is not None:
        _remove(
            command.sub_commands,
            [
                index
                for index, sibling in enumerate(command.sub_commands)
                if sibling.uuid != invoked.uuid
            ],
            _describe_command,
        )

    remove_indices = []
    for index, sub_command in enumerate(command.sub_commands):
        prune_arguments(sub_command, words)
        prune_sub_commands(sub_command, words)

        # A present sub-command with nothing left beneath it has been used up
        if (
            sub_command.present_on_line
            and not sub_command.sub_commands
            and not sub_command.args
        ):
            remove_indices.append(index)

    _remove(command.sub_commands, remove_indices, _describe_command)


def _remove(nodes: list, indices: list[int], describe):
    io = TabTreeIO.get_default_io()
    # Highest index first so earlier removals can't shift later ones
    for index in reversed(indices):
        io.print_debug("Removing %s", describe(nodes[index]))
        del nodes[index]


def _describe_command(command: Command) -> str:
    return f"sub-command: {command.name}"


def _describe_arg(arg: CommandArg) -> str:
    return f"argument: {arg.label}"
