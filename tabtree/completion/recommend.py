from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from ..model import ArgType

if TYPE_CHECKING:
    from ..model import Command, CommandArg


class Recommendations(NamedTuple):
    candidates: list[str]
    required: bool


def recommend(tree: Command, current_word: str | None) -> Recommendations:
    """
    Values for the argument under the cursor take priority, otherwise offer
    everything on the pruned tree that has not been supplied yet.
    """
    candidates = collect_required(tree, current_word)
    if candidates:
        return Recommendations(candidates, required=True)
    return Recommendations(collect_optional(tree, current_word), required=False)


def find_current_arg(command: Command, current_word: str | None) -> CommandArg | None:
    """
    Depth first search for a present argument named by the current word, checking a
    command's own args before those of its sub-commands.
    """
    for arg in command.args:
        if arg.present_on_line and arg.is_named(current_word):
            return arg

    for sub_command in command.sub_commands:
        if (found := find_current_arg(sub_command, current_word)) is not None:
            return found

    return None


def collect_required(tree: Command, current_word: str | None) -> list[str]:
    arg = find_current_arg(tree, current_word)
    if arg is None or arg.arg_type == ArgType.NONE:
        return []
    return [opt.name for opt in arg.opts]


def collect_optional(tree: Command, current_word: str | None = None) -> list[str]:
    results: list[str] = []

    for sub_command in tree.sub_commands:
        if not sub_command.present_on_line:
            results.append(sub_command.recommendation)
        # Present sub-commands still contribute whatever remains beneath them
        results.extend(collect_optional(sub_command, current_word))

    for arg in tree.args:
        if arg.present_on_line:
            # the value for this argument is still pending
            results.extend(opt.name for opt in arg.opts)
        else:
            results.append(arg.recommendation)

    return results
