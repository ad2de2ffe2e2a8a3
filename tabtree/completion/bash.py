from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


def get_bash_completion_script(
    command_names: Iterable[str], program_name: str = "tabtree"
) -> str:
    """
    A special task accessible via `tabtree _bash_completion` that prints a bash
    script registering tabtree as the completer for the given commands.

    Bash exports COMP_LINE and COMP_POINT to commands registered with `complete -C`,
    which is all `tabtree _complete` needs.
    """

    lines = [f"# bash completion for commands known to {program_name}"]
    lines.extend(
        f'complete -o default -C "{program_name} _complete" {name}'
        for name in command_names
    )
    return "\n".join(lines)
