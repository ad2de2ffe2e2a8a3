from .__version__ import __version__

__all__ = ["__version__", "main"]


def main():
    import sys

    if len(sys.argv) > 1 and sys.argv[1].startswith("_"):
        if _run_builtin_task(*sys.argv[1:]):
            return

    from .app import TabTree
    from .io import TabTreeIO

    io = TabTreeIO(output=sys.stdout, error=sys.stderr, make_default=True)
    app = TabTree(output=io)
    result = app(cli_args=sys.argv[1:])
    if result:
        raise SystemExit(result)


def _run_builtin_task(task_name: str, *task_args: str) -> bool:
    """
    Run a special builtin task for shell completion purposes.

    task_name: The name of the builtin task to run, e.g. "_complete"
    task_args: for "_bash_completion", the commands to register completion for

    returns True if the task was handled, False otherwise
    """
    import sys

    from .app import TabTree
    from .exceptions import TabTreeException
    from .io import TabTreeIO

    if task_name not in ("_complete", "_bash_completion", "_list_commands"):
        return False

    io = TabTreeIO(output=sys.stdout, error=sys.stderr, make_default=True)
    app = TabTree(output=io)

    if task_name == "_complete":
        # bash also passes the command name, current word and previous word, but
        # these are recomputed from COMP_LINE and COMP_POINT
        result = app.run_completion()
        if result:
            raise SystemExit(result)
        return True

    try:
        app.load_config()
        if task_name == "_bash_completion":
            from .completion.bash import get_bash_completion_script

            print(
                get_bash_completion_script(
                    task_args or app.list_commands(), program_name=app.program_name
                )
            )
        else:
            print(" ".join(app.list_commands()))
    except TabTreeException as error:
        app.ui.print_error(error)
        raise SystemExit(1) from error

    return True
