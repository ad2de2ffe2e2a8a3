# ruff: noqa: N818
class TabTreeException(RuntimeError):
    """
    Base for every failure reported to the user. The optional second argument is
    the underlying error, kept as text for the "From:" line of the error output.
    """

    cause: str | None

    def __init__(self, msg, *args):
        super().__init__(msg, *args)
        self.msg = msg
        self.cause = (str(args[0]) or repr(args[0])) if args else None

    def __str__(self):
        return self.msg

    @property
    def context(self) -> str | None:
        """A line locating the problem, printed ahead of the message"""
        return None


class CommandDefinitionError(TabTreeException):
    """A command document that can't be turned into a command tree"""

    def __init__(
        self,
        msg,
        *args,
        command_name: str | None = None,
        element: str | None = None,
        filename: str | None = None,
    ):
        super().__init__(msg, *args)
        self.command_name = command_name
        self.element = element
        self.filename = filename

    @property
    def context(self) -> str | None:
        if self.command_name:
            where = f" in file {self.filename}" if self.filename else ""
            return f"Invalid command {self.command_name!r}{where}"
        if self.filename:
            return f"Invalid document {self.filename}"
        return None


class ConfigValidationError(TabTreeException):
    def __init__(
        self, msg, *args, option: str | None = None, filename: str | None = None
    ):
        super().__init__(msg, *args)
        self.option = option
        self.filename = filename

    @property
    def context(self) -> str | None:
        if not self.option:
            return None
        where = f" in file {self.filename}" if self.filename else ""
        return f"Invalid config option {self.option!r}{where}"


class StoreError(TabTreeException):
    pass


class SchemaVersionError(StoreError):
    pass
