"""Boundary errors. The parser itself never raises; these cover arguments and I/O."""


class Csv2JsonError(Exception):
    exit_code = 1

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        # single line for stderr
        return " ".join(self.message.splitlines())


class UsageError(Csv2JsonError):
    """No input given, unknown option, or a bad option value."""

    def __init__(self, message: str, show_help: bool = False):
        super().__init__(message)
        self.show_help = show_help


class InputNotFoundError(Csv2JsonError):
    def __init__(self, path: str):
        super().__init__(f"file not found: {path}")
        self.path = path


class ReadError(Csv2JsonError):
    pass


class WriteError(Csv2JsonError):
    pass
