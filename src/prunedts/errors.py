"""Exception types raised by prunedts."""


class PrunedtsError(Exception):
    """Base class for all prunedts failures."""


class ParseError(PrunedtsError):
    """Declaration text could not be tokenized or split into statements."""

    def __init__(self, message: str, line: int = 0, column: int = 0) -> None:
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"{message} (line {line}, column {column})" if line else message)


class ExtractorError(PrunedtsError):
    """The external extraction tool failed."""


class ConfigError(PrunedtsError):
    """A configuration file is missing required data or is malformed."""
