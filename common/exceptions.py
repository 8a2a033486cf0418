"""Exceptions raised by the import parsers."""


class ImportParseError(Exception):
    """A whole input blob could not be parsed."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RosterParseError(ImportParseError):
    pass


class PerformanceParseError(ImportParseError):
    pass
