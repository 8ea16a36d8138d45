"""calltree custom exceptions."""


class CallTreeError(Exception):
    """Base exception for calltree errors."""


class MalformedRecordError(CallTreeError):
    """A trace line does not have the expected delimiters."""

    def __init__(self, message: str, line_no: int | None = None, line: str = "") -> None:
        self.line_no = line_no
        self.line = line
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message)


class TraceReadError(CallTreeError):
    """The trace file could not be opened or read."""


class ConfigurationError(CallTreeError):
    """Required configuration is missing or invalid."""


class GraphFrozenError(CallTreeError):
    """A frozen call graph was modified."""
