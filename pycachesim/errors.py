class ConfigurationError(ValueError):
    """Raised when a cache geometry or run configuration is invalid."""


class MalformedTraceEvent(ValueError):
    """Raised when a trace line cannot be parsed into an event."""

    def __init__(self, message: str, line: str = ""):
        super().__init__(message)
        self.line = line
