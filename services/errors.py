from typing import Optional


class MonitorError(Exception):
    """Base class for every error raised by the monitor."""


class MalformedRecord(MonitorError, ValueError):
    def __init__(self, message: str, line: str = "", line_number: Optional[int] = None):
        self.line = line
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class ConfigurationError(MonitorError):
    pass


class LogIOError(MonitorError):
    def __init__(self, path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"{path}: {cause.strerror or cause}")
