"""Exceptions raised by log_lib."""


class InvalidDirective(ValueError):
    """A directive string could not be parsed.

    Attributes:
        text: The full directive text as given by the user
        position: Offset into text where parsing stopped
    """

    def __init__(self, text: str, position: int, reason: str = None):
        self.text = text
        self.position = position
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(
            f"Invalid directive \"{text}\" at position {position}{detail}")


class ReportOpenFailed(OSError):
    """The report file could not be opened for writing."""

    def __init__(self, path: str, cause: OSError):
        self.path = path
        self.cause = cause
        reason = cause.strerror or str(cause)
        super().__init__(f"Failed to open report \"{path}\": {reason}")
        self.errno = cause.errno
