"""
Error taxonomy for the TCX heart-rate merger.

Every failure is fatal: errors propagate to the command line, which reports
the message on stderr and exits non-zero. Nothing is retried.
"""


class TcxMergeError(Exception):
    """Base class for merge tool errors."""

    def __init__(self, message: str, suggestion: str | None = None):
        """
        Initialize TcxMergeError.

        Args:
            message: Error description
            suggestion: Suggested fix for the user
        """
        self.message = message
        self.suggestion = suggestion

        full_message = message
        if suggestion:
            full_message += f"\n  Suggestion: {suggestion}"

        super().__init__(full_message)


class FileReadError(TcxMergeError):
    """Raised when an input file is missing or unreadable."""

    pass


class ParseError(TcxMergeError):
    """Raised when an input is not a well-formed activity document."""

    pass


class MergeError(TcxMergeError):
    """Raised when the two trackpoint streams cannot be merged."""

    pass


class SerializationError(TcxMergeError):
    """Raised when the merged document cannot be written."""

    pass
