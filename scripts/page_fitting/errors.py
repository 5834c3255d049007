"""
Error types for page fitting.

A single exception class carries an ErrorKind so callers can branch
on the failure category and report the offending input.
"""

from enum import Enum, auto
from typing import Optional, Union


class ErrorKind(Enum):
    """Failure categories raised by the fitter and its file sinks."""
    INVALID_INPUT = auto()
    DEGENERATE_COVERAGE = auto()
    IO_FAILURE = auto()
    PARSE_FAILURE = auto()


class PageFitError(ValueError):
    """
    Structured page fitting failure.

    Attributes:
        kind: Category of the failure
        message: Human readable description
        subject: The offending input (parameter name, coordinate index,
                 line number or file path), if known
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        subject: Optional[Union[str, int]] = None,
    ):
        self.kind = kind
        self.message = message
        self.subject = subject
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.subject is None:
            return f"{self.kind.name}: {self.message}"
        return f"{self.kind.name} ({self.subject}): {self.message}"
