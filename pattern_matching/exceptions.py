"""
Text Processing Exception Hierarchy

Structured errors raised by the matching engine and by the layers that
feed user input into it.
"""
from typing import Optional


class TextProcessingError(Exception):
    """
    Base class for errors raised while matching or analyzing text

    Attributes:
        message: Human-readable error message
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class PatternSyntaxError(TextProcessingError, ValueError):
    """
    A regex pattern that does not compile

    Attributes:
        pattern: The offending pattern source
        description: Diagnostic reported by the regex engine
        position: Index in the pattern where compilation failed, if known
    """

    def __init__(self, pattern: str, description: str, position: Optional[int] = None):
        self.pattern = pattern
        self.description = description
        self.position = position

        message = f"{description} in pattern {pattern!r}"
        if position is not None:
            message += f" near index {position}"
        super().__init__(message)


class ReplacementError(TextProcessingError, ValueError):
    """
    A replacement template that references a group the pattern does not have,
    or that contains a malformed group reference
    """

    def __init__(self, replacement: str, description: str):
        self.replacement = replacement
        self.description = description
        super().__init__(f"{description} in replacement {replacement!r}")


class InvalidArgumentError(TextProcessingError, ValueError):
    """
    Caller-supplied configuration that is not numeric or is out of range

    Raised by the integration layer (HTTP handlers, batch options), never by
    the analysis functions themselves.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
