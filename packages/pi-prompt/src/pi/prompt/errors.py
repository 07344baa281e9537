"""Errors raised by pi-prompt."""

from __future__ import annotations


class PromptError(RuntimeError):
    """Base class for prompt failures."""


class UnsupportedInputError(PromptError):
    """The input source cannot be switched into raw mode."""

    def __init__(self, message: str = "Must be able to set input stream to raw mode.") -> None:
        super().__init__(message)


class PromptInterrupted(PromptError):
    """The user pressed Ctrl-C while the prompt was active."""

    def __init__(self) -> None:
        super().__init__("SIGINT")


class PromptBusyError(PromptError):
    """Another prompt session already owns the input source."""

    def __init__(self) -> None:
        super().__init__("Input source already has an active prompt")


class PromptEOFError(PromptError):
    """The input source closed before an answer could be produced."""

    def __init__(self) -> None:
        super().__init__("Input stream closed")
