"""Package-specific exception types."""

from __future__ import annotations


class MarkdownWriterError(Exception):
    """Base class for md-writer errors.

    Unrecognised custom-syntax lines are not errors; they are reported as
    `RecognitionError` values by the translator.
    """


class AssistantError(MarkdownWriterError):
    """Raised when the AI provider bridge cannot produce a response."""


class AssistantNotConfiguredError(AssistantError):
    """Raised when the remote provider is selected but no API key is set."""


class PromptTooLargeError(AssistantError):
    """Raised when a prompt exceeds the provider's character limit.

    Args:
        length: Number of characters in the rejected prompt.
        limit: Maximum number of characters accepted by the provider.
    """

    def __init__(self, length: int, limit: int):
        self.length = length
        self.limit = limit
        super().__init__(f"Prompt too large ({length} characters, limit {limit})")
