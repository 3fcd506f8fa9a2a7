"""Exception hierarchy shared across the package."""
from __future__ import annotations

INVALID_API_KEY_MESSAGE = "Invalid API Key. Please check your configuration."
GENERIC_FAILURE_MESSAGE = "Failed to generate content from the API. Please try again."
EMPTY_INPUT_MESSAGE = "Input cannot be empty."


class TechDocsError(Exception):
    """Base class for errors raised by this package."""


class ConfigError(TechDocsError):
    """Invalid or inconsistent configuration value."""


class TemplateConfigError(ConfigError):
    """A configured template id is missing from the registry."""


class UnknownTemplateError(TechDocsError, KeyError):
    """Lookup of a template id that is not registered."""

    def __str__(self) -> str:
        return f"unknown template id: {self.args[0]!r}" if self.args else "unknown template id"


class GenerationError(TechDocsError):
    """
    Remote generation failed.

    Args:
        user_message: Message safe to show to the user. The underlying cause
            is chained via ``__cause__`` and only ever logged.
    """

    def __init__(self, user_message: str = GENERIC_FAILURE_MESSAGE) -> None:
        super().__init__(user_message)
        self.user_message = user_message


class InvalidApiKeyError(GenerationError):
    """The remote API rejected the configured credential."""

    def __init__(self) -> None:
        super().__init__(INVALID_API_KEY_MESSAGE)
