"""
Error types raised by the wizard services.

Everything derived from WizardError is caught at the action-dispatch boundary
and shown to the user as a message.
"""


class WizardError(Exception):
    """Base class for user-visible wizard failures."""


class ConfigurationError(WizardError):
    """No usable AI provider key."""


class ValidationError(WizardError):
    """A required form field is missing or malformed."""


class ProviderError(WizardError):
    """An AI provider call failed (HTTP error, SDK error, empty reply)."""

    def __init__(self, provider, message):
        super().__init__(message)
        self.provider = provider


class AIResponseError(WizardError):
    """The AI reply could not be parsed into the expected match JSON."""

    def __init__(self, message, raw_response=''):
        super().__init__(message)
        self.raw_response = raw_response
