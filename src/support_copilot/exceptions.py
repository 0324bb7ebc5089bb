"""Custom exceptions for support_copilot."""


class SupportCopilotError(Exception):
    """Base exception for support_copilot."""
    pass


class ConfigError(SupportCopilotError):
    """Configuration errors."""
    pass


class ExtractionError(SupportCopilotError):
    """A source file is unsupported, unreadable or corrupt."""
    pass


class EmbeddingUnavailable(SupportCopilotError):
    """An embedding provider could not produce a vector."""
    pass


class GenerationUnavailable(SupportCopilotError):
    """A generative provider failed or returned unusable output."""
    pass


class NotFoundError(SupportCopilotError):
    """A referenced ticket, file or document does not exist."""
    pass


class InvalidInputError(SupportCopilotError):
    """Required query or ticket fields are missing or malformed."""
    pass


class StoreError(SupportCopilotError):
    """Document store persistence errors."""
    pass
