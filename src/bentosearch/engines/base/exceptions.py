"""Engine-related exceptions."""


class BentoSearchError(Exception):
    """Base exception for bentosearch errors."""


class InvalidArgumentsError(BentoSearchError, ValueError):
    """Raised when search arguments cannot be normalized for an engine."""


class ConfigurationError(BentoSearchError):
    """Raised when engine configuration is missing or invalid."""


class UpstreamError(BentoSearchError):
    """Raised by an engine when the external search source fails.

    Args:
        message: Error message.
        info: Human readable detail reported by the source, if any.
    """

    def __init__(self, message: str, info: str | None = None) -> None:
        super().__init__(message)
        self.info = info


class MalformedResponseError(UpstreamError):
    """Raised when the source answered with something that cannot be parsed."""


class EngineNotFoundError(BentoSearchError, KeyError):
    """Raised when an engine id is not registered."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""
