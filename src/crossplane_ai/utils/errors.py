"""Exception types for Crossplane AI."""


class CrossplaneAIError(Exception):
    """Base exception for all Crossplane AI errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(CrossplaneAIError):
    """Configuration is invalid or the cluster client cannot be built."""


class DiscoveryError(CrossplaneAIError):
    """Resource discovery failed as a whole (cluster unreachable)."""


class CompletionError(CrossplaneAIError):
    """The completion service call failed.

    Always recovered by the assistant service, which falls back to
    the deterministic templates.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ValidationError(CrossplaneAIError):
    """User input is missing or invalid."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)
