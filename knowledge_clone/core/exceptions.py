"""Custom exceptions for the knowledge clone pipeline."""


class KnowledgeCloneError(Exception):
    """Base exception for pipeline errors."""

    def __init__(self, message: str, provider: str = "unknown") -> None:
        """Initialize error.

        Args:
            message: Error message
            provider: Provider name
        """
        self.provider = provider
        super().__init__(f"[{provider}] {message}")


class AuthError(KnowledgeCloneError):
    """Raised when credentials are missing or rejected (HTTP 401/403)."""

    pass


class ServiceError(KnowledgeCloneError):
    """Raised when a dependency answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        provider: str = "unknown",
        status_code: int | None = None,
    ) -> None:
        """Initialize error.

        Args:
            message: Error message
            provider: Provider name
            status_code: HTTP status returned by the dependency
        """
        self.status_code = status_code
        super().__init__(message, provider=provider)


class NetworkError(KnowledgeCloneError):
    """Raised on transport-level failures (connection, DNS, timeout)."""

    pass


class ConfigError(KnowledgeCloneError):
    """Raised when a locally stored setting is invalid."""

    def __init__(self, key: str, value: str | None) -> None:
        """Initialize error.

        Args:
            key: Settings key
            value: Offending raw value
        """
        self.key = key
        self.value = value
        super().__init__(f"Invalid value for '{key}': {value!r}", provider="settings")
